import logging
from typing import NamedTuple, Optional

from .models import RATING_LABELS, RatingRecord

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "You must rate this content."


class RenderableRating(NamedTuple):
    rating: int
    label: str


class ValidationResult(NamedTuple):
    ok: bool
    field: Optional[str] = None
    message: Optional[str] = None


VALID = ValidationResult(ok=True)


class RatingStore:
    """
    Revision keyed ratings for content items.

    Every operation except ``delete`` takes the RatingConfig and does nothing
    for items whose type does not take part in rating. Storage errors are not
    handled here and reach the caller unchanged.
    """

    def __init__(self, model=RatingRecord):
        self.model = model

    def load(self, items, types, config):
        """Attach stored ratings to a batch of items, in one query at most."""
        participating = config.participating(types)
        if not participating:
            return

        vids = {item.vid for item in items if item.type in participating and item.vid is not None}
        if not vids:
            return

        # Matched by nid: the loaded item stands for the node's current revision
        by_nid = {}
        for item in items:
            by_nid.setdefault(item.nid, []).append(item)

        for nid, rating in self.model.objects.filter(vid__in=vids).values_list('nid', 'rating'):
            for item in by_nid.get(nid, []):
                item.rating = rating

    def insert(self, item, config):
        if not config.is_participating(item.type):
            logger.debug("Skipping rating insert for node %s, type %s is not rated", item.nid, item.type)
            return

        # A second insert for the same revision violates the unique vid and raises
        self.model.objects.create(nid=item.nid, vid=item.vid, rating=item.rating or 0)
        logger.debug("Stored rating %s for node %s revision %s", item.rating or 0, item.nid, item.vid)

    def update(self, item, config):
        """
        Overwrite the rating of the item's revision, or create it if the
        revision has none yet (the type may have been enabled after the
        revision was written). The probe and the write are two statements,
        concurrent updates of one revision are last writer wins.
        """
        if not config.is_participating(item.type):
            logger.debug("Skipping rating update for node %s, type %s is not rated", item.nid, item.type)
            return

        exists = self.model.objects.filter(vid=item.vid).exists()
        if exists:
            self.model.objects.filter(vid=item.vid).update(rating=item.rating or 0)
            logger.debug("Updated rating for node %s revision %s to %s", item.nid, item.vid, item.rating or 0)
        else:
            self.insert(item, config)

    def delete(self, nid):
        # Unconditional: a type disabled after rating must not leave rows behind
        deleted, _ = self.model.objects.filter(nid=nid).delete()
        if deleted:
            logger.info("Deleted %d rating record(s) for node %s", deleted, nid)
        return deleted

    def render(self, item, config):
        if not config.is_participating(item.type):
            return None
        rating = item.rating or 0
        return RenderableRating(rating=rating, label=RATING_LABELS[rating])

    def validate(self, item, config):
        if not config.is_participating(item.type):
            return VALID

        # 0 is the "Unrated" choice and counts as a rating
        value = item.values.get('rating')
        if value is None or value == '':
            return ValidationResult(ok=False, field='rating', message=REQUIRED_MESSAGE)
        return VALID


rating_store = RatingStore()
