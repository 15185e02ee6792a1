import logging

from .models import RatingTypeSetting

logger = logging.getLogger(__name__)


class RatingConfig:
    """
    Which content types take part in rating.

    Built once per request with ``RatingConfig.load()`` and handed to every
    RatingStore operation. A type with no stored setting does not take part.
    """

    def __init__(self, flags=None):
        self._flags = dict(flags or {})

    @classmethod
    def load(cls):
        return cls(RatingTypeSetting.objects.values_list('node_type', 'enabled'))

    def get(self, key, default=False):
        return self._flags.get(key, default)

    def set(self, key, value):
        value = bool(value)
        RatingTypeSetting.objects.update_or_create(node_type=key, defaults={'enabled': value})
        self._flags[key] = value
        logger.info("Rating %s for content type %s", "enabled" if value else "disabled", key)

    def forget(self, key):
        RatingTypeSetting.objects.filter(node_type=key).delete()
        self._flags.pop(key, None)
        logger.info("Removed rating setting for content type %s", key)

    def is_participating(self, content_type):
        return bool(self.get(content_type, False))

    def participating(self, types):
        return {t for t in types if self.is_participating(t)}
