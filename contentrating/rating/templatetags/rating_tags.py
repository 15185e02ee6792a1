from django import template

from ..config import RatingConfig
from ..store import rating_store

register = template.Library()


@register.inclusion_tag('rating/rating.html')
def node_rating(item):
    """Render the rating of a loaded content item, nothing if its type is not rated."""
    return {'rating': rating_store.render(item, RatingConfig.load())}
