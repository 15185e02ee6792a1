from django.db.models.signals import post_delete
from django.dispatch import receiver
from django.template.loader import render_to_string

from content.models import NodeType
from content.signals import (
    node_deleted,
    node_form_building,
    node_inserted,
    node_type_form_building,
    node_type_saved,
    node_updated,
    node_validating,
    node_viewing,
    nodes_loaded,
)
from .config import RatingConfig
from .forms import enabled_field, rating_field
from .store import rating_store


# ---------------- NODE LIFECYCLE ----------------
@receiver(nodes_loaded)
def load_ratings(sender, items, types, **kwargs):
    rating_store.load(items, types, RatingConfig.load())


@receiver(node_inserted)
def insert_rating(sender, item, **kwargs):
    rating_store.insert(item, RatingConfig.load())


@receiver(node_updated)
def update_rating(sender, item, **kwargs):
    rating_store.update(item, RatingConfig.load())


@receiver(node_deleted)
def delete_ratings(sender, nid, **kwargs):
    rating_store.delete(nid)


# ---------------- VALIDATION & DISPLAY ----------------
@receiver(node_validating)
def validate_rating(sender, form, item, **kwargs):
    # An invalid choice is already reported by the field itself
    if form.has_error('rating'):
        return
    result = rating_store.validate(item, RatingConfig.load())
    if not result.ok:
        field = result.field if result.field in form.fields else None
        form.add_error(field, result.message)


@receiver(node_viewing)
def render_rating(sender, item, context, **kwargs):
    renderable = rating_store.render(item, RatingConfig.load())
    if renderable is not None:
        context['content']['rating'] = render_to_string('rating/rating.html', {'rating': renderable})


# ---------------- FORMS ----------------
@receiver(node_form_building)
def add_rating_field(sender, form, node_type, item=None, **kwargs):
    config = RatingConfig.load()
    if config.is_participating(node_type.type):
        form.fields['rating'] = rating_field(item.rating if item is not None else None)


@receiver(node_type_form_building)
def add_rating_setting(sender, form, node_type=None, **kwargs):
    enabled = RatingConfig.load().is_participating(node_type.type) if node_type is not None else False
    form.fields['rating_enabled'] = enabled_field(enabled)


@receiver(node_type_saved)
def save_rating_setting(sender, node_type, cleaned_data, **kwargs):
    if 'rating_enabled' in cleaned_data:
        RatingConfig().set(node_type.type, cleaned_data['rating_enabled'])


# ---------------- NODE TYPE REMOVAL ----------------
@receiver(post_delete, sender=NodeType)
def forget_rating_setting(sender, instance, **kwargs):
    RatingConfig().forget(instance.type)
