from django import forms

from .models import RATING_CHOICES


def rating_field(initial=None):
    # Not required at the field level: the "must rate" error comes from RatingStore.validate
    return forms.TypedChoiceField(
        label="Rating",
        choices=[('', '- Select a rating -')] + RATING_CHOICES,
        coerce=int,
        empty_value=None,
        required=False,
        initial=initial,
        widget=forms.Select(attrs={'class': 'form-control'}),
    )


def enabled_field(initial=False):
    return forms.BooleanField(
        label="Enable rating",
        required=False,
        initial=initial,
        help_text="Users will be able to rate content of this type.",
    )


class RatingTypeSettingForm(forms.Form):
    enabled = forms.BooleanField(required=False)
