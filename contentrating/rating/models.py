from django.db import models

# Fixed label table, index is the stored rating value
RATING_CHOICES = [
    (0, 'Unrated'),
    (1, 'Poor'),
    (2, 'Needs improvement'),
    (3, 'Acceptable'),
    (4, 'Good'),
    (5, 'Excellent'),
]
RATING_LABELS = dict(RATING_CHOICES)
MAX_RATING = 5


# ---------------- TYPE SETTING ----------------
class RatingTypeSetting(models.Model):
    node_type = models.CharField(max_length=32, unique=True, help_text="Machine name of the content type")
    enabled = models.BooleanField(default=False, help_text="Whether content of this type can be rated")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rating_type_settings'
        verbose_name = 'Rating type setting'
        verbose_name_plural = 'Rating type settings'
        ordering = ['node_type']

    def __str__(self):
        return f"{self.node_type}: {'enabled' if self.enabled else 'disabled'}"


# ---------------- RATING RECORD ----------------
class RatingRecord(models.Model):
    # Plain ids, not foreign keys: only RatingStore.delete removes these rows
    nid = models.PositiveIntegerField(db_index=True, help_text="The content item being rated")
    vid = models.PositiveIntegerField(unique=True, help_text="The revision the rating belongs to")
    rating = models.PositiveSmallIntegerField(choices=RATING_CHOICES, default=0)

    class Meta:
        db_table = 'ratings'
        verbose_name = 'Rating'
        verbose_name_plural = 'Ratings'
        ordering = ['nid', 'vid']
        constraints = [
            models.CheckConstraint(condition=models.Q(rating__lte=MAX_RATING), name='rating_value_range'),
        ]

    def __str__(self):
        return f"Rating {self.rating} for node {self.nid} revision {self.vid}"
