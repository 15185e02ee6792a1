from django.apps import AppConfig


class RatingAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'rating'
    verbose_name = 'Content rating'

    def ready(self):
        # Connect the receivers for the content lifecycle signals
        from . import signals  # noqa: F401
