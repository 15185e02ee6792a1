from django.core.management.base import BaseCommand
from django.db import transaction

from ...models import RatingRecord, RatingTypeSetting


class Command(BaseCommand):
    help = "Remove every stored rating and every per-type rating setting"

    def handle(self, *args, **kwargs):
        with transaction.atomic():
            records, _ = RatingRecord.objects.all().delete()
            settings, _ = RatingTypeSetting.objects.all().delete()

        self.stdout.write(self.style.SUCCESS(
            f"Removed {records} rating record(s) and {settings} content type setting(s)."
        ))
