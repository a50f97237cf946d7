import logging
import random

from django.core.management.base import BaseCommand, CommandError

from authentication.domain.services.mock_vendor_service import MockVendorService


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Replaces the system generated vendors with a fresh set of mock vendors."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=100, help="Number of regular vendors (1-1000)")
        parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible set")

    def handle(self, *args, **options):
        count = options["count"]
        if count < 1 or count > 1000:
            raise CommandError("--count must be between 1 and 1000")

        rng = random.Random(options["seed"]) if options["seed"] is not None else None
        self.stdout.write(f"Generating {count} mock vendors...")

        result = MockVendorService(rng=rng).generate(count=count)
        if not result.success:
            raise CommandError(result.message)

        data = result.data
        self.stdout.write(
            self.style.SUCCESS(
                f"Deleted {data['deleted']} old vendors. Created {data['created']} vendors "
                f"({data['companies']} companies, {data['regular']} regular)."
            )
        )
        for error in data["error_details"]:
            self.stdout.write(self.style.WARNING(f"{error['type']} vendor {error['index']}: {error['error']}"))
        for sample in data["samples"]:
            self.stdout.write(f"  {sample['name']} ({sample['type']}, rating {sample['rating']})")
