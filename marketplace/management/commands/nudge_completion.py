import logging

from django.core.management.base import BaseCommand

from infrastructure.container import container


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Sends warranty nudges for jobs awaiting buyer confirmation and auto-closes the stale ones."

    def handle(self, *args, **options):
        self.stdout.write("Checking jobs awaiting buyer confirmation...")

        summary = container.nudge_service().run()

        self.stdout.write(
            self.style.SUCCESS(
                f"Nudges sent: {summary['nudges_sent']}. Jobs auto-closed: {summary['jobs_auto_closed']}."
            )
        )
