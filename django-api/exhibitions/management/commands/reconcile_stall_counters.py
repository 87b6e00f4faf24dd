from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from exhibitions.domain.errors import InvalidEventIdError, InvariantViolationError
from exhibitions.models import Event
from exhibitions.services.event_service import parse_event_id


class Command(BaseCommand):
    help = "Recompute stall vote counters from ranking rows."

    def add_arguments(self, parser):
        parser.add_argument("event_ids", nargs="*", help="Events to process (default: all)")
        parser.add_argument(
            "--check",
            action="store_true",
            help="Report drift without writing; exit non-zero if any is found.",
        )

    def handle(self, *args, **options):
        service = apps.get_app_config("exhibitions").analytics_service
        raw_ids = options["event_ids"] or [str(pk) for pk in Event.objects.values_list("pk", flat=True)]

        drifted = 0
        for raw_id in raw_ids:
            try:
                event_id = parse_event_id(raw_id)
            except InvalidEventIdError:
                raise CommandError(f"Not an event id: {raw_id}") from None
            if options["check"]:
                try:
                    service.verify_counters(event_id)
                except InvariantViolationError as exc:
                    drifted += 1
                    self.stderr.write(f"{event_id}: {exc.message} ({', '.join(exc.stall_ids)})")
                continue
            fixed = service.reconcile_counters(event_id)
            if fixed:
                self.stdout.write(f"{event_id}: repaired {fixed} stall(s)")

        if options["check"] and drifted:
            raise CommandError(f"Counter drift found in {drifted} event(s)")
        self.stdout.write(self.style.SUCCESS(f"Processed {len(raw_ids)} event(s)"))
