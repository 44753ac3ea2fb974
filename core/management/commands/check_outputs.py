"""Django command to report whether data outputs are working."""

from django.core.management.base import BaseCommand, CommandError

from core.models import DataOutput
from core.services import OutputService


class Command(BaseCommand):
    help = "Report whether data outputs received records within their expected period"

    def add_arguments(self, parser):
        parser.add_argument("--output-id", type=int, help="Check a specific data output ID")

    def handle(self, *args, **options):
        output_id = options.get("output_id")

        if output_id:
            try:
                data_outputs = [DataOutput.objects.get(id=output_id)]
            except DataOutput.DoesNotExist as e:
                raise CommandError(f"Data output {output_id} does not exist") from e
        else:
            data_outputs = DataOutput.objects.order_by("id")

        not_working = 0
        for data_output in data_outputs:
            status = OutputService.get_status(data_output)
            self._print_status(status)
            if not status["working"]:
                not_working += 1

        if not_working:
            self.stdout.write(self.style.WARNING(f"{not_working} data output(s) not working"))
        else:
            self.stdout.write(self.style.SUCCESS("All data outputs working"))

    def _print_status(self, status):
        """Print one status line."""
        last_receive = status["last_receive_at"] or "never"
        line = f"[{status['id']}] {status['name']}: last received {last_receive}"
        if status["working"]:
            self.stdout.write(self.style.SUCCESS(f"✓ {line}"))
        else:
            self.stdout.write(self.style.ERROR(f"✗ {line}"))
