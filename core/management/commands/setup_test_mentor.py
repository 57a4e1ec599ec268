from django.core.management.base import BaseCommand, CommandError

from core.diagnostics import setup_test_mentor

from ._json import write_json


class Command(BaseCommand):
    help = "Give an existing account the mentor role and an approved mentor onboarding request."

    def add_arguments(self, parser):
        parser.add_argument("email")

    def handle(self, *args, **options):
        result = setup_test_mentor(options["email"])
        write_json(self, result)
        if not result["ok"]:
            raise CommandError(result["error"])
