from django.core.management.base import BaseCommand

from core.diagnostics import create_candidate_user

from ._json import write_json


class Command(BaseCommand):
    help = "Create (or complete) a candidate account with an approved onboarding request."

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument("--password", default=None)
        parser.add_argument("--display-name", default="")

    def handle(self, *args, **options):
        result = create_candidate_user(
            options["email"],
            password=options["password"],
            display_name=options["display_name"],
        )
        write_json(self, result)
