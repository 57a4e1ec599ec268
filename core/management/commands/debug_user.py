from django.core.management.base import BaseCommand

from core.diagnostics import debug_user_report

from ._json import write_json


class Command(BaseCommand):
    help = "Print the profile, roles and onboarding requests of a user as JSON."

    def add_arguments(self, parser):
        parser.add_argument("email")

    def handle(self, *args, **options):
        write_json(self, debug_user_report(options["email"]))
