from django.core.management.base import BaseCommand

from core.diagnostics import debug_mentorship_report

from ._json import write_json


class Command(BaseCommand):
    help = "Print mentorship request counts and the latest requests of a mentor as JSON."

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument("--limit", type=int, default=5)

    def handle(self, *args, **options):
        write_json(self, debug_mentorship_report(options["email"], limit=options["limit"]))
