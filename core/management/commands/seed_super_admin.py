from django.core.management.base import BaseCommand

from core.accounts import seed_super_admin

from ._json import write_json


class Command(BaseCommand):
    help = "Idempotently create the configured super admin account."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=None)
        parser.add_argument("--password", default=None)

    def handle(self, *args, **options):
        write_json(self, seed_super_admin(email=options["email"], password=options["password"]))
