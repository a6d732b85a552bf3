"""
``manage.py seed_form_catalog`` – load the default form catalog and locales.
"""
from django.core.management.base import BaseCommand, CommandError

from apps.form_catalog.seed import seed_catalog
from apps.form_catalog.validators import CatalogValidationError


class Command(BaseCommand):
    help = "Create or refresh the default form types, field definitions and locales."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias to seed (default: %(default)s).",
        )

    def handle(self, *args, **options):
        try:
            created = seed_catalog(using=options["database"])
        except CatalogValidationError as exc:
            raise CommandError(
                "; ".join(f"{err['field']}: {err['message']}" for err in exc.errors)
            ) from exc

        self.stdout.write(
            self.style.SUCCESS(
                "Catalog seeded: {locales} locale(s), {form_types} form type(s), "
                "{fields} field(s) created.".format(**created)
            )
        )
