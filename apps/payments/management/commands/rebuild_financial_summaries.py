"""
Recompute monthly financial summaries from completed payments.

Usage:
    python manage.py rebuild_financial_summaries
    python manage.py rebuild_financial_summaries --email someone@example.com
"""

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.payments.services import rebuild_all_financial_summaries


class Command(BaseCommand):
    help = 'Rebuild the per-user monthly financial summaries'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            help='Only rebuild summaries for this user',
        )

    def handle(self, *args, **options):
        user = None
        if options['email']:
            try:
                user = User.objects.get(email__iexact=options['email'])
            except User.DoesNotExist:
                raise CommandError(f"No user with email {options['email']}")

        written = rebuild_all_financial_summaries(user=user)

        self.stdout.write(
            self.style.SUCCESS(f'Rebuilt {written} financial summary row(s).')
        )
