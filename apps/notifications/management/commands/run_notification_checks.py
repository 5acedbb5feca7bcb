"""
Run the notification automation checks once.

Meant for cron; the same checks back POST /api/notifications/automation/.

Usage:
    python manage.py run_notification_checks
"""

from django.core.management.base import BaseCommand, CommandError

from apps.notifications.services import run_notification_checks


class Command(BaseCommand):
    help = 'Create renewal, overdue-payment and password-rotation notifications'

    def handle(self, *args, **options):
        results = run_notification_checks()

        for name, count in results.items():
            if count < 0:
                self.stdout.write(self.style.ERROR(f'  - {name}: failed'))
            else:
                self.stdout.write(f'  - {name}: {count} notification(s)')

        if any(count < 0 for count in results.values()):
            raise CommandError('One or more notification checks failed, see logs.')

        self.stdout.write(self.style.SUCCESS('Notification checks completed.'))
