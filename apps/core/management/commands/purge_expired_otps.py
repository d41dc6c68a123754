# apps/core/management/commands/purge_expired_otps.py

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.core.models import VerificationRecord


class Command(BaseCommand):
    help = 'Deletes verification codes whose expiry has passed (schedule it, e.g. every minute via cron)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only count the expired records'
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options['dry_run']:
            count = VerificationRecord.objects.expired(now).count()
            self.stdout.write(f'🔍 {count} expired verification code(s) would be deleted')
            return

        count = VerificationRecord.objects.purge_expired(now)
        self.stdout.write(
            self.style.SUCCESS(f'🧹 {count} expired verification code(s) deleted')
        )
