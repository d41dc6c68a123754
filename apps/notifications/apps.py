# apps/notifications/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class NotificationsConfig(AppConfig):
    """Notifications app configuration"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.notifications'
    verbose_name = 'Notifications - real-time'

    def ready(self):
        logger.info("🔌 Notifications app ready - WebSockets enabled")
