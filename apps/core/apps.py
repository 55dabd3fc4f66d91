# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app: storage models, membership guard, position sequencer"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Kanban storage'

    def ready(self):
        """
        Connects model signals
        """
        from . import signals  # noqa: F401
