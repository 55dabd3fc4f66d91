# apps/board/apps.py

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Board app configuration"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Kanban'

    broadcaster = None
    events = None
    services = None

    def ready(self):
        """
        Wires the realtime and service components

        Built once per process: the fan-out registry only knows the
        sockets connected to this process.
        """
        from .broadcast import BoardBroadcaster
        from .events import BoardEventEmitter
        from .services import KanbanServices
        from .webhooks import build_dispatcher

        self.broadcaster = BoardBroadcaster()
        self.events = BoardEventEmitter(self.broadcaster, build_dispatcher(settings))
        self.services = KanbanServices(self.events)

        logger.info("🔌 Board app ready - WebSocket fan-out enabled")
