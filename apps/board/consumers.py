# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.apps import apps

from apps.core.models import MAX_ID
from apps.core.permissions import BoardPermissions

logger = logging.getLogger(__name__)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    WebSocket endpoint for realtime board updates

    Client frames:
    - {"type": "subscribe", "boardId": 1} -> {"type": "subscribed", "boardId": 1}
    - {"type": "unsubscribe"}             -> {"type": "unsubscribed", "boardId": 1}
    - {"type": "ping"}                    -> {"type": "pong"}

    Anything else is logged and ignored. Board events arrive through the
    channel layer as "board.event" messages carrying pre-serialized text.
    """

    def __init__(self, *args, broadcaster=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._broadcaster = broadcaster

    @property
    def broadcaster(self):
        if self._broadcaster is None:
            self._broadcaster = apps.get_app_config('board').broadcaster
        return self._broadcaster

    async def connect(self):
        """
        Accepts authenticated sockets only
        """
        self.user = self.scope.get('user')

        if self.user is None or not self.user.is_authenticated:
            logger.warning("❌ WebSocket rejected - user not authenticated")
            await self.close()
            return

        self.broadcaster.register(self.channel_name, self.user.id)
        await self.accept()

        logger.info(f"✅ WebSocket connected - {self.user.username}")

    async def disconnect(self, close_code):
        self.broadcaster.disconnect(self.channel_name)

        username = getattr(self.user, 'username', 'anonymous')
        logger.info(f"🔌 WebSocket disconnected - {username} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Dispatches client control frames
        """
        try:
            data = json.loads(text_data or '')
        except ValueError:
            logger.warning(f"⚠️ Malformed WebSocket frame from {self.user.username}")
            return

        if not isinstance(data, dict):
            logger.warning(f"⚠️ Unexpected WebSocket payload from {self.user.username}")
            return

        message_type = data.get('type')

        if message_type == 'ping':
            await self.send_json({'type': 'pong'})

        elif message_type == 'subscribe':
            await self.handle_subscribe(data.get('boardId'))

        elif message_type == 'unsubscribe':
            board_id = self.broadcaster.unsubscribe(self.channel_name)
            await self.send_json({'type': 'unsubscribed', 'boardId': board_id})

        else:
            logger.debug(f"🤷 Ignored WebSocket message type: {message_type}")

    async def handle_subscribe(self, board_id):
        if isinstance(board_id, bool) or not isinstance(board_id, (int, str)):
            logger.warning(f"⚠️ Subscribe without a valid boardId from {self.user.username}")
            return
        try:
            board_id = int(board_id)
        except ValueError:
            logger.warning(f"⚠️ Subscribe with non-numeric boardId from {self.user.username}")
            return
        if not 1 <= board_id <= MAX_ID:
            logger.warning(f"⚠️ Subscribe with out-of-range boardId from {self.user.username}")
            return

        if not await self.can_read_board(board_id):
            await self.send_json({
                'type': 'error',
                'boardId': board_id,
                'error': 'Board not found',
            })
            return

        if not self.broadcaster.subscribe(self.channel_name, board_id):
            return
        await self.send_json({'type': 'subscribed', 'boardId': board_id})

        logger.info(f"📡 {self.user.username} watching board {board_id}")

    # === Channel layer handlers ===

    async def board_event(self, event):
        """
        Forwards a broadcast board event to the socket
        """
        await self.send(text_data=event['text'])

    # === Helpers ===

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    @database_sync_to_async
    def can_read_board(self, board_id):
        return BoardPermissions.is_member(board_id, self.user.id)
