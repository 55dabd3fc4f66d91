# apps/board/broadcast.py

"""
Realtime fan-out for board events

Each websocket connection is known by its channel name. A connection
watches at most one board at a time; broadcasting to a board sends the
serialized event to every subscribed channel through the channel layer,
where the consumer's board_event handler writes it to the socket.

The registry lives in process memory, so the service must run as a
single ASGI process. Sync views broadcast from worker threads while
consumers subscribe from the event loop, hence the lock.
"""

import json
import logging
import threading

from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)

EVENT_HANDLER = 'board.event'


class BoardBroadcaster:
    """
    Subscription registry + delivery

    The registry itself is never handed out; callers go through
    register/subscribe/unsubscribe/disconnect/broadcast and the
    revoke_* calls that follow membership changes.
    """

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer
        self._lock = threading.Lock()
        # channel_name -> board_id or None
        self._connections = {}
        # board_id -> set of channel names
        self._subscriptions = {}
        # channel_name -> user_id
        self._users = {}

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    # === CONNECTION LIFECYCLE ===

    def register(self, channel_name, user_id=None):
        """Tracks a connection; user_id lets access revocation find it"""
        with self._lock:
            self._connections.setdefault(channel_name, None)
            self._users[channel_name] = user_id

    def subscribe(self, channel_name, board_id):
        """
        Points a registered connection at a board

        A previous subscription of the same connection is dropped first,
        so a connection is never in two subscriber sets. Unknown
        connections are ignored and False is returned.
        """
        board_id = int(board_id)
        with self._lock:
            if channel_name not in self._connections:
                logger.warning(f"⚠️ Subscribe from unregistered channel {channel_name} ignored")
                return False
            self._detach(channel_name)
            self._connections[channel_name] = board_id
            self._subscriptions.setdefault(board_id, set()).add(channel_name)

        logger.debug(f"📡 {channel_name} subscribed to board {board_id}")
        return True

    def unsubscribe(self, channel_name):
        """Returns the board the connection was watching, if any"""
        with self._lock:
            board_id = self._detach(channel_name)
            if channel_name in self._connections:
                self._connections[channel_name] = None
        return board_id

    def disconnect(self, channel_name):
        with self._lock:
            self._detach(channel_name)
            self._connections.pop(channel_name, None)
            self._users.pop(channel_name, None)

    def revoke_user(self, board_id, user_id):
        """
        Unsubscribes a user's connections from a board they lost access to

        Returns the number of detached connections.
        """
        board_id = int(board_id)
        with self._lock:
            channels = [
                channel_name
                for channel_name in self._subscriptions.get(board_id, ())
                if self._users.get(channel_name) == user_id
            ]
            for channel_name in channels:
                self._detach(channel_name)
                self._connections[channel_name] = None

        if channels:
            logger.info(f"🚪 User {user_id} detached from board {board_id} ({len(channels)} sockets)")
        return len(channels)

    def revoke_board(self, board_id):
        """Unsubscribes every connection watching a deleted board"""
        board_id = int(board_id)
        with self._lock:
            channels = self._subscriptions.pop(board_id, set())
            for channel_name in channels:
                self._connections[channel_name] = None

        if channels:
            logger.info(f"🚪 Board {board_id} gone, {len(channels)} sockets detached")
        return len(channels)

    def _detach(self, channel_name):
        # caller holds the lock
        board_id = self._connections.get(channel_name)
        if board_id is None:
            return None

        subscribers = self._subscriptions.get(board_id)
        if subscribers is not None:
            subscribers.discard(channel_name)
            if not subscribers:
                del self._subscriptions[board_id]
        return board_id

    # === DELIVERY ===

    def subscription_of(self, channel_name):
        with self._lock:
            return self._connections.get(channel_name)

    async def broadcast(self, board_id, message, exclude=None):
        """
        Sends a message to every subscriber of a board

        Best effort: a failed send is logged and the remaining
        subscribers still receive the event. Returns the number of
        successful sends.
        """
        with self._lock:
            targets = [
                channel_name
                for channel_name in self._subscriptions.get(int(board_id), ())
                if channel_name != exclude
            ]

        if not targets:
            return 0

        text = json.dumps(message, cls=DjangoJSONEncoder)
        delivered = 0
        for channel_name in targets:
            try:
                await self.channel_layer.send(channel_name, {
                    'type': EVENT_HANDLER,
                    'text': text,
                })
                delivered += 1
            except Exception as e:
                logger.warning(f"⚠️ Broadcast to {channel_name} failed: {e}")

        return delivered

    def stats(self):
        """Connection and per-board subscriber counts"""
        with self._lock:
            return {
                'connections': len(self._connections),
                'boards': {
                    board_id: len(subscribers)
                    for board_id, subscribers in self._subscriptions.items()
                },
            }
