# apps/board/events.py

"""
Event emission after successful writes

Every mutation ends by calling one of the emitter methods below. The
envelope {type, boardId, payload} is delivered to the board's
subscribers only once the surrounding transaction commits, so a rolled
back write never produces an event. Card events are also forwarded to
the webhook dispatcher under their dotted name (card.created, ...).
"""

import logging

from asgiref.sync import async_to_sync
from django.db import transaction

from .webhooks import WebhookDispatcher

logger = logging.getLogger(__name__)


# === EVENT TYPES ===
BOARD_UPDATED = 'board:updated'
COLUMN_CREATED = 'column:created'
COLUMN_UPDATED = 'column:updated'
COLUMN_DELETED = 'column:deleted'
COLUMN_REORDERED = 'column:reordered'
CARD_CREATED = 'card:created'
CARD_UPDATED = 'card:updated'
CARD_DELETED = 'card:deleted'
CARD_MOVED = 'card:moved'
LABEL_CREATED = 'label:created'
LABEL_UPDATED = 'label:updated'
LABEL_DELETED = 'label:deleted'
MEMBER_ADDED = 'member:added'
MEMBER_REMOVED = 'member:removed'

EVENT_TYPES = (
    BOARD_UPDATED,
    COLUMN_CREATED, COLUMN_UPDATED, COLUMN_DELETED, COLUMN_REORDERED,
    CARD_CREATED, CARD_UPDATED, CARD_DELETED, CARD_MOVED,
    LABEL_CREATED, LABEL_UPDATED, LABEL_DELETED,
    MEMBER_ADDED, MEMBER_REMOVED,
)


def build_message(event_type, board_id, payload):
    return {'type': event_type, 'boardId': board_id, 'payload': payload}


class BoardEventEmitter:
    """Broadcasts board events and forwards card events to webhooks"""

    def __init__(self, broadcaster, webhooks=None):
        self.broadcaster = broadcaster
        self.webhooks = webhooks or WebhookDispatcher()

    def emit(self, event_type, board_id, payload, actor_id=None, webhook_event=None, webhook_data=None):
        """
        Schedules delivery for after commit

        Outside of an atomic block Django runs the callback immediately.
        """
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown board event: {event_type}")

        message = build_message(event_type, board_id, payload)
        transaction.on_commit(
            lambda: self.deliver(message, actor_id, webhook_event, webhook_data)
        )

    def deliver(self, message, actor_id=None, webhook_event=None, webhook_data=None):
        try:
            async_to_sync(self.broadcaster.broadcast)(message['boardId'], message)
        except Exception as e:
            logger.error(f"❌ Broadcast of {message['type']} for board {message['boardId']} failed: {e}")

        if webhook_event:
            try:
                self.webhooks.dispatch(actor_id, webhook_event, webhook_data or {})
            except Exception as e:
                logger.error(f"❌ Webhook {webhook_event} could not be dispatched: {e}")

    def revoke(self, board_id, user_id=None):
        """
        Detaches sockets that lost access to a board once the write commits

        Without user_id every subscriber of the board is detached.
        """
        transaction.on_commit(lambda: self.detach_subscribers(board_id, user_id))

    def detach_subscribers(self, board_id, user_id=None):
        try:
            if user_id is None:
                self.broadcaster.revoke_board(board_id)
            else:
                self.broadcaster.revoke_user(board_id, user_id)
        except Exception as e:
            logger.error(f"❌ Could not detach subscribers of board {board_id}: {e}")

    # === BOARD ===

    def board_updated(self, board_id, board):
        self.emit(BOARD_UPDATED, board_id, board)

    def member_added(self, board_id, member):
        self.emit(MEMBER_ADDED, board_id, member)

    def member_removed(self, board_id, user_id):
        self.emit(MEMBER_REMOVED, board_id, {'userId': user_id})
        # queued behind the broadcast: the removed user still gets member:removed
        self.revoke(board_id, user_id)

    def board_deleted(self, board_id):
        self.revoke(board_id)

    # === COLUMNS ===

    def column_created(self, board_id, column):
        self.emit(COLUMN_CREATED, board_id, column)

    def column_updated(self, board_id, column):
        self.emit(COLUMN_UPDATED, board_id, column)

    def column_deleted(self, board_id, column_id):
        self.emit(COLUMN_DELETED, board_id, {'columnId': column_id})

    def columns_reordered(self, board_id, column_ids):
        self.emit(COLUMN_REORDERED, board_id, {'columnIds': list(column_ids)})

    # === CARDS ===

    def card_created(self, board_id, card, actor_id=None):
        self.emit(
            CARD_CREATED, board_id, card,
            actor_id=actor_id,
            webhook_event='card.created',
            webhook_data={'card': card, 'boardId': board_id, 'columnId': card['columnId']},
        )

    def card_updated(self, board_id, card, actor_id=None, changes=None):
        self.emit(
            CARD_UPDATED, board_id, card,
            actor_id=actor_id,
            webhook_event='card.updated',
            webhook_data={
                'card': card,
                'boardId': board_id,
                'columnId': card['columnId'],
                'changes': changes or {},
            },
        )

    def card_deleted(self, board_id, card_id, column_id, actor_id=None):
        self.emit(
            CARD_DELETED, board_id, {'cardId': card_id},
            actor_id=actor_id,
            webhook_event='card.deleted',
            webhook_data={'cardId': card_id, 'boardId': board_id, 'columnId': column_id},
        )

    def card_moved(self, board_id, card, from_column_id, actor_id=None):
        payload = {
            'cardId': card['id'],
            'columnId': card['columnId'],
            'position': card['position'],
            'card': card,
        }
        self.emit(
            CARD_MOVED, board_id, payload,
            actor_id=actor_id,
            webhook_event='card.moved',
            webhook_data={
                'card': card,
                'boardId': board_id,
                'fromColumnId': from_column_id,
                'toColumnId': card['columnId'],
                'toPosition': card['position'],
            },
        )

    def card_archived(self, board_id, card, actor_id=None):
        # clients see an archived card as an update that sets archivedAt
        self.emit(
            CARD_UPDATED, board_id, card,
            actor_id=actor_id,
            webhook_event='card.archived',
            webhook_data={'card': card, 'boardId': board_id, 'columnId': card['columnId']},
        )

    def card_unarchived(self, board_id, card, actor_id=None):
        self.emit(
            CARD_UPDATED, board_id, card,
            actor_id=actor_id,
            webhook_event='card.unarchived',
            webhook_data={'card': card, 'boardId': board_id, 'toColumnId': card['columnId']},
        )

    # === LABELS ===

    def label_created(self, board_id, label):
        self.emit(LABEL_CREATED, board_id, label)

    def label_updated(self, board_id, label):
        self.emit(LABEL_UPDATED, board_id, label)

    def label_deleted(self, board_id, label_id):
        self.emit(LABEL_DELETED, board_id, {'labelId': label_id})
