# apps/board/services.py

"""
Mutation services

Each service is constructed with the event emitter (and the aggregate
reader where it serves reads); nothing here is a module-level
singleton. Every write runs in transaction.atomic() and the event goes
out after commit.

Order-affecting writes lock the board row first. On PostgreSQL this
serializes concurrent moves within a board; SQLite ignores the lock and
relies on its database-level write lock.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.core.api import to_camel_case
from apps.core.exceptions import Forbidden, NotFound, ValidationFailed
from apps.core.models import Board, BoardMember, Card, Column, Label
from apps.core.permissions import BoardPermissions
from apps.core.positions import (
    apply_order,
    clamp_position,
    close_gap,
    is_permutation,
    next_position,
    open_slot,
    shift_within,
)

from .aggregates import BoardAggregateReader, card_queryset
from .serializers import board_to_dict, card_to_dict, column_to_dict, label_to_dict, member_to_dict

logger = logging.getLogger(__name__)
User = get_user_model()

CARD_FIELDS = ('title', 'description', 'due_date', 'priority', 'color', 'assignee_id', 'subtasks', 'comments')


def lock_board(board_id):
    """Row lock on the board for the rest of the transaction"""
    return Board.objects.select_for_update().only('id').get(id=board_id)


def get_column(column_id):
    column = Column.objects.select_related('board').filter(id=column_id).first()
    if column is None:
        raise NotFound('Column not found', code='COLUMN_NOT_FOUND')
    return column


def get_card(card_id):
    card = Card.objects.select_related('column').filter(id=card_id).first()
    if card is None:
        raise NotFound('Card not found', code='CARD_NOT_FOUND')
    return card


def get_destination_column(column_id, board_id):
    """Destination of a move/unarchive; must belong to the same board"""
    column = Column.objects.filter(id=column_id).first()
    if column is None:
        raise NotFound('Column not found', code='COLUMN_NOT_FOUND')
    if column.board_id != board_id:
        raise ValidationFailed('Cannot move a card to another board', code='INVALID_COLUMN')
    return column


# === BOARDS ===

class BoardService:

    def __init__(self, events, reader=None):
        self.events = events
        self.reader = reader or BoardAggregateReader()

    def list_boards(self, user):
        return self.reader.list_boards(user)

    def get_board(self, board_id, user):
        return self.reader.get_board(board_id, user)

    def create_board(self, user, data):
        """The owner membership is added by the post_save signal"""
        with transaction.atomic():
            board = Board.objects.create(name=data['name'], owner=user)

        logger.info(f"📋 Board {board.id} created by {user.username}")
        return board_to_dict(board)

    def update_board(self, board_id, user, data):
        with transaction.atomic():
            board = BoardPermissions.get_owned_board(board_id, user)
            board.name = data['name']
            board.save(update_fields=['name', 'updated_at'])
            payload = board_to_dict(board)
            self.events.board_updated(board.id, payload)

        return payload

    def delete_board(self, board_id, user):
        with transaction.atomic():
            board = BoardPermissions.get_owned_board(board_id, user)
            board.delete()
            self.events.board_deleted(board_id)

        logger.info(f"🗑️ Board {board_id} deleted by {user.username}")

    def add_member(self, board_id, user, username):
        """
        Adds a user by username

        Adding an existing member returns the existing membership and
        emits nothing.
        """
        with transaction.atomic():
            board = BoardPermissions.get_owned_board(board_id, user)

            invitee = User.objects.filter(username=username).first()
            if invitee is None:
                raise NotFound('User not found', code='USER_NOT_FOUND')

            member, created = BoardMember.objects.get_or_create(
                board=board,
                user=invitee,
                defaults={'role': BoardMember.ROLE_MEMBER}
            )
            member.user = invitee
            payload = member_to_dict(member)
            if created:
                self.events.member_added(board.id, payload)
                logger.info(f"👥 {invitee.username} added to board {board.id}")

        return payload

    def remove_member(self, board_id, user, user_id):
        with transaction.atomic():
            board = BoardPermissions.get_owned_board(board_id, user)
            if user_id == board.owner_id:
                raise Forbidden('The board owner cannot be removed', code='OWNER_NOT_REMOVABLE')

            deleted, _ = BoardMember.objects.filter(
                board=board,
                user_id=user_id,
                role=BoardMember.ROLE_MEMBER
            ).delete()
            if not deleted:
                raise NotFound('Member not found', code='MEMBER_NOT_FOUND')

            self.events.member_removed(board.id, user_id)

        logger.info(f"👋 User {user_id} removed from board {board_id}")


# === COLUMNS ===

class ColumnService:

    def __init__(self, events):
        self.events = events

    def create_column(self, board_id, user, data):
        board = BoardPermissions.get_writable_board(board_id, user)

        with transaction.atomic():
            lock_board(board.id)
            column = Column.objects.create(
                board=board,
                name=data['name'],
                is_done=data.get('is_done', False),
                position=next_position(Column.objects.filter(board=board)),
            )
            payload = column_to_dict(column, cards=[])
            self.events.column_created(board.id, payload)

        return payload

    def update_column(self, column_id, user, data):
        column = get_column(column_id)
        BoardPermissions.require_member(column.board_id, user)

        with transaction.atomic():
            fields = []
            if data.get('name'):
                column.name = data['name']
                fields.append('name')
            if 'is_done' in data:
                column.is_done = data['is_done']
                fields.append('is_done')
            if fields:
                column.save(update_fields=fields)

            payload = column_to_dict(column)
            self.events.column_updated(column.board_id, payload)

        return payload

    def delete_column(self, column_id, user):
        """Deletes the column with its cards and closes the gap"""
        column = get_column(column_id)
        BoardPermissions.require_member(column.board_id, user)

        with transaction.atomic():
            lock_board(column.board_id)
            position = Column.objects.get(id=column.id).position
            column.delete()
            close_gap(Column.objects.filter(board_id=column.board_id), position)
            self.events.column_deleted(column.board_id, column_id)

    def reorder_columns(self, board_id, user, column_ids):
        """
        Bulk reorder

        column_ids must list every column of the board exactly once.
        """
        board = BoardPermissions.get_writable_board(board_id, user)

        with transaction.atomic():
            lock_board(board.id)
            siblings = Column.objects.filter(board=board)
            if not is_permutation(siblings.values_list('id', flat=True), column_ids):
                raise ValidationFailed(
                    'columnIds must list every column of the board exactly once',
                    code='INVALID_COLUMN_ORDER'
                )
            apply_order(siblings, column_ids)
            self.events.columns_reordered(board.id, column_ids)

        return list(column_ids)


# === CARDS ===

class CardService:

    def __init__(self, events, reader=None):
        self.events = events
        self.reader = reader or BoardAggregateReader()

    def _check_references(self, board_id, data):
        """Assignee must be a member, labels must be board labels"""
        assignee_id = data.get('assignee_id')
        if assignee_id is not None and not BoardPermissions.is_member(board_id, assignee_id):
            raise ValidationFailed('Assignee is not a board member', code='INVALID_ASSIGNEE')

        label_ids = set(data.get('label_ids') or [])
        if label_ids:
            found = Label.objects.filter(board_id=board_id, id__in=label_ids).count()
            if found != len(label_ids):
                raise ValidationFailed('Labels must belong to the board', code='INVALID_LABELS')

    def _serialize(self, card_id):
        return card_to_dict(card_queryset().get(id=card_id))

    def create_card(self, column_id, user, data):
        """Appends a card at the tail of the column"""
        column = get_column(column_id)
        board_id = column.board_id
        BoardPermissions.require_member(board_id, user)
        self._check_references(board_id, data)

        with transaction.atomic():
            lock_board(board_id)
            card = Card.objects.create(
                column=column,
                title=data['title'],
                description=data.get('description'),
                due_date=data.get('due_date'),
                priority=data.get('priority'),
                color=data.get('color'),
                assignee_id=data.get('assignee_id'),
                subtasks=data.get('subtasks') or [],
                comments=data.get('comments') or [],
                position=next_position(Card.objects.active().filter(column=column)),
            )
            if data.get('label_ids'):
                card.labels.set(data['label_ids'])

            payload = self._serialize(card.id)
            self.events.card_created(board_id, payload, actor_id=user.id)

        return payload

    def update_card(self, card_id, user, data):
        """Partial update: only keys present in `data` are written"""
        card = get_card(card_id)
        board_id = card.column.board_id
        BoardPermissions.require_member(board_id, user)
        self._check_references(board_id, data)

        with transaction.atomic():
            for field in CARD_FIELDS:
                if field in data:
                    value = data[field]
                    if field in ('subtasks', 'comments'):
                        value = value or []
                    setattr(card, field, value)
            card.save()

            if 'label_ids' in data:
                card.labels.set(data['label_ids'])

            payload = self._serialize(card.id)
            changes = {to_camel_case(key): value for key, value in data.items()}
            self.events.card_updated(board_id, payload, actor_id=user.id, changes=changes)

        return payload

    def delete_card(self, card_id, user):
        card = get_card(card_id)
        board_id = card.column.board_id
        BoardPermissions.require_member(board_id, user)

        with transaction.atomic():
            lock_board(board_id)
            card = Card.objects.get(id=card.id)
            column_id, position, was_active = card.column_id, card.position, not card.is_archived
            card.delete()
            if was_active:
                close_gap(Card.objects.active().filter(column_id=column_id), position)
            self.events.card_deleted(board_id, card_id, column_id, actor_id=user.id)

    def move_card(self, card_id, user, column_id, position):
        """
        Moves a card within or across columns of the same board

        Targets beyond the tail are clamped to it. Moving a card onto its
        own slot changes nothing.
        """
        card = get_card(card_id)
        board_id = card.column.board_id
        BoardPermissions.require_member(board_id, user)
        if card.is_archived:
            raise ValidationFailed('Archived cards cannot be moved', code='CARD_ARCHIVED')
        destination = get_destination_column(column_id, board_id)

        with transaction.atomic():
            lock_board(board_id)
            card = Card.objects.get(id=card.id)
            source_id = card.column_id
            source = Card.objects.active().filter(column_id=source_id)

            if destination.id == source_id:
                target = clamp_position(position, source.count() - 1)
                if target != card.position:
                    shift_within(source, card.position, target)
                    card.position = target
                    card.save(update_fields=['position', 'updated_at'])
            else:
                close_gap(source.exclude(id=card.id), card.position)
                siblings = Card.objects.active().filter(column=destination)
                target = clamp_position(position, siblings.count())
                open_slot(siblings, target)
                card.column = destination
                card.position = target
                card.save(update_fields=['column', 'position', 'updated_at'])

            payload = self._serialize(card.id)
            self.events.card_moved(board_id, payload, source_id, actor_id=user.id)

        return payload

    def archive_card(self, card_id, user):
        """Soft-removes a card from its column; archiving twice is a no-op"""
        card = get_card(card_id)
        board_id = card.column.board_id
        BoardPermissions.require_member(board_id, user)

        if card.is_archived:
            return self._serialize(card.id)

        with transaction.atomic():
            lock_board(board_id)
            card = Card.objects.get(id=card.id)
            card.archived_at = timezone.now()
            card.save(update_fields=['archived_at', 'updated_at'])
            close_gap(Card.objects.active().filter(column_id=card.column_id), card.position)

            payload = self._serialize(card.id)
            self.events.card_archived(board_id, payload, actor_id=user.id)

        return payload

    def unarchive_card(self, card_id, user, column_id):
        """Restores an archived card at the tail of `column_id`"""
        card = get_card(card_id)
        board_id = card.column.board_id
        BoardPermissions.require_member(board_id, user)
        if not card.is_archived:
            raise ValidationFailed('Card is not archived', code='CARD_NOT_ARCHIVED')
        destination = get_destination_column(column_id, board_id)

        with transaction.atomic():
            lock_board(board_id)
            card.column = destination
            card.position = next_position(Card.objects.active().filter(column=destination))
            card.archived_at = None
            card.save(update_fields=['column', 'position', 'archived_at', 'updated_at'])

            payload = self._serialize(card.id)
            self.events.card_unarchived(board_id, payload, actor_id=user.id)

        return payload

    def list_archived_cards(self, board_id, user):
        return self.reader.list_archived_cards(board_id, user)


# === LABELS ===

class LabelService:

    def __init__(self, events):
        self.events = events

    def _get_label(self, label_id, user):
        label = Label.objects.filter(id=label_id).first()
        if label is None:
            raise NotFound('Label not found', code='LABEL_NOT_FOUND')
        BoardPermissions.require_member(label.board_id, user)
        return label

    def list_labels(self, board_id, user):
        board = BoardPermissions.get_readable_board(board_id, user)
        return [label_to_dict(label) for label in Label.objects.filter(board=board).order_by('id')]

    def create_label(self, board_id, user, data):
        board = BoardPermissions.get_writable_board(board_id, user)

        with transaction.atomic():
            label = Label.objects.create(board=board, name=data['name'], color=data['color'])
            payload = label_to_dict(label)
            self.events.label_created(board.id, payload)

        return payload

    def update_label(self, label_id, user, data):
        label = self._get_label(label_id, user)

        with transaction.atomic():
            for field in ('name', 'color'):
                if data.get(field):
                    setattr(label, field, data[field])
            label.save()

            payload = label_to_dict(label)
            self.events.label_updated(label.board_id, payload)

        return payload

    def delete_label(self, label_id, user):
        label = self._get_label(label_id, user)

        with transaction.atomic():
            board_id = label.board_id
            label.delete()
            self.events.label_deleted(board_id, label_id)


class KanbanServices:
    """Everything the views need, wired once in BoardConfig.ready()"""

    def __init__(self, events, reader=None):
        self.events = events
        self.reader = reader or BoardAggregateReader()
        self.boards = BoardService(events, self.reader)
        self.columns = ColumnService(events)
        self.cards = CardService(events, self.reader)
        self.labels = LabelService(events)
