# apps/board/aggregates.py

"""
Board aggregate reader

Builds the nested board view in a fixed number of queries: board,
columns, active cards (+ assignee), card labels, members (+ user) and
board labels.
"""

from django.db.models import Prefetch

from apps.core.models import Board, BoardMember, Card, Column, Label
from apps.core.permissions import BoardPermissions

from .serializers import board_to_dict, card_to_dict, column_to_dict, label_to_dict, member_to_dict


def active_cards_queryset():
    return (
        Card.objects.active()
        .select_related('assignee')
        .prefetch_related('labels')
        .order_by('position', 'id')
    )


def card_queryset():
    """Any card, with what card_to_dict reads"""
    return Card.objects.select_related('assignee').prefetch_related('labels')


class BoardAggregateReader:

    def get_board(self, board_id, user):
        """
        Full board view for a member

        Non-members and absent boards both raise NotFound.
        """
        board = BoardPermissions.get_readable_board(board_id, user)

        columns = (
            Column.objects.filter(board=board)
            .order_by('position', 'id')
            .prefetch_related(Prefetch('cards', queryset=active_cards_queryset(), to_attr='active_cards'))
        )
        members = (
            BoardMember.objects.filter(board=board)
            .select_related('user')
            .order_by('id')
        )
        labels = Label.objects.filter(board=board).order_by('id')

        data = board_to_dict(board)
        data['columns'] = [column_to_dict(column, column.active_cards) for column in columns]
        data['members'] = [member_to_dict(member) for member in members]
        data['labels'] = [label_to_dict(label) for label in labels]
        return data

    def list_boards(self, user):
        """Boards the user belongs to, most recently updated first"""
        boards = Board.objects.filter(members__user=user).order_by('-updated_at', '-id').distinct()
        return [board_to_dict(board) for board in boards]

    def list_archived_cards(self, board_id, user):
        board = BoardPermissions.get_readable_board(board_id, user)
        cards = (
            card_queryset()
            .archived()
            .filter(column__board=board)
            .order_by('-archived_at', '-id')
        )
        return [card_to_dict(card) for card in cards]
