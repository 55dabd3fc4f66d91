"""Shared fixtures: users, a board with two columns, isolated services."""

import pytest

from apps.board.events import BoardEventEmitter
from apps.board.services import KanbanServices
from apps.core.models import Card, Column, User


class RecordingBroadcaster:
    """Stands in for the fan-out service and keeps what was broadcast."""

    def __init__(self):
        self.messages = []
        self.revoked = []

    async def broadcast(self, board_id, message, exclude=None):
        self.messages.append(message)
        return 1

    def revoke_user(self, board_id, user_id):
        self.revoked.append((board_id, user_id))
        return 1

    def revoke_board(self, board_id):
        self.revoked.append((board_id, None))
        return 1


class RecordingWebhooks:
    def __init__(self):
        self.calls = []

    def dispatch(self, user_id, event, data):
        self.calls.append((user_id, event, data))


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def webhooks():
    return RecordingWebhooks()


@pytest.fixture
def events(broadcaster, webhooks):
    return BoardEventEmitter(broadcaster, webhooks)


@pytest.fixture
def services(events):
    return KanbanServices(events)


@pytest.fixture
def user(db):
    return User.objects.create_user(username='alice', password='secret123', display_name='Alice')


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username='bob', password='secret123', display_name='Bob')


@pytest.fixture
def board(services, user):
    return services.boards.create_board(user, {'name': 'Roadmap'})


@pytest.fixture
def todo(services, user, board):
    return Column.objects.get(id=services.columns.create_column(board['id'], user, {'name': 'To Do'})['id'])


@pytest.fixture
def in_progress(services, user, board):
    return Column.objects.get(id=services.columns.create_column(board['id'], user, {'name': 'In Progress'})['id'])


@pytest.fixture
def add_cards(services, user):
    """add_cards(column, 'A', 'B') -> list of card dicts, appended in order"""

    def _add(column, *titles):
        return [services.cards.create_card(column.id, user, {'title': title}) for title in titles]

    return _add


@pytest.fixture
def layout():
    """layout(column) -> [(title, position), ...] of active cards in order"""

    def _layout(column):
        return list(
            Card.objects.active()
            .filter(column=column)
            .order_by('position')
            .values_list('title', 'position')
        )

    return _layout
