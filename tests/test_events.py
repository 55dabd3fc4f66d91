"""Tests for event emission after writes."""

import pytest
from django.db import transaction

from apps.board.events import BoardEventEmitter, build_message


def event_types(broadcaster):
    return [message['type'] for message in broadcaster.messages]


def test_events_wait_for_commit(django_capture_on_commit_callbacks, services, broadcaster, user, board, todo):
    with django_capture_on_commit_callbacks() as callbacks:
        services.cards.create_card(todo.id, user, {'title': 'Later'})

    assert broadcaster.messages == []
    assert len(callbacks) == 1

    callbacks[0]()
    message, = broadcaster.messages
    assert message['type'] == 'card:created'
    assert message['boardId'] == board['id']
    assert message['payload']['title'] == 'Later'


def test_rolled_back_write_emits_nothing(db, django_capture_on_commit_callbacks, events, broadcaster):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                events.card_deleted(1, 5, 2)
                raise RuntimeError('rollback')

    assert callbacks == []
    assert broadcaster.messages == []


def test_card_lifecycle_events(django_capture_on_commit_callbacks, services, broadcaster, webhooks,
                               user, board, todo, in_progress):
    with django_capture_on_commit_callbacks(execute=True):
        card = services.cards.create_card(todo.id, user, {'title': 'Ship it'})
        services.cards.update_card(card['id'], user, {'priority': 'high'})
        services.cards.move_card(card['id'], user, in_progress.id, 0)
        services.cards.archive_card(card['id'], user)
        services.cards.unarchive_card(card['id'], user, todo.id)
        services.cards.delete_card(card['id'], user)

    assert event_types(broadcaster) == [
        'card:created',
        'card:updated',
        'card:moved',
        'card:updated',
        'card:updated',
        'card:deleted',
    ]
    assert [event for _, event, _ in webhooks.calls] == [
        'card.created',
        'card.updated',
        'card.moved',
        'card.archived',
        'card.unarchived',
        'card.deleted',
    ]
    assert all(user_id == user.id for user_id, _, _ in webhooks.calls)

    moved = broadcaster.messages[2]['payload']
    assert moved['cardId'] == card['id']
    assert moved['columnId'] == in_progress.id
    assert moved['position'] == 0
    assert webhooks.calls[2][2]['fromColumnId'] == todo.id
    assert webhooks.calls[1][2]['changes'] == {'priority': 'high'}
    assert broadcaster.messages[5]['payload'] == {'cardId': card['id']}


def test_board_column_label_and_member_events(django_capture_on_commit_callbacks, services, broadcaster,
                                              webhooks, user, other_user, board, todo):
    with django_capture_on_commit_callbacks(execute=True):
        services.boards.update_board(board['id'], user, {'name': 'Renamed'})
        column = services.columns.create_column(board['id'], user, {'name': 'Done'})
        services.columns.update_column(column['id'], user, {'is_done': True})
        services.columns.reorder_columns(board['id'], user, [column['id'], todo.id])
        services.columns.delete_column(column['id'], user)
        label = services.labels.create_label(board['id'], user, {'name': 'Bug', 'color': 'red'})
        services.labels.update_label(label['id'], user, {'color': 'blue'})
        services.labels.delete_label(label['id'], user)
        services.boards.add_member(board['id'], user, 'bob')
        services.boards.add_member(board['id'], user, 'bob')
        services.boards.remove_member(board['id'], user, other_user.id)

    assert event_types(broadcaster) == [
        'board:updated',
        'column:created',
        'column:updated',
        'column:reordered',
        'column:deleted',
        'label:created',
        'label:updated',
        'label:deleted',
        'member:added',
        'member:removed',
    ]
    assert broadcaster.messages[3]['payload'] == {'columnIds': [column['id'], todo.id]}
    assert broadcaster.messages[9]['payload'] == {'userId': other_user.id}
    assert broadcaster.revoked == [(board['id'], other_user.id)]
    assert webhooks.calls == []


def test_deleting_a_board_detaches_its_subscribers(django_capture_on_commit_callbacks, services,
                                                   broadcaster, user, board):
    with django_capture_on_commit_callbacks(execute=True):
        services.boards.delete_board(board['id'], user)

    assert broadcaster.revoked == [(board['id'], None)]


def test_delivery_failures_are_swallowed():
    """Neither failure reaches the caller."""
    class BrokenBroadcaster:
        async def broadcast(self, board_id, message, exclude=None):
            raise ConnectionError('layer down')

    class BrokenWebhooks:
        def dispatch(self, user_id, event, data):
            raise RuntimeError('no thread for you')

    emitter = BoardEventEmitter(BrokenBroadcaster(), BrokenWebhooks())
    emitter.deliver(build_message('card:deleted', 1, {'cardId': 2}), actor_id=1, webhook_event='card.deleted')


def test_unknown_event_type_is_a_programming_error(events):
    with pytest.raises(ValueError):
        events.emit('card:exploded', 1, {})
