"""Tests for the nested board view."""

import pytest

from apps.core.exceptions import NotFound


def test_board_view_is_nested_and_ordered(services, user, board, todo, in_progress, add_cards):
    label = services.labels.create_label(board['id'], user, {'name': 'Bug', 'color': '#f00'})
    first, second = add_cards(todo, 'First', 'Second')
    services.cards.update_card(second['id'], user, {'assignee_id': user.id, 'label_ids': [label['id']]})
    services.columns.reorder_columns(board['id'], user, [in_progress.id, todo.id])

    view = services.boards.get_board(board['id'], user)

    assert [column['name'] for column in view['columns']] == ['In Progress', 'To Do']
    cards = view['columns'][1]['cards']
    assert [card['title'] for card in cards] == ['First', 'Second']
    assert cards[0]['assignee'] is None
    assert 'assignee' in cards[0]
    assert cards[1]['assignee'] == {'id': user.id, 'username': 'alice', 'displayName': 'Alice'}
    assert cards[1]['labels'] == [label]
    assert view['labels'] == [label]
    assert view['members'] == [{
        'boardId': board['id'],
        'userId': user.id,
        'role': 'owner',
        'user': user.to_public(),
    }]


def test_archived_cards_are_left_out(services, user, board, todo, add_cards):
    keep, gone = add_cards(todo, 'Keep', 'Gone')
    services.cards.archive_card(gone['id'], user)

    view = services.boards.get_board(board['id'], user)
    assert [card['title'] for card in view['columns'][0]['cards']] == ['Keep']

    archived = services.cards.list_archived_cards(board['id'], user)
    assert [card['id'] for card in archived] == [gone['id']]


def test_non_member_gets_not_found(services, other_user, board):
    with pytest.raises(NotFound):
        services.boards.get_board(board['id'], other_user)


def test_list_boards_only_shows_memberships(services, user, other_user, board):
    services.boards.create_board(other_user, {'name': 'Private'})
    shared = services.boards.create_board(other_user, {'name': 'Shared'})
    services.boards.add_member(shared['id'], other_user, 'alice')

    names = [item['name'] for item in services.boards.list_boards(user)]
    assert sorted(names) == ['Roadmap', 'Shared']
