"""Tests for dense ordering of columns and cards."""

import pytest

from apps.core.exceptions import ValidationFailed
from apps.core.models import Card, Column
from apps.core.positions import clamp_position, is_permutation


def column_layout(board_id):
    return list(Column.objects.filter(board_id=board_id).order_by('position').values_list('name', 'position'))


def test_append_assigns_positions_in_insertion_order(add_cards, layout, todo):
    add_cards(todo, 'A', 'B', 'C', 'D')
    assert layout(todo) == [('A', 0), ('B', 1), ('C', 2), ('D', 3)]


def test_columns_append_at_tail(services, user, board, todo, in_progress):
    services.columns.create_column(board['id'], user, {'name': 'Done', 'is_done': True})
    assert column_layout(board['id']) == [('To Do', 0), ('In Progress', 1), ('Done', 2)]


@pytest.mark.parametrize('source, target, expected', [
    (0, 3, ['B', 'C', 'D', 'A']),
    (3, 0, ['D', 'A', 'B', 'C']),
    (1, 2, ['A', 'C', 'B', 'D']),
    (2, 1, ['A', 'C', 'B', 'D']),
])
def test_move_within_column_stays_dense(services, user, add_cards, layout, todo, source, target, expected):
    cards = add_cards(todo, 'A', 'B', 'C', 'D')
    services.cards.move_card(cards[source]['id'], user, todo.id, target)
    assert layout(todo) == [(title, index) for index, title in enumerate(expected)]


def test_move_to_own_slot_is_noop(services, user, add_cards, layout, todo):
    cards = add_cards(todo, 'A', 'B', 'C')
    before = layout(todo)
    moved = services.cards.move_card(cards[1]['id'], user, todo.id, 1)
    assert moved['position'] == 1
    assert layout(todo) == before


def test_move_across_columns(services, user, add_cards, layout, todo, in_progress):
    card_a, card_b = add_cards(todo, 'A', 'B')
    add_cards(in_progress, 'Existing')

    moved = services.cards.move_card(card_b['id'], user, in_progress.id, 0)

    assert moved['columnId'] == in_progress.id
    assert layout(todo) == [('A', 0)]
    assert layout(in_progress) == [('B', 0), ('Existing', 1)]


def test_move_across_columns_from_head(services, user, add_cards, layout, todo, in_progress):
    cards = add_cards(todo, 'A', 'B', 'C')
    add_cards(in_progress, 'X', 'Y')

    services.cards.move_card(cards[0]['id'], user, in_progress.id, 1)

    assert layout(todo) == [('B', 0), ('C', 1)]
    assert layout(in_progress) == [('X', 0), ('A', 1), ('Y', 2)]


def test_move_target_is_clamped_to_tail(services, user, add_cards, layout, todo, in_progress):
    cards = add_cards(todo, 'A', 'B')
    add_cards(in_progress, 'X')

    services.cards.move_card(cards[0]['id'], user, in_progress.id, 99)
    services.cards.move_card(cards[1]['id'], user, todo.id, 99)

    assert layout(todo) == [('B', 0)]
    assert layout(in_progress) == [('X', 0), ('A', 1)]


def test_delete_card_closes_gap(services, user, add_cards, layout, todo):
    cards = add_cards(todo, 'A', 'B', 'C')
    services.cards.delete_card(cards[0]['id'], user)
    assert layout(todo) == [('B', 0), ('C', 1)]


def test_delete_column_closes_gap(services, user, board, todo, in_progress):
    done = services.columns.create_column(board['id'], user, {'name': 'Done'})
    services.columns.delete_column(todo.id, user)
    assert column_layout(board['id']) == [('In Progress', 0), ('Done', 1)]
    assert Column.objects.filter(id=done['id'], position=1).exists()


def test_archive_and_unarchive_keep_columns_dense(services, user, add_cards, layout, todo, in_progress):
    cards = add_cards(todo, 'A', 'B', 'C')
    add_cards(in_progress, 'X')

    archived = services.cards.archive_card(cards[1]['id'], user)
    assert archived['archivedAt'] is not None
    assert layout(todo) == [('A', 0), ('C', 1)]

    restored = services.cards.unarchive_card(cards[1]['id'], user, in_progress.id)
    assert restored['archivedAt'] is None
    assert layout(in_progress) == [('X', 0), ('B', 1)]


def test_archived_card_cannot_be_moved(services, user, add_cards, todo):
    card, = add_cards(todo, 'A')
    services.cards.archive_card(card['id'], user)

    with pytest.raises(ValidationFailed):
        services.cards.move_card(card['id'], user, todo.id, 0)


def test_reorder_columns(services, user, board, todo, in_progress):
    done = services.columns.create_column(board['id'], user, {'name': 'Done'})
    services.columns.reorder_columns(board['id'], user, [done['id'], todo.id, in_progress.id])
    assert column_layout(board['id']) == [('Done', 0), ('To Do', 1), ('In Progress', 2)]


@pytest.mark.parametrize('ids', ['partial', 'duplicate', 'foreign'])
def test_reorder_rejects_anything_but_a_permutation(services, user, other_user, board, todo, in_progress, ids):
    other_board = services.boards.create_board(other_user, {'name': 'Other'})
    foreign = services.columns.create_column(other_board['id'], other_user, {'name': 'Elsewhere'})
    column_ids = {
        'partial': [in_progress.id],
        'duplicate': [todo.id, todo.id],
        'foreign': [in_progress.id, foreign['id']],
    }[ids]

    with pytest.raises(ValidationFailed):
        services.columns.reorder_columns(board['id'], user, column_ids)
    assert column_layout(board['id']) == [('To Do', 0), ('In Progress', 1)]


def test_move_to_other_board_is_rejected(services, user, add_cards, todo):
    other_board = services.boards.create_board(user, {'name': 'Other'})
    elsewhere = services.columns.create_column(other_board['id'], user, {'name': 'Elsewhere'})
    card, = add_cards(todo, 'A')

    with pytest.raises(ValidationFailed):
        services.cards.move_card(card['id'], user, elsewhere['id'], 0)
    assert Card.objects.get(id=card['id']).column_id == todo.id


def test_clamp_position():
    assert clamp_position(-3, 4) == 0
    assert clamp_position(2, 4) == 2
    assert clamp_position(9, 4) == 4


def test_is_permutation():
    assert is_permutation([1, 2, 3], [3, 1, 2])
    assert not is_permutation([1, 2, 3], [1, 2])
    assert not is_permutation([1, 2], [1, 1])
    assert not is_permutation([1, 2], [1, 2, 4])
