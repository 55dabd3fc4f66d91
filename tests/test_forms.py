"""Tests for request shape validation."""

import pytest

from apps.board.forms import CardForm, CardUpdateForm, ColumnReorderForm
from apps.core.api import clean_form, to_camel_case, to_snake_case
from apps.core.exceptions import ValidationFailed


def test_key_conversion():
    assert to_snake_case('assigneeId') == 'assignee_id'
    assert to_snake_case('title') == 'title'
    assert to_camel_case('label_ids') == 'labelIds'


def test_partial_update_keeps_explicit_nulls_only():
    data = clean_form(CardUpdateForm({'description': None, 'priority': None}), partial=True)
    assert data == {'description': None, 'priority': None}


def test_partial_update_rejects_empty_title():
    with pytest.raises(ValidationFailed) as excinfo:
        clean_form(CardUpdateForm({'title': ''}), partial=True)
    assert 'title' in excinfo.value.errors


def test_card_defaults():
    data = clean_form(CardForm({'title': 'Task'}))
    assert data['label_ids'] == []
    assert data['subtasks'] == []
    assert data['comments'] == []
    assert data['priority'] is None
    assert data['assignee_id'] is None


def test_comments_shape():
    comment = {
        'id': 'c1',
        'content': 'Looks good',
        'authorId': 1,
        'authorName': 'Alice',
        'createdAt': '2024-01-01T00:00:00Z',
    }
    assert clean_form(CardForm({'title': 'Task', 'comments': [comment]}))['comments'] == [comment]

    with pytest.raises(ValidationFailed):
        clean_form(CardForm({'title': 'Task', 'comments': [dict(comment, authorId=True)]}))


@pytest.mark.parametrize('value', ['1,2', [1, 'two'], [True], {'id': 1}, [0], [2 ** 63]])
def test_id_lists_must_be_integers(value):
    with pytest.raises(ValidationFailed):
        clean_form(ColumnReorderForm({'column_ids': value}))


def test_empty_id_list():
    assert clean_form(ColumnReorderForm({'column_ids': []})) == {'column_ids': []}


@pytest.mark.parametrize('assignee_id', [0, -3, 2 ** 63])
def test_assignee_id_must_fit_a_database_id(assignee_id):
    with pytest.raises(ValidationFailed) as excinfo:
        clean_form(CardForm({'title': 'Task', 'assignee_id': assignee_id}))
    assert 'assignee_id' in excinfo.value.errors


def test_largest_database_id_is_accepted():
    data = clean_form(ColumnReorderForm({'column_ids': [2 ** 63 - 1]}))
    assert data == {'column_ids': [2 ** 63 - 1]}
