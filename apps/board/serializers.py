# apps/board/serializers.py

"""
Model -> JSON dicts in the shape the client expects (camelCase keys)

Callers are responsible for prefetching: card_to_dict reads
card.assignee and card.labels.all() directly.
"""


def _iso(value):
    return value.isoformat() if value else None


def board_to_dict(board):
    return {
        'id': board.id,
        'name': board.name,
        'ownerId': board.owner_id,
        'createdAt': _iso(board.created_at),
        'updatedAt': _iso(board.updated_at),
    }


def member_to_dict(member):
    """Membership with the member's public profile"""
    return {
        'boardId': member.board_id,
        'userId': member.user_id,
        'role': member.role,
        'user': member.user.to_public(),
    }


def column_to_dict(column, cards=None):
    data = {
        'id': column.id,
        'boardId': column.board_id,
        'name': column.name,
        'position': column.position,
        'isDone': column.is_done,
        'createdAt': _iso(column.created_at),
    }
    if cards is not None:
        data['cards'] = [card_to_dict(card) for card in cards]
    return data


def label_to_dict(label):
    return {
        'id': label.id,
        'boardId': label.board_id,
        'name': label.name,
        'color': label.color,
    }


def card_to_dict(card):
    """
    Card with resolved labels and assignee

    An unassigned card carries assignee=None; the key is always present.
    """
    return {
        'id': card.id,
        'columnId': card.column_id,
        'title': card.title,
        'description': card.description,
        'position': card.position,
        'dueDate': _iso(card.due_date),
        'priority': card.priority,
        'color': card.color,
        'assigneeId': card.assignee_id,
        'assignee': card.assignee.to_public() if card.assignee_id else None,
        'labels': [label_to_dict(label) for label in card.labels.all()],
        'subtasks': list(card.subtasks or []),
        'comments': list(card.comments or []),
        'archivedAt': _iso(card.archived_at),
        'createdAt': _iso(card.created_at),
        'updatedAt': _iso(card.updated_at),
    }
