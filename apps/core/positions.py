# apps/core/positions.py

"""
Position sequencer

Keeps sibling rows (columns of a board, active cards of a column) on a
dense zero-based ordering. Every function takes the sibling queryset so
the same rules serve both columns and cards; shifts are single UPDATE
statements with F() expressions.

Callers run these inside transaction.atomic() and must check parentage
before calling: an id that is not in the sibling queryset is ignored.
"""

from typing import Iterable, List

from django.db.models import F, Max, QuerySet


def next_position(siblings: QuerySet) -> int:
    """Position for a new tail sibling: max + 1, or 0 when empty"""
    top = siblings.aggregate(top=Max('position'))['top']
    return (top if top is not None else -1) + 1


def clamp_position(position: int, size: int) -> int:
    """Keeps a requested slot inside 0..size"""
    if position < 0:
        return 0
    return min(position, size)


def shift_within(siblings: QuerySet, current: int, target: int) -> int:
    """
    Makes room for moving a sibling from `current` to `target`

    current < target: rows in (current, target] move up by one.
    current > target: rows in [target, current) move down by one.
    Returns the number of shifted rows; the moved row itself is untouched.
    """
    if current < target:
        return siblings.filter(
            position__gt=current,
            position__lte=target
        ).update(position=F('position') - 1)
    if current > target:
        return siblings.filter(
            position__gte=target,
            position__lt=current
        ).update(position=F('position') + 1)
    return 0


def close_gap(siblings: QuerySet, position: int) -> int:
    """Pulls every sibling after a vacated slot back by one"""
    return siblings.filter(position__gt=position).update(position=F('position') - 1)


def open_slot(siblings: QuerySet, position: int) -> int:
    """Pushes every sibling at or after `position` forward by one"""
    return siblings.filter(position__gte=position).update(position=F('position') + 1)


def is_permutation(current_ids: Iterable[int], ordered_ids: List[int]) -> bool:
    """True when `ordered_ids` lists every current id exactly once"""
    current = set(current_ids)
    return len(ordered_ids) == len(current) and set(ordered_ids) == current


def apply_order(siblings: QuerySet, ordered_ids: List[int]) -> int:
    """
    Assigns position = index in `ordered_ids`

    Ids missing from the sibling queryset are skipped.
    """
    rows = {row.id: row for row in siblings.filter(id__in=ordered_ids)}
    changed = []
    for index, row_id in enumerate(ordered_ids):
        row = rows.get(row_id)
        if row is not None and row.position != index:
            row.position = index
            changed.append(row)
    if changed:
        siblings.model.objects.bulk_update(changed, ['position'])
    return len(changed)
