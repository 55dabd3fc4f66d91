# apps/board/forms.py

"""
Request shapes for the board API

Forms are bound to the decoded JSON body (keys already snake_case) and
only check shape and bounds. Cross-entity rules (assignee is a member,
labels belong to the board, ...) are enforced by the services.
"""

from django import forms
from django.core.exceptions import ValidationError

from apps.core.models import MAX_ID


class IdListField(forms.Field):
    """JSON array of integer ids"""

    default_error_messages = {
        'invalid': 'Enter a list of integer ids.',
        'out_of_range': 'Ids must be between 1 and %(max)s.',
    }

    def to_python(self, value):
        if value in (None, ''):
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages['invalid'], code='invalid')

        ids = []
        for item in value:
            # bool is an int subclass
            if isinstance(item, bool) or not isinstance(item, int):
                raise ValidationError(self.error_messages['invalid'], code='invalid')
            if not 1 <= item <= MAX_ID:
                raise ValidationError(
                    self.error_messages['out_of_range'], code='out_of_range', params={'max': MAX_ID}
                )
            ids.append(item)
        return ids


def _check_items(value, field_name, schema, optional=()):
    """
    Validates a list of flat JSON objects against {key: type}

    Returns [] for an empty or null list.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f'{field_name} must be a list.', code='invalid')

    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValidationError(f'{field_name}[{index}] must be an object.', code='invalid')
        for key, expected in schema.items():
            present = key in item and item[key] is not None
            if not present and key in optional:
                continue
            if not present or not isinstance(item[key], expected) or (
                expected is int and isinstance(item[key], bool)
            ):
                raise ValidationError(f'{field_name}[{index}].{key} is invalid.', code='invalid')
    return value


SUBTASK_SCHEMA = {'id': str, 'title': str, 'completed': bool}
COMMENT_SCHEMA = {
    'id': str,
    'content': str,
    'authorId': int,
    'authorName': str,
    'createdAt': str,
    'updatedAt': str,
}


# === BOARDS ===

class BoardForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=200)


class MemberAddForm(forms.Form):
    username = forms.CharField(max_length=150)


# === COLUMNS ===

class ColumnForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=100)
    is_done = forms.BooleanField(required=False)


class ColumnUpdateForm(ColumnForm):
    name = forms.CharField(min_length=1, max_length=100, required=False)

    def clean_name(self):
        name = self.cleaned_data['name']
        if 'name' in self.data and not name:
            raise ValidationError('Name cannot be empty.', code='required')
        return name


class ColumnReorderForm(forms.Form):
    column_ids = IdListField(required=False)


# === CARDS ===

class CardForm(forms.Form):
    """
    Card creation

    description, due_date, priority, color and assignee_id accept null.
    """

    title = forms.CharField(min_length=1, max_length=200)
    description = forms.CharField(required=False, strip=False, empty_value=None)
    due_date = forms.DateTimeField(required=False)
    priority = forms.ChoiceField(
        choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')],
        required=False
    )
    color = forms.CharField(max_length=20, required=False, empty_value=None)
    assignee_id = forms.IntegerField(required=False, min_value=1, max_value=MAX_ID)
    label_ids = IdListField(required=False)
    subtasks = forms.JSONField(required=False)
    comments = forms.JSONField(required=False)

    def clean_priority(self):
        return self.cleaned_data['priority'] or None

    def clean_subtasks(self):
        return _check_items(self.cleaned_data['subtasks'], 'subtasks', SUBTASK_SCHEMA)

    def clean_comments(self):
        return _check_items(
            self.cleaned_data['comments'], 'comments', COMMENT_SCHEMA, optional=('updatedAt',)
        )


class CardUpdateForm(CardForm):
    title = forms.CharField(min_length=1, max_length=200, required=False)

    def clean_title(self):
        title = self.cleaned_data['title']
        if 'title' in self.data and not title:
            raise ValidationError('Title cannot be empty.', code='required')
        return title


class CardMoveForm(forms.Form):
    column_id = forms.IntegerField(min_value=1, max_value=MAX_ID)
    position = forms.IntegerField(min_value=0)


class CardUnarchiveForm(forms.Form):
    column_id = forms.IntegerField(min_value=1, max_value=MAX_ID)


# === LABELS ===

class LabelForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=50)
    color = forms.CharField(min_length=1, max_length=20)


class LabelUpdateForm(forms.Form):
    name = forms.CharField(min_length=1, max_length=50, required=False)
    color = forms.CharField(min_length=1, max_length=20, required=False)

    def clean(self):
        cleaned_data = super().clean()
        for field in ('name', 'color'):
            if field in self.data and not cleaned_data.get(field):
                self.add_error(field, ValidationError('This field cannot be empty.', code='required'))
        return cleaned_data
