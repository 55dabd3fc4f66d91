# apps/core/converters.py

from .models import MAX_ID


class IdConverter:
    """Like <int:...> but only matches ids the database can store"""

    regex = '[0-9]+'

    def to_python(self, value):
        value = int(value)
        if not 1 <= value <= MAX_ID:
            raise ValueError(value)
        return value

    def to_url(self, value):
        return str(value)
