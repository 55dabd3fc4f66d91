# apps/core/api.py

"""
JSON API plumbing shared by every endpoint

- parses request bodies and normalises camelCase keys
- turns bound forms into cleaned data or ValidationFailed
- maps KanbanError subclasses to JSON responses
"""

import json
import logging
import re
from functools import wraps

from django.http import HttpResponse, JsonResponse

from .exceptions import KanbanError, Unauthorized, ValidationFailed

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def to_snake_case(key):
    return _CAMEL_BOUNDARY.sub('_', key).lower()


def to_camel_case(key):
    head, *rest = key.split('_')
    return head + ''.join(part.title() for part in rest)


def parse_json_body(request):
    """
    Decodes the JSON object sent by the client

    Top-level keys are converted to snake_case so they line up with the
    form field names.
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed('Malformed JSON body')

    if not isinstance(data, dict):
        raise ValidationFailed('JSON body must be an object')

    return {to_snake_case(key): value for key, value in data.items()}


def clean_form(form, partial=False):
    """
    Validates a bound form

    With partial=True only the fields the client actually sent are
    returned, so "absent" and "explicitly null" stay distinguishable.
    """
    if not form.is_valid():
        raise ValidationFailed('Invalid input', errors=form.errors.get_json_data())

    if not partial:
        return dict(form.cleaned_data)

    return {
        name: value
        for name, value in form.cleaned_data.items()
        if name in form.data
    }


def api_view(require_login=True):
    """
    Decorator for JSON endpoints

    Rejects anonymous callers with 401 and converts typed service errors
    into their status codes. Anything else propagates to Django.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(request, *args, **kwargs):
            try:
                if require_login and not request.user.is_authenticated:
                    raise Unauthorized()
                return view_func(request, *args, **kwargs)
            except KanbanError as exc:
                logger.info(f"⚠️ {request.method} {request.path} -> {exc.status_code} {exc.code}: {exc.message}")
                return JsonResponse(exc.as_dict(), status=exc.status_code)

        return wrapped_view

    return decorator


def no_content():
    return HttpResponse(status=204)
