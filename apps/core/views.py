# apps/core/views.py

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, connection, transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from .api import api_view, clean_form, parse_json_body
from .exceptions import Conflict, NotFound, Unauthorized, ValidationFailed
from .forms import LoginForm, RegisterForm

logger = logging.getLogger(__name__)
User = get_user_model()


# === AUTHENTICATION ===

@require_POST
@api_view(require_login=False)
def register_view(request):
    """
    Creates an account

    Password strength follows AUTH_PASSWORD_VALIDATORS; hashing is
    delegated to django.contrib.auth.
    """
    data = clean_form(RegisterForm(parse_json_body(request)))

    candidate = User(username=data['username'], display_name=data['display_name'])
    try:
        validate_password(data['password'], user=candidate)
    except ValidationError as e:
        raise ValidationFailed('Invalid input', errors={
            'password': [{'message': message, 'code': 'invalid'} for message in e.messages]
        })

    if User.objects.filter(username__iexact=data['username']).exists():
        raise Conflict('Username already taken', code='USERNAME_TAKEN')

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=data['username'],
                password=data['password'],
                display_name=data['display_name'],
            )
    except IntegrityError:
        raise Conflict('Username already taken', code='USERNAME_TAKEN')

    logger.info(f"👤 New account registered: {user.username}")
    return JsonResponse(user.to_public(), status=201)


@require_POST
@api_view(require_login=False)
def login_view(request):
    """
    Opens a session for valid credentials
    """
    data = clean_form(LoginForm(parse_json_body(request)))

    user = authenticate(request, username=data['username'], password=data['password'])
    if user is None:
        raise Unauthorized('Invalid credentials', code='INVALID_CREDENTIALS')

    login(request, user)
    return JsonResponse(user.to_public())


@require_POST
@api_view()
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


@require_GET
@ensure_csrf_cookie
@api_view()
def me_view(request):
    """Current user; also hands out the CSRF cookie for later writes"""
    return JsonResponse(request.user.to_public())


# === MONITORING ===

@require_GET
def health_check(request):
    """
    Health check for load balancers
    """
    status = {'status': 'ok', 'database': 'connected', 'timestamp': timezone.now().isoformat()}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as e:
        logger.error(f"❌ Health check database failure: {e}")
        status.update(status='error', database=f'error: {e}')
        return JsonResponse(status, status=503)

    return JsonResponse(status)


def not_found_view(request, exception=None):
    """Unmatched routes answer in the API's error format"""
    return JsonResponse(NotFound().as_dict(), status=404)
