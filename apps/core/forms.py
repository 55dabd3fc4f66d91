# apps/core/forms.py

from django import forms
from django.contrib.auth.validators import UnicodeUsernameValidator


class RegisterForm(forms.Form):
    """Account registration"""

    username = forms.CharField(
        min_length=3,
        max_length=150,
        validators=[UnicodeUsernameValidator()]
    )
    password = forms.CharField(min_length=6, max_length=128, strip=False)
    display_name = forms.CharField(min_length=1, max_length=100)


class LoginForm(forms.Form):
    """Session login"""

    username = forms.CharField(max_length=150)
    password = forms.CharField(max_length=128, strip=False)
