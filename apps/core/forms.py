# apps/core/forms.py

import json

from django import forms
from django.core.validators import URLValidator

from .exceptions import ValidationError


class PayloadForm(forms.Form):
    """
    Form alimentado pelo corpo da requisição

    Aceita um dict (JSON decodificado) ou QueryDict (multipart/querystring).
    Guarda as chaves enviadas para que updates parciais só toquem nos
    campos presentes; chaves desconhecidas são rejeitadas quando `strict`.
    """

    ignored_keys = frozenset()
    strict = True

    def __init__(self, data=None, **kwargs):
        data = data if data is not None else {}
        self.provided = [key for key in data.keys() if key not in self.ignored_keys]
        super().__init__(data=data, **kwargs)

    def clean(self):
        cleaned_data = super().clean()

        if self.strict:
            unknown = sorted(set(self.provided) - set(self.fields))
            if unknown:
                raise forms.ValidationError(
                    f"Unknown fields: {', '.join(unknown)}",
                    code='unknown_field'
                )

        return cleaned_data

    def payload(self):
        """
        Valida e retorna apenas os campos enviados pelo cliente
        Erros viram ValidationError de domínio (HTTP 400)
        """
        if not self.is_valid():
            errors = {field: list(messages) for field, messages in self.errors.items()}
            first = next((m for messages in errors.values() for m in messages), None)
            raise ValidationError(first, errors=errors)

        return {
            name: self.cleaned_data[name]
            for name in self.provided
            if name in self.fields
        }


# === CAMPOS ===

class LooseDateField(forms.DateField):
    """Data que também aceita datetime ISO (descarta a parte de hora)"""

    def to_python(self, value):
        if isinstance(value, str) and 'T' in value:
            value = value.split('T', 1)[0]
        return super().to_python(value)


class TagListField(forms.Field):
    """Lista de tags: lista JSON, string JSON ou string separada por vírgulas"""

    default_error_messages = {
        'invalid': 'Tags must be a list of strings',
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []

        if isinstance(value, str):
            value = value.strip()
            if value.startswith('['):
                try:
                    value = json.loads(value)
                except ValueError:
                    raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
            else:
                value = value.split(',')

        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError(self.error_messages['invalid'], code='invalid')

        tags = []
        for item in value:
            if isinstance(item, (dict, list)):
                raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
            tag = str(item).strip()
            if tag:
                tags.append(tag)
        return tags


class JSONListField(forms.Field):
    """Lista de objetos JSON (aceita a lista ou a string JSON)"""

    default_error_messages = {
        'invalid': 'Expected a list of objects',
    }
    required_keys = ()

    def to_python(self, value):
        if value in self.empty_values:
            return []

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise forms.ValidationError(self.error_messages['invalid'], code='invalid')

        if not isinstance(value, list):
            raise forms.ValidationError(self.error_messages['invalid'], code='invalid')

        for item in value:
            if not isinstance(item, dict) or any(not item.get(key) for key in self.required_keys):
                raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
        return value


class LlmUrlForm(PayloadForm):
    """POST /api/settings/llm-url/"""

    llmUrl = forms.CharField(
        max_length=500,
        validators=[URLValidator(schemes=['http', 'https'])],
        error_messages={'required': 'LLM URL is required'}
    )


# === AUTENTICAÇÃO ===

class LoginForm(PayloadForm):
    """POST /api/auth/login/ - usuário ou email + senha"""

    ignored_keys = frozenset(['remember'])

    username = forms.CharField(
        max_length=150,
        error_messages={'required': 'Username and password are required'}
    )
    password = forms.CharField(
        strip=False,
        error_messages={'required': 'Username and password are required'}
    )


class RegisterForm(PayloadForm):
    """POST /api/auth/register/"""

    REQUIRED_MESSAGE = 'Username, password, and name are required'

    username = forms.CharField(max_length=150, error_messages={'required': REQUIRED_MESSAGE})
    password = forms.CharField(
        min_length=8,
        strip=False,
        error_messages={
            'required': REQUIRED_MESSAGE,
            'min_length': 'Password must be at least 8 characters',
        }
    )
    name = forms.CharField(max_length=200, error_messages={'required': REQUIRED_MESSAGE})
    email = forms.EmailField(required=False)
    role = forms.CharField(max_length=100, required=False)

    def clean_username(self):
        from .models import User

        username = self.cleaned_data['username']
        if User.objects.filter(username__iexact=username).exists():
            raise forms.ValidationError('Username already exists')
        return username
