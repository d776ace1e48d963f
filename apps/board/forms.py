# apps/board/forms.py

from django import forms

from apps.core.forms import JSONListField, LooseDateField, PayloadForm, TagListField
from apps.core.models import User

# Campos somente leitura que o cliente devolve junto com a tarefa
READ_ONLY_KEYS = frozenset([
    'id',
    'assignee',
    'creator',
    'created_by',
    'created_at',
    'updated_at',
    'createdAt',
    'updatedAt',
    'history',
])


class AttachmentListField(JSONListField):
    default_error_messages = {
        'invalid': 'File attachments must be a list of descriptors',
    }
    required_keys = ('filename',)


class TaskForm(PayloadForm):
    """
    Corpo de POST/PUT /api/tasks/

    Título obrigatório e status/prioridade normalizados ficam a cargo do
    TaskService; aqui só se valida forma e tipo de cada campo.
    """

    ignored_keys = READ_ONLY_KEYS

    title = forms.CharField(max_length=255, required=False)
    description = forms.CharField(required=False, empty_value=None, strip=False)
    status = forms.CharField(max_length=20, required=False, empty_value=None)
    priority = forms.CharField(max_length=10, required=False, empty_value=None)
    category = forms.CharField(max_length=100, required=False, empty_value=None)
    deadline = LooseDateField(required=False)
    assignee_id = forms.ModelChoiceField(
        queryset=User.objects.all(),
        required=False,
        error_messages={'invalid_choice': 'Assignee does not exist'}
    )
    estimated_hours = forms.FloatField(required=False, min_value=0)
    tags = TagListField(required=False)
    notes = forms.CharField(required=False, empty_value=None, strip=False)
    file_attachments = AttachmentListField(required=False)
    ai_suggestions = forms.CharField(required=False, empty_value=None, strip=False)
    ai_recommendation = forms.CharField(required=False, empty_value=None, strip=False)


class StatusForm(PayloadForm):
    """Corpo de PATCH /api/tasks/<id>/status/"""

    ignored_keys = frozenset(['id'])

    status = forms.CharField(max_length=20, required=False)


class TagFilterField(TagListField):
    """tags repetido na querystring (?tags=a&tags=b) ou separado por vírgulas"""

    widget = forms.MultipleHiddenInput

    def to_python(self, value):
        if isinstance(value, (list, tuple)):
            value = [part for item in value for part in str(item).split(',')]
        return super().to_python(value)


class TaskFilterForm(PayloadForm):
    """Querystring de GET /api/tasks/filtered/"""

    strict = False

    status = forms.CharField(required=False)
    priority = forms.CharField(required=False)
    category = forms.CharField(required=False)
    assignee_id = forms.IntegerField(required=False)
    search = forms.CharField(required=False)
    deadline_before = LooseDateField(required=False)
    deadline_after = LooseDateField(required=False)
    tags = TagFilterField(required=False)
