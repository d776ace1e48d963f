# apps/ai/forms.py

from django import forms

from apps.core.forms import JSONListField, PayloadForm


class RosterField(JSONListField):
    """
    Lista de membros da equipe enviada pelo cliente ({name, role, skills})
    Membros sem nome são descartados; o LLM não tem como sugeri-los
    """

    default_error_messages = {
        'invalid': 'userList must be a list of users',
    }

    def to_python(self, value):
        members = super().to_python(value)
        return [member for member in members if str(member.get('name') or '').strip()]


class SuggestionForm(PayloadForm):
    """Corpo de POST /api/ai/task-suggestions/"""

    title = forms.CharField(required=False)
    description = forms.CharField(required=False)
    currentPriority = forms.CharField(required=False)
    currentCategory = forms.CharField(required=False)
    currentDeadline = forms.CharField(required=False)
    currentAssigneeName = forms.CharField(required=False)
    currentAssigneeId = forms.CharField(required=False)
    userList = RosterField(required=False)


class QueryForm(PayloadForm):
    """Corpo de POST /api/ai/query/"""

    query = forms.CharField(error_messages={'required': 'Query is required'})
    taskId = forms.IntegerField(required=False)
