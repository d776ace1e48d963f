# apps/ai/views.py

import json
import logging

from django.apps import apps
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from apps.core.exceptions import ValidationError
from apps.core.models import User

from .forms import QueryForm, SuggestionForm

logger = logging.getLogger(__name__)


def _suggestion_service():
    return apps.get_app_config('ai').suggestion_service


def _json_body(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError('Request body must be valid JSON')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _team_roster():
    """Membros reais da equipe para o LLM escolher um responsável"""
    return [
        {
            'id': user.id,
            'name': user.display_name,
            'role': user.role,
            'skills': list(user.skills or []),
        }
        for user in User.objects.filter(is_active=True)
    ]


# === ANÁLISES DO BOARD ===
# UpstreamServiceError sobe até o ApiErrorMiddleware (502)

@require_GET
def task_priorities(request):
    return JsonResponse(_suggestion_service().task_priorities(), safe=False)


@require_GET
def workflow_improvements(request):
    return JsonResponse(_suggestion_service().workflow_improvements(), safe=False)


@require_GET
def bottlenecks(request):
    return JsonResponse(_suggestion_service().bottlenecks(), safe=False)


@require_GET
def predictions(request):
    return JsonResponse(_suggestion_service().predictions(), safe=False)


# === PERGUNTAS E SUGESTÕES ===

@csrf_exempt
@require_POST
def custom_query(request):
    data = QueryForm(_json_body(request)).payload()
    result = _suggestion_service().custom_query(data['query'], data.get('taskId'))
    return JsonResponse(result)


def _current_assignee_name(assignee_id, roster):
    """Nome do responsável atual a partir do id (roster enviado ou banco)"""
    try:
        assignee_id = int(assignee_id)
    except (TypeError, ValueError):
        return ''

    for member in roster:
        if str(member.get('id')) == str(assignee_id):
            return str(member.get('name') or '')

    user = User.objects.filter(pk=assignee_id).first()
    return user.display_name if user else ''


@csrf_exempt
@require_POST
def task_suggestions(request):
    """
    Sugestões para o formulário de tarefa
    Responde sempre 200: falhas do LLM viram sugestões com os campos atuais
    """
    data = SuggestionForm(_json_body(request)).payload()
    roster = data.pop('userList', None) or _team_roster()

    assignee_id = data.pop('currentAssigneeId', None)
    if not data.get('currentAssigneeName') and assignee_id:
        data['currentAssigneeName'] = _current_assignee_name(assignee_id, roster)

    suggestion = _suggestion_service().suggest_task_update(data, roster)
    return JsonResponse(suggestion)
