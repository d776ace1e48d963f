# apps/board/views.py

import json
import logging

from django.apps import apps
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.ai import heuristics
from apps.core.exceptions import KanbanError, ValidationError
from apps.core.utils import build_board_context

from .forms import StatusForm, TaskFilterForm, TaskForm
from .serializers import serialize_history, serialize_task
from .uploads import discard_files, store_uploads

logger = logging.getLogger(__name__)


def _task_service():
    return apps.get_app_config('board').task_service


def _actor(request):
    """Usuário da sessão, ou None para requisições anônimas"""
    user = getattr(request, 'user', None)
    return user if user is not None and user.is_authenticated else None


def _read_body(request):
    """
    Lê o corpo como JSON ou multipart
    Retorna (dados, arquivos enviados em `files`)
    """
    if request.content_type == 'multipart/form-data':
        if request.method == 'POST':
            return request.POST, request.FILES.getlist('files')
        # Django só faz o parse de multipart em POST
        data, files = request.parse_file_upload(request.META, request)
        return data, files.getlist('files')

    if not request.body:
        return {}, []

    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError('Request body must be valid JSON')

    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data, []


def _save_with_uploads(request, save):
    """Grava os anexos e chama `save`; se a gravação falhar, descarta os arquivos"""
    data, files = _read_body(request)
    fields = TaskForm(data).payload()
    attachments = store_uploads(files)

    try:
        return save(fields, attachments)
    except KanbanError:
        discard_files(attachments)
        raise


# === TAREFAS ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
def task_collection(request):
    """
    GET: todas as tarefas (atualizadas mais recentemente primeiro)
    POST: cria tarefa (JSON ou multipart com `files`)
    """
    service = _task_service()

    if request.method == 'GET':
        tasks = service.list_all()
        return JsonResponse([serialize_task(task) for task in tasks], safe=False)

    task = _save_with_uploads(
        request,
        lambda fields, attachments: service.create(fields, actor=_actor(request), attachments=attachments)
    )
    return JsonResponse(serialize_task(task), status=201)


@require_http_methods(["GET"])
def task_filtered(request):
    filters = TaskFilterForm(request.GET).payload()
    tasks = _task_service().list_filtered(filters)
    return JsonResponse([serialize_task(task) for task in tasks], safe=False)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def task_detail(request, task_id):
    service = _task_service()

    if request.method == 'GET':
        return JsonResponse(serialize_task(service.get(task_id)))

    if request.method == 'DELETE':
        return JsonResponse(service.delete(task_id, actor=_actor(request)))

    task = _save_with_uploads(
        request,
        lambda fields, attachments: service.update(task_id, fields, actor=_actor(request), attachments=attachments)
    )
    return JsonResponse(serialize_task(task))


@csrf_exempt
@require_http_methods(["PATCH"])
def task_status(request, task_id):
    """Atualização de status (drag and drop no board)"""
    data, _ = _read_body(request)
    status = StatusForm(data).payload().get('status')
    result = _task_service().update_status(task_id, status, actor=_actor(request))
    return JsonResponse(result)


@require_http_methods(["GET"])
def task_history(request, task_id):
    entries = _task_service().history(task_id)
    return JsonResponse([serialize_history(entry) for entry in entries], safe=False)


@csrf_exempt
@require_http_methods(["DELETE"])
def task_file(request, task_id, filename):
    task = _task_service().remove_attachment(task_id, filename, actor=_actor(request))
    return JsonResponse(serialize_task(task))


@require_http_methods(["GET"])
def task_ai_suggestions(request, task_id):
    """
    Sugestões offline por palavras-chave (sem chamar o LLM)
    ?requestType=custom_query&query=... responde perguntas sobre a tarefa
    """
    task = _task_service().get(task_id)

    if request.GET.get('requestType') == 'custom_query':
        query = (request.GET.get('query') or '').strip()
        if not query:
            raise ValidationError('Task title or query is required')

        current_task = {
            'title': task.title,
            'description': task.description,
            'priority': task.priority,
        }
        return JsonResponse(heuristics.answer_query(query, current_task, build_board_context()))

    return JsonResponse(heuristics.suggest_task_fields(task.title, task.description))
