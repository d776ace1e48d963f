# apps/core/views.py

import json
import logging

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.core.cache import cache
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from apps.board.serializers import serialize_user

from .exceptions import ValidationError
from .forms import LlmUrlForm, LoginForm, RegisterForm
from .models import AppSetting, User

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        User.objects.count()

        # Verificar cache (Redis em produção)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'OK',
            'message': 'API server is running',
            'database': 'ok',
            'cache': 'ok',
            'ai_enabled': settings.ENABLE_AI,
            'timestamp': timezone.now().isoformat(),
            'version': settings.KANBAN_VERSION
        }

        return JsonResponse(status)

    except Exception as e:
        logger.error(f"❌ Health check falhou: {str(e)}")
        status = {
            'status': 'unhealthy',
            'message': 'API server is degraded',
            'error': str(e) if settings.DEBUG else None,
            'timestamp': timezone.now().isoformat(),
            'version': settings.KANBAN_VERSION
        }

        return JsonResponse(status, status=500)


# === USUÁRIOS ===

@require_GET
def user_list(request):
    users = User.objects.all()
    return JsonResponse([serialize_user(user) for user in users], safe=False)


@require_GET
def user_profile(request):
    """Usuário da sessão atual"""
    if not request.user.is_authenticated:
        return JsonResponse({'message': 'Authentication required'}, status=401)

    return JsonResponse(serialize_user(request.user))


def _json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except ValueError:
        raise ValidationError('Request body must be valid JSON')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


# === AUTENTICAÇÃO ===
# Sessão do Django: o cookie de sessão identifica quem altera as tarefas

def _authenticate(request, username, password):
    """Aceita usuário ou email, como no login do board"""
    user = authenticate(request, username=username, password=password)
    if user is None and '@' in username:
        match = User.objects.filter(email__iexact=username).first()
        if match:
            user = authenticate(request, username=match.username, password=password)
    return user


@csrf_exempt
@require_POST
def auth_login(request):
    data = LoginForm(_json_body(request)).payload()

    user = _authenticate(request, data['username'], data['password'])
    if user is None:
        logger.info(f"🔒 Login recusado para {data['username']}")
        return JsonResponse({'status': 'error', 'message': 'Invalid credentials'}, status=401)

    login(request, user)
    logger.info(f"🔓 Login de {user.username}")

    return JsonResponse({'message': f'Welcome, {user.display_name}!', 'user': serialize_user(user)})


@csrf_exempt
@require_POST
def auth_register(request):
    """Cria o usuário e já abre a sessão"""
    data = RegisterForm(_json_body(request)).payload()

    user = User.objects.create_user(
        username=data['username'],
        password=data['password'],
        email=data.get('email') or '',
        name=data['name'],
        role=data.get('role') or 'user',
    )
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')

    return JsonResponse({'message': 'User registered successfully', 'user': serialize_user(user)}, status=201)


@csrf_exempt
@require_POST
def auth_logout(request):
    if request.user.is_authenticated:
        logger.info(f"👋 Logout de {request.user.username}")
    logout(request)
    return JsonResponse({'status': 'success', 'message': 'Logged out successfully'})


# === CONFIGURAÇÕES ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
def llm_url_setting(request):
    """
    GET: URL atual do servidor de LLM
    POST: {llmUrl} salva a nova URL (vale para a próxima chamada ao LLM)
    """
    if request.method == 'GET':
        llm_url = AppSetting.get_value(AppSetting.LLM_URL, settings.LLM_ENDPOINT)
        return JsonResponse({'llmUrl': llm_url})

    llm_url = LlmUrlForm(_json_body(request)).payload()['llmUrl']
    AppSetting.set_value(AppSetting.LLM_URL, llm_url)
    logger.info(f"⚙️  URL do LLM atualizada para {llm_url}")

    return JsonResponse({'message': 'LLM URL updated successfully', 'llmUrl': llm_url})


def api_not_found(request, path=''):
    return JsonResponse({
        'status': 'error',
        'message': f'API endpoint not found: {request.path}'
    }, status=404)
