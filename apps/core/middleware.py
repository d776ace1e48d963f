# apps/core/middleware.py

import logging

from django.conf import settings
from django.http import JsonResponse

from .exceptions import KanbanError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Converte exceções das views da API em respostas JSON

    Formato: {"message": ..., "error": ...}. O detalhe em `error` só é
    exposto com DEBUG ativo; em produção vai como null.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        """
        Erros de domínio viram 4xx/5xx com a mensagem pública;
        qualquer outro erro em /api/ vira 500 genérico
        """
        if isinstance(exception, KanbanError):
            if exception.status_code >= 500:
                logger.error(f"❌ {request.method} {request.path}: {exception.message} ({exception.detail})")
            else:
                logger.info(f"⚠️  {request.method} {request.path}: {exception.message}")

            body = {
                'message': exception.message,
                'error': self._detail(exception.detail or exception.message),
            }
            errors = getattr(exception, 'errors', None)
            if errors:
                body['errors'] = errors
            return JsonResponse(body, status=exception.status_code)

        if not request.path.startswith('/api/'):
            return None  # Deixar o tratamento padrão do Django (admin etc)

        logger.exception(f"❌ Erro inesperado em {request.method} {request.path}")
        return JsonResponse({
            'message': 'Something went wrong!',
            'error': self._detail(str(exception)),
        }, status=500)

    @staticmethod
    def _detail(detail):
        return str(detail) if settings.DEBUG and detail else None
