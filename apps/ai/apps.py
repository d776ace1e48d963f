# apps/ai/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AiConfig(AppConfig):
    """Configuração da app IA"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.ai'
    verbose_name = 'IA - Sugestões & Análises'

    def ready(self):
        """
        Inicialização da app
        Monta o cliente de completions e o SuggestionService
        """
        from django.conf import settings

        from .client import CompletionClient, configured_endpoint
        from .services import SuggestionService

        self.completion_client = CompletionClient(
            endpoint_provider=configured_endpoint,
            model=settings.LLM_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
        )
        self.suggestion_service = SuggestionService(self.completion_client)

        logger.info(f"🤖 IA App inicializada - modelo {settings.LLM_MODEL}")
