# apps/ai/client.py

import logging

import requests
from django.conf import settings

from apps.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


def configured_endpoint():
    """URL base do servidor de LLM: valor salvo em AppSetting ou o do ambiente"""
    from apps.core.models import AppSetting

    return AppSetting.get_value(AppSetting.LLM_URL, settings.LLM_ENDPOINT)


class CompletionClient:
    """
    Cliente HTTP para um endpoint /chat/completions compatível com OpenAI
    (LM Studio por padrão)

    A URL base é resolvida a cada chamada para refletir alterações feitas
    em /api/settings/llm-url/ sem reiniciar o processo. Sem retentativas.
    """

    def __init__(self, endpoint_provider, model, temperature=0.7, max_tokens=-1, timeout=60.0):
        self.endpoint_provider = endpoint_provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def base_url(self):
        return (self.endpoint_provider() or '').rstrip('/')

    def complete(self, messages, max_tokens=None):
        """Envia as mensagens e retorna o texto da primeira escolha"""
        url = f"{self.base_url}/chat/completions"
        logger.debug(f"🤖 Enviando {len(messages)} mensagens para {url}")

        try:
            r = requests.post(
                url,
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": self.temperature,
                    "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
                    "stream": False,
                },
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            logger.error(f"❌ Erro ao consultar o LLM em {url}: {str(e)}")
            raise UpstreamServiceError(detail=str(e)) from e
        except ValueError as e:
            logger.error(f"❌ Resposta do LLM não é JSON: {str(e)}")
            raise UpstreamServiceError('Invalid response from the AI service', detail=str(e)) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.error(f"❌ Formato inesperado de resposta do LLM: {str(data)[:200]}")
            raise UpstreamServiceError('Invalid response format from the AI service', detail=str(data)[:200])

        if not isinstance(content, str):
            raise UpstreamServiceError('Invalid response format from the AI service', detail=repr(content)[:200])

        logger.debug(f"✅ Resposta do LLM recebida ({len(content)} caracteres)")
        return content

    def ping(self):
        """Teste de conexão com um prompt curto; retorna o texto recebido"""
        return self.complete(
            [
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "content": 'Respond with the word "Connected" if you can hear me.'},
            ],
            max_tokens=50,
        )
