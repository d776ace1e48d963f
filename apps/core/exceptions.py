# apps/core/exceptions.py

"""
Erros de domínio do Kanban

Cada erro carrega o status HTTP e a mensagem pública que o
ApiErrorMiddleware devolve ao cliente como {message, error}.
"""


class KanbanError(Exception):
    """Base dos erros de domínio"""

    status_code = 500
    default_message = 'Something went wrong!'

    def __init__(self, message=None, detail=None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(KanbanError):
    """Campo obrigatório ausente ou payload inválido"""

    status_code = 400
    default_message = 'Invalid request payload'

    def __init__(self, message=None, detail=None, errors=None):
        super().__init__(message, detail)
        self.errors = errors or {}


class NotFoundError(KanbanError):
    """Tarefa referenciada não existe"""

    status_code = 404
    default_message = 'Resource not found'


class UpstreamServiceError(KanbanError):
    """Servidor de LLM inacessível ou resposta ilegível"""

    status_code = 502
    default_message = 'The AI service is unavailable'


class PersistenceError(KanbanError):
    """Falha de escrita no banco de dados"""

    status_code = 500
    default_message = 'Failed to save changes'
