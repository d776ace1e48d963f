# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Kanban'

    def ready(self):
        """
        Inicialização da app
        Monta o TaskService com o broadcaster do channel layer
        """
        from channels.layers import get_channel_layer
        from django.conf import settings

        from .broadcast import BoardBroadcaster
        from .services import TaskService

        broadcaster = BoardBroadcaster(get_channel_layer(), settings.KANBAN_BROADCAST_GROUP)
        self.task_service = TaskService(broadcaster)

        logger.info("🔌 Board App inicializada - WebSockets habilitados")
