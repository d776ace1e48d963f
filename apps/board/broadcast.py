# apps/board/broadcast.py

import logging

from asgiref.sync import async_to_sync

logger = logging.getLogger(__name__)

# Catálogo de eventos enviados aos clientes
TASK_CREATED = 'task:created'
TASK_UPDATED = 'task:updated'
TASK_STATUS_UPDATED = 'task:statusUpdated'
TASK_DELETED = 'task:deleted'


class BoardBroadcaster:
    """
    Publica eventos de tarefas para todos os clientes conectados

    Todos os consumers entram no mesmo grupo do channel layer; não há
    filtro por cliente. Publicação é fire-and-forget: falhas de entrega
    são registradas no log e nunca propagadas para a requisição.
    """

    def __init__(self, channel_layer, group='board'):
        self.channel_layer = channel_layer
        self.group = group

    def publish(self, event, payload):
        if self.channel_layer is None:
            logger.warning(f"⚠️  Channel layer não configurado - evento {event} descartado")
            return

        try:
            async_to_sync(self.channel_layer.group_send)(
                self.group,
                {
                    'type': 'task.event',
                    'event': event,
                    'payload': payload,
                }
            )
            logger.debug(f"📡 Evento {event} publicado no grupo {self.group}")
        except Exception as e:
            logger.error(f"❌ Falha ao publicar evento {event}: {str(e)}")
