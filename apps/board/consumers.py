# apps/board/consumers.py

import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket do board Kanban

    Funcionalidades:
    - Recebe os eventos de tarefas publicados pelo BoardBroadcaster
    - Heartbeat (ping/pong)
    - Entrada/saída das salas de edição de uma tarefa (join:task / leave:task)

    Toda conexão é aceita e entra no mesmo grupo; não há filtro por cliente.
    """

    async def connect(self):
        self.board_group_name = settings.KANBAN_BROADCAST_GROUP
        self.task_groups = set()

        await self.channel_layer.group_add(
            self.board_group_name,
            self.channel_name
        )
        await self.accept()

        logger.info(f"✅ WebSocket conectado - {self.client_label()}")

    async def disconnect(self, close_code):
        if hasattr(self, 'board_group_name'):
            await self.channel_layer.group_discard(
                self.board_group_name,
                self.channel_name
            )

        for group in getattr(self, 'task_groups', set()):
            await self.channel_layer.group_discard(group, self.channel_name)

        logger.info(f"🔌 WebSocket desconectado - {self.client_label()} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Mensagens do cliente: {"type": "ping"} ou
        {"type": "join:task" | "leave:task", "taskId": <id>}
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.client_label()}")
            return

        if not isinstance(data, dict):
            return

        message_type = data.get('type')

        # Heartbeat/Ping
        if message_type == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': timezone.now().isoformat()
            }))

        elif message_type in ('join:task', 'leave:task'):
            try:
                task_id = int(data.get('taskId'))
            except (TypeError, ValueError):
                logger.warning(f"⚠️  {message_type} sem taskId válido de {self.client_label()}")
                return

            group = f'task_{task_id}'
            if message_type == 'join:task':
                await self.channel_layer.group_add(group, self.channel_name)
                self.task_groups.add(group)
                event = 'task:joined'
            else:
                await self.channel_layer.group_discard(group, self.channel_name)
                self.task_groups.discard(group)
                event = 'task:left'

            await self.send(text_data=json.dumps({
                'event': event,
                'payload': {'id': task_id}
            }))
            logger.debug(f"👥 {self.client_label()} {message_type} {task_id}")

    # === Handlers do channel layer ===

    async def task_event(self, event):
        """
        Repassa ao cliente um evento publicado pelo BoardBroadcaster
        """
        await self.send(text_data=json.dumps({
            'event': event['event'],
            'payload': event['payload']
        }))

    # === Métodos auxiliares ===

    def client_label(self):
        user = self.scope.get('user')
        if user is not None and user.is_authenticated:
            return user.username
        return self.channel_name
