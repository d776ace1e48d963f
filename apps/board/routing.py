# apps/board/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket para a aplicação board
websocket_urlpatterns = [
    # Canal único do board - eventos de tarefas em tempo real
    re_path(r'ws/board/$', consumers.BoardConsumer.as_asgi()),
]
