# apps/board/__init__.py

"""
Board - API de tarefas do Kanban

Funcionalidades:
- CRUD de tarefas com histórico por campo
- Anexos de arquivos
- WebSockets para atualizações em tempo real
"""
