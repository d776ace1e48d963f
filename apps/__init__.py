# apps/__init__.py

"""
Kanban AI - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, erros, usuários e configurações
- board: Mutação de tarefas, histórico e WebSockets
- ai: Sugestões e análises via servidor de LLM
"""

__version__ = '0.1.0'
