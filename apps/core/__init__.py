# apps/core/__init__.py

"""
Core - Aplicação base do Kanban AI

Contém:
- Models (User, Task, TaskHistory, AppSetting)
- Erros de domínio e middleware de erros da API
- Estatísticas do board usadas pelas análises de IA
- Endpoints de saúde, usuários e configurações
- Comandos seed_users e check_llm
"""
