# apps/ai/__init__.py

"""
IA - Sugestões e análises do board via servidor de LLM

Funcionalidades:
- Sugestões de campos para o formulário de tarefa
- Perguntas livres sobre o board
- Prioridades, gargalos, melhorias de fluxo e previsões
- Heurísticas offline por palavras-chave
"""
