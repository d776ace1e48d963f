# apps/ai/heuristics.py

"""
Sugestões offline por palavras-chave

Não chamam o LLM: respondem na hora a partir do texto da tarefa e do
estado do board. Prazos são determinísticos (alta 3 dias, média 7, baixa 14).
"""

from datetime import timedelta
from typing import Dict, List, Optional

from django.utils import timezone

DEADLINE_DAYS = {
    'critical': 3,
    'high': 3,
    'medium': 7,
    'low': 14,
}

# Ordem importa: a primeira categoria que casar vence
CATEGORY_KEYWORDS = [
    ('Design', ('design', 'ui', 'ux', 'interface')),
    ('Development', ('develop', 'code', 'implement', 'programming')),
    ('Testing', ('test', 'qa', 'quality', 'verify', 'validate')),
    ('Documentation', ('document', 'docs')),
    ('Review', ('review', 'check')),
    ('Regulatory', ('regulatory', 'compliance', 'legal')),
]

URGENT_TERMS = ('urgent', 'critical', 'important', 'asap', 'immediately')
LOW_TERMS = ('when possible', 'low priority', 'eventually')


def _text(*parts):
    return ' '.join(part for part in parts if part).lower()


def _has_any(text, terms):
    return any(term in text for term in terms)


def guess_priority(text: str) -> str:
    if _has_any(text, URGENT_TERMS):
        return 'high'
    if _has_any(text, LOW_TERMS):
        return 'low'
    return 'medium'


def guess_category(text: str) -> Optional[str]:
    for category, keywords in CATEGORY_KEYWORDS:
        if _has_any(text, keywords):
            return category
    return None


def suggest_task_fields(title, description=None, today=None) -> Dict:
    """Prioridade, categoria e prazo estimados a partir do título/descrição"""
    today = today or timezone.localdate()
    text = _text(title, description)

    priority = guess_priority(text)
    category = guess_category(text)
    days = DEADLINE_DAYS[priority]

    recommendation = f"Based on the task description, I'd recommend treating this as a {priority} priority task"
    if category:
        recommendation += f" in the {category} category"
    recommendation += f". The estimated completion time is approximately {days} days."

    return {
        'priority': priority,
        'category': category,
        'deadline': (today + timedelta(days=days)).isoformat(),
        'recommendation': recommendation,
        'confidence': 0.85,
    }


# === PERGUNTAS LIVRES ===

def _answer_deadline(response, context, today):
    workloads = context.get('userWorkloads') or []
    if not workloads:
        response['response'] = 'No user workload data available to estimate a realistic deadline.'
        return response

    status_counts = context.get('statusCounts') or {}
    active = status_counts.get('todo', 0) + status_counts.get('in_progress', 0)

    # 3 a 14 dias conforme a carga da equipe
    workload_factor = min(1, active / 20)
    deadline = today + timedelta(days=int(3 + workload_factor * 11))

    response['response'] = (
        f"Based on the current team workload ({active} active tasks) and complexity of this task, "
        f"I recommend a deadline of {deadline.month}/{deadline.day}/{deadline.year}. "
        f"This allows sufficient time for completion while considering other priorities."
    )
    response['deadline'] = deadline.isoformat()
    return response


def _answer_assignee(response, context, task_text):
    workloads: List[Dict] = list(context.get('userWorkloads') or [])
    if not workloads:
        response['response'] = 'No user workload data available to suggest an assignee.'
        return response

    def with_role(*fragments):
        return [u for u in workloads if _has_any((u.get('role') or '').lower(), fragments)]

    relevant = workloads
    if _has_any(task_text, ('design', 'ui')):
        relevant = with_role('design')
    elif _has_any(task_text, ('develop', 'code')):
        relevant = with_role('develop', 'engineer')
    elif _has_any(task_text, ('test', 'qa')):
        relevant = with_role('qa')

    if not relevant:
        relevant = workloads

    suggested = min(relevant, key=lambda u: u.get('activeTasks', 0))
    load = 'optimal' if suggested.get('activeTasks', 0) == 0 else 'manageable'

    response['response'] = (
        f"I recommend assigning this task to {suggested['name']} ({suggested.get('role') or 'no role'}) "
        f"who currently has {suggested.get('activeTasks', 0)} active tasks, which is {load} "
        f"for taking on new work. Their expertise aligns well with this task's requirements."
    )
    response['assignee_id'] = str(suggested['id'])
    return response


def _answer_priority(response, context, task_text):
    high_count = (context.get('priorityCounts') or {}).get('high', 0)
    total = context.get('totalTasks') or 1
    ratio = high_count / total

    if _has_any(task_text, ('urgent', 'critical', 'asap', 'immediately')):
        priority = 'high'
        explanation = 'The task contains terms indicating urgency.'
    elif ratio > 0.3:
        priority = 'medium'
        explanation = (
            f"There are already {high_count} high priority tasks ({round(ratio * 100)}% of all tasks), "
            f"so consider this as medium priority to avoid priority inflation."
        )
    elif _has_any(task_text, ('bug', 'fix', 'issue')):
        priority = 'high'
        explanation = 'This appears to be a bug fix which generally warrants higher priority.'
    elif _has_any(task_text, ('feature', 'enhance')):
        priority = 'medium'
        explanation = 'This appears to be a feature enhancement.'
    else:
        priority = 'medium'
        explanation = 'Based on the task description, this seems to be a standard task.'

    response['response'] = (
        f"I recommend setting this task to {priority} priority. {explanation} "
        f"Consider the impact on project timelines and current team workload when finalizing priority."
    )
    response['priority'] = priority
    return response


def _answer_category(response, context, task_text):
    category = guess_category(task_text)
    if category is None:
        existing = context.get('categories') or []
        category = existing[0] if existing else 'Development'

    response['response'] = (
        f'Based on the task description, I recommend categorizing this as "{category}". '
        f'This categorization helps with filtering and organizing related tasks.'
    )
    response['category'] = category
    return response


def answer_query(query, current_task=None, context=None, today=None) -> Dict:
    """
    Responde perguntas sobre prazo, responsável, prioridade ou categoria
    de uma tarefa; qualquer outra pergunta recebe um conselho geral
    """
    today = today or timezone.localdate()
    context = context or {}
    current_task = current_task or {}
    query_text = (query or '').lower()
    task_text = _text(current_task.get('title'), current_task.get('description'))

    response = {
        'response': None,
        'priority': None,
        'category': None,
        'assignee_id': None,
        'deadline': None,
    }

    if _has_any(query_text, ('deadline', 'when', 'due date')):
        return _answer_deadline(response, context, today)
    if _has_any(query_text, ('who', 'assign')):
        return _answer_assignee(response, context, task_text)
    if _has_any(query_text, ('priority', 'important', 'urgency')):
        return _answer_priority(response, context, task_text)
    if _has_any(query_text, ('category', 'type', 'what kind')):
        return _answer_category(response, context, task_text)

    todo_count = (context.get('statusCounts') or {}).get('todo', 0)
    priority = current_task.get('priority') or 'medium'
    response['response'] = (
        f"This task appears to be a {priority} priority item that should be addressed within the next sprint. "
        f"Consider breaking it down into smaller subtasks if it seems complex. Based on the current board "
        f"state with {todo_count} items in the backlog, careful prioritization is important."
    )
    return response
