# apps/core/utils.py

import calendar
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from django.utils import timezone


def add_months(day: date, months: int) -> date:
    """
    Soma meses a uma data, ajustando para o último dia do mês quando preciso
    Ex: 31/01 + 1 mês -> 28/02 (ou 29/02)
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def days_since(moment: Optional[datetime], now: Optional[datetime] = None) -> int:
    """Dias completos (arredondados para cima) desde `moment`"""
    if moment is None:
        return 0
    now = now or timezone.now()
    seconds = (now - moment).total_seconds()
    return max(0, -int(-seconds // 86400))


def count_by_status(tasks: Iterable) -> Dict[str, int]:
    """Quantidade de tarefas por status"""
    counts: Dict[str, int] = {}
    for task in tasks:
        status = task.status or 'todo'
        counts[status] = counts.get(status, 0) + 1
    return counts


def calculate_user_workloads(tasks: Iterable, users: Iterable) -> List[Dict]:
    """
    Calcula carga de trabalho por membro da equipe
    activeTasks = tarefas atribuídas que ainda não estão em 'done'
    """
    tasks = list(tasks)
    workloads = []

    for user in users:
        user_tasks = [t for t in tasks if t.assignee_id == user.id]
        workloads.append({
            'id': user.id,
            'name': user.display_name,
            'role': user.role or '',
            'taskCount': len(user_tasks),
            'activeTasks': len([t for t in user_tasks if t.status != 'done']),
        })

    return workloads


def build_board_context() -> Dict:
    """
    Snapshot do board usado pelas respostas a perguntas livres:
    totais, contagens por status e prioridade, carga por usuário, categorias e prazos
    """
    from .models import Task, User

    tasks = list(Task.objects.select_related('assignee').order_by('-updated_at'))
    users = User.objects.filter(is_active=True)

    categories = []
    priority_counts: Dict[str, int] = {}
    for task in tasks:
        if task.category and task.category not in categories:
            categories.append(task.category)
        priority = task.priority or 'medium'
        priority_counts[priority] = priority_counts.get(priority, 0) + 1

    return {
        'totalTasks': len(tasks),
        'statusCounts': count_by_status(tasks),
        'priorityCounts': priority_counts,
        'userWorkloads': calculate_user_workloads(tasks, users),
        'categories': categories,
        'deadlines': [
            {
                'id': task.id,
                'title': task.title,
                'deadline': task.deadline.isoformat(),
                'assignee': task.assignee.display_name if task.assignee else None,
            }
            for task in tasks if task.deadline
        ],
    }


def calculate_status_statistics(tasks: Iterable, now: Optional[datetime] = None) -> Dict[str, Dict]:
    """
    Identifica onde as tarefas estão paradas:
    quantidade e média de dias desde a última atualização por status
    """
    now = now or timezone.now()
    groups: Dict[str, List] = {}
    for task in tasks:
        groups.setdefault(task.status or 'todo', []).append(task)

    stats = {}
    for status, grouped in groups.items():
        total_days = sum(days_since(t.updated_at, now) for t in grouped)
        stats[status] = {
            'count': len(grouped),
            'avg_days': total_days / len(grouped),
        }
    return stats


def calculate_project_statistics(tasks: Iterable, today: Optional[date] = None) -> Dict:
    """
    Métricas consolidadas do projeto para previsões:
    conclusão, atrasos, distribuição por status e por papel do responsável
    """
    tasks = list(tasks)
    today = today or timezone.localdate()

    completed = 0
    past_due = 0
    role_assignments: Dict[str, Dict] = {}

    for task in tasks:
        status = task.status or 'todo'
        if status == 'done':
            completed += 1
        elif task.deadline and task.deadline < today:
            past_due += 1

        if task.assignee_id:
            role = task.assignee.role or 'Unspecified'
            bucket = role_assignments.setdefault(role, {'assigned': 0, 'by_status': {}})
            bucket['assigned'] += 1
            bucket['by_status'][status] = bucket['by_status'].get(status, 0) + 1

    total = len(tasks)

    return {
        'total_tasks': total,
        'completed_tasks': completed,
        'completion_percentage': round(completed / total * 100) if total else 0,
        'past_due_tasks': past_due,
        'status_distribution': count_by_status(tasks),
        'role_assignments': role_assignments,
        'target_end_date': add_months(today, 3).isoformat(),
    }
