# apps/ai/services.py

import logging
from datetime import date

from django.utils import timezone

from apps.core.exceptions import UpstreamServiceError, ValidationError
from apps.core.models import Task
from apps.core.utils import calculate_project_statistics, calculate_status_statistics, days_since

from . import prompts
from .parsing import parse_json_reply

logger = logging.getLogger(__name__)

VALID_PRIORITIES = [key for key, _ in Task.PRIORITY_CHOICES]
VALID_SEVERITIES = ('high', 'medium', 'low')


def _text(value):
    """Texto limpo; null/None vindos do modelo viram string vazia"""
    if value is None:
        return ''
    text = str(value).strip()
    return '' if text.lower() in ('null', 'none') else text


def _int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _iso_date(value):
    """YYYY-MM-DD válido ou string vazia"""
    text = _text(value)[:10]
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        return ''


class SuggestionService:
    """
    Sugestões e análises do board via LLM

    O cliente de completions é injetado (CompletionClient em produção,
    um stub nos testes). Falhas de parse sempre caem em valores padrão;
    falhas de rede só são absorvidas em suggest_task_update e por tarefa
    em task_priorities.
    """

    def __init__(self, client):
        self.client = client

    # === FORMULÁRIO DE TAREFA ===

    def suggest_task_update(self, context, roster):
        """
        Sugere priority/category/deadline/suggested_assignee/reasoning
        Nenhum campo volta nulo; o responsável sugerido precisa existir no roster
        """
        title = _text(context.get('title'))
        description = _text(context.get('description'))
        if not title and not description:
            raise ValidationError('Title or description is required')

        current = {
            'priority': _text(context.get('currentPriority')).lower() or Task.DEFAULT_PRIORITY,
            'category': _text(context.get('currentCategory')),
            'deadline': _text(context.get('currentDeadline')),
            'suggested_assignee': _text(context.get('currentAssigneeName')),
        }

        logger.info(f"🤖 Sugestões para a tarefa: {title or description[:50]}")
        messages = prompts.task_update_messages(title, description, current, roster)

        try:
            reply = self.client.complete(messages)
        except UpstreamServiceError as e:
            logger.warning(f"⚠️  LLM indisponível, mantendo campos atuais: {e.detail or e.message}")
            return self._keep_current(
                current,
                f'The AI service could not be reached ({e.message}), so we kept the existing fields.'
            )

        parsed = parse_json_reply(reply, expect=dict)
        if parsed is None:
            logger.warning(f"⚠️  Resposta do LLM não pôde ser interpretada: {reply[:200]}")
            return self._keep_current(
                current,
                'LLM response could not be parsed, so we kept the existing fields.'
            )

        priority = _text(parsed.get('priority')).lower()
        suggestion = {
            'priority': priority if priority in VALID_PRIORITIES else current['priority'],
            'category': _text(parsed.get('category')) or current['category'],
            'deadline': _iso_date(parsed.get('deadline')) or current['deadline'],
            'suggested_assignee': current['suggested_assignee'],
            'reasoning': _text(parsed.get('reasoning')) or '(No reasoning provided)',
        }

        proposed = _text(parsed.get('suggested_assignee'))
        if proposed:
            matched = self._match_member(proposed, roster)
            if matched:
                suggestion['suggested_assignee'] = matched
            else:
                suggestion['reasoning'] += (
                    f'\n(Note: The AI suggested "{proposed}", which doesn\'t match any real user. '
                    f'Keeping existing assignee.)'
                )

        return suggestion

    @staticmethod
    def _keep_current(current, reasoning):
        return dict(current, reasoning=reasoning)

    @staticmethod
    def _match_member(name, roster):
        """Nome canônico do membro (comparação sem diferenciar maiúsculas)"""
        wanted = name.lower()
        for member in roster:
            member_name = _text(member.get('name'))
            if member_name and member_name.lower() == wanted:
                return member_name
        return None

    # === PERGUNTAS LIVRES ===

    def custom_query(self, query, task_id=None):
        query = _text(query)
        if not query:
            raise ValidationError('Query is required')

        task = None
        if task_id:
            task = Task.objects.filter(pk=task_id).first()

        logger.info(f"🤖 Pergunta ao LLM: {query[:100]}{f' (tarefa {task_id})' if task_id else ''}")
        reply = self.client.complete(prompts.custom_query_messages(query, task_id, task))

        parsed = parse_json_reply(reply, expect=dict)
        if parsed is None or not _text(parsed.get('response')):
            logger.warning(f"⚠️  Resposta do LLM não pôde ser interpretada: {reply[:200]}")
            return {'response': 'Sorry, I could not parse the AI response as JSON.'}

        return {'response': _text(parsed.get('response'))}

    # === ANÁLISES DO BOARD ===

    def task_priorities(self, limit=5):
        """Prioridade sugerida para as tarefas mais recentes, uma chamada por tarefa"""
        tasks = list(Task.objects.select_related('assignee').order_by('-updated_at', '-id')[:limit])
        if not tasks:
            logger.info("📭 Nenhuma tarefa para análise de prioridade")
            return []

        priorities = []
        for task in tasks:
            current = task.priority or Task.DEFAULT_PRIORITY
            entry = {
                'id': task.id,
                'title': task.title,
                'current_priority': current,
                'suggested_priority': current,
            }

            try:
                reply = self.client.complete(prompts.priority_messages(task))
            except UpstreamServiceError as e:
                logger.warning(f"⚠️  Falha ao analisar prioridade da tarefa #{task.id}: {e.detail or e.message}")
                entry['reason'] = 'Error calling the AI service for this task.'
                priorities.append(entry)
                continue

            parsed = parse_json_reply(reply, expect=dict)
            if parsed is None:
                entry['reason'] = 'Could not parse AI response.'
            else:
                suggested = _text(parsed.get('suggested_priority')).lower()
                if suggested in VALID_PRIORITIES:
                    entry['suggested_priority'] = suggested
                entry['reason'] = _text(parsed.get('reason')) or 'No reasoning provided'
            priorities.append(entry)

        logger.info(f"✅ Prioridades analisadas para {len(priorities)} tarefas")
        return priorities

    def workflow_improvements(self):
        tasks = list(Task.objects.select_related('assignee'))
        if not tasks:
            return []

        summary = [
            {
                'id': task.id,
                'title': task.title,
                'description': task.description or 'No description',
                'status': task.status or 'todo',
                'priority': task.priority or 'medium',
                'assignee': task.assignee.display_name if task.assignee else 'Unassigned',
                'deadline': task.deadline.isoformat() if task.deadline else 'Not specified',
                'created_at': task.created_at.isoformat(),
            }
            for task in tasks
        ]

        reply = self.client.complete(prompts.workflow_messages(summary))
        parsed = parse_json_reply(reply, expect=list)
        if parsed is None:
            logger.warning(f"⚠️  Melhorias de fluxo ilegíveis: {reply[:200]}")
            return []

        improvements = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            improvements.append({
                'id': len(improvements) + 1,
                'title': _text(item.get('title')),
                'description': _text(item.get('description')),
                'impact': _int(item.get('impact'), 3) or 3,
            })
        return improvements

    def bottlenecks(self):
        tasks = list(Task.objects.select_related('assignee'))
        if not tasks:
            return []

        now = timezone.now()
        analysis = {
            'tasks': [
                {
                    'id': task.id,
                    'title': task.title,
                    'status': task.status or 'todo',
                    'priority': task.priority or 'medium',
                    'assignee': task.assignee.display_name if task.assignee else 'Unassigned',
                    'days_since_created': days_since(task.created_at, now),
                    'days_since_updated': days_since(task.updated_at, now),
                }
                for task in tasks
            ],
            'status_statistics': calculate_status_statistics(tasks, now),
        }

        reply = self.client.complete(prompts.bottleneck_messages(analysis))
        parsed = parse_json_reply(reply, expect=list)
        if parsed is None:
            logger.warning(f"⚠️  Análise de gargalos ilegível: {reply[:200]}")
            return []

        bottlenecks = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            severity = _text(item.get('severity')).lower()
            bottlenecks.append({
                'id': len(bottlenecks) + 1,
                'area': _text(item.get('area')),
                'severity': severity if severity in VALID_SEVERITIES else 'medium',
                'description': _text(item.get('description')),
                'affected_tasks': _int(item.get('affected_tasks'), 0),
                'avg_delay': _float(item.get('avg_delay'), 0.0),
                'solution': _text(item.get('solution')),
            })
        return bottlenecks

    def predictions(self):
        """Previsões do projeto; None quando o board está vazio"""
        tasks = list(Task.objects.select_related('assignee'))
        if not tasks:
            return None

        stats = calculate_project_statistics(tasks)
        fallback = {
            'completion_percentage': stats['completion_percentage'],
            'projected_end_date': stats['target_end_date'],
            'on_schedule': stats['past_due_tasks'] == 0,
            'resource_alerts': [],
            'risk_factors': [],
        }

        reply = self.client.complete(prompts.prediction_messages(stats))
        parsed = parse_json_reply(reply, expect=dict)
        if parsed is None:
            logger.warning(f"⚠️  Previsões ilegíveis, usando estatísticas calculadas: {reply[:200]}")
            return fallback

        on_schedule = parsed.get('on_schedule')
        return {
            'completion_percentage': _int(parsed.get('completion_percentage'), 0) or stats['completion_percentage'],
            'projected_end_date': _iso_date(parsed.get('projected_end_date')) or stats['target_end_date'],
            'on_schedule': on_schedule if isinstance(on_schedule, bool) else False,
            'resource_alerts': parsed['resource_alerts'] if isinstance(parsed.get('resource_alerts'), list) else [],
            'risk_factors': parsed['risk_factors'] if isinstance(parsed.get('risk_factors'), list) else [],
        }
