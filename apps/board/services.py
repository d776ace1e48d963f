# apps/board/services.py

import json
import logging
from datetime import date, datetime

from django.db import DatabaseError, connection, transaction
from django.db.models import Q

from apps.core.exceptions import NotFoundError, PersistenceError, ValidationError
from apps.core.models import Task, TaskHistory

from .broadcast import TASK_CREATED, TASK_DELETED, TASK_STATUS_UPDATED, TASK_UPDATED
from .serializers import serialize_task
from .uploads import discard_files

logger = logging.getLogger(__name__)

# Campos editáveis; 'assignee_id' recebe um User (ou None) vindo do form
TRACKED_FIELDS = (
    'title',
    'description',
    'status',
    'priority',
    'category',
    'deadline',
    'assignee_id',
    'estimated_hours',
    'tags',
    'notes',
    'file_attachments',
    'ai_suggestions',
    'ai_recommendation',
)


def stringify(value):
    """
    Representação textual gravada no histórico
    None continua None; datas em ISO; listas e dicts em JSON
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _typed(name, value):
    """Valor comparável de um campo (User vira pk, float normalizado)"""
    if name == 'assignee_id':
        return getattr(value, 'pk', value)
    if name == 'estimated_hours' and value is not None:
        return float(value)
    if name in ('tags', 'file_attachments'):
        return list(value or [])
    return value


class TaskService:
    """
    Mutações de tarefas: validação, diff tipado, histórico e broadcast

    Linha da tarefa e linhas de histórico são gravadas na mesma transação.
    O broadcast só é agendado via on_commit, então uma transação desfeita
    nunca chega aos clientes.
    """

    def __init__(self, broadcaster):
        self.broadcaster = broadcaster

    # === LEITURA ===

    def list_all(self):
        return list(Task.objects.select_related('assignee', 'creator').order_by('-updated_at', '-id'))

    def get(self, task_id):
        try:
            return Task.objects.select_related('assignee', 'creator').get(pk=task_id)
        except Task.DoesNotExist:
            raise NotFoundError('Task not found')

    def history(self, task_id):
        if not Task.objects.filter(pk=task_id).exists():
            raise NotFoundError('Task not found')

        return list(
            TaskHistory.objects
            .filter(task_identifier=task_id)
            .select_related('changed_by')
            .order_by('-created_at', '-id')
        )

    def list_filtered(self, filters):
        """
        Lista com filtros opcionais combinados com AND
        tags casa por sobreposição (qualquer tag em comum)
        """
        queryset = Task.objects.select_related('assignee', 'creator')

        if filters.get('status'):
            queryset = queryset.filter(status=filters['status'])
        if filters.get('priority'):
            queryset = queryset.filter(priority=filters['priority'])
        if filters.get('category'):
            queryset = queryset.filter(category=filters['category'])
        if filters.get('assignee_id'):
            queryset = queryset.filter(assignee_id=filters['assignee_id'])
        if filters.get('search'):
            term = filters['search']
            queryset = queryset.filter(Q(title__icontains=term) | Q(description__icontains=term))
        if filters.get('deadline_before'):
            queryset = queryset.filter(deadline__lte=filters['deadline_before'])
        if filters.get('deadline_after'):
            queryset = queryset.filter(deadline__gte=filters['deadline_after'])

        queryset = queryset.order_by('-updated_at', '-id')

        tags = filters.get('tags')
        if isinstance(tags, str):
            tags = [tags]
        if not tags:
            return list(queryset)

        if connection.features.supports_json_field_contains:
            overlap = Q()
            for tag in tags:
                overlap |= Q(tags__contains=[tag])
            return list(queryset.filter(overlap))

        # SQLite não tem contains em JSONField
        wanted = set(tags)
        return [task for task in queryset if wanted & set(task.tags or [])]

    # === ESCRITA ===

    def create(self, fields, actor=None, attachments=()):
        title = (fields.get('title') or '').strip()
        if not title:
            raise ValidationError('Task title is required')

        data = {name: value for name, value in fields.items() if name in TRACKED_FIELDS}
        data['title'] = title
        data['status'] = Task.normalize_status(data.get('status'))
        data['priority'] = Task.normalize_priority(data.get('priority'))
        data['tags'] = list(data.get('tags') or [])
        data['file_attachments'] = list(data.get('file_attachments') or []) + list(attachments)

        try:
            with transaction.atomic():
                task = Task(creator=actor)
                for name, value in data.items():
                    self._apply(task, name, value)
                task.save()

                TaskHistory.objects.create(
                    task=task,
                    task_identifier=task.id,
                    field='status',
                    old_value=None,
                    new_value=task.status,
                    change_type='create',
                    changed_by=actor,
                )

                task = self.get(task.id)
                self._publish_on_commit(TASK_CREATED, serialize_task(task))
        except DatabaseError as e:
            logger.error(f"❌ Erro ao criar tarefa: {str(e)}")
            raise PersistenceError('Failed to create task', detail=str(e)) from e

        logger.info(f"✅ Tarefa #{task.id} criada: {task.title}")
        return task

    def update(self, task_id, fields, actor=None, attachments=()):
        fields = {name: value for name, value in fields.items() if name in TRACKED_FIELDS}

        if 'title' in fields:
            title = (fields['title'] or '').strip()
            if not title:
                raise ValidationError('Task title cannot be empty')
            fields['title'] = title
        if 'status' in fields:
            fields['status'] = Task.normalize_status(fields['status'])
        if 'priority' in fields:
            fields['priority'] = Task.normalize_priority(fields['priority'])

        try:
            with transaction.atomic():
                task = self._lock(task_id)
                snapshot = {name: _typed(name, getattr(task, name)) for name in TRACKED_FIELDS}

                if attachments:
                    current = fields.get('file_attachments', snapshot['file_attachments'])
                    fields['file_attachments'] = list(current or []) + list(attachments)

                changes = []
                for name, value in fields.items():
                    new_value = _typed(name, value)
                    if new_value != snapshot[name]:
                        changes.append((name, snapshot[name], new_value))
                    self._apply(task, name, value)

                if changes:
                    task.save()
                    for name, old_value, new_value in changes:
                        TaskHistory.objects.create(
                            task=task,
                            task_identifier=task.id,
                            field=name,
                            old_value=stringify(old_value),
                            new_value=stringify(new_value),
                            change_type='update',
                            changed_by=actor,
                        )

                task = self.get(task.id)
                self._publish_on_commit(TASK_UPDATED, serialize_task(task))
        except DatabaseError as e:
            logger.error(f"❌ Erro ao atualizar tarefa #{task_id}: {str(e)}")
            raise PersistenceError('Failed to update task', detail=str(e)) from e

        logger.info(f"✏️  Tarefa #{task.id} atualizada ({len(changes)} campos alterados)")
        return task

    def update_status(self, task_id, status, actor=None):
        if not status or not str(status).strip():
            raise ValidationError('Status is required')
        status = Task.normalize_status(status)

        try:
            with transaction.atomic():
                task = self._lock(task_id)
                old_status = task.status
                task.status = status
                task.save(update_fields=['status', 'updated_at'])

                TaskHistory.objects.create(
                    task=task,
                    task_identifier=task.id,
                    field='status',
                    old_value=old_status,
                    new_value=status,
                    change_type='update',
                    changed_by=actor,
                )

                self._publish_on_commit(TASK_STATUS_UPDATED, {'id': task.id, 'status': status})
        except DatabaseError as e:
            logger.error(f"❌ Erro ao mover tarefa #{task_id}: {str(e)}")
            raise PersistenceError('Failed to update task status', detail=str(e)) from e

        logger.info(f"🔄 Tarefa #{task.id}: {old_status} -> {status}")
        return {
            'message': 'Task status updated successfully',
            'id': task.id,
            'status': status,
        }

    def delete(self, task_id, actor=None):
        try:
            with transaction.atomic():
                task = self._lock(task_id)
                task_pk = task.pk
                old_status = task.status
                attachments = list(task.file_attachments or [])

                # CASCADE remove o histórico; o registro de exclusão vem depois
                task.delete()

                TaskHistory.objects.create(
                    task=None,
                    task_identifier=task_pk,
                    field='status',
                    old_value=old_status,
                    new_value='deleted',
                    change_type='delete',
                    changed_by=actor,
                )

                self._publish_on_commit(TASK_DELETED, {'id': task_pk})
                transaction.on_commit(lambda: discard_files(attachments))
        except DatabaseError as e:
            logger.error(f"❌ Erro ao excluir tarefa #{task_id}: {str(e)}")
            raise PersistenceError('Failed to delete task', detail=str(e)) from e

        logger.info(f"🗑️  Tarefa #{task_pk} excluída")
        return {'message': 'Task deleted successfully', 'id': task_pk}

    def remove_attachment(self, task_id, filename, actor=None):
        task = self.get(task_id)
        descriptor = task.attachment(filename)
        if descriptor is None:
            raise NotFoundError(f'Attachment {filename} not found')

        remaining = [d for d in task.file_attachments if d.get('filename') != filename]

        with transaction.atomic():
            task = self.update(task_id, {'file_attachments': remaining}, actor=actor)
            transaction.on_commit(lambda: discard_files([descriptor]))

        return task

    # === AUXILIARES ===

    def _lock(self, task_id):
        # Sem select_related: FOR UPDATE não aceita o lado nulo de um outer join
        try:
            return Task.objects.select_for_update().get(pk=task_id)
        except Task.DoesNotExist:
            raise NotFoundError('Task not found')

    @staticmethod
    def _apply(task, name, value):
        if name == 'assignee_id' and (value is None or hasattr(value, 'pk')):
            task.assignee = value
        else:
            setattr(task, name, value)

    def _publish_on_commit(self, event, payload):
        transaction.on_commit(lambda: self.broadcaster.publish(event, payload))
