# apps/board/serializers.py

"""
Representações JSON de tarefas, usuários e histórico

Tudo aqui produz tipos nativos (datas em ISO 8601) para servir tanto
JsonResponse quanto o channel layer, que não serializa date/datetime.
"""


def _iso(value):
    return value.isoformat() if value else None


def serialize_user_summary(user, detailed=False):
    """Resumo do usuário embutido nas tarefas (assignee/creator)"""
    if user is None:
        return None

    data = {
        'id': user.id,
        'name': user.display_name,
    }
    if detailed:
        data['role'] = user.role
        data['avatar_url'] = user.avatar_url
    return data


def serialize_user(user):
    """Usuário completo para /api/users/"""
    return {
        'id': user.id,
        'username': user.username,
        'name': user.display_name,
        'email': user.email,
        'role': user.role,
        'skills': list(user.skills or []),
        'avatar_url': user.avatar_url,
        'workload_capacity': user.workload_capacity,
    }


def serialize_task(task, with_relations=True):
    data = {
        'id': task.id,
        'title': task.title,
        'description': task.description,
        'status': task.status,
        'priority': task.priority,
        'category': task.category,
        'deadline': _iso(task.deadline),
        'assignee_id': task.assignee_id,
        'created_by': task.creator_id,
        'estimated_hours': task.estimated_hours,
        'tags': list(task.tags or []),
        'notes': task.notes,
        'file_attachments': list(task.file_attachments or []),
        'ai_suggestions': task.ai_suggestions,
        'ai_recommendation': task.ai_recommendation,
        'created_at': _iso(task.created_at),
        'updated_at': _iso(task.updated_at),
    }

    if with_relations:
        data['assignee'] = serialize_user_summary(task.assignee, detailed=True)
        data['creator'] = serialize_user_summary(task.creator)

    return data


def serialize_history(entry):
    return {
        'id': entry.id,
        'task_id': entry.task_identifier,
        'field': entry.field,
        'old_value': entry.old_value,
        'new_value': entry.new_value,
        'change_type': entry.change_type,
        'changed_by': serialize_user_summary(entry.changed_by),
        'created_at': _iso(entry.created_at),
    }
