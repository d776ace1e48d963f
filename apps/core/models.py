# apps/core/models.py

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
from django.db import models


class User(AbstractUser):
    """
    Usuário do board

    Membros da equipe que podem ser responsáveis (assignee) ou criadores
    de tarefas. A lógica de tarefas apenas lê estes registros.
    """

    name = models.CharField(max_length=200, blank=True)
    role = models.CharField(max_length=100, blank=True, default='user')
    skills = models.JSONField(default=list, blank=True)
    avatar_url = models.CharField(max_length=500, blank=True, null=True)
    workload_capacity = models.PositiveIntegerField(
        default=40,
        help_text="Capacidade semanal em horas"
    )

    class Meta:
        db_table = 'users'
        ordering = ['name', 'username']

    @property
    def display_name(self):
        """Nome exibido no board: name, nome completo ou username"""
        return self.name or self.get_full_name() or self.username

    def __str__(self):
        return self.display_name


class Task(models.Model):
    """Tarefa do board Kanban"""

    STATUS_CHOICES = [
        ('backlog', 'Backlog'),
        ('todo', 'To Do'),
        ('in_progress', 'In Progress'),
        ('review', 'Review'),
        ('done', 'Done'),
    ]

    PRIORITY_CHOICES = [
        ('low', '🟢 Low'),
        ('medium', '🟡 Medium'),
        ('high', '🟠 High'),
        ('critical', '🔴 Critical'),
    ]

    DEFAULT_STATUS = 'todo'
    DEFAULT_PRIORITY = 'medium'

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=DEFAULT_STATUS,
        db_index=True
    )
    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default=DEFAULT_PRIORITY
    )
    category = models.CharField(max_length=100, blank=True, null=True)
    deadline = models.DateField(null=True, blank=True)
    assignee = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks'
    )
    creator = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_column='created_by',
        related_name='created_tasks'
    )
    estimated_hours = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )
    tags = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, null=True)
    file_attachments = models.JSONField(default=list, blank=True)
    ai_suggestions = models.TextField(blank=True, null=True)
    ai_recommendation = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['-updated_at', '-id']

    def __str__(self):
        return self.title

    @classmethod
    def normalize_status(cls, value):
        """Status desconhecido cai no status padrão"""
        valid = {key for key, _ in cls.STATUS_CHOICES}
        value = (value or '').strip().lower()
        return value if value in valid else cls.DEFAULT_STATUS

    @classmethod
    def normalize_priority(cls, value):
        """Prioridade desconhecida cai na prioridade padrão"""
        valid = {key for key, _ in cls.PRIORITY_CHOICES}
        value = (value or '').strip().lower()
        return value if value in valid else cls.DEFAULT_PRIORITY

    def attachment(self, filename):
        """Retorna o descritor do anexo com este nome de arquivo"""
        for descriptor in self.file_attachments or []:
            if descriptor.get('filename') == filename:
                return descriptor
        return None


class TaskHistory(models.Model):
    """
    Histórico de alterações de uma tarefa (trilha de auditoria)

    Uma linha por campo alterado. O registro de exclusão sobrevive à
    tarefa: `task` fica nulo e `task_identifier` guarda o id original.
    """

    CHANGE_TYPE_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
    ]

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='history'
    )
    task_identifier = models.BigIntegerField(db_index=True)
    field = models.CharField(max_length=100)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    change_type = models.CharField(max_length=10, choices=CHANGE_TYPE_CHOICES)
    changed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='task_changes'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'task_history'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'task history'

    def __str__(self):
        return f"#{self.task_identifier} {self.change_type} {self.field}: {self.old_value} -> {self.new_value}"


class AppSetting(models.Model):
    """Configuração editável em tempo de execução (ex.: URL do servidor de LLM)"""

    LLM_URL = 'llm_url'

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'app_settings'
        ordering = ['key']

    def __str__(self):
        return f"{self.key}={self.value}"

    @classmethod
    def get_value(cls, key, default=None):
        row = cls.objects.filter(key=key).first()
        return row.value if row else default

    @classmethod
    def set_value(cls, key, value):
        row, _ = cls.objects.update_or_create(key=key, defaults={'value': value})
        return row
