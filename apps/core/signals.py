# apps/core/signals.py

import logging

from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Task, User

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Task)
def normalize_task_fields(sender, instance, **kwargs):
    """
    Garante os invariantes da tarefa antes de qualquer escrita:
    status/prioridade sempre dentro das opções e listas nunca nulas
    """
    instance.status = Task.normalize_status(instance.status)
    instance.priority = Task.normalize_priority(instance.priority)

    if instance.tags is None:
        instance.tags = []
    if instance.file_attachments is None:
        instance.file_attachments = []


@receiver(post_save, sender=User)
def log_new_user(sender, instance, created, **kwargs):
    """Log de novos membros disponíveis para atribuição"""
    if created:
        logger.info(f"👤 Usuário {instance.username} ({instance.role}) disponível para atribuição")
