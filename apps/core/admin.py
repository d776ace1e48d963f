# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import AppSetting, Task, TaskHistory, User


@admin.register(User)
class KanbanUserAdmin(BaseUserAdmin):
    """Admin customizado para os membros da equipe"""

    list_display = [
        'username', 'name', 'email', 'role',
        'workload_capacity', 'is_active', 'date_joined'
    ]
    list_filter = ['role', 'is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'name', 'first_name', 'last_name', 'email']
    ordering = ['name', 'username']

    # Adicionar campos customizados ao formulário
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Equipe', {
            'fields': ('name', 'role', 'skills', 'avatar_url', 'workload_capacity')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Equipe', {
            'fields': ('name', 'role', 'workload_capacity')
        }),
    )


class TaskHistoryInline(admin.TabularInline):
    """Histórico somente leitura dentro da tarefa"""

    model = TaskHistory
    fk_name = 'task'
    extra = 0
    can_delete = False
    fields = ['created_at', 'change_type', 'field', 'old_value', 'new_value', 'changed_by']
    readonly_fields = fields
    ordering = ['-created_at', '-id']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin para tarefas do board"""

    list_display = [
        'title', 'status', 'priority_badge', 'category',
        'assignee', 'deadline', 'updated_at'
    ]
    list_filter = ['status', 'priority', 'category', 'deadline']
    search_fields = ['title', 'description', 'notes']
    raw_id_fields = ['assignee', 'creator']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [TaskHistoryInline]

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('title', 'description', 'status', 'priority', 'category', 'tags')
        }),
        ('Planejamento', {
            'fields': ('assignee', 'creator', 'deadline', 'estimated_hours')
        }),
        ('Notas & Anexos', {
            'fields': ('notes', 'file_attachments'),
            'classes': ('collapse',)
        }),
        ('IA', {
            'fields': ('ai_suggestions', 'ai_recommendation'),
            'classes': ('collapse',)
        }),
        ('Datas', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def priority_badge(self, obj):
        """Exibe a prioridade com badge colorido"""
        cores = {
            'critical': '#EF4444',  # vermelho
            'high': '#F97316',  # laranja
            'medium': '#F59E0B',  # amarelo
            'low': '#10B981'  # verde
        }
        cor = cores.get(obj.priority, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cor, obj.get_priority_display()
        )

    priority_badge.short_description = 'Prioridade'


@admin.register(TaskHistory)
class TaskHistoryAdmin(admin.ModelAdmin):
    """Trilha de auditoria; registros nunca são editados"""

    list_display = ['task_identifier', 'change_type', 'field', 'old_value', 'new_value', 'changed_by', 'created_at']
    list_filter = ['change_type', 'field', 'created_at']
    search_fields = ['task_identifier', 'old_value', 'new_value']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'updated_at']
    search_fields = ['key']
