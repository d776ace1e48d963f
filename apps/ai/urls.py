# apps/ai/urls.py

from django.urls import path

from . import views

app_name = 'ai'

urlpatterns = [
    path('priorities/', views.task_priorities, name='priorities'),
    path('workflow-improvements/', views.workflow_improvements, name='workflow_improvements'),
    path('bottlenecks/', views.bottlenecks, name='bottlenecks'),
    path('predictions/', views.predictions, name='predictions'),
    path('query/', views.custom_query, name='query'),
    path('task-suggestions/', views.task_suggestions, name='task_suggestions'),
]
