# apps/board/urls.py

from django.urls import path

from . import views

app_name = 'board'

urlpatterns = [
    path('', views.task_collection, name='task_collection'),
    path('filtered/', views.task_filtered, name='task_filtered'),
    path('<int:task_id>/', views.task_detail, name='task_detail'),
    path('<int:task_id>/status/', views.task_status, name='task_status'),
    path('<int:task_id>/history/', views.task_history, name='task_history'),
    path('<int:task_id>/files/<str:filename>/', views.task_file, name='task_file'),
    path('<int:task_id>/ai-suggestions/', views.task_ai_suggestions, name='task_ai_suggestions'),
]
