# apps/core/urls.py

from django.urls import path, re_path
from . import views

app_name = 'core'

urlpatterns = [
    # === MONITORAMENTO ===
    path('health/', views.health_check, name='health'),

    # === AUTENTICAÇÃO ===
    path('auth/login/', views.auth_login, name='login'),
    path('auth/register/', views.auth_register, name='register'),
    path('auth/logout/', views.auth_logout, name='logout'),

    # === USUÁRIOS ===
    path('users/', views.user_list, name='users'),
    path('users/profile/', views.user_profile, name='user_profile'),

    # === CONFIGURAÇÕES ===
    path('settings/llm-url/', views.llm_url_setting, name='llm_url'),

    # Qualquer outra rota em /api/ responde 404 em JSON (manter por último)
    re_path(r'^(?P<path>.*)$', views.api_not_found, name='api_not_found'),
]
