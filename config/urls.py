# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API REST
    path('api/tasks/', include('apps.board.urls')),
    path('api/ai/', include('apps.ai.urls')),
    path('api/', include('apps.core.urls')),
]

# Servir anexos enviados em desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# Customizar títulos do admin
admin.site.site_header = 'Kanban AI Admin'
admin.site.site_title = 'Kanban AI'
admin.site.index_title = 'Administração do Board'
