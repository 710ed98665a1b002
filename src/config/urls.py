"""
URL Configuration para a Gestão de Usuários.

Estrutura:
- /admin/ - Django Admin
- /api/usuarios/ - API REST de Usuários
- /health/ e /metrics/ - Monitoramento
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),
    
    # Usuários
    path('api/usuarios/', include('src.adapters.django_app.usuarios.urls')),
    
    # Health check e métricas Prometheus
    path('', include('src.adapters.django_app.monitoring.urls')),
]
