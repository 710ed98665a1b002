"""
URL patterns da API de Usuários.

- GET/POST          /api/usuarios/
- GET               /api/usuarios/buscar/
- GET/PUT/PATCH/DELETE /api/usuarios/<id>/
"""

from django.urls import path

from . import api_views

app_name = 'usuarios'

urlpatterns = [
    path('', api_views.UsuarioAPIListView.as_view(), name='api_list'),
    
    # Antes do <pk> para não conflitar
    path('buscar/', api_views.UsuarioAPIBuscaView.as_view(), name='api_buscar'),
    
    path('<str:pk>/', api_views.UsuarioAPIDetailView.as_view(), name='api_detail'),
]
