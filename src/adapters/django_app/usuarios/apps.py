"""
Configuração do Django App para Usuários.
"""

from django.apps import AppConfig


class UsuariosConfig(AppConfig):
    """Configuração do app Usuários."""
    
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.usuarios'
    label = 'usuarios'
    verbose_name = 'Gestão de Usuários'
    
    def ready(self):
        """
        Registra os handlers locais de eventos (métricas de cadastro)
        no publisher padrão do processo.
        """
        from src.adapters.django_app.monitoring.metrics import registrar_handlers_metricas
        from src.adapters.django_app.events.publishers import get_event_publisher
        
        registrar_handlers_metricas(get_event_publisher())
