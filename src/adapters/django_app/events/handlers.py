"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados (modos async e hybrid).

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # event_data é o DomainEvent.to_dict(); campos próprios em "data"
"""

import logging
from datetime import timedelta
from typing import Any, Dict

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Usuários
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_usuario_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para UsuarioCriadoEvent.
    
    Ações:
    - Enviar e-mail de boas-vindas
    """
    usuario_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})
    
    logger.info(f"[HANDLER] UsuarioCriado: {usuario_id} | email={data.get('email')}")
    
    notify_user.delay(
        user_id=usuario_id,
        message=f"Bem-vindo(a), {data.get('nome', '')}!",
        channel='email',
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_usuario_atualizado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para UsuarioAtualizadoEvent.
    
    Troca de e-mail ou senha gera aviso de segurança ao usuário.
    """
    usuario_id = event_data.get('aggregate_id')
    campos = event_data.get('data', {}).get('campos_alterados', [])
    
    logger.info(f"[HANDLER] UsuarioAtualizado: {usuario_id} | campos={campos}")
    
    sensiveis = [c for c in campos if c in ('email', 'senha')]
    if sensiveis:
        notify_user.delay(
            user_id=usuario_id,
            message=f"Seus dados de acesso foram alterados: {', '.join(sensiveis)}",
            channel='email',
        )


@shared_task(bind=True, acks_late=True)
def handle_usuario_removido(self, event_data: Dict[str, Any]) -> None:
    """Handler para UsuarioRemovidoEvent (trilha de auditoria)."""
    logger.info(
        f"[HANDLER] UsuarioRemovido: {event_data.get('aggregate_id')} | "
        f"occurred_at={event_data.get('occurred_at')}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'UsuarioCriadoEvent': handle_usuario_criado,
    'UsuarioAtualizadoEvent': handle_usuario_atualizado,
    'UsuarioRemovidoEvent': handle_usuario_removido,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.
    
    Roteia eventos para os handlers apropriados.
    """
    handler = EVENT_HANDLERS.get(event_type)
    
    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(
    self,
    user_id: str,
    message: str,
    channel: str = 'email',
) -> None:
    """
    Notifica usuário pelo canal informado.
    
    Sem provedor de e-mail configurado, a notificação é apenas logada.
    """
    logger.info(f"[NOTIFICATION] {channel.upper()} para {user_id}: {message}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def gerar_relatorio_diario(self) -> Dict[str, Any]:
    """
    Gera relatório diário de cadastros.
    
    Executada diariamente pelo Celery Beat.
    
    Returns:
        Dados do relatório
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")
    
    from src.config.container import get_container
    from src.core.users.dtos import ListarUsuariosQueryDTO
    
    container = get_container()
    agora = timezone.now()
    
    total = container.contar_usuarios_service().execute()
    novos = container.listar_usuarios_service().execute(
        ListarUsuariosQueryDTO(criado_apos=agora - timedelta(days=1), por_pagina=1)
    ).total
    
    report = {
        'data': agora.isoformat(),
        'total_usuarios': total,
        'novos_ultimas_24h': novos,
    }
    
    logger.info(f"[SCHEDULED] Relatório gerado: {report}")
    return report
