"""
Testes dos publishers de eventos, handlers Celery e Unit of Work Django.

Tasks Celery são chamadas diretamente (execução síncrona no processo);
o envio ao broker (.delay) é substituído por mocks.
"""

import logging
from unittest.mock import patch

import pytest

from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    build_event_publisher,
)
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.adapters.django_app.usuarios.models import UsuarioModel
from src.core.users.events import (
    UsuarioAtualizadoEvent,
    UsuarioCriadoEvent,
    UsuarioRemovidoEvent,
)


def evento_criado():
    return UsuarioCriadoEvent(aggregate_id="u1", nome="Ana", email="ana@example.com")


class TestBuildEventPublisher:
    
    def test_modo_sync(self):
        publisher = build_event_publisher("sync")
        
        assert isinstance(publisher, LoggingEventPublisher)
        assert publisher._dispatch_to_celery is False
    
    def test_modo_hybrid(self):
        publisher = build_event_publisher("hybrid")
        
        assert isinstance(publisher, LoggingEventPublisher)
        assert publisher._dispatch_to_celery is True
    
    def test_modo_async(self):
        assert isinstance(build_event_publisher("async"), CeleryEventPublisher)


class TestPublishers:
    
    def test_logging_publisher_executa_handlers_locais(self, caplog):
        recebidos = []
        publisher = LoggingEventPublisher()
        publisher.register_handler("UsuarioCriadoEvent", recebidos.append)
        
        with caplog.at_level(logging.INFO):
            publisher.publish(evento_criado())
        
        assert [e.aggregate_id for e in recebidos] == ["u1"]
        assert "[EVENT] UsuarioCriadoEvent" in caplog.text
    
    def test_falha_de_handler_nao_propaga(self, caplog):
        def quebrado(event):
            raise RuntimeError("boom")
        
        publisher = InMemoryEventPublisher()
        publisher.register_handler("UsuarioCriadoEvent", quebrado)
        
        publisher.publish(evento_criado())
        
        assert len(publisher.published_events) == 1
        assert "Erro em handler para UsuarioCriadoEvent" in caplog.text
    
    def test_hybrid_envia_para_celery(self):
        publisher = build_event_publisher("hybrid")
        
        with patch.object(handlers.dispatch_domain_event, "delay") as delay:
            publisher.publish(evento_criado())
        
        event_type, event_data = delay.call_args.args
        assert event_type == "UsuarioCriadoEvent"
        assert event_data["data"] == {"nome": "Ana", "email": "ana@example.com"}
    
    def test_celery_fora_do_ar_nao_quebra_fluxo(self, caplog):
        recebidos = []
        publisher = CeleryEventPublisher()
        publisher.register_handler("UsuarioCriadoEvent", recebidos.append)
        
        with patch.object(
            handlers.dispatch_domain_event, "delay", side_effect=ConnectionError("broker")
        ):
            publisher.publish(evento_criado())
        
        assert len(recebidos) == 1
        assert "Falha ao publicar evento no Celery" in caplog.text
    
    def test_in_memory_filtra_por_tipo(self):
        publisher = InMemoryEventPublisher()
        publisher.publish_batch([
            evento_criado(),
            UsuarioRemovidoEvent(aggregate_id="u1", email="ana@example.com"),
        ])
        
        assert len(publisher.get_events_by_type("UsuarioRemovidoEvent")) == 1
        publisher.clear()
        assert publisher.published_events == []


class TestHandlers:
    
    def test_dispatcher_roteia_para_handler(self):
        evento = evento_criado()
        
        with patch.object(handlers.handle_usuario_criado, "delay") as delay:
            handlers.dispatch_domain_event(evento.event_type, evento.to_dict())
        
        delay.assert_called_once_with(evento.to_dict())
    
    def test_dispatcher_evento_desconhecido(self, caplog):
        handlers.dispatch_domain_event("EventoQualquer", {})
        
        assert "Handler não encontrado para EventoQualquer" in caplog.text
    
    def test_usuario_criado_envia_boas_vindas(self):
        with patch.object(handlers.notify_user, "delay") as delay:
            handlers.handle_usuario_criado(evento_criado().to_dict())
        
        delay.assert_called_once_with(
            user_id="u1",
            message="Bem-vindo(a), Ana!",
            channel="email",
        )
    
    @pytest.mark.parametrize("campos,notifica", [
        (["nome"], False),
        (["telefone", "nome"], False),
        (["email"], True),
        (["senha"], True),
    ])
    def test_usuario_atualizado_avisa_so_dados_de_acesso(self, campos, notifica):
        evento = UsuarioAtualizadoEvent(aggregate_id="u1", campos_alterados=campos)
        
        with patch.object(handlers.notify_user, "delay") as delay:
            handlers.handle_usuario_atualizado(evento.to_dict())
        
        assert delay.called is notifica
    
    def test_notify_user_loga(self, caplog):
        with caplog.at_level(logging.INFO):
            handlers.notify_user("u1", "Olá", channel="sms")
        
        assert "[NOTIFICATION] SMS para u1: Olá" in caplog.text
    
    @pytest.mark.django_db
    def test_relatorio_diario(self, testing_container):
        from src.core.users.dtos import CriarUsuarioInputDTO
        
        testing_container.criar_usuario_service().execute(CriarUsuarioInputDTO(
            nome="Ana",
            email="ana@example.com",
            senha="S3nha!forte",
            cpf="529.982.247-25",
        ))
        
        with patch("src.config.container.get_container", return_value=testing_container):
            relatorio = handlers.gerar_relatorio_diario()
        
        assert relatorio["total_usuarios"] == 1
        assert relatorio["novos_ultimas_24h"] == 1


@pytest.mark.django_db
class TestDjangoUnitOfWork:
    
    def _model(self, id="u1", email="ana@example.com", cpf="52998224725"):
        return UsuarioModel(id=id, nome="Ana", email=email, senha="x", cpf=cpf)
    
    def test_commit_persiste_e_publica(self):
        publisher = InMemoryEventPublisher()
        
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            self._model().save()
            uow.publish_event(evento_criado())
        
        assert uow.is_committed
        assert UsuarioModel.objects.filter(id="u1").exists()
        assert len(publisher.published_events) == 1
    
    def test_rollback_descarta_escritas_e_eventos(self):
        publisher = InMemoryEventPublisher()
        
        with pytest.raises(ValueError):
            with DjangoUnitOfWork(event_publisher=publisher) as uow:
                self._model().save()
                uow.publish_event(evento_criado())
                raise ValueError("falha no meio da operação")
        
        assert uow.is_rolled_back
        assert not UsuarioModel.objects.filter(id="u1").exists()
        assert publisher.published_events == []
    
    def test_falha_no_publisher_nao_desfaz_commit(self, caplog):
        class PublisherQuebrado(InMemoryEventPublisher):
            def publish(self, event):
                raise RuntimeError("fila indisponível")
        
        with DjangoUnitOfWork(event_publisher=PublisherQuebrado()) as uow:
            self._model().save()
            uow.publish_event(evento_criado())
        
        assert UsuarioModel.objects.filter(id="u1").exists()
        assert "Failed to publish event" in caplog.text
