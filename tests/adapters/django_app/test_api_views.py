"""
Testes das API Views de Usuários.

Usa o Django test Client (pilha completa de middlewares e rotas)
com o container trocado por infraestrutura InMemory, sem banco.
"""

import json
from unittest.mock import patch

import pytest
from django.test import Client

from src.adapters.django_app.monitoring.metrics import REGISTRY


URL_LISTA = "/api/usuarios/"
URL_BUSCA = "/api/usuarios/buscar/"

PAYLOAD = {
    "nome": "João da Silva",
    "email": "JOAO@EXAMPLE.COM",
    "senha": "S3nha!forte",
    "cpf": "111.444.777-35",
    "telefone": "(11) 98765-4321",
}


def url_detalhe(usuario_id):
    return f"/api/usuarios/{usuario_id}/"


@pytest.fixture
def api(testing_container):
    """Client com o container InMemory injetado nas views."""
    with patch(
        "src.adapters.django_app.usuarios.api_views.get_container",
        return_value=testing_container,
    ):
        yield Client()


def post_json(client, url, data):
    return client.post(url, data=json.dumps(data), content_type="application/json")


def patch_json(client, url, data):
    return client.patch(url, data=json.dumps(data), content_type="application/json")


@pytest.fixture
def usuario(api):
    response = post_json(api, URL_LISTA, PAYLOAD)
    assert response.status_code == 201, response.content
    return response.json()["data"]


class TestCriarUsuarioAPI:
    
    def test_criar_usuario_201(self, usuario):
        assert usuario["email"] == "joao@example.com"
        assert usuario["cpf"] == "111.444.777-35"
        assert usuario["telefone"] == "+55 (11) 98765-4321"
        assert "senha" not in usuario
    
    def test_criar_usuario_publica_evento(self, usuario, testing_container):
        publisher = testing_container.event_publisher()
        
        eventos = publisher.get_events_by_type("UsuarioCriadoEvent")
        assert [e.aggregate_id for e in eventos] == [usuario["id"]]
    
    def test_criar_usuario_dados_invalidos_400(self, api):
        response = post_json(api, URL_LISTA, {**PAYLOAD, "senha": "fraca", "cpf": "123"})
        
        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert set(body["meta"]["fields"]) == {"senha", "cpf"}
    
    def test_criar_usuario_json_invalido_400(self, api):
        response = api.post(URL_LISTA, data="{nao-e-json", content_type="application/json")
        
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"
    
    def test_criar_usuario_email_duplicado_409(self, api, usuario):
        response = post_json(api, URL_LISTA, {**PAYLOAD, "cpf": "529.982.247-25"})
        
        body = response.json()
        assert response.status_code == 409
        assert body["error"]["code"] == "DUPLICATE_IDENTITY"
        assert body["meta"]["field"] == "email"
    
    def test_criar_usuario_cpf_duplicado_409(self, api, usuario):
        response = post_json(api, URL_LISTA, {**PAYLOAD, "email": "outro@example.com"})
        
        assert response.status_code == 409
        assert response.json()["meta"]["field"] == "cpf"
    
    def test_criar_usuario_sanitiza_nome(self, api):
        """Tags HTML são removidas antes da validação."""
        response = post_json(api, URL_LISTA, {**PAYLOAD, "nome": "<b>Maria</b> Souza"})
        
        assert response.status_code == 201, response.content
        assert response.json()["data"]["nome"] == "Maria Souza"

    def test_criar_usuario_apostrofo_removido_pela_sanitizacao(self, api):
        response = post_json(api, URL_LISTA, {**PAYLOAD, "nome": "Ana D'Ávila"})

        assert response.status_code == 201, response.content
        assert response.json()["data"]["nome"] == "Ana DÁvila"

    def test_criar_usuario_cpf_em_digitos_arabes_400(self, api, usuario):
        response = post_json(api, URL_LISTA, {
            **PAYLOAD,
            "email": "outro@example.com",
            "cpf": "١١١٤٤٤٧٧٧٣٥",
        })

        assert response.status_code == 400
        assert "cpf" in response.json()["meta"]["fields"]

    def test_erro_conta_em_errors_total(self, api, usuario):
        route = "/api/usuarios/"
        antes = REGISTRY.get_sample_value(
            "errors_total", {"type": "DuplicateIdentityError", "route": route}
        ) or 0
        
        post_json(api, URL_LISTA, PAYLOAD)
        
        depois = REGISTRY.get_sample_value(
            "errors_total", {"type": "DuplicateIdentityError", "route": route}
        )
        assert depois == antes + 1


class TestConsultarUsuarioAPI:
    
    def test_obter_usuario(self, api, usuario):
        response = api.get(url_detalhe(usuario["id"]))
        
        assert response.status_code == 200
        assert response.json()["data"]["id"] == usuario["id"]
    
    def test_obter_usuario_inexistente_404(self, api):
        response = api.get(url_detalhe("nao-existe"))
        
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ENTITY_NOT_FOUND"
    
    def test_buscar_por_email(self, api, usuario):
        response = api.get(URL_BUSCA, {"email": "Joao@Example.com"})
        
        assert response.status_code == 200
        assert response.json()["data"]["id"] == usuario["id"]
    
    def test_buscar_por_cpf(self, api, usuario):
        response = api.get(URL_BUSCA, {"cpf": "11144477735"})
        
        assert response.status_code == 200
        assert response.json()["data"]["id"] == usuario["id"]
    
    def test_buscar_sem_parametros_400(self, api):
        response = api.get(URL_BUSCA)
        
        assert response.status_code == 400
    
    def test_listar_usuarios(self, api, usuario):
        post_json(api, URL_LISTA, {
            **PAYLOAD,
            "nome": "Ana Souza",
            "email": "ana@example.com",
            "cpf": "529.982.247-25",
        })
        
        response = api.get(URL_LISTA, {"ordenar_por": "nome", "ordem": "asc", "por_pagina": 1})
        
        body = response.json()
        assert response.status_code == 200
        assert [u["nome"] for u in body["data"]] == ["Ana Souza"]
        assert body["meta"]["total"] == 2
        assert body["meta"]["total_paginas"] == 2
        assert body["meta"]["tem_proxima"] is True
    
    def test_listar_filtro_invalido_400(self, api):
        response = api.get(URL_LISTA, {"por_pagina": 500})
        
        assert response.status_code == 400
        assert "por_pagina" in response.json()["meta"]["fields"]


class TestAtualizarRemoverUsuarioAPI:
    
    def test_patch_nome(self, api, usuario):
        response = patch_json(api, url_detalhe(usuario["id"]), {"nome": "João Souza"})
        
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["nome"] == "João Souza"
        assert data["criado_em"] == usuario["criado_em"]
        assert data["atualizado_em"] > usuario["atualizado_em"]
    
    def test_put_remove_telefone(self, api, usuario):
        response = api.put(
            url_detalhe(usuario["id"]),
            data=json.dumps({"telefone": ""}),
            content_type="application/json",
        )
        
        assert response.status_code == 200
        assert response.json()["data"]["telefone"] == ""
    
    def test_patch_sem_campos_400(self, api, usuario):
        response = patch_json(api, url_detalhe(usuario["id"]), {})
        
        assert response.status_code == 400
    
    def test_patch_inexistente_404(self, api):
        response = patch_json(api, url_detalhe("nao-existe"), {"nome": "X Y"})
        
        assert response.status_code == 404
    
    def test_delete_204(self, api, usuario):
        response = api.delete(url_detalhe(usuario["id"]))
        
        assert response.status_code == 204
        assert api.get(url_detalhe(usuario["id"])).status_code == 404
    
    def test_delete_inexistente_404(self, api):
        assert api.delete(url_detalhe("nao-existe")).status_code == 404
