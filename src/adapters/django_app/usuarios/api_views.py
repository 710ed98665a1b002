"""
API Views JSON para o domínio de Usuários.

Endpoints:
- GET    /api/usuarios/                  - Listar (filtros + paginação)
- POST   /api/usuarios/                  - Cadastrar
- GET    /api/usuarios/buscar/?email=|cpf= - Buscar por e-mail ou CPF
- GET    /api/usuarios/<id>/             - Obter
- PUT    /api/usuarios/<id>/             - Atualizar (parcial)
- PATCH  /api/usuarios/<id>/             - Atualizar (parcial)
- DELETE /api/usuarios/<id>/             - Excluir

Formato:
- Entrada: JSON (strings sanitizadas antes da validação)
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from typing import Any, Dict, Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    DuplicateIdentityError,
    EntityNotFoundError,
    ValidationError,
)
from src.config.container import get_container
from src.adapters.django_app.monitoring.metrics import increment_error
from src.adapters.django_app.monitoring.middleware import resolve_route
from src.adapters.django_app.security.sanitization import sanitizar_valor

from .forms import UsuarioCreateForm, UsuarioFiltroForm, UsuarioUpdateForm

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: Optional[Dict] = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.
    
    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: {"message", "code"} (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}
    
    if data is not None:
        response['data'] = data
    
    if error is not None:
        response['error'] = error
    
    if meta is not None:
        response['meta'] = meta
    
    return JsonResponse(response, status=status)


def error_payload(message: str, code: str) -> Dict[str, str]:
    return {'message': message, 'code': code}


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.
    
    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}
    
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"JSON inválido: {e}")
    
    if not isinstance(data, dict):
        raise ValueError("O corpo da requisição deve ser um objeto JSON")
    
    return data


def form_errors(form) -> Dict[str, list]:
    return {campo: [str(msg) for msg in msgs] for campo, msgs in form.errors.items()}


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.
    
    Fornece:
    - Parsing e sanitização de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """
    
    def get_container(self):
        return get_container()
    
    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()
    
    def parse_body(self, request: HttpRequest) -> Dict:
        return sanitizar_valor(parse_json_body(request))
    
    def parse_query(self, request: HttpRequest) -> Dict:
        return sanitizar_valor(request.GET.dict())
    
    def invalid_form(self, form) -> JsonResponse:
        return json_response(
            success=False,
            error=error_payload('Dados inválidos', 'VALIDATION_ERROR'),
            status=400,
            meta={'fields': form_errors(form)},
        )
    
    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Mapeia exceções para status HTTP.
        
        ValidationError → 400, EntityNotFound → 404,
        DuplicateIdentity → 409, BusinessRule → 422, outros → 500.
        """
        route = resolve_route(self.request) if hasattr(self, 'request') else 'unmatched'
        increment_error(e.__class__.__name__, route)
        
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=error_payload(e.message, e.code),
                status=400,
                meta={'field': e.field},
            )
        
        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=error_payload(e.message, e.code),
                status=404,
            )
        
        if isinstance(e, DuplicateIdentityError):
            return json_response(
                success=False,
                error=error_payload(e.message, e.code),
                status=409,
                meta={'field': e.field},
            )
        
        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=error_payload(e.message, e.code),
                status=422,
                meta={'rule': e.rule},
            )
        
        if isinstance(e, DomainException):
            return json_response(
                success=False,
                error=error_payload(e.message, e.code),
                status=400,
            )
        
        if isinstance(e, ValueError):
            return json_response(
                success=False,
                error=error_payload(str(e), 'BAD_REQUEST'),
                status=400,
            )
        
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error=error_payload('Erro interno do servidor', 'INTERNAL_ERROR'),
            status=500,
        )


# =============================================================================
# Usuário API Views
# =============================================================================

class UsuarioAPIListView(BaseAPIView):
    """
    GET /api/usuarios/ - Lista usuários
    POST /api/usuarios/ - Cadastra usuário
    """
    
    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - nome, email: busca parcial
        - cpf: busca exata
        - criado_apos, criado_antes: ISO 8601
        - pagina (default 1), por_pagina (default 10, máx 100)
        - ordenar_por: nome|email|criado_em; ordem: asc|desc
        """
        try:
            form = UsuarioFiltroForm(self.parse_query(request))
            if not form.is_valid():
                return self.invalid_form(form)
            
            resultado = self.get_service('listar_usuarios_service').execute(form.to_query_dto())
            
            return json_response(
                success=True,
                data=[item.to_dict() for item in resultado.items],
                meta=resultado.meta(),
            )
        
        except Exception as e:
            return self.handle_exception(e)
    
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "nome": "string (2-100)",
            "email": "string",
            "senha": "string (8-128, maiúscula, minúscula, número, especial)",
            "cpf": "string (com ou sem pontuação)",
            "telefone": "string (opcional)"
        }
        """
        try:
            form = UsuarioCreateForm(self.parse_body(request))
            if not form.is_valid():
                return self.invalid_form(form)
            
            output = self.get_service('criar_usuario_service').execute(form.to_input_dto())
            
            logger.info(f"API: Usuário criado: {output.id}")
            
            return json_response(success=True, data=output.to_dict(), status=201)
        
        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPIBuscaView(BaseAPIView):
    """GET /api/usuarios/buscar/?email=... ou ?cpf=..."""
    
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            params = self.parse_query(request)
            email = params.get('email')
            cpf = params.get('cpf')
            
            if email:
                output = self.get_service('buscar_usuario_por_email_service').execute(email)
            elif cpf:
                output = self.get_service('buscar_usuario_por_cpf_service').execute(cpf)
            else:
                raise ValidationError('Informe email ou cpf para a busca')
            
            return json_response(success=True, data=output.to_dict())
        
        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPIDetailView(BaseAPIView):
    """
    GET /api/usuarios/<id>/ - Obter
    PUT|PATCH /api/usuarios/<id>/ - Atualizar parcialmente
    DELETE /api/usuarios/<id>/ - Excluir
    """
    
    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('obter_usuario_service').execute(pk)
            return json_response(success=True, data=output.to_dict())
        
        except Exception as e:
            return self.handle_exception(e)
    
    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON (todos opcionais, ao menos um):
        {"nome": ..., "email": ..., "telefone": ... ("" remove), "senha": ...}
        """
        try:
            form = UsuarioUpdateForm(self.parse_body(request))
            if not form.is_valid():
                return self.invalid_form(form)
            
            output = self.get_service('atualizar_usuario_service').execute(
                form.to_input_dto(usuario_id=pk)
            )
            
            logger.info(f"API: Usuário atualizado: {pk}")
            
            return json_response(success=True, data=output.to_dict())
        
        except Exception as e:
            return self.handle_exception(e)
    
    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        return self.patch(request, pk)
    
    def delete(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            self.get_service('remover_usuario_service').execute(pk)
            logger.info(f"API: Usuário removido: {pk}")
            return HttpResponse(status=204)
        
        except Exception as e:
            return self.handle_exception(e)
