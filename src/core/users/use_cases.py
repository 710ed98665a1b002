"""
Use Cases (Application Services) do Domínio de Usuários.

Use Cases implementados:
- CriarUsuarioService: Cadastra usuário (unicidade + hash + agregado)
- ObterUsuarioService: Obtém usuário por ID
- BuscarUsuarioPorEmailService: Obtém usuário por e-mail
- BuscarUsuarioPorCPFService: Obtém usuário por CPF
- AtualizarUsuarioService: Atualização parcial
- RemoverUsuarioService: Exclui usuário
- ListarUsuariosService: Lista paginada com filtros
- ContarUsuariosService: Total de usuários

Ordem obrigatória no cadastro: verificação de unicidade e hash da
senha acontecem antes de construir o agregado, que não faz I/O.
"""

import logging
from typing import Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    DuplicateIdentityError,
    EntityNotFoundError,
    ValidationError,
)

from .ports import CAMPOS_ORDENACAO, PasswordHasher, UsuarioRepository
from .entities import UsuarioEntity
from .value_objects import CPF, Email
from .dtos import (
    AtualizarUsuarioInputDTO,
    CriarUsuarioInputDTO,
    ListarUsuariosQueryDTO,
    PaginatedResultDTO,
    UsuarioOutputDTO,
)
from .events import (
    UsuarioAtualizadoEvent,
    UsuarioCriadoEvent,
    UsuarioRemovidoEvent,
)


logger = logging.getLogger(__name__)

POR_PAGINA_MAXIMO = 100


def _nao_encontrado(usuario_id: str) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"Usuário {usuario_id} não encontrado",
        entity_type="Usuario",
        entity_id=usuario_id,
    )


class CriarUsuarioService:
    """
    Use Case: Cadastrar um novo usuário.
    
    Fluxo:
    1. Normalizar e validar e-mail e CPF (value objects)
    2. Verificar unicidade de e-mail e CPF
    3. Aplicar hash na senha
    4. Obter ID do repositório e construir a entidade
    5. Persistir e disparar UsuarioCriadoEvent
    
    Example:
        service = CriarUsuarioService(repo, hasher, uow)
        output = service.execute(CriarUsuarioInputDTO(
            nome="Maria Silva",
            email="maria@example.com",
            senha="S3nha!forte",
            cpf="111.444.777-35",
        ))
    """
    
    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow
    
    def execute(self, input_dto: CriarUsuarioInputDTO) -> UsuarioOutputDTO:
        """
        Raises:
            InvalidFormatError: E-mail, CPF ou telefone inválido
            DuplicateIdentityError: E-mail ou CPF já cadastrado
        """
        email = Email(input_dto.email)
        cpf = CPF(input_dto.cpf)
        
        with self.uow:
            if self.usuario_repo.exists_by_email(email.valor):
                raise DuplicateIdentityError("email", email.valor)
            
            if self.usuario_repo.exists_by_cpf(cpf.valor):
                raise DuplicateIdentityError("cpf", cpf.formatado)
            
            senha_hash = self.password_hasher.hash(input_dto.senha)
            
            usuario = UsuarioEntity.criar(
                id=self.usuario_repo.proximo_id(),
                nome=input_dto.nome,
                email=email.valor,
                senha=senha_hash,
                cpf=cpf.valor,
                telefone=input_dto.telefone,
            )
            
            self.usuario_repo.save(usuario)
            
            self.uow.publish_event(
                UsuarioCriadoEvent(
                    aggregate_id=usuario.id,
                    nome=usuario.nome,
                    email=usuario.email.valor,
                )
            )
        
        logger.info(f"Usuário criado | id={usuario.id} | email={usuario.email}")
        return UsuarioOutputDTO.from_entity(usuario)


class ObterUsuarioService:
    """Use Case: Obter usuário por ID."""
    
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo
    
    def execute(self, usuario_id: str) -> UsuarioOutputDTO:
        usuario = self.usuario_repo.get_by_id(usuario_id)
        
        if not usuario:
            raise _nao_encontrado(usuario_id)
        
        return UsuarioOutputDTO.from_entity(usuario)


class BuscarUsuarioPorEmailService:
    """
    Use Case: Obter usuário pelo e-mail.
    
    O e-mail é normalizado antes da busca, então "Maria@Example.COM"
    encontra "maria@example.com".
    """
    
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo
    
    def execute(self, email: str) -> UsuarioOutputDTO:
        canonico = Email(email).valor
        usuario = self.usuario_repo.get_by_email(canonico)
        
        if not usuario:
            raise EntityNotFoundError(
                f"Usuário com e-mail {canonico} não encontrado",
                entity_type="Usuario",
            )
        
        return UsuarioOutputDTO.from_entity(usuario)


class BuscarUsuarioPorCPFService:
    """Use Case: Obter usuário pelo CPF (com ou sem pontuação)."""
    
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo
    
    def execute(self, cpf: str) -> UsuarioOutputDTO:
        cpf_vo = CPF(cpf)
        usuario = self.usuario_repo.get_by_cpf(cpf_vo.valor)
        
        if not usuario:
            raise EntityNotFoundError(
                f"Usuário com CPF {cpf_vo.formatado} não encontrado",
                entity_type="Usuario",
            )
        
        return UsuarioOutputDTO.from_entity(usuario)


class AtualizarUsuarioService:
    """
    Use Case: Atualizar dados de um usuário.
    
    Fluxo:
    1. Buscar usuário (404 se não existe)
    2. Se o e-mail muda, garantir que não pertence a outro usuário
    3. Aplicar hash na nova senha, se informada
    4. Gerar nova instância via atualizar() (copy-on-write)
    5. Persistir e disparar UsuarioAtualizadoEvent
    """
    
    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow
    
    def execute(self, input_dto: AtualizarUsuarioInputDTO) -> UsuarioOutputDTO:
        """
        Raises:
            ValidationError: Nenhum campo informado
            EntityNotFoundError: Usuário não existe
            DuplicateIdentityError: Novo e-mail pertence a outro usuário
            InvalidFormatError: Novo e-mail ou telefone inválido
        """
        campos = input_dto.campos_informados
        if not campos:
            raise ValidationError("Informe ao menos um campo para atualizar")
        
        with self.uow:
            usuario = self.usuario_repo.get_by_id(input_dto.usuario_id)
            if not usuario:
                raise _nao_encontrado(input_dto.usuario_id)
            
            email = None
            if input_dto.email is not None:
                email = Email(input_dto.email).valor
                dono = self.usuario_repo.get_by_email(email)
                if dono is not None and dono.id != usuario.id:
                    raise DuplicateIdentityError("email", email)
            
            senha_hash = None
            if input_dto.senha is not None:
                senha_hash = self.password_hasher.hash(input_dto.senha)
            
            atualizado = usuario.atualizar(
                nome=input_dto.nome,
                email=email,
                telefone=input_dto.telefone,
                senha=senha_hash,
            )
            
            self.usuario_repo.save(atualizado)
            
            self.uow.publish_event(
                UsuarioAtualizadoEvent(
                    aggregate_id=atualizado.id,
                    campos_alterados=campos,
                )
            )
        
        logger.info(f"Usuário atualizado | id={atualizado.id} | campos={','.join(campos)}")
        return UsuarioOutputDTO.from_entity(atualizado)


class RemoverUsuarioService:
    """Use Case: Excluir usuário."""
    
    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork):
        self.usuario_repo = usuario_repo
        self.uow = uow
    
    def execute(self, usuario_id: str) -> None:
        """
        Raises:
            EntityNotFoundError: Usuário não existe
        """
        with self.uow:
            usuario = self.usuario_repo.get_by_id(usuario_id)
            if not usuario or not self.usuario_repo.delete(usuario_id):
                raise _nao_encontrado(usuario_id)
            
            self.uow.publish_event(
                UsuarioRemovidoEvent(
                    aggregate_id=usuario_id,
                    email=usuario.email.valor,
                )
            )
        
        logger.info(f"Usuário removido | id={usuario_id}")


class ListarUsuariosService:
    """
    Use Case: Listar usuários com filtros e paginação.
    
    Não usa UoW pois é operação de leitura.
    """
    
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo
    
    def execute(self, query: Optional[ListarUsuariosQueryDTO] = None) -> PaginatedResultDTO:
        """
        Raises:
            ValidationError: Paginação ou ordenação inválidas
            InvalidFormatError: Filtro de CPF inválido
        """
        query = query or ListarUsuariosQueryDTO()
        self._validar(query)
        
        filtros = query.filtros()
        if "cpf" in filtros:
            filtros["cpf"] = CPF(filtros["cpf"]).valor
        
        usuarios, total = self.usuario_repo.list_paginated(
            filtros,
            pagina=query.pagina,
            por_pagina=query.por_pagina,
            ordenar_por=query.ordenar_por,
            ordem=query.ordem,
        )
        
        return PaginatedResultDTO(
            items=[UsuarioOutputDTO.from_entity(u) for u in usuarios],
            total=total,
            pagina=query.pagina,
            por_pagina=query.por_pagina,
        )
    
    @staticmethod
    def _validar(query: ListarUsuariosQueryDTO) -> None:
        if query.pagina < 1:
            raise ValidationError("Página deve ser maior ou igual a 1", field="pagina")
        
        if not 1 <= query.por_pagina <= POR_PAGINA_MAXIMO:
            raise ValidationError(
                f"Itens por página deve estar entre 1 e {POR_PAGINA_MAXIMO}",
                field="por_pagina"
            )
        
        if query.ordenar_por not in CAMPOS_ORDENACAO:
            raise ValidationError(
                f"Ordenação inválida: {query.ordenar_por}",
                field="ordenar_por"
            )
        
        if query.ordem not in ("asc", "desc"):
            raise ValidationError(f"Ordem inválida: {query.ordem}", field="ordem")


class ContarUsuariosService:
    """Use Case: Total de usuários cadastrados (alimenta a métrica users_total)."""
    
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo
    
    def execute(self) -> int:
        return self.usuario_repo.count()
