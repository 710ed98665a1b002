"""
Entidades do Domínio de Usuários.

Entidades:
- UsuarioEntity: Agregado raiz que compõe os value objects de identidade

Regras de Negócio Encapsuladas:
- E-mail, CPF e telefone sempre válidos (validados pelos value objects)
- Criação atômica: qualquer campo inválido impede a construção
- Atualização copy-on-write: a instância original nunca muda
- criado_em imutável; atualizado_em cresce a cada atualização
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from src.core.shared.exceptions import ValidationError
from .value_objects import CPF, Email, Telefone


def _agora(referencia: Optional[datetime] = None) -> datetime:
    """Momento atual no mesmo "tipo" (aware/naive) da referência."""
    if referencia is not None and referencia.tzinfo is None:
        return datetime.now()
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=False)
class UsuarioEntity:
    """
    Entidade de Domínio: Usuário.
    
    O id é atribuído pela camada de persistência (ver
    UsuarioRepository.proximo_id) e a senha chega já com hash; o
    agregado não faz I/O nem verifica unicidade.
    
    Attributes:
        id: Identificador opaco vindo do repositório
        nome: Nome como informado (validado na camada de formulários)
        email: Value object Email
        senha: Hash da senha
        cpf: Value object CPF
        telefone: Value object Telefone (pode estar vazio)
        criado_em: Data/hora de criação
        atualizado_em: Data/hora da última atualização
    
    Example:
        usuario = UsuarioEntity.criar(
            id="7c9e...",
            nome="Maria Silva",
            email="Maria@Example.com",
            senha=hasher.hash("S3nha!forte"),
            cpf="111.444.777-35",
        )
        
        alterado = usuario.atualizar(telefone="11987654321")
        usuario.tem_telefone()   # False
        alterado.tem_telefone()  # True
    """
    
    id: str
    nome: str
    email: Email
    senha: str
    cpf: CPF
    telefone: Telefone = field(default_factory=Telefone)
    criado_em: datetime = field(default_factory=_agora)
    atualizado_em: datetime = field(default_factory=_agora)
    
    @classmethod
    def criar(
        cls,
        id: str,
        nome: str,
        email: str,
        senha: str,
        cpf: str,
        telefone: Optional[str] = None,
        criado_em: Optional[datetime] = None,
        atualizado_em: Optional[datetime] = None,
    ) -> "UsuarioEntity":
        """
        Factory method que constrói e valida os value objects.
        
        A primeira falha de value object é propagada sem embrulho,
        para que o chamador saiba qual campo foi rejeitado.
        
        Raises:
            InvalidFormatError: E-mail, CPF ou telefone inválido
            ValidationError: id ausente ou datas incoerentes
        """
        if not id:
            raise ValidationError("ID é obrigatório", field="id")
        
        email_vo = Email(email)
        cpf_vo = CPF(cpf)
        telefone_vo = Telefone(telefone)
        
        criado_em = criado_em or _agora()
        atualizado_em = atualizado_em or criado_em
        cls._validar_datas(criado_em, atualizado_em)
        
        return cls(
            id=id,
            nome=nome,
            email=email_vo,
            senha=senha,
            cpf=cpf_vo,
            telefone=telefone_vo,
            criado_em=criado_em,
            atualizado_em=atualizado_em,
        )
    
    @classmethod
    def _validar_datas(cls, criado_em: datetime, atualizado_em: datetime) -> None:
        if atualizado_em < criado_em:
            raise ValidationError(
                "Data de atualização anterior à data de criação",
                field="atualizado_em"
            )
    
    def atualizar(
        self,
        nome: Optional[str] = None,
        email: Optional[str] = None,
        telefone: Optional[str] = None,
        senha: Optional[str] = None,
    ) -> "UsuarioEntity":
        """
        Retorna um novo usuário com os campos informados substituídos.
        
        None significa "não informado". Para remover o telefone,
        passe telefone="". E-mail e telefone passam novamente pelos
        value objects, então a atualização pode falhar como a criação.
        
        Raises:
            InvalidFormatError: E-mail ou telefone inválido
        """
        alteracoes: Dict[str, Any] = {}
        
        if nome is not None:
            alteracoes["nome"] = nome
        if email is not None:
            alteracoes["email"] = Email(email)
        if telefone is not None:
            alteracoes["telefone"] = Telefone(telefone)
        if senha is not None:
            alteracoes["senha"] = senha
        
        # Estritamente maior que o anterior, mesmo com relógio de baixa resolução
        agora = _agora(self.atualizado_em)
        minimo = self.atualizado_em + timedelta(microseconds=1)
        alteracoes["atualizado_em"] = max(agora, minimo)
        
        return replace(self, **alteracoes)
    
    def tem_telefone(self) -> bool:
        return not self.telefone.vazio
    
    def to_public(self) -> Dict[str, Any]:
        """Todos os campos, exceto a senha."""
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "cpf": self.cpf,
            "telefone": self.telefone,
            "criado_em": self.criado_em,
            "atualizado_em": self.atualizado_em,
        }
    
    def to_plain_object(self) -> Dict[str, Any]:
        """Valores primitivos canônicos (forma persistida), com a senha."""
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email.valor,
            "senha": self.senha,
            "cpf": self.cpf.valor,
            "telefone": self.telefone.valor,
            "criado_em": self.criado_em,
            "atualizado_em": self.atualizado_em,
        }
    
    def __repr__(self) -> str:
        return (
            f"UsuarioEntity(id={self.id[:8]}..., "
            f"email={self.email.valor})"
        )
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UsuarioEntity):
            return False
        return self.id == other.id
    
    def __hash__(self) -> int:
        return hash(self.id)
