"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter UsuarioEntity → UsuarioModel (para persistência)
- Converter UsuarioModel → UsuarioEntity (para uso no Core)

Mappers são stateless e não contêm lógica de negócio.
"""

from src.core.users.entities import UsuarioEntity

from .models import UsuarioModel


class UsuarioMapper:
    """
    Mapper para conversão entre UsuarioEntity e UsuarioModel.
    
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    """
    
    @staticmethod
    def to_model(entity: UsuarioEntity) -> UsuarioModel:
        """
        Converte UsuarioEntity para UsuarioModel (formas canônicas).
        
        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return UsuarioModel(**entity.to_plain_object())
    
    @staticmethod
    def to_entity(model: UsuarioModel) -> UsuarioEntity:
        """
        Converte UsuarioModel para UsuarioEntity.
        
        Passa pelo factory method: uma linha adulterada no banco
        não vira um agregado com value object inválido.
        """
        return UsuarioEntity.criar(
            id=model.id,
            nome=model.nome,
            email=model.email,
            senha=model.senha,
            cpf=model.cpf,
            telefone=model.telefone or None,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )
