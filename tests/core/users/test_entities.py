"""
Testes Unitários para o agregado UsuarioEntity.

Coverage:
- Criação (factory criar) e atomicidade da validação
- Atualização copy-on-write e carimbo de atualizado_em
- Serialização pública (sem senha) e plana (forma persistida)
"""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

from src.core.users.entities import UsuarioEntity
from src.core.users.value_objects import CPF, Email, Telefone
from src.core.shared.exceptions import InvalidFormatError, ValidationError


def criar_usuario(**overrides):
    dados = {
        "id": "usr-0001",
        "nome": "João da Silva",
        "email": "joao@example.com",
        "senha": "sha256$hash",
        "cpf": "111.444.777-35",
    }
    dados.update(overrides)
    return UsuarioEntity.criar(**dados)


class TestUsuarioEntityCriacao:
    """Testes de criação do usuário."""
    
    def test_criar_usuario_canonicaliza_campos(self):
        """Deve passar e-mail, CPF e telefone pelos value objects."""
        usuario = criar_usuario(
            email="JOAO@EXAMPLE.COM",
            telefone="(11) 98765-4321",
        )
        
        assert usuario.cpf.valor == "11144477735"
        assert usuario.email.valor == "joao@example.com"
        assert usuario.telefone.valor == "+5511987654321"
        assert isinstance(usuario.email, Email)
        assert isinstance(usuario.cpf, CPF)
        assert isinstance(usuario.telefone, Telefone)
    
    def test_criar_usuario_preserva_nome_e_senha(self):
        """Nome e senha são opacos para o domínio."""
        usuario = criar_usuario(nome="  Ana  ", senha="qualquer-coisa")
        
        assert usuario.nome == "  Ana  "
        assert usuario.senha == "qualquer-coisa"
    
    def test_criar_usuario_sem_telefone(self):
        """Deve criar com telefone vazio quando não informado."""
        usuario = criar_usuario()
        
        assert usuario.telefone.vazio
        assert usuario.tem_telefone() is False
    
    def test_criar_usuario_datas_default(self):
        """Deve usar agora e atualizado_em igual a criado_em."""
        antes = datetime.now(timezone.utc)
        usuario = criar_usuario()
        depois = datetime.now(timezone.utc)
        
        assert antes <= usuario.criado_em <= depois
        assert usuario.atualizado_em == usuario.criado_em
    
    def test_criar_usuario_com_datas_informadas(self):
        criado = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
        atualizado = criado + timedelta(days=2)
        
        usuario = criar_usuario(criado_em=criado, atualizado_em=atualizado)
        
        assert usuario.criado_em == criado
        assert usuario.atualizado_em == atualizado
    
    def test_criar_usuario_atualizado_antes_de_criado_erro(self):
        """Deve rejeitar atualizado_em anterior a criado_em."""
        criado = datetime(2024, 1, 10, tzinfo=timezone.utc)
        
        with pytest.raises(ValidationError) as exc_info:
            criar_usuario(criado_em=criado, atualizado_em=criado - timedelta(seconds=1))
        
        assert exc_info.value.field == "atualizado_em"
    
    def test_criar_usuario_sem_id_erro(self):
        with pytest.raises(ValidationError) as exc_info:
            criar_usuario(id="")
        
        assert exc_info.value.field == "id"
    
    def test_criar_usuario_email_invalido_erro(self):
        """Deve falhar informando o campo e-mail."""
        with pytest.raises(InvalidFormatError) as exc_info:
            criar_usuario(email="invalid")
        
        assert exc_info.value.field == "email"
        assert exc_info.value.message == "E-mail inválido"
    
    def test_criar_usuario_cpf_invalido_erro(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            criar_usuario(cpf="11144477736")
        
        assert exc_info.value.field == "cpf"
    
    def test_criar_usuario_telefone_invalido_erro(self):
        with pytest.raises(InvalidFormatError) as exc_info:
            criar_usuario(telefone="+1234567890123")
        
        assert exc_info.value.field == "telefone"
    
    def test_criar_usuario_primeiro_campo_invalido_e_reportado(self):
        """Com e-mail e CPF inválidos, o erro do e-mail vem primeiro."""
        with pytest.raises(InvalidFormatError) as exc_info:
            criar_usuario(email="invalid", cpf="123")
        
        assert exc_info.value.field == "email"


class TestUsuarioEntityAtualizacao:
    """Testes de atualização copy-on-write."""
    
    def test_atualizar_nome_nao_altera_original(self):
        """Deve retornar nova instância e manter a original intacta."""
        usuario = criar_usuario(telefone="11987654321")
        
        alterado = usuario.atualizar(nome="X")
        
        assert alterado is not usuario
        assert alterado.nome == "X"
        assert usuario.nome == "João da Silva"
        assert alterado.email == usuario.email
        assert alterado.cpf == usuario.cpf
        assert alterado.telefone == usuario.telefone
        assert alterado.criado_em == usuario.criado_em
        assert alterado.atualizado_em > usuario.atualizado_em
    
    def test_atualizar_sempre_avanca_atualizado_em(self):
        """Deve avançar atualizado_em mesmo em atualizações consecutivas."""
        usuario = criar_usuario()
        
        primeiro = usuario.atualizar(nome="A")
        segundo = primeiro.atualizar(nome="B")
        
        assert usuario.atualizado_em < primeiro.atualizado_em < segundo.atualizado_em
    
    def test_atualizar_com_datas_antigas(self):
        """Deve respeitar datas sem fuso vindas de fora."""
        criado = datetime(2020, 5, 1, 8, 30)
        usuario = criar_usuario(criado_em=criado)
        
        alterado = usuario.atualizar(nome="Outro")
        
        assert alterado.atualizado_em > criado
    
    def test_atualizar_email_revalida(self):
        usuario = criar_usuario()
        
        alterado = usuario.atualizar(email="NOVO@Example.com")
        
        assert alterado.email.valor == "novo@example.com"
    
    def test_atualizar_email_invalido_erro(self):
        """Deve falhar como na criação."""
        usuario = criar_usuario()
        
        with pytest.raises(InvalidFormatError) as exc_info:
            usuario.atualizar(email="sem-arroba")
        
        assert exc_info.value.field == "email"
    
    def test_atualizar_telefone(self):
        usuario = criar_usuario()
        
        alterado = usuario.atualizar(telefone="(21) 3456-7890")
        
        assert alterado.tem_telefone()
        assert alterado.telefone.valor == "+552134567890"
        assert not usuario.tem_telefone()
    
    def test_atualizar_telefone_vazio_remove(self):
        """Telefone "" remove o telefone."""
        usuario = criar_usuario(telefone="11987654321")
        
        alterado = usuario.atualizar(telefone="")
        
        assert alterado.tem_telefone() is False
    
    def test_atualizar_telefone_invalido_erro(self):
        usuario = criar_usuario()
        
        with pytest.raises(InvalidFormatError):
            usuario.atualizar(telefone="+44 20 7946 0958")
    
    def test_atualizar_senha_copia_direto(self):
        usuario = criar_usuario()
        
        alterado = usuario.atualizar(senha="novo-hash")
        
        assert alterado.senha == "novo-hash"
        assert usuario.senha == "sha256$hash"
    
    def test_atualizar_sem_campos_so_carimba(self):
        """Sem campos informados, somente atualizado_em muda."""
        usuario = criar_usuario()
        
        alterado = usuario.atualizar()
        
        assert alterado.to_public()["nome"] == usuario.nome
        assert alterado.atualizado_em > usuario.atualizado_em
    
    def test_entidade_imutavel(self):
        usuario = criar_usuario()
        
        with pytest.raises(FrozenInstanceError):
            usuario.nome = "Outro"


class TestUsuarioEntitySerializacao:
    """Testes de serialização e identidade."""
    
    def test_to_public_sem_senha(self):
        usuario = criar_usuario(telefone="11987654321")
        
        publico = usuario.to_public()
        
        assert "senha" not in publico
        assert publico["email"] == Email("joao@example.com")
        assert publico["cpf"].formatado == "111.444.777-35"
    
    def test_to_plain_object_forma_canonica(self):
        """Deve expor a forma persistida (sem formatação)."""
        usuario = criar_usuario(telefone="(11) 98765-4321")
        
        plano = usuario.to_plain_object()
        
        assert plano["cpf"] == "11144477735"
        assert plano["email"] == "joao@example.com"
        assert plano["telefone"] == "+5511987654321"
        assert plano["senha"] == "sha256$hash"
    
    def test_igualdade_por_id(self):
        usuario = criar_usuario()
        
        assert usuario == usuario.atualizar(nome="Outro")
        assert usuario != criar_usuario(id="usr-0002")
        assert len({usuario, usuario.atualizar(nome="Outro")}) == 1
