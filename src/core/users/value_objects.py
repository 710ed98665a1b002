"""
Value Objects de identidade do usuário.

CPF, E-mail e Telefone são imutáveis, validados na construção e
comparados pelo valor canônico (sem separadores), que é a forma
persistida e usada nas buscas. A forma de exibição fica em `formatado`.

Example:
    cpf = CPF("111.444.777-35")
    cpf.valor       # "11144477735"
    cpf.formatado   # "111.444.777-35"
    
    Telefone("(11) 98765-4321") == Telefone("+5511987654321")  # True
"""

from dataclasses import dataclass
import re
from typing import Optional

from src.core.shared.exceptions import InvalidFormatError


# =============================================================================
# CPF
# =============================================================================

@dataclass(frozen=True)
class CPF:
    """
    Cadastro de Pessoa Física: 11 dígitos com dois dígitos verificadores.
    
    Aceita qualquer string contendo os 11 dígitos com separadores
    arbitrários. Sequências de dígitos repetidos (000.000.000-00 etc.)
    são sempre inválidas, mesmo passando no cálculo do módulo 11.
    
    Raises:
        InvalidFormatError: "CPF inválido"
    """
    
    valor: str
    
    def __post_init__(self):
        digitos = re.sub(r"[^0-9]", "", self.valor or "")
        if not self._is_valido(digitos):
            raise InvalidFormatError("CPF inválido", field="cpf")
        object.__setattr__(self, "valor", digitos)
    
    @classmethod
    def parse(cls, raw: str) -> "CPF":
        return cls(raw)
    
    @staticmethod
    def _is_valido(digitos: str) -> bool:
        if len(digitos) != 11:
            return False
        
        if len(set(digitos)) == 1:
            return False
        
        numeros = [int(d) for d in digitos]
        
        # Primeiro dígito: pesos 10..2 sobre os 9 primeiros
        soma = sum(numeros[i] * (10 - i) for i in range(9))
        if CPF._digito_verificador(soma) != numeros[9]:
            return False
        
        # Segundo dígito: pesos 11..2 sobre os 10 primeiros
        soma = sum(numeros[i] * (11 - i) for i in range(10))
        return CPF._digito_verificador(soma) == numeros[10]
    
    @staticmethod
    def _digito_verificador(soma: int) -> int:
        resto = (soma * 10) % 11
        return 0 if resto in (10, 11) else resto
    
    @property
    def formatado(self) -> str:
        v = self.valor
        return f"{v[:3]}.{v[3:6]}.{v[6:9]}-{v[9:]}"
    
    def __str__(self) -> str:
        return self.formatado


# =============================================================================
# E-MAIL
# =============================================================================

EMAIL_MAX_LENGTH = 254

_EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9._+-]*[a-zA-Z0-9])?"
    r"@[a-zA-Z0-9]([a-zA-Z0-9.-]*[a-zA-Z0-9])?\.[a-zA-Z]{2,}$"
)


@dataclass(frozen=True)
class Email:
    """
    Endereço de e-mail normalizado (minúsculas, sem espaços nas pontas).
    
    Regras:
    - Parte local: alfanuméricos e `._+-`, começando e terminando
      com alfanumérico
    - Exatamente um `@`
    - Domínio com pelo menos um ponto e TLD de 2+ letras
    - No máximo 254 caracteres
    - Sem `..`, `@.` ou `.@`
    
    Raises:
        InvalidFormatError: "E-mail inválido"
    """
    
    valor: str
    
    def __post_init__(self):
        if not self.valor:
            raise InvalidFormatError("E-mail inválido", field="email")
        
        normalizado = self.valor.lower().strip()
        if not self._is_valido(normalizado):
            raise InvalidFormatError("E-mail inválido", field="email")
        object.__setattr__(self, "valor", normalizado)
    
    @classmethod
    def parse(cls, raw: str) -> "Email":
        return cls(raw)
    
    @staticmethod
    def _is_valido(email: str) -> bool:
        if len(email) > EMAIL_MAX_LENGTH:
            return False
        
        if ".." in email or "@." in email or ".@" in email:
            return False
        
        return _EMAIL_PATTERN.match(email) is not None
    
    @property
    def parte_local(self) -> str:
        return self.valor.split("@")[0]
    
    @property
    def dominio(self) -> str:
        return self.valor.split("@")[1]
    
    @property
    def formatado(self) -> str:
        return self.valor
    
    def __str__(self) -> str:
        return self.valor


# =============================================================================
# TELEFONE
# =============================================================================

CODIGO_PAIS = "+55"

_TELEFONE_PATTERN = re.compile(r"^\+55[0-9]{10,11}$")


@dataclass(frozen=True)
class Telefone:
    """
    Telefone brasileiro na forma canônica `+55<DDD><número>`.
    
    O campo é opcional: ausência (None ou "") produz um telefone vazio,
    sempre válido. Números sem `+` recebem o código do país; qualquer
    outro código de país é rejeitado. Após o `+55` devem restar 10
    dígitos (fixo) ou 11 (celular).
    
    Raises:
        InvalidFormatError: "Número de telefone inválido"
    """
    
    valor: Optional[str] = ""
    
    def __post_init__(self):
        if not self.valor:
            object.__setattr__(self, "valor", "")
            return
        
        limpo = re.sub(r"[^0-9+]", "", self.valor)
        if not limpo.startswith("+"):
            limpo = CODIGO_PAIS + limpo
        
        if not limpo.startswith(CODIGO_PAIS) or not _TELEFONE_PATTERN.match(limpo):
            raise InvalidFormatError("Número de telefone inválido", field="telefone")
        
        object.__setattr__(self, "valor", limpo)
    
    @classmethod
    def parse(cls, raw: Optional[str] = None) -> "Telefone":
        return cls(raw)
    
    @property
    def vazio(self) -> bool:
        return self.valor == ""
    
    @property
    def formatado(self) -> str:
        """
        Forma de exibição.
        
        Celular (11 dígitos): +55 (11) 98765-4321
        Fixo (10 dígitos):    +55 (11) 8765-4321
        """
        if self.vazio:
            return ""
        
        numero = self.valor[len(CODIGO_PAIS):]
        ddd, resto = numero[:2], numero[2:]
        corte = 5 if len(numero) == 11 else 4
        return f"{CODIGO_PAIS} ({ddd}) {resto[:corte]}-{resto[corte:]}"
    
    def __str__(self) -> str:
        return self.formatado
    