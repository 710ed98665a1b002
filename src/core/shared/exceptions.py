"""
Exceções de Domínio da Gestão de Usuários.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    │   └── InvalidFormatError (value object rejeitou o valor bruto)
    ├── EntityNotFoundError (entidade não existe)
    └── BusinessRuleViolationError (regra de negócio violada)
        └── DuplicateIdentityError (e-mail ou CPF já cadastrado)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.
    
    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.
    
    Example:
        try:
            usuario = UsuarioEntity.criar(...)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """
    
    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)
    
    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
    
    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.
    
    Example:
        if not campos:
            raise ValidationError("Informe ao menos um campo para atualizar")
    """
    
    prefix = "VALIDATION_ERROR"
    
    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"{self.prefix}_{field.upper()}" if field else self.prefix
        super().__init__(message, code)
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class InvalidFormatError(ValidationError):
    """
    Valor bruto rejeitado pelo construtor de um value object.
    
    A mensagem é específica do campo ("CPF inválido", "E-mail inválido",
    "Número de telefone inválido") e pode ser repassada ao cliente.
    """
    
    prefix = "INVALID_FORMAT"


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.
    
    Example:
        usuario = repo.get_by_id(usuario_id)
        if not usuario:
            raise EntityNotFoundError(f"Usuário {usuario_id} não encontrado")
    """
    
    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.
    
    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.
    """
    
    def __init__(self, message: str, rule: str = None, code: str = "BUSINESS_RULE_VIOLATION"):
        self.rule = rule
        super().__init__(message, code)
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class DuplicateIdentityError(BusinessRuleViolationError):
    """
    E-mail ou CPF já pertence a outro usuário.
    
    Detectada pela camada de serviço (ou pela constraint única do banco),
    nunca pelo agregado, que não consulta armazenamento.
    """
    
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        label = "CPF" if field == "cpf" else "E-mail"
        super().__init__(
            f"{label} já cadastrado: {value}",
            rule=f"{field}_unico",
            code="DUPLICATE_IDENTITY",
        )
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        result["field"] = self.field
        return result
