"""
Exceções de Domínio do ITSM Core.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada malformada)
    ├── EntityNotFoundError (entidade referenciada não existe)
    ├── AuthorizationError (ator sem a relação necessária)
    ├── BusinessRuleViolationError (pré-condição de estado violada)
    └── RepositoryError (falha de infraestrutura)
        └── CodeGenerationError (códigos de ticket esgotados)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(input_dto)
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

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento (data malformada, ID vazio,
    categoria inativa, ticket pai igual ao próprio ticket...).

    Example:
        if not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.
    Nunca é re-tentada.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
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


class AuthorizationError(DomainException):
    """
    Ator não possui a relação exigida com o recurso.

    Exemplos: não é o dono do atraso, não é o autor do comentário,
    atribuição para outro departamento sob a restrição de TI.

    Example:
        if atraso.usuario_id != ator.usuario_id:
            raise AuthorizationError(
                "Apenas o responsável pelo atraso pode justificá-lo",
                rule="atraso.justificar",
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "AUTHORIZATION_FAILED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio (conflito de estado).

    Lançada quando uma operação exige um estado que a entidade
    não possui: justificativa já existente, apontamento já validado,
    ticket fora do status exigido pela transição.

    Example:
        if ticket.status != TicketStatus.EN_ATTENTE:
            raise BusinessRuleViolationError(
                "Ticket não está aguardando validação",
                rule="validacao_exige_en_attente"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class RepositoryError(DomainException):
    """
    Falha inesperada da camada de persistência.

    Envolve o erro original com contexto e é propagada ao chamador.
    Nunca é re-tentada automaticamente.
    """

    def __init__(self, message: str, code: str = "REPOSITORY_ERROR"):
        super().__init__(message, code)


class CodeGenerationError(RepositoryError):
    """Não foi possível gerar um código de ticket único."""

    def __init__(self, message: str):
        super().__init__(message, "CODE_GENERATION_FAILED")
