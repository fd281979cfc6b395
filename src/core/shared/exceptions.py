"""
Exceções de Domínio do Ticket2Help.

Este módulo define as exceções que o Core usa para comunicar falhas
esperadas entre camadas. A fachada de atendimento converte-as no
formato uniforme de resultado (ver result.py); apenas StorageError
atravessa essa fronteira como exceção.

Hierarquia:
    DomainException (base)
    ├── ValidationError (dados de entrada inválidos)
    ├── PermissionDeniedError (utilizador sem perfil ou inativo)
    ├── EntityNotFoundError (ticket ou utilizador inexistente)
    ├── InvalidStateError (transição de estado ilegal)
    │   └── ConcurrencyError (transição perdida para outro utilizador)
    └── StorageError (falha do repositório)
"""

from typing import Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio herdam desta classe,
    o que permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            ticket.atender("tec-1")
        except DomainException as e:
            logger.warning(f"Operação rejeitada: {e}")
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

    Lançada quando um campo obrigatório está vazio ou um valor não
    pertence ao conjunto aceite. O utilizador deve corrigir e repetir.

    Example:
        if not avaria.strip():
            raise ValidationError("Descrição da avaria é obrigatória", field="avaria")
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


class PermissionDeniedError(DomainException):
    """
    Utilizador sem permissão para a operação.

    Lançada quando o utilizador está inativo ou não tem o perfil
    exigido (apenas técnicos e administradores atendem tickets).
    """

    def __init__(self, message: str, user_id: str = None):
        self.user_id = user_id
        super().__init__(message, "PERMISSION_DENIED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.user_id:
            result["user_id"] = self.user_id
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

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
        if self.entity_id is not None:
            result["entity_id"] = str(self.entity_id)
        return result


class InvalidStateError(DomainException):
    """
    Transição de estado não permitida pela máquina de estados.

    O ticket não está no estado exigido pela operação (por exemplo,
    atender um ticket que já está em atendimento). O chamador deve
    recarregar o ticket antes de voltar a tentar.

    Example:
        if self.estado != TicketEstado.POR_ATENDER:
            raise InvalidStateError(
                "Apenas tickets por atender podem ser atendidos",
                estado_atual=self.estado.value,
                estado_esperado=TicketEstado.POR_ATENDER.value,
            )
    """

    SUGESTAO = (
        "Outro utilizador pode já ter atuado sobre este ticket; "
        "atualize e tente novamente."
    )

    def __init__(
        self,
        message: str,
        estado_atual: Optional[str] = None,
        estado_esperado: Optional[str] = None,
        code: str = "INVALID_STATE",
    ):
        self.estado_atual = estado_atual
        self.estado_esperado = estado_esperado
        super().__init__(f"{message}. {self.SUGESTAO}", code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.estado_atual:
            result["estado_atual"] = self.estado_atual
        if self.estado_esperado:
            result["estado_esperado"] = self.estado_esperado
        return result


class ConcurrencyError(InvalidStateError):
    """
    Transição perdida para uma escrita concorrente.

    Lançada quando a atualização condicionada ao estado esperado
    não afeta nenhuma linha: outro técnico alterou o ticket entre
    a leitura e a escrita.
    """

    def __init__(self, message: str, estado_esperado: Optional[str] = None):
        super().__init__(
            message,
            estado_esperado=estado_esperado,
            code="CONCURRENCY_ERROR",
        )


class StorageError(DomainException):
    """
    Falha no armazenamento de dados.

    Não é recuperável localmente. Nenhuma alteração de estado deve
    ser assumida quando esta exceção é lançada.
    """

    SUGESTAO = "Tente novamente mais tarde."

    def __init__(self, message: str, operation: str = None):
        self.operation = operation
        super().__init__(f"{message}. {self.SUGESTAO}", "STORAGE_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.operation:
            result["operation"] = self.operation
        return result
