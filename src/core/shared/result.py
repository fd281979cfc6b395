"""
Resultado uniforme das operações expostas à camada de apresentação.

A fachada de atendimento nunca lança exceções para falhas esperadas
(validação, permissão, estado, inexistência). Devolve sempre um
OperationResult com success, data e error_message.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from .exceptions import DomainException


T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    Resultado de uma operação da fachada.

    Attributes:
        success: Se a operação foi concluída
        data: Dados devolvidos (apenas em sucesso)
        error_message: Mensagem para o utilizador (apenas em falha)
        error_code: Código da exceção de domínio que causou a falha

    Example:
        resultado = gestao.atender_ticket(ticket_id=1, tecnico_id="tec-1")
        if not resultado.success:
            mostrar_erro(resultado.error_message)
    """

    success: bool
    data: Optional[T] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: T = None) -> "OperationResult[T]":
        """Cria resultado de sucesso."""
        return cls(success=True, data=data)

    @classmethod
    def falha(cls, error_message: str, error_code: str = None) -> "OperationResult[T]":
        """Cria resultado de falha."""
        return cls(success=False, error_message=error_message, error_code=error_code)

    @classmethod
    def from_exception(cls, exc: DomainException) -> "OperationResult[T]":
        """Converte exceção de domínio em resultado de falha."""
        return cls.falha(exc.message, exc.code)

    def to_dict(self) -> Dict[str, Any]:
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        elif isinstance(data, list):
            data = [item.to_dict() if hasattr(item, "to_dict") else item for item in data]

        return {
            "success": self.success,
            "data": data,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }
