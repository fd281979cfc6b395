"""
Database helpers partilhados pelos adapters Django.

- storage_operation: converte erros do ORM em StorageError do domínio
- check_database_connection: verificação de conexão (setup/health check)
"""

from functools import wraps
from typing import Any, Callable, Dict, Optional
import logging

from django.db import DatabaseError, connections

from src.core.shared.exceptions import StorageError

logger = logging.getLogger(__name__)


def storage_operation(operation: str, entidade: str = "dados") -> Callable:
    """
    Decorator para métodos de repositório.

    Qualquer DatabaseError é registado e relançado como StorageError,
    para que o Core nunca veja exceções do Django.

    Example:
        @storage_operation("add", "tickets")
        def add(self, ticket): ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as e:
                logger.error(f"Erro de base de dados em {operation}: {e}", exc_info=True)
                raise StorageError(
                    f"Erro ao aceder aos {entidade} ({operation})",
                    operation=operation
                ) from e
        return wrapper
    return decorator


def check_database_connection(alias: Optional[str] = None) -> Dict[str, Any]:
    """
    Verifica conexão e retorna informações do banco.

    Returns:
        Dict com status, engine e nome da base de dados
    """
    connection = connections[alias or "default"]
    try:
        connection.ensure_connection()
    except DatabaseError as e:
        logger.error(f"Falha na conexão à base de dados: {e}")
        return {
            "status": "error",
            "error": str(e),
            "healthy": False,
        }

    return {
        "status": "connected",
        "engine": connection.vendor,
        "database": str(connection.settings_dict.get("NAME")),
        "healthy": True,
    }
