"""
Domínio de Utilizadores - submetedores e técnicos.

Expõe apenas o necessário para as regras de permissão do
ciclo de vida dos tickets.
"""

from .entities import UserEntity, PerfilUtilizador, PERFIS_ATENDIMENTO
from .ports import UserDirectory, InMemoryUserDirectory

__all__ = [
    "UserEntity",
    "PerfilUtilizador",
    "PERFIS_ATENDIMENTO",
    "UserDirectory",
    "InMemoryUserDirectory",
]
