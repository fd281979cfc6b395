"""
Ports do Domínio de Utilizadores.

UserDirectory é consumido pelo ciclo de vida dos tickets para validar
submetedores e técnicos. Implementações:
- DjangoUserDirectory (src/adapters/django_app/users/repositories.py)
- InMemoryUserDirectory (abaixo, para testes)
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import UserEntity, PerfilUtilizador


@runtime_checkable
class UserDirectory(Protocol):
    """
    Interface de consulta de utilizadores.

    Methods:
        get_by_id: Busca utilizador por ID
        is_active: Verifica se o utilizador existe e está ativo
        has_role: Verifica se o utilizador tem o perfil indicado
        list_by_perfil: Lista utilizadores de um perfil
    """

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        ...

    def is_active(self, user_id: str) -> bool:
        ...

    def has_role(self, user_id: str, perfil: PerfilUtilizador) -> bool:
        ...

    def list_by_perfil(self, perfil: PerfilUtilizador) -> List[UserEntity]:
        ...


class InMemoryUserDirectory:
    """
    Implementação em memória do UserDirectory.

    Example:
        directory = InMemoryUserDirectory()
        directory.add(UserEntity(id="tec-1", username="ana", perfil=PerfilUtilizador.TECNICO))
    """

    def __init__(self, users: Optional[List[UserEntity]] = None):
        self._users: Dict[str, UserEntity] = {}
        for user in users or []:
            self.add(user)

    def add(self, user: UserEntity) -> None:
        self._users[user.id] = user

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        return self._users.get(user_id)

    def is_active(self, user_id: str) -> bool:
        user = self._users.get(user_id)
        return user is not None and user.ativo

    def has_role(self, user_id: str, perfil: PerfilUtilizador) -> bool:
        user = self._users.get(user_id)
        return user is not None and user.perfil == perfil

    def list_by_perfil(self, perfil: PerfilUtilizador) -> List[UserEntity]:
        return [u for u in self._users.values() if u.perfil == perfil]

    def clear(self) -> None:
        self._users.clear()
