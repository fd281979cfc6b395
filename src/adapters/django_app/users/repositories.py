"""
Diretório de utilizadores sobre o Django ORM.

Implementa o port UserDirectory (src/core/users/ports.py).
"""

from typing import List, Optional
import logging

from src.core.users.entities import UserEntity, PerfilUtilizador
from ..shared.database import storage_operation

from .models import UtilizadorModel
from .mappers import UtilizadorMapper

logger = logging.getLogger(__name__)


class DjangoUserDirectory:
    """
    Implementação Django do UserDirectory.

    Example:
        directory = DjangoUserDirectory()
        directory.save(UserEntity(id="tec-1", username="ana", perfil=PerfilUtilizador.TECNICO))
        directory.has_role("tec-1", PerfilUtilizador.TECNICO)  # True
    """

    @storage_operation("get_by_id", "utilizadores")
    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        try:
            return UtilizadorMapper.to_entity(UtilizadorModel.objects.get(id=user_id))
        except UtilizadorModel.DoesNotExist:
            return None

    @storage_operation("is_active", "utilizadores")
    def is_active(self, user_id: str) -> bool:
        return UtilizadorModel.objects.filter(id=user_id, ativo=True).exists()

    @storage_operation("has_role", "utilizadores")
    def has_role(self, user_id: str, perfil: PerfilUtilizador) -> bool:
        return UtilizadorModel.objects.filter(id=user_id, perfil=perfil.value).exists()

    @storage_operation("list_by_perfil", "utilizadores")
    def list_by_perfil(self, perfil: PerfilUtilizador) -> List[UserEntity]:
        return [
            UtilizadorMapper.to_entity(model)
            for model in UtilizadorModel.objects.filter(perfil=perfil.value)
        ]

    @storage_operation("save", "utilizadores")
    def save(self, user: UserEntity) -> None:
        """Cria ou atualiza utilizador (usado pelo script de setup)."""
        model = UtilizadorMapper.to_model(user)
        model.save()
        logger.info(f"Utilizador gravado: {user.id} ({user.perfil.value})")
