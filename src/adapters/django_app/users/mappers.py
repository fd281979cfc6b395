"""
Mapper entre UserEntity (Core) e UtilizadorModel (Django).
"""

from src.core.users.entities import UserEntity, PerfilUtilizador

from .models import UtilizadorModel


class UtilizadorMapper:

    @staticmethod
    def to_model(entity: UserEntity) -> UtilizadorModel:
        return UtilizadorModel(
            id=entity.id,
            username=entity.username,
            nome_completo=entity.nome_completo,
            email=entity.email,
            perfil=entity.perfil.value,
            ativo=entity.ativo,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: UtilizadorModel) -> UserEntity:
        return UserEntity(
            id=model.id,
            username=model.username,
            nome_completo=model.nome_completo,
            email=model.email,
            perfil=PerfilUtilizador(model.perfil),
            ativo=model.ativo,
            criado_em=model.criado_em,
        )
