"""
Entidades do Domínio de Utilizadores.

O Core só precisa de saber quem pode submeter tickets e quem pode
atendê-los. Autenticação e gestão de contas ficam fora do Core.

Regras:
- Qualquer utilizador ativo pode submeter tickets
- Apenas técnicos e administradores ativos atendem e concluem tickets
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.core.shared.exceptions import ValidationError


class PerfilUtilizador(Enum):
    """Perfis de utilizador."""

    COLABORADOR = "Colaborador"
    TECNICO = "Técnico"
    ADMINISTRADOR = "Administrador"

    @classmethod
    def from_string(cls, value: str) -> "PerfilUtilizador":
        """
        Converte string (nome ou valor) para enum.

        Raises:
            ValidationError: Se valor inválido
        """
        if not isinstance(value, str):
            raise ValidationError(f"Perfil inválido: {value!r}", field="perfil")

        try:
            return cls[value.upper()]
        except KeyError:
            pass

        for perfil in cls:
            if perfil.value.lower() == value.lower():
                return perfil

        raise ValidationError(f"Perfil inválido: {value}", field="perfil")


PERFIS_ATENDIMENTO = frozenset({PerfilUtilizador.TECNICO, PerfilUtilizador.ADMINISTRADOR})


@dataclass
class UserEntity:
    """
    Entidade de Domínio: Utilizador.

    Attributes:
        id: Identificador do utilizador
        username: Nome de login
        nome_completo: Nome apresentado em relatórios
        email: Email de contacto
        perfil: Perfil (colaborador, técnico, administrador)
        ativo: Se a conta está ativa
        criado_em: Data de registo
    """

    id: str
    username: str
    nome_completo: str = ""
    email: str = ""
    perfil: PerfilUtilizador = PerfilUtilizador.COLABORADOR
    ativo: bool = True
    criado_em: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.id:
            raise ValidationError("ID do utilizador é obrigatório", field="id")
        if not self.username or not self.username.strip():
            raise ValidationError("Username é obrigatório", field="username")

    @property
    def pode_criar_tickets(self) -> bool:
        return self.ativo

    @property
    def pode_atender_tickets(self) -> bool:
        return self.ativo and self.perfil in PERFIS_ATENDIMENTO

    @property
    def nome_apresentacao(self) -> str:
        return self.nome_completo or self.username

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
