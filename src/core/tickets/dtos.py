"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para a API e para os handlers.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada (de APIs/scripts)
- Output DTOs: Formatam dados para resposta
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Imutável (frozen=True) para garantir que dados recebidos
    não sejam alterados acidentalmente.

    Attributes:
        tipo: "Hardware" ou "Software" (nome ou valor do enum)
        submetido_por_id: ID do colaborador
        equipamento: (Hardware) equipamento afetado
        avaria: (Hardware) descrição da avaria
        software: (Software) aplicação afetada
        descricao_necessidade: (Software) descrição da necessidade
    """

    tipo: str
    submetido_por_id: str
    equipamento: str = ""
    avaria: str = ""
    software: str = ""
    descricao_necessidade: str = ""

    def dados_especificos(self) -> dict:
        """Campos da variante, no formato aceite por TicketEntity.criar."""
        return {
            "equipamento": self.equipamento,
            "avaria": self.avaria,
            "software": self.software,
            "descricao_necessidade": self.descricao_necessidade,
        }

    def to_dict(self) -> dict:
        return {
            "tipo": self.tipo,
            "submetido_por_id": self.submetido_por_id,
            **self.dados_especificos(),
        }


@dataclass(frozen=True)
class AtenderTicketInputDTO:
    """
    DTO de entrada para iniciar atendimento.

    Attributes:
        ticket_id: ID do ticket
        tecnico_id: ID do técnico que atende
    """

    ticket_id: int
    tecnico_id: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "tecnico_id": self.tecnico_id,
        }


@dataclass(frozen=True)
class ConcluirAtendimentoInputDTO:
    """
    DTO de entrada para concluir atendimento.

    Attributes:
        ticket_id: ID do ticket
        tecnico_id: ID do técnico que conclui
        estado_atendimento: "Resolvido" ou "Não Resolvido" (nome ou valor)
        descricao: Reparação (Hardware) ou intervenção (Software)
        pecas: Peças usadas (Hardware, opcional)
    """

    ticket_id: int
    tecnico_id: str
    estado_atendimento: str
    descricao: str
    pecas: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "tecnico_id": self.tecnico_id,
            "estado_atendimento": self.estado_atendimento,
            "descricao": self.descricao,
            "pecas": self.pecas,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    Campos da variante que não se aplicam ficam a None.
    """

    id: int
    tipo: str
    estado: str
    estado_atendimento: str
    submetido_por_id: str
    tecnico_id: Optional[str]
    criado_em: datetime
    atendido_em: Optional[datetime]
    atualizado_em: datetime
    urgente: bool
    informacao_especifica: str
    tempo_atendimento_horas: Optional[float] = None
    equipamento: Optional[str] = None
    avaria: Optional[str] = None
    descricao_reparacao: Optional[str] = None
    pecas: Optional[str] = None
    software: Optional[str] = None
    descricao_necessidade: Optional[str] = None
    descricao_intervencao: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Entidade TicketEntity

        Returns:
            DTO com dados da entidade
        """
        return cls(
            id=entity.id,
            tipo=entity.tipo.value,
            estado=entity.estado.value,
            estado_atendimento=entity.estado_atendimento.value,
            submetido_por_id=entity.submetido_por_id,
            tecnico_id=entity.tecnico_id,
            criado_em=entity.criado_em,
            atendido_em=entity.atendido_em,
            atualizado_em=entity.atualizado_em,
            urgente=entity.e_urgente,
            informacao_especifica=entity.informacao_especifica,
            tempo_atendimento_horas=entity.tempo_atendimento_horas,
            equipamento=entity.equipamento,
            avaria=entity.avaria,
            descricao_reparacao=entity.descricao_reparacao,
            pecas=entity.pecas,
            software=entity.software,
            descricao_necessidade=entity.descricao_necessidade,
            descricao_intervencao=entity.descricao_intervencao,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "tipo": self.tipo,
            "estado": self.estado,
            "estado_atendimento": self.estado_atendimento,
            "submetido_por_id": self.submetido_por_id,
            "tecnico_id": self.tecnico_id,
            "criado_em": self.criado_em.isoformat(),
            "atendido_em": self.atendido_em.isoformat() if self.atendido_em else None,
            "atualizado_em": self.atualizado_em.isoformat(),
            "urgente": self.urgente,
            "informacao_especifica": self.informacao_especifica,
            "tempo_atendimento_horas": (
                round(self.tempo_atendimento_horas, 2)
                if self.tempo_atendimento_horas is not None else None
            ),
            "equipamento": self.equipamento,
            "avaria": self.avaria,
            "descricao_reparacao": self.descricao_reparacao,
            "pecas": self.pecas,
            "software": self.software,
            "descricao_necessidade": self.descricao_necessidade,
            "descricao_intervencao": self.descricao_intervencao,
        }
