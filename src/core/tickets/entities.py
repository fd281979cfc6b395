"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam as regras
do ciclo de vida de um pedido de suporte.

Entidades:
- TicketEntity: Agregado principal (variantes Hardware e Software)
- TicketEstado: Estados do ciclo de vida
- EstadoAtendimento: Resultado do atendimento
- TipoTicket: Discriminador da variante

Regras de Negócio Encapsuladas:
- Campos obrigatórios por variante na criação
- Transições de estado controladas (Por Atender → Em Atendimento → Atendido)
- Descrição da intervenção obrigatória na conclusão
- Deteção de urgência por palavras-chave
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from src.core.shared.exceptions import (
    ValidationError,
    InvalidStateError,
)


class TicketEstado(Enum):
    """
    Estados do ciclo de vida de um ticket.

    Fluxo de Estados:
        POR_ATENDER → EM_ATENDIMENTO → ATENDIDO

    ATENDIDO é terminal.
    """

    POR_ATENDER = "Por Atender"
    EM_ATENDIMENTO = "Em Atendimento"
    ATENDIDO = "Atendido"

    @classmethod
    def from_string(cls, value: str) -> "TicketEstado":
        """
        Converte string para enum.

        Args:
            value: Nome ("POR_ATENDER") ou valor ("Por Atender")

        Raises:
            ValidationError: Se valor inválido
        """
        if not isinstance(value, str):
            raise ValidationError(f"Estado inválido: {value!r}", field="estado")

        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        for estado in cls:
            if estado.value.lower() == value.lower():
                return estado

        raise ValidationError(f"Estado inválido: {value}", field="estado")


class EstadoAtendimento(Enum):
    """
    Resultado do atendimento.

    ABERTO enquanto o ticket não está concluído; RESOLVIDO ou
    NAO_RESOLVIDO apenas quando o ticket está ATENDIDO.
    """

    ABERTO = "Aberto"
    RESOLVIDO = "Resolvido"
    NAO_RESOLVIDO = "Não Resolvido"

    @classmethod
    def from_string(cls, value: str) -> "EstadoAtendimento":
        if not isinstance(value, str):
            raise ValidationError(
                f"Estado de atendimento inválido: {value!r}",
                field="estado_atendimento"
            )

        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        for estado in cls:
            if estado.value.lower() == value.lower():
                return estado

        raise ValidationError(
            f"Estado de atendimento inválido: {value}",
            field="estado_atendimento"
        )


class TipoTicket(Enum):
    """Variante do ticket. Determina os campos específicos aplicáveis."""

    HARDWARE = "Hardware"
    SOFTWARE = "Software"

    @property
    def outro(self) -> "TipoTicket":
        """Tipo oposto (usado pela estratégia round robin)."""
        if self is TipoTicket.HARDWARE:
            return TipoTicket.SOFTWARE
        return TipoTicket.HARDWARE

    @classmethod
    def from_string(cls, value: str) -> "TipoTicket":
        if not isinstance(value, str):
            raise ValidationError(f"Tipo de ticket inválido: {value!r}", field="tipo")

        try:
            return cls[value.upper()]
        except KeyError:
            pass

        for tipo in cls:
            if tipo.value.lower() == value.lower():
                return tipo

        raise ValidationError(f"Tipo de ticket inválido: {value}", field="tipo")


# Palavras que tornam um ticket urgente (comparação sem distinção de maiúsculas)
PALAVRAS_URGENTES_HARDWARE: Tuple[str, ...] = (
    "servidor", "rede", "crítico", "emergência", "fogo", "fumo", "não liga",
)
PALAVRAS_URGENTES_SOFTWARE: Tuple[str, ...] = (
    "sistema", "crítico", "emergência", "produção", "não funciona", "erro crítico",
)

ESTADOS_COM_TECNICO = frozenset({TicketEstado.EM_ATENDIMENTO, TicketEstado.ATENDIDO})


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do domínio de suporte. Hardware e Software são
    variantes da mesma entidade, distinguidas por `tipo`; os campos de
    cada variante ficam vazios na outra.

    Invariantes:
    - atendido_em e tecnico_id preenchidos sse estado ∈ {EM_ATENDIMENTO, ATENDIDO}
    - estado_atendimento diferente de ABERTO apenas quando ATENDIDO
    - Campos obrigatórios da variante não vazios
    - tipo, criado_em e submetido_por_id não mudam após a criação

    Attributes:
        id: Identificador atribuído pelo repositório na inserção
        tipo: Variante (HARDWARE ou SOFTWARE)
        submetido_por_id: ID do colaborador que submeteu
        estado: Estado do ciclo de vida
        estado_atendimento: Resultado do atendimento
        tecnico_id: ID do técnico que atendeu
        criado_em: Data/hora de criação
        atendido_em: Data/hora em que o atendimento começou
        atualizado_em: Data/hora da última alteração
        equipamento: (Hardware) equipamento afetado
        avaria: (Hardware) descrição da avaria
        descricao_reparacao: (Hardware) reparação efetuada
        pecas: (Hardware) peças usadas, opcional
        software: (Software) aplicação afetada
        descricao_necessidade: (Software) descrição da necessidade
        descricao_intervencao: (Software) intervenção efetuada

    Example:
        ticket = TicketEntity.criar_hardware(
            submetido_por_id="user-1",
            equipamento="Portátil HP",
            avaria="Não liga",
        )
        ticket.atender("tec-1")
        ticket.concluir(EstadoAtendimento.RESOLVIDO, "Fonte substituída")
    """

    # Identificação
    id: Optional[int] = None
    tipo: TipoTicket = TipoTicket.HARDWARE
    submetido_por_id: str = ""

    # Estado
    estado: TicketEstado = field(default=TicketEstado.POR_ATENDER)
    estado_atendimento: EstadoAtendimento = field(default=EstadoAtendimento.ABERTO)
    tecnico_id: Optional[str] = None

    # Timestamps
    criado_em: datetime = field(default_factory=datetime.now)
    atendido_em: Optional[datetime] = None
    atualizado_em: datetime = field(default_factory=datetime.now)

    # Hardware
    equipamento: Optional[str] = None
    avaria: Optional[str] = None
    descricao_reparacao: Optional[str] = None
    pecas: Optional[str] = None

    # Software
    software: Optional[str] = None
    descricao_necessidade: Optional[str] = None
    descricao_intervencao: Optional[str] = None

    # =========================================================================
    # Criação
    # =========================================================================

    @classmethod
    def criar(
        cls,
        tipo: TipoTicket,
        submetido_por_id: str,
        dados: Dict[str, Any],
    ) -> "TicketEntity":
        """
        Factory que despacha para a variante indicada por `tipo`.

        Args:
            tipo: Variante do ticket
            submetido_por_id: ID do colaborador
            dados: Campos específicos da variante

        Raises:
            ValidationError: Se campos obrigatórios vazios
        """
        if tipo == TipoTicket.HARDWARE:
            return cls.criar_hardware(
                submetido_por_id=submetido_por_id,
                equipamento=dados.get("equipamento", ""),
                avaria=dados.get("avaria", ""),
            )
        return cls.criar_software(
            submetido_por_id=submetido_por_id,
            software=dados.get("software", ""),
            descricao_necessidade=dados.get("descricao_necessidade", ""),
        )

    @classmethod
    def criar_hardware(
        cls,
        submetido_por_id: str,
        equipamento: str,
        avaria: str,
    ) -> "TicketEntity":
        """
        Cria ticket de hardware com validações.

        Raises:
            ValidationError: Se equipamento ou avaria vazios
        """
        cls._validar_submetedor(submetido_por_id)
        cls._validar_obrigatorio(equipamento, "equipamento", "Equipamento")
        cls._validar_obrigatorio(avaria, "avaria", "Descrição da avaria")

        agora = datetime.now()
        return cls(
            tipo=TipoTicket.HARDWARE,
            submetido_por_id=submetido_por_id,
            equipamento=equipamento.strip(),
            avaria=avaria.strip(),
            criado_em=agora,
            atualizado_em=agora,
        )

    @classmethod
    def criar_software(
        cls,
        submetido_por_id: str,
        software: str,
        descricao_necessidade: str,
    ) -> "TicketEntity":
        """
        Cria ticket de software com validações.

        Raises:
            ValidationError: Se software ou necessidade vazios
        """
        cls._validar_submetedor(submetido_por_id)
        cls._validar_obrigatorio(software, "software", "Software")
        cls._validar_obrigatorio(
            descricao_necessidade,
            "descricao_necessidade",
            "Descrição da necessidade",
        )

        agora = datetime.now()
        return cls(
            tipo=TipoTicket.SOFTWARE,
            submetido_por_id=submetido_por_id,
            software=software.strip(),
            descricao_necessidade=descricao_necessidade.strip(),
            criado_em=agora,
            atualizado_em=agora,
        )

    @classmethod
    def _validar_submetedor(cls, submetido_por_id: str) -> None:
        if not submetido_por_id:
            raise ValidationError(
                "Utilizador que submete o ticket é obrigatório",
                field="submetido_por_id"
            )

    @classmethod
    def _validar_obrigatorio(cls, valor: Optional[str], campo: str, rotulo: str) -> None:
        if not isinstance(valor, str) or not valor.strip():
            raise ValidationError(f"{rotulo} é obrigatório", field=campo)

    # =========================================================================
    # Transições
    # =========================================================================

    def atender(self, tecnico_id: str) -> None:
        """
        Inicia o atendimento do ticket.

        Regras:
        - Apenas tickets POR_ATENDER podem ser atendidos
        - Regista técnico e data de atendimento

        Args:
            tecnico_id: ID do técnico

        Raises:
            ValidationError: Se tecnico_id vazio
            InvalidStateError: Se ticket não está por atender
        """
        if not tecnico_id:
            raise ValidationError("ID do técnico é obrigatório", field="tecnico_id")

        if self.estado != TicketEstado.POR_ATENDER:
            raise InvalidStateError(
                f"Ticket {self.id} não está por atender (estado: {self.estado.value})",
                estado_atual=self.estado.value,
                estado_esperado=TicketEstado.POR_ATENDER.value,
            )

        self.estado = TicketEstado.EM_ATENDIMENTO
        self.tecnico_id = tecnico_id
        self.atendido_em = datetime.now()
        self._atualizar_timestamp()

    def concluir(
        self,
        estado_atendimento: EstadoAtendimento,
        descricao: str,
        pecas: Optional[str] = None,
    ) -> None:
        """
        Conclui o atendimento do ticket.

        Regras:
        - Apenas tickets EM_ATENDIMENTO podem ser concluídos
        - Resultado tem de ser RESOLVIDO ou NAO_RESOLVIDO
        - A descrição da reparação (Hardware) ou da intervenção
          (Software) é obrigatória

        Args:
            estado_atendimento: Resultado do atendimento
            descricao: Reparação/intervenção efetuada
            pecas: Peças usadas (apenas Hardware)

        Raises:
            InvalidStateError: Se ticket não está em atendimento
            ValidationError: Se resultado ou descrição inválidos
        """
        if self.estado != TicketEstado.EM_ATENDIMENTO:
            raise InvalidStateError(
                f"Ticket {self.id} não está em atendimento (estado: {self.estado.value})",
                estado_atual=self.estado.value,
                estado_esperado=TicketEstado.EM_ATENDIMENTO.value,
            )

        if (
            not isinstance(estado_atendimento, EstadoAtendimento)
            or estado_atendimento == EstadoAtendimento.ABERTO
        ):
            raise ValidationError(
                "Resultado do atendimento deve ser Resolvido ou Não Resolvido",
                field="estado_atendimento"
            )

        if self.tipo == TipoTicket.HARDWARE:
            self._validar_obrigatorio(descricao, "descricao_reparacao", "Descrição da reparação")
            if pecas is not None and not isinstance(pecas, str):
                raise ValidationError("Peças usadas devem ser texto", field="pecas")
            self.descricao_reparacao = descricao.strip()
            self.pecas = pecas.strip() if pecas and pecas.strip() else None
        else:
            self._validar_obrigatorio(
                descricao, "descricao_intervencao", "Descrição da intervenção"
            )
            self.descricao_intervencao = descricao.strip()

        self.estado = TicketEstado.ATENDIDO
        self.estado_atendimento = estado_atendimento
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    # =========================================================================
    # Propriedades
    # =========================================================================

    @property
    def e_urgente(self) -> bool:
        """
        Verifica se a descrição do problema contém palavras urgentes.

        Hardware usa a descrição da avaria; Software usa a descrição
        da necessidade.
        """
        if self.tipo == TipoTicket.HARDWARE:
            texto, palavras = self.avaria, PALAVRAS_URGENTES_HARDWARE
        else:
            texto, palavras = self.descricao_necessidade, PALAVRAS_URGENTES_SOFTWARE

        if not texto:
            return False

        texto = texto.lower()
        return any(palavra in texto for palavra in palavras)

    @property
    def tempo_atendimento_horas(self) -> Optional[float]:
        """Horas entre criação e início do atendimento (None se não atendido)."""
        if self.atendido_em is None:
            return None
        return (self.atendido_em - self.criado_em).total_seconds() / 3600

    @property
    def esta_concluido(self) -> bool:
        return self.estado == TicketEstado.ATENDIDO

    @property
    def informacao_especifica(self) -> str:
        """Resumo dos campos da variante para listagens."""
        if self.tipo == TipoTicket.HARDWARE:
            info = f"Equipamento: {self.equipamento} | Avaria: {self.avaria}"
            if self.descricao_reparacao:
                info += f" | Reparação: {self.descricao_reparacao}"
            if self.pecas:
                info += f" | Peças: {self.pecas}"
            return info

        info = f"Software: {self.software} | Necessidade: {self.descricao_necessidade}"
        if self.descricao_intervencao:
            info += f" | Intervenção: {self.descricao_intervencao}"
        return info

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id}, "
            f"tipo={self.tipo.value}, "
            f"estado={self.estado.value}, "
            f"criado_em={self.criado_em.isoformat()}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return id(self)
        return hash(self.id)
