"""
Estatísticas de Tickets.

Funções puras sobre uma fatia de tickets. Nenhuma função acede ao
repositório: quem chama obtém os tickets (tipicamente com
`list_by_periodo`) e passa-os aqui.

Conteúdo:
- PeriodoAnalise: janela temporal validada
- EstatisticasDashboard: percentagens, tempos médios e contagens
- EstatisticasTecnico: desempenho por técnico com classificação
- ComparacaoPeriodos: variação face ao período anterior
- EstatisticasBasicas, TendenciaMensal, EstatisticasDiaSemana
- Classificação do estado geral do sistema
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from src.core.shared.exceptions import ValidationError
from .entities import (
    TicketEntity,
    TicketEstado,
    EstadoAtendimento,
    TipoTicket,
    ESTADOS_COM_TECNICO,
)


DIAS_SEMANA = (
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
    "Domingo",
)

# Limiares da comparação de períodos
LIMIAR_VARIACAO_TOTAL = 5.0
LIMIAR_VARIACAO_TAXA = 2.0


# =============================================================================
# Auxiliares
# =============================================================================

def calcular_percentagem(parte: int, total: int) -> float:
    """parte / total × 100, ou 0 quando total é 0."""
    if total == 0:
        return 0.0
    return parte * 100 / total


def variacao_percentual(antigo: float, novo: float) -> float:
    """
    Variação percentual entre dois valores.

    Quando o valor antigo é 0 devolve 100 se o novo for positivo,
    caso contrário 0.
    """
    if antigo == 0:
        return 100.0 if novo > 0 else 0.0
    return (novo - antigo) / antigo * 100


def tempo_medio_atendimento(tickets: List[TicketEntity]) -> Tuple[float, int]:
    """
    Média das horas entre criação e atendimento.

    Returns:
        (média em horas, número de tickets com tempo)
    """
    tempos = [
        t.tempo_atendimento_horas
        for t in tickets
        if t.tempo_atendimento_horas is not None
    ]
    if not tempos:
        return 0.0, 0
    return sum(tempos) / len(tempos), len(tempos)


def _contar(tickets: List[TicketEntity], **criterios: Any) -> int:
    return sum(
        1 for t in tickets
        if all(getattr(t, nome) == valor for nome, valor in criterios.items())
    )


def _inicio_do_dia(dia: date) -> datetime:
    return datetime.combine(dia, time.min)


# =============================================================================
# Período
# =============================================================================

@dataclass(frozen=True)
class PeriodoAnalise:
    """
    Janela temporal [inicio, fim] (inclusiva).

    Raises:
        ValidationError: Se fim anterior a inicio
    """

    inicio: datetime
    fim: datetime

    def __post_init__(self):
        if self.fim < self.inicio:
            raise ValidationError(
                "Data de fim não pode ser anterior à data de início",
                field="fim"
            )

    @property
    def total_dias(self) -> int:
        return (self.fim.date() - self.inicio.date()).days + 1

    @property
    def duracao(self) -> timedelta:
        return self.fim - self.inicio

    def contem(self, momento: datetime) -> bool:
        return self.inicio <= momento <= self.fim

    def periodo_anterior(self) -> "PeriodoAnalise":
        """Período de igual duração imediatamente antes deste."""
        fim_anterior = self.inicio - timedelta(microseconds=1)
        return PeriodoAnalise(inicio=self.inicio - self.duracao, fim=fim_anterior)

    @classmethod
    def mes_atual(cls, referencia: Optional[datetime] = None) -> "PeriodoAnalise":
        agora = referencia or datetime.now()
        return cls(inicio=_inicio_do_dia(agora.date().replace(day=1)), fim=agora)

    @classmethod
    def ultimos_dias(cls, dias: int, referencia: Optional[datetime] = None) -> "PeriodoAnalise":
        if dias <= 0:
            raise ValidationError("Número de dias deve ser positivo", field="dias")
        agora = referencia or datetime.now()
        return cls(inicio=agora - timedelta(days=dias), fim=agora)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inicio": self.inicio.isoformat(),
            "fim": self.fim.isoformat(),
            "total_dias": self.total_dias,
        }


# =============================================================================
# Dashboard
# =============================================================================

@dataclass
class EstatisticasDashboard:
    """
    Resumo para o painel de relatórios.

    Percentagens:
    - atendimento = atendidos / total × 100
    - resolução = resolvidos / atendidos × 100

    O tempo médio geral é a média ponderada dos tempos por tipo,
    ponderada pelo número de tickets com tempo registado.
    """

    total_tickets: int = 0
    tickets_atendidos: int = 0
    tickets_resolvidos: int = 0
    tickets_nao_resolvidos: int = 0
    percentagem_atendidos: float = 0.0
    percentagem_resolvidos: float = 0.0
    tempo_medio_hardware: float = 0.0
    tempo_medio_software: float = 0.0
    tempo_medio_geral: float = 0.0
    tickets_por_estado: Dict[str, int] = field(default_factory=dict)
    tickets_por_tecnico: Dict[str, int] = field(default_factory=dict)
    periodo: Optional[PeriodoAnalise] = None

    @classmethod
    def calcular(
        cls,
        tickets: List[TicketEntity],
        periodo: Optional[PeriodoAnalise] = None,
    ) -> "EstatisticasDashboard":
        total = len(tickets)
        atendidos = _contar(tickets, estado=TicketEstado.ATENDIDO)
        resolvidos = _contar(tickets, estado_atendimento=EstadoAtendimento.RESOLVIDO)
        nao_resolvidos = _contar(tickets, estado_atendimento=EstadoAtendimento.NAO_RESOLVIDO)

        media_hw, n_hw = tempo_medio_atendimento(
            [t for t in tickets if t.tipo == TipoTicket.HARDWARE]
        )
        media_sw, n_sw = tempo_medio_atendimento(
            [t for t in tickets if t.tipo == TipoTicket.SOFTWARE]
        )
        if n_hw + n_sw > 0:
            media_geral = (media_hw * n_hw + media_sw * n_sw) / (n_hw + n_sw)
        else:
            media_geral = 0.0

        por_estado = {estado.value: _contar(tickets, estado=estado) for estado in TicketEstado}

        por_tecnico: Dict[str, int] = {}
        for ticket in tickets:
            if ticket.tecnico_id and ticket.estado in ESTADOS_COM_TECNICO:
                por_tecnico[ticket.tecnico_id] = por_tecnico.get(ticket.tecnico_id, 0) + 1

        return cls(
            total_tickets=total,
            tickets_atendidos=atendidos,
            tickets_resolvidos=resolvidos,
            tickets_nao_resolvidos=nao_resolvidos,
            percentagem_atendidos=calcular_percentagem(atendidos, total),
            percentagem_resolvidos=calcular_percentagem(resolvidos, atendidos),
            tempo_medio_hardware=media_hw,
            tempo_medio_software=media_sw,
            tempo_medio_geral=media_geral,
            tickets_por_estado=por_estado,
            tickets_por_tecnico=por_tecnico,
            periodo=periodo,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tickets": self.total_tickets,
            "tickets_atendidos": self.tickets_atendidos,
            "tickets_resolvidos": self.tickets_resolvidos,
            "tickets_nao_resolvidos": self.tickets_nao_resolvidos,
            "percentagem_atendidos": round(self.percentagem_atendidos, 2),
            "percentagem_resolvidos": round(self.percentagem_resolvidos, 2),
            "tempo_medio_hardware": round(self.tempo_medio_hardware, 2),
            "tempo_medio_software": round(self.tempo_medio_software, 2),
            "tempo_medio_geral": round(self.tempo_medio_geral, 2),
            "tickets_por_estado": dict(self.tickets_por_estado),
            "tickets_por_tecnico": dict(self.tickets_por_tecnico),
            "periodo": self.periodo.to_dict() if self.periodo else None,
        }


# =============================================================================
# Técnicos
# =============================================================================

@dataclass
class EstatisticasTecnico:
    """
    Desempenho de um técnico.

    Pontuação (máx. 9):
    - Taxa de resolução: ≥90% → 3, ≥75% → 2, ≥50% → 1
    - Tempo médio de atendimento: ≤4h → 3, ≤24h → 2, ≤72h → 1
    - Volume: ≥20 → 3, ≥10 → 2, ≥5 → 1
    """

    tecnico_id: str
    nome: str = ""
    total_tickets: int = 0
    tickets_resolvidos: int = 0
    tickets_nao_resolvidos: int = 0
    tickets_hardware: int = 0
    tickets_software: int = 0
    tempo_medio_horas: float = 0.0

    @property
    def taxa_resolucao(self) -> float:
        return calcular_percentagem(self.tickets_resolvidos, self.total_tickets)

    @property
    def pontuacao(self) -> int:
        pontos = 0

        taxa = self.taxa_resolucao
        if taxa >= 90:
            pontos += 3
        elif taxa >= 75:
            pontos += 2
        elif taxa >= 50:
            pontos += 1

        if self.tempo_medio_horas <= 4:
            pontos += 3
        elif self.tempo_medio_horas <= 24:
            pontos += 2
        elif self.tempo_medio_horas <= 72:
            pontos += 1

        if self.total_tickets >= 20:
            pontos += 3
        elif self.total_tickets >= 10:
            pontos += 2
        elif self.total_tickets >= 5:
            pontos += 1

        return pontos

    @property
    def classificacao(self) -> str:
        pontos = self.pontuacao
        if pontos >= 7:
            return "Excelente"
        if pontos >= 5:
            return "Bom"
        if pontos >= 3:
            return "Regular"
        return "Necessita Melhoria"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tecnico_id": self.tecnico_id,
            "nome": self.nome or self.tecnico_id,
            "total_tickets": self.total_tickets,
            "tickets_resolvidos": self.tickets_resolvidos,
            "tickets_nao_resolvidos": self.tickets_nao_resolvidos,
            "tickets_hardware": self.tickets_hardware,
            "tickets_software": self.tickets_software,
            "tempo_medio_horas": round(self.tempo_medio_horas, 2),
            "taxa_resolucao": round(self.taxa_resolucao, 2),
            "pontuacao": self.pontuacao,
            "classificacao": self.classificacao,
        }


def calcular_estatisticas_tecnicos(
    tickets: List[TicketEntity],
    nomes: Optional[Dict[str, str]] = None,
) -> List[EstatisticasTecnico]:
    """
    Agrupa tickets em atendimento ou atendidos por técnico.

    Args:
        tickets: Fatia de tickets
        nomes: Mapa opcional tecnico_id → nome para apresentação

    Returns:
        Lista ordenada por total de tickets (decrescente)
    """
    nomes = nomes or {}
    grupos: Dict[str, List[TicketEntity]] = {}
    for ticket in tickets:
        if ticket.tecnico_id and ticket.estado in ESTADOS_COM_TECNICO:
            grupos.setdefault(ticket.tecnico_id, []).append(ticket)

    resultado = []
    for tecnico_id, grupo in grupos.items():
        media, _ = tempo_medio_atendimento(grupo)
        resultado.append(EstatisticasTecnico(
            tecnico_id=tecnico_id,
            nome=nomes.get(tecnico_id, ""),
            total_tickets=len(grupo),
            tickets_resolvidos=_contar(grupo, estado_atendimento=EstadoAtendimento.RESOLVIDO),
            tickets_nao_resolvidos=_contar(grupo, estado_atendimento=EstadoAtendimento.NAO_RESOLVIDO),
            tickets_hardware=_contar(grupo, tipo=TipoTicket.HARDWARE),
            tickets_software=_contar(grupo, tipo=TipoTicket.SOFTWARE),
            tempo_medio_horas=media,
        ))

    return sorted(resultado, key=lambda e: (-e.total_tickets, e.tecnico_id))


# =============================================================================
# Comparação de períodos
# =============================================================================

class DirecaoTendencia(Enum):
    CRESCENTE = "Crescente"
    DECRESCENTE = "Decrescente"
    ESTAVEL = "Estável"


def _voto(delta: float, limiar: float) -> int:
    if delta > limiar:
        return 1
    if delta < -limiar:
        return -1
    return 0


@dataclass
class ComparacaoPeriodos:
    """
    Período atual face ao anterior de igual duração.

    A tendência é decidida por maioria sobre três variações:
    total de tickets (limiar 5%), taxa de atendimento (2 p.p.) e
    taxa de resolução (2 p.p.). São precisos pelo menos dois votos
    no mesmo sentido; caso contrário a tendência é estável.
    """

    atual: EstatisticasDashboard
    anterior: EstatisticasDashboard
    variacao_total: float = 0.0
    variacao_taxa_atendimento: float = 0.0
    variacao_taxa_resolucao: float = 0.0
    tendencia: DirecaoTendencia = DirecaoTendencia.ESTAVEL

    @classmethod
    def calcular(
        cls,
        atual: EstatisticasDashboard,
        anterior: EstatisticasDashboard,
    ) -> "ComparacaoPeriodos":
        variacao_total = variacao_percentual(anterior.total_tickets, atual.total_tickets)
        delta_atendimento = atual.percentagem_atendidos - anterior.percentagem_atendidos
        delta_resolucao = atual.percentagem_resolvidos - anterior.percentagem_resolvidos

        votos = [
            _voto(variacao_total, LIMIAR_VARIACAO_TOTAL),
            _voto(delta_atendimento, LIMIAR_VARIACAO_TAXA),
            _voto(delta_resolucao, LIMIAR_VARIACAO_TAXA),
        ]
        if votos.count(1) >= 2:
            tendencia = DirecaoTendencia.CRESCENTE
        elif votos.count(-1) >= 2:
            tendencia = DirecaoTendencia.DECRESCENTE
        else:
            tendencia = DirecaoTendencia.ESTAVEL

        return cls(
            atual=atual,
            anterior=anterior,
            variacao_total=variacao_total,
            variacao_taxa_atendimento=delta_atendimento,
            variacao_taxa_resolucao=delta_resolucao,
            tendencia=tendencia,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "atual": self.atual.to_dict(),
            "anterior": self.anterior.to_dict(),
            "variacao_total": round(self.variacao_total, 2),
            "variacao_taxa_atendimento": round(self.variacao_taxa_atendimento, 2),
            "variacao_taxa_resolucao": round(self.variacao_taxa_resolucao, 2),
            "tendencia": self.tendencia.value,
        }


# =============================================================================
# Estatísticas básicas e tendências
# =============================================================================

@dataclass
class EstatisticasBasicas:
    total_tickets: int = 0
    tickets_hardware: int = 0
    tickets_software: int = 0
    tickets_por_atender: int = 0
    tickets_em_atendimento: int = 0
    tickets_atendidos: int = 0
    tickets_resolvidos: int = 0
    tickets_nao_resolvidos: int = 0

    @property
    def taxa_conclusao(self) -> float:
        return calcular_percentagem(self.tickets_atendidos, self.total_tickets)

    @property
    def taxa_resolucao(self) -> float:
        return calcular_percentagem(self.tickets_resolvidos, self.tickets_atendidos)

    @classmethod
    def calcular(cls, tickets: List[TicketEntity]) -> "EstatisticasBasicas":
        return cls(
            total_tickets=len(tickets),
            tickets_hardware=_contar(tickets, tipo=TipoTicket.HARDWARE),
            tickets_software=_contar(tickets, tipo=TipoTicket.SOFTWARE),
            tickets_por_atender=_contar(tickets, estado=TicketEstado.POR_ATENDER),
            tickets_em_atendimento=_contar(tickets, estado=TicketEstado.EM_ATENDIMENTO),
            tickets_atendidos=_contar(tickets, estado=TicketEstado.ATENDIDO),
            tickets_resolvidos=_contar(tickets, estado_atendimento=EstadoAtendimento.RESOLVIDO),
            tickets_nao_resolvidos=_contar(tickets, estado_atendimento=EstadoAtendimento.NAO_RESOLVIDO),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tickets": self.total_tickets,
            "tickets_hardware": self.tickets_hardware,
            "tickets_software": self.tickets_software,
            "tickets_por_atender": self.tickets_por_atender,
            "tickets_em_atendimento": self.tickets_em_atendimento,
            "tickets_atendidos": self.tickets_atendidos,
            "tickets_resolvidos": self.tickets_resolvidos,
            "tickets_nao_resolvidos": self.tickets_nao_resolvidos,
            "taxa_conclusao": round(self.taxa_conclusao, 2),
            "taxa_resolucao": round(self.taxa_resolucao, 2),
        }


@dataclass
class TendenciaMensal:
    mes: str
    ano: int
    numero_mes: int
    total_tickets: int = 0
    tickets_atendidos: int = 0

    @property
    def taxa_conclusao(self) -> float:
        return calcular_percentagem(self.tickets_atendidos, self.total_tickets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mes": self.mes,
            "ano": self.ano,
            "numero_mes": self.numero_mes,
            "total_tickets": self.total_tickets,
            "tickets_atendidos": self.tickets_atendidos,
            "taxa_conclusao": round(self.taxa_conclusao, 2),
        }


def _recuar_meses(ano: int, mes: int, meses: int) -> Tuple[int, int]:
    indice = ano * 12 + (mes - 1) - meses
    return indice // 12, indice % 12 + 1


def calcular_tendencias_mensais(
    tickets: List[TicketEntity],
    meses: int = 6,
    referencia: Optional[datetime] = None,
) -> List[TendenciaMensal]:
    """
    Totais por mês para os últimos `meses` meses (mais antigo primeiro).

    O mês da referência (por omissão, agora) é o último da lista.
    """
    referencia = referencia or datetime.now()
    tendencias = []

    for recuo in range(meses - 1, -1, -1):
        ano, mes = _recuar_meses(referencia.year, referencia.month, recuo)
        do_mes = [
            t for t in tickets
            if t.criado_em.year == ano and t.criado_em.month == mes
        ]
        tendencias.append(TendenciaMensal(
            mes=f"{mes:02d}/{ano}",
            ano=ano,
            numero_mes=mes,
            total_tickets=len(do_mes),
            tickets_atendidos=_contar(do_mes, estado=TicketEstado.ATENDIDO),
        ))

    return tendencias


@dataclass
class EstatisticasDiaSemana:
    dia_semana: int
    nome: str
    total_tickets: int = 0
    tickets_atendidos: int = 0
    media_por_dia: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dia_semana": self.dia_semana,
            "nome": self.nome,
            "total_tickets": self.total_tickets,
            "tickets_atendidos": self.tickets_atendidos,
            "media_por_dia": round(self.media_por_dia, 2),
        }


def calcular_estatisticas_dia_semana(
    tickets: List[TicketEntity],
    periodo: PeriodoAnalise,
) -> List[EstatisticasDiaSemana]:
    """
    Tickets criados por dia da semana (segunda = 0).

    A média divide o total pelo número de ocorrências desse dia da
    semana no período.
    """
    ocorrencias = [0] * 7
    dia = periodo.inicio.date()
    while dia <= periodo.fim.date():
        ocorrencias[dia.weekday()] += 1
        dia += timedelta(days=1)

    resultado = []
    for indice, nome in enumerate(DIAS_SEMANA):
        do_dia = [
            t for t in tickets
            if periodo.contem(t.criado_em) and t.criado_em.weekday() == indice
        ]
        total = len(do_dia)
        resultado.append(EstatisticasDiaSemana(
            dia_semana=indice,
            nome=nome,
            total_tickets=total,
            tickets_atendidos=_contar(do_dia, estado=TicketEstado.ATENDIDO),
            media_por_dia=total / ocorrencias[indice] if ocorrencias[indice] else 0.0,
        ))

    return resultado


# =============================================================================
# Estado do sistema
# =============================================================================

def eficiencia_geral(tickets: List[TicketEntity]) -> float:
    """Tickets resolvidos sobre o total, em percentagem."""
    return calcular_percentagem(
        _contar(tickets, estado_atendimento=EstadoAtendimento.RESOLVIDO),
        len(tickets),
    )


def classificar_estado_sistema(eficiencia: float) -> str:
    if eficiencia >= 80:
        return "Excelente"
    if eficiencia >= 60:
        return "Bom"
    if eficiencia >= 40:
        return "Regular"
    return "Necessita Atenção"
