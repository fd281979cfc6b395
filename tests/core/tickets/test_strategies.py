"""
Testes Unitários para as Estratégias de Atendimento.

Coverage:
- FIFO / LIFO (incluindo desempate por id)
- Prioridade (urgentes primeiro)
- PorTipo (tipo preferido com recurso a FIFO)
- RoundRobin (alternância e estado)
- ContextoAtendimento (troca e registo de estratégias)
"""

import pytest
from datetime import datetime, timedelta

from src.core.tickets.entities import TicketEstado, TipoTicket
from src.core.tickets.strategies import (
    EstrategiaFIFO,
    EstrategiaLIFO,
    EstrategiaPrioridade,
    EstrategiaPorTipo,
    EstrategiaRoundRobin,
    ContextoAtendimento,
    CODIGOS_ESTRATEGIA,
)
from src.core.shared.exceptions import ValidationError


@pytest.fixture
def pendentes(make_ticket):
    """Três tickets por atender: 1 (mais antigo) a 3 (mais recente)."""
    return [
        make_ticket("Software", id=2, horas_atras=5),
        make_ticket("Hardware", id=1, horas_atras=10),
        make_ticket("Hardware", id=3, horas_atras=1),
    ]


class TestEstrategiaFIFO:

    def test_escolhe_mais_antigo(self, pendentes):
        assert EstrategiaFIFO().selecionar_proximo(pendentes).id == 1

    def test_lista_vazia(self):
        assert EstrategiaFIFO().selecionar_proximo([]) is None

    def test_ignora_tickets_nao_pendentes(self, make_ticket):
        antigo = make_ticket(id=1, horas_atras=10, estado=TicketEstado.EM_ATENDIMENTO, tecnico_id="tec-1")
        atendido = make_ticket(id=2, horas_atras=8, estado=TicketEstado.ATENDIDO, tecnico_id="tec-1")
        pendente = make_ticket(id=3, horas_atras=1)

        assert EstrategiaFIFO().selecionar_proximo([antigo, atendido, pendente]).id == 3

    def test_sem_pendentes_devolve_none(self, make_ticket):
        atendido = make_ticket(id=1, estado=TicketEstado.ATENDIDO)

        assert EstrategiaFIFO().selecionar_proximo([atendido]) is None

    def test_empate_resolvido_por_id(self, make_ticket):
        tickets = [make_ticket(id=9, horas_atras=2), make_ticket(id=4, horas_atras=2)]

        assert EstrategiaFIFO().selecionar_proximo(tickets).id == 4

    def test_proximo_depois_de_atender_o_primeiro(self, make_ticket):
        base = datetime(2024, 3, 15, 8, 0)
        tickets = [make_ticket(id=n, criado_em=base + timedelta(minutes=n)) for n in (1, 2, 3)]
        estrategia = EstrategiaFIFO()

        primeiro = estrategia.selecionar_proximo(tickets)
        assert primeiro.id == 1

        primeiro.atender("tec-1")

        assert estrategia.selecionar_proximo(tickets).id == 2

    def test_nao_altera_tickets(self, pendentes):
        EstrategiaFIFO().selecionar_proximo(pendentes)

        assert all(t.estado == TicketEstado.POR_ATENDER for t in pendentes)


class TestEstrategiaLIFO:

    def test_escolhe_mais_recente(self, pendentes):
        assert EstrategiaLIFO().selecionar_proximo(pendentes).id == 3

    def test_empate_resolvido_por_id(self, make_ticket):
        tickets = [make_ticket(id=9, horas_atras=2), make_ticket(id=4, horas_atras=2)]

        assert EstrategiaLIFO().selecionar_proximo(tickets).id == 4

    def test_lista_vazia(self):
        assert EstrategiaLIFO().selecionar_proximo([]) is None


class TestEstrategiaPrioridade:

    def test_urgente_primeiro(self, pendentes, make_ticket):
        urgente = make_ticket("Software", id=4, horas_atras=0, urgente=True)

        assert EstrategiaPrioridade().selecionar_proximo(pendentes + [urgente]).id == 4

    def test_urgentes_por_ordem_de_chegada(self, make_ticket):
        tickets = [
            make_ticket("Hardware", id=1, horas_atras=1, urgente=True),
            make_ticket("Software", id=2, horas_atras=6, urgente=True),
            make_ticket("Hardware", id=3, horas_atras=9),
        ]

        assert EstrategiaPrioridade().selecionar_proximo(tickets).id == 2

    def test_sem_urgentes_usa_fifo(self, pendentes):
        assert EstrategiaPrioridade().selecionar_proximo(pendentes).id == 1


class TestEstrategiaPorTipo:

    def test_prefere_software(self, pendentes):
        estrategia = EstrategiaPorTipo(TipoTicket.SOFTWARE)

        assert estrategia.selecionar_proximo(pendentes).id == 2
        assert estrategia.nome == "Prioridade Software"

    def test_prefere_hardware(self, pendentes):
        assert EstrategiaPorTipo(TipoTicket.HARDWARE).selecionar_proximo(pendentes).id == 1

    def test_sem_tipo_preferido_usa_fifo(self, make_ticket):
        tickets = [make_ticket("Hardware", id=5, horas_atras=1), make_ticket("Hardware", id=6, horas_atras=3)]

        assert EstrategiaPorTipo(TipoTicket.SOFTWARE).selecionar_proximo(tickets).id == 6


class TestEstrategiaRoundRobin:

    def test_comeca_por_hardware(self, pendentes):
        estrategia = EstrategiaRoundRobin()

        assert estrategia.selecionar_proximo(pendentes).tipo == TipoTicket.HARDWARE
        assert estrategia.ultimo_tipo == TipoTicket.HARDWARE

    def test_alterna_tipos(self, make_ticket):
        estrategia = EstrategiaRoundRobin()
        tickets = [
            make_ticket("Hardware", id=1, horas_atras=10),
            make_ticket("Hardware", id=2, horas_atras=9),
            make_ticket("Software", id=3, horas_atras=8),
            make_ticket("Software", id=4, horas_atras=7),
        ]

        escolhidos = []
        for _ in range(4):
            ticket = estrategia.selecionar_proximo(tickets)
            escolhidos.append(ticket.id)
            tickets = [t for t in tickets if t.id != ticket.id]

        assert escolhidos == [1, 3, 2, 4]

    def test_sequencia_hw_sw_hw_a_partir_de_software(self, make_ticket):
        """[HW@1, SW@2, HW@3] com último tipo Software: HW@1 e depois SW@2."""
        base = datetime(2024, 3, 15, 8, 0)
        tickets = [
            make_ticket("Hardware", id=1, criado_em=base + timedelta(minutes=1)),
            make_ticket("Software", id=2, criado_em=base + timedelta(minutes=2)),
            make_ticket("Hardware", id=3, criado_em=base + timedelta(minutes=3)),
        ]
        estrategia = EstrategiaRoundRobin(ultimo_tipo=TipoTicket.SOFTWARE)

        primeiro = estrategia.selecionar_proximo(tickets)
        primeiro.atender("tec-1")
        segundo = estrategia.selecionar_proximo(tickets)

        assert primeiro.id == 1
        assert segundo.id == 2
        assert estrategia.ultimo_tipo == TipoTicket.SOFTWARE

    def test_apenas_mesmo_tipo_mantem_estado(self, make_ticket):
        estrategia = EstrategiaRoundRobin(ultimo_tipo=TipoTicket.HARDWARE)
        tickets = [make_ticket("Hardware", id=1, horas_atras=2), make_ticket("Hardware", id=2, horas_atras=1)]

        assert estrategia.selecionar_proximo(tickets).id == 1
        assert estrategia.ultimo_tipo == TipoTicket.HARDWARE

    def test_lista_vazia_nao_altera_estado(self):
        estrategia = EstrategiaRoundRobin()

        assert estrategia.selecionar_proximo([]) is None
        assert estrategia.ultimo_tipo == TipoTicket.SOFTWARE


class TestContextoAtendimento:

    def test_estrategia_padrao_fifo(self, pendentes):
        contexto = ContextoAtendimento()

        assert contexto.estrategia.nome == "FIFO"
        assert contexto.selecionar_proximo(pendentes).id == 1

    def test_definir_estrategia(self, pendentes):
        contexto = ContextoAtendimento()
        contexto.definir_estrategia(EstrategiaLIFO())

        assert contexto.estrategia.nome == "LIFO"
        assert contexto.selecionar_proximo(pendentes).id == 3

    @pytest.mark.parametrize("codigo,nome", [
        ("fifo", "FIFO"),
        ("LIFO", "LIFO"),
        ("prioridade", "Prioridade"),
        ("hardware", "Prioridade Hardware"),
        ("software", "Prioridade Software"),
        (" round_robin ", "Round Robin"),
    ])
    def test_criar_estrategia(self, codigo, nome):
        assert ContextoAtendimento.criar_estrategia(codigo).nome == nome

    def test_criar_estrategia_desconhecida(self):
        with pytest.raises(ValidationError) as exc_info:
            ContextoAtendimento.criar_estrategia("aleatoria")

        assert exc_info.value.field == "estrategia"

    def test_com_codigo(self):
        assert ContextoAtendimento.com_codigo("prioridade").estrategia.nome == "Prioridade"

    def test_estrategias_disponiveis(self):
        disponiveis = ContextoAtendimento.estrategias_disponiveis()

        assert [e["codigo"] for e in disponiveis] == list(CODIGOS_ESTRATEGIA)
        assert all(e["nome"] and e["descricao"] for e in disponiveis)
