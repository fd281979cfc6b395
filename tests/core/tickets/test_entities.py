"""
Testes Unitários para Entidades do Domínio de Tickets.

Testa todas as regras de negócio encapsuladas nas entidades,
incluindo validações, transições de estado e propriedades.

Coverage:
- TicketEntity.criar_hardware() / criar_software() / criar()
- TicketEntity.atender(): Início do atendimento
- TicketEntity.concluir(): Conclusão do atendimento
- Deteção de urgência
- Propriedades computadas (tempo, informação específica)
- Enums e conversão from_string
"""

import pytest
from datetime import datetime, timedelta

from src.core.tickets.entities import (
    TicketEntity,
    TicketEstado,
    EstadoAtendimento,
    TipoTicket,
)
from src.core.shared.exceptions import (
    ValidationError,
    InvalidStateError,
)


@pytest.fixture
def ticket_hardware():
    return TicketEntity.criar_hardware(
        submetido_por_id="colab-1",
        equipamento="Portátil HP",
        avaria="Ecrã não acende",
    )


@pytest.fixture
def ticket_software():
    return TicketEntity.criar_software(
        submetido_por_id="colab-1",
        software="Office",
        descricao_necessidade="Instalar suplemento de assinatura",
    )


class TestTicketEntityCriacao:
    """Testes para criação de tickets."""

    def test_criar_hardware_valido(self, ticket_hardware):
        """Deve criar ticket de hardware por atender."""
        assert ticket_hardware.id is None
        assert ticket_hardware.tipo == TipoTicket.HARDWARE
        assert ticket_hardware.estado == TicketEstado.POR_ATENDER
        assert ticket_hardware.estado_atendimento == EstadoAtendimento.ABERTO
        assert ticket_hardware.equipamento == "Portátil HP"
        assert ticket_hardware.avaria == "Ecrã não acende"
        assert ticket_hardware.tecnico_id is None
        assert ticket_hardware.atendido_em is None
        assert ticket_hardware.software is None

    def test_criar_software_valido(self, ticket_software):
        assert ticket_software.tipo == TipoTicket.SOFTWARE
        assert ticket_software.software == "Office"
        assert ticket_software.descricao_necessidade == "Instalar suplemento de assinatura"
        assert ticket_software.equipamento is None

    def test_criar_remove_espacos_extras(self):
        ticket = TicketEntity.criar_hardware("colab-1", "  Impressora  ", "  Papel encravado ")

        assert ticket.equipamento == "Impressora"
        assert ticket.avaria == "Papel encravado"

    def test_criado_em_igual_atualizado_em(self, ticket_hardware):
        assert ticket_hardware.criado_em == ticket_hardware.atualizado_em

    @pytest.mark.parametrize("equipamento,avaria,campo", [
        ("", "Não liga", "equipamento"),
        ("   ", "Não liga", "equipamento"),
        ("Portátil", "", "avaria"),
        ("Portátil", "  ", "avaria"),
    ])
    def test_criar_hardware_campos_obrigatorios(self, equipamento, avaria, campo):
        """Deve rejeitar campos da variante vazios."""
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar_hardware("colab-1", equipamento, avaria)

        assert exc_info.value.field == campo

    @pytest.mark.parametrize("software,necessidade,campo", [
        ("", "Instalar", "software"),
        ("ERP", "", "descricao_necessidade"),
    ])
    def test_criar_software_campos_obrigatorios(self, software, necessidade, campo):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar_software("colab-1", software, necessidade)

        assert exc_info.value.field == campo

    def test_criar_submetedor_vazio_erro(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar_hardware("", "Portátil", "Não liga")

        assert exc_info.value.field == "submetido_por_id"

    def test_criar_despacha_pelo_tipo(self):
        hardware = TicketEntity.criar(
            TipoTicket.HARDWARE, "colab-1", {"equipamento": "Rato", "avaria": "Não clica"}
        )
        software = TicketEntity.criar(
            TipoTicket.SOFTWARE, "colab-1", {"software": "ERP", "descricao_necessidade": "Acesso"}
        )

        assert hardware.tipo == TipoTicket.HARDWARE
        assert hardware.equipamento == "Rato"
        assert software.tipo == TipoTicket.SOFTWARE
        assert software.software == "ERP"

    def test_criar_ignora_campos_da_outra_variante(self):
        with pytest.raises(ValidationError):
            TicketEntity.criar(
                TipoTicket.HARDWARE, "colab-1", {"software": "ERP", "descricao_necessidade": "Acesso"}
            )


class TestTicketEntityAtendimento:
    """Testes para início do atendimento."""

    def test_atender_sucesso(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        assert ticket_hardware.estado == TicketEstado.EM_ATENDIMENTO
        assert ticket_hardware.tecnico_id == "tec-1"
        assert ticket_hardware.atendido_em is not None
        assert ticket_hardware.atendido_em >= ticket_hardware.criado_em

    def test_atender_atualiza_timestamp(self, ticket_hardware):
        anterior = ticket_hardware.atualizado_em
        ticket_hardware.atender("tec-1")

        assert ticket_hardware.atualizado_em >= anterior

    def test_atender_tecnico_vazio_erro(self, ticket_hardware):
        with pytest.raises(ValidationError) as exc_info:
            ticket_hardware.atender("")

        assert exc_info.value.field == "tecnico_id"
        assert ticket_hardware.estado == TicketEstado.POR_ATENDER

    def test_atender_duas_vezes_erro(self, ticket_hardware):
        """Segundo atendimento falha e não altera o ticket."""
        ticket_hardware.atender("tec-1")
        atendido_em = ticket_hardware.atendido_em

        with pytest.raises(InvalidStateError) as exc_info:
            ticket_hardware.atender("tec-2")

        assert exc_info.value.estado_atual == "Em Atendimento"
        assert exc_info.value.estado_esperado == "Por Atender"
        assert ticket_hardware.tecnico_id == "tec-1"
        assert ticket_hardware.atendido_em == atendido_em

    def test_atender_ticket_atendido_erro(self, ticket_hardware):
        ticket_hardware.atender("tec-1")
        ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Cabo trocado")

        with pytest.raises(InvalidStateError):
            ticket_hardware.atender("tec-2")

    def test_mensagem_estado_invalido_sugere_atualizar(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        with pytest.raises(InvalidStateError) as exc_info:
            ticket_hardware.atender("tec-2")

        assert "atualize e tente novamente" in exc_info.value.message
        assert exc_info.value.code == "INVALID_STATE"


class TestTicketEntityConclusao:
    """Testes para conclusão do atendimento."""

    def test_concluir_hardware_com_pecas(self, ticket_hardware):
        ticket_hardware.atender("tec-1")
        ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, " Ecrã substituído ", pecas=" Ecrã 15\" ")

        assert ticket_hardware.estado == TicketEstado.ATENDIDO
        assert ticket_hardware.estado_atendimento == EstadoAtendimento.RESOLVIDO
        assert ticket_hardware.descricao_reparacao == "Ecrã substituído"
        assert ticket_hardware.pecas == "Ecrã 15\""
        assert ticket_hardware.esta_concluido

    def test_concluir_hardware_pecas_vazias_ficam_none(self, ticket_hardware):
        ticket_hardware.atender("tec-1")
        ticket_hardware.concluir(EstadoAtendimento.NAO_RESOLVIDO, "Sem reparação possível", pecas="  ")

        assert ticket_hardware.pecas is None
        assert ticket_hardware.estado_atendimento == EstadoAtendimento.NAO_RESOLVIDO

    def test_concluir_software_grava_intervencao(self, ticket_software):
        ticket_software.atender("tec-1")
        ticket_software.concluir(EstadoAtendimento.RESOLVIDO, "Suplemento instalado", pecas="ignorado")

        assert ticket_software.descricao_intervencao == "Suplemento instalado"
        assert ticket_software.descricao_reparacao is None
        assert ticket_software.pecas is None

    def test_concluir_por_atender_erro(self, ticket_hardware):
        with pytest.raises(InvalidStateError) as exc_info:
            ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Reparado")

        assert exc_info.value.estado_esperado == "Em Atendimento"
        assert ticket_hardware.estado == TicketEstado.POR_ATENDER

    def test_concluir_duas_vezes_erro(self, ticket_hardware):
        ticket_hardware.atender("tec-1")
        ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Reparado")

        with pytest.raises(InvalidStateError):
            ticket_hardware.concluir(EstadoAtendimento.NAO_RESOLVIDO, "Outra vez")

        assert ticket_hardware.estado_atendimento == EstadoAtendimento.RESOLVIDO

    def test_concluir_com_resultado_aberto_erro(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_hardware.concluir(EstadoAtendimento.ABERTO, "Reparado")

        assert exc_info.value.field == "estado_atendimento"
        assert ticket_hardware.estado == TicketEstado.EM_ATENDIMENTO

    def test_concluir_hardware_descricao_vazia_erro(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "   ")

        assert exc_info.value.field == "descricao_reparacao"
        assert ticket_hardware.estado == TicketEstado.EM_ATENDIMENTO

    def test_concluir_software_descricao_vazia_erro(self, ticket_software):
        ticket_software.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_software.concluir(EstadoAtendimento.RESOLVIDO, "")

        assert exc_info.value.field == "descricao_intervencao"

    def test_concluir_mantem_tecnico_e_atendido_em(self, ticket_hardware):
        ticket_hardware.atender("tec-1")
        atendido_em = ticket_hardware.atendido_em

        ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Reparado")

        assert ticket_hardware.tecnico_id == "tec-1"
        assert ticket_hardware.atendido_em == atendido_em


class TestTicketEntityUrgencia:
    """Testes para deteção de urgência por palavras-chave."""

    @pytest.mark.parametrize("avaria", [
        "Servidor principal em baixo",
        "Switch de REDE avariado",
        "Cheiro a fumo na sala",
        "Computador não liga",
    ])
    def test_hardware_urgente(self, avaria):
        assert TicketEntity.criar_hardware("colab-1", "Equipamento", avaria).e_urgente

    def test_hardware_nao_urgente(self, ticket_hardware):
        assert not ticket_hardware.e_urgente

    @pytest.mark.parametrize("necessidade", [
        "O sistema de faturação está em baixo",
        "Falha em PRODUÇÃO",
        "A aplicação não funciona",
    ])
    def test_software_urgente(self, necessidade):
        assert TicketEntity.criar_software("colab-1", "ERP", necessidade).e_urgente

    def test_software_nao_urgente(self, ticket_software):
        assert not ticket_software.e_urgente

    def test_urgencia_usa_apenas_descricao_do_problema(self):
        """O nome do equipamento não conta para a urgência."""
        ticket = TicketEntity.criar_hardware("colab-1", "Servidor", "Ventoinha ruidosa")

        assert not ticket.e_urgente


class TestTicketEntityPropriedades:

    def test_tempo_atendimento_none_se_por_atender(self, ticket_hardware):
        assert ticket_hardware.tempo_atendimento_horas is None

    def test_tempo_atendimento_em_horas(self, ticket_hardware):
        ticket_hardware.criado_em = datetime.now() - timedelta(hours=3)
        ticket_hardware.atender("tec-1")

        assert ticket_hardware.tempo_atendimento_horas == pytest.approx(3, abs=0.01)

    def test_informacao_especifica_hardware(self, ticket_hardware):
        assert ticket_hardware.informacao_especifica == (
            "Equipamento: Portátil HP | Avaria: Ecrã não acende"
        )

        ticket_hardware.atender("tec-1")
        ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Cabo trocado", pecas="Cabo LVDS")

        assert ticket_hardware.informacao_especifica == (
            "Equipamento: Portátil HP | Avaria: Ecrã não acende"
            " | Reparação: Cabo trocado | Peças: Cabo LVDS"
        )

    def test_informacao_especifica_software(self, ticket_software):
        ticket_software.atender("tec-1")
        ticket_software.concluir(EstadoAtendimento.RESOLVIDO, "Instalado")

        assert ticket_software.informacao_especifica == (
            "Software: Office | Necessidade: Instalar suplemento de assinatura"
            " | Intervenção: Instalado"
        )

    def test_esta_concluido_false(self, ticket_hardware):
        assert not ticket_hardware.esta_concluido


class TestTicketEntityIgualdade:

    def test_tickets_com_mesmo_id_sao_iguais(self, ticket_hardware, ticket_software):
        ticket_hardware.id = 7
        ticket_software.id = 7

        assert ticket_hardware == ticket_software

    def test_tickets_sem_id_comparam_por_identidade(self):
        a = TicketEntity.criar_hardware("colab-1", "Rato", "Não clica")
        b = TicketEntity.criar_hardware("colab-1", "Rato", "Não clica")

        assert a != b
        assert a == a

    def test_ticket_pode_ser_usado_em_set(self, ticket_hardware):
        ticket_hardware.id = 1
        outro = TicketEntity.criar_hardware("colab-2", "Teclado", "Teclas presas")
        outro.id = 1

        assert len({ticket_hardware, outro}) == 1


class TestEnums:

    @pytest.mark.parametrize("valor,esperado", [
        ("POR_ATENDER", TicketEstado.POR_ATENDER),
        ("Por Atender", TicketEstado.POR_ATENDER),
        ("em atendimento", TicketEstado.EM_ATENDIMENTO),
        ("atendido", TicketEstado.ATENDIDO),
    ])
    def test_ticket_estado_from_string(self, valor, esperado):
        assert TicketEstado.from_string(valor) == esperado

    def test_ticket_estado_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketEstado.from_string("Fechado")

        assert exc_info.value.field == "estado"

    @pytest.mark.parametrize("valor,esperado", [
        ("Resolvido", EstadoAtendimento.RESOLVIDO),
        ("não resolvido", EstadoAtendimento.NAO_RESOLVIDO),
        ("NAO_RESOLVIDO", EstadoAtendimento.NAO_RESOLVIDO),
    ])
    def test_estado_atendimento_from_string(self, valor, esperado):
        assert EstadoAtendimento.from_string(valor) == esperado

    def test_estado_atendimento_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            EstadoAtendimento.from_string("Talvez")

        assert exc_info.value.field == "estado_atendimento"

    def test_tipo_from_string(self):
        assert TipoTicket.from_string("hardware") == TipoTicket.HARDWARE
        assert TipoTicket.from_string("Software") == TipoTicket.SOFTWARE

    def test_tipo_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            TipoTicket.from_string("Rede")

        assert exc_info.value.field == "tipo"

    def test_tipo_outro(self):
        assert TipoTicket.HARDWARE.outro == TipoTicket.SOFTWARE
        assert TipoTicket.SOFTWARE.outro == TipoTicket.HARDWARE

    @pytest.mark.parametrize("conversor,campo", [
        (TicketEstado.from_string, "estado"),
        (EstadoAtendimento.from_string, "estado_atendimento"),
        (TipoTicket.from_string, "tipo"),
    ])
    @pytest.mark.parametrize("valor", [None, 5, ["Hardware"]])
    def test_from_string_rejeita_valores_que_nao_sao_texto(self, conversor, campo, valor):
        with pytest.raises(ValidationError) as exc_info:
            conversor(valor)

        assert exc_info.value.field == campo


class TestTicketEntityTiposInvalidos:
    """Valores que não são texto devem falhar com ValidationError."""

    @pytest.mark.parametrize("equipamento,avaria,campo", [
        (5, "Ecrã partido", "equipamento"),
        ("Portátil", None, "avaria"),
    ])
    def test_criar_hardware_campos_nao_texto(self, equipamento, avaria, campo):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar_hardware("colab-1", equipamento, avaria)

        assert exc_info.value.field == campo

    def test_concluir_resultado_none_erro(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_hardware.concluir(None, "Reparado")

        assert exc_info.value.field == "estado_atendimento"
        assert ticket_hardware.estado == TicketEstado.EM_ATENDIMENTO

    def test_concluir_descricao_nao_texto_erro(self, ticket_software):
        ticket_software.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_software.concluir(EstadoAtendimento.RESOLVIDO, 42)

        assert exc_info.value.field == "descricao_intervencao"

    def test_concluir_pecas_nao_texto_nao_altera_ticket(self, ticket_hardware):
        ticket_hardware.atender("tec-1")

        with pytest.raises(ValidationError) as exc_info:
            ticket_hardware.concluir(EstadoAtendimento.RESOLVIDO, "Ecrã trocado", pecas=3)

        assert exc_info.value.field == "pecas"
        assert ticket_hardware.estado == TicketEstado.EM_ATENDIMENTO
        assert ticket_hardware.descricao_reparacao is None
