"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Submete novo ticket
- AtenderTicketService: Técnico inicia atendimento
- ConcluirAtendimentoService: Técnico conclui atendimento
- ObterTicketService: Obtém ticket específico
- ListarTicketsService: Lista tickets com filtros
- ProximoTicketService: Escolhe o próximo ticket pela estratégia ativa
- EstatisticasService: Estatísticas de um período

Fachada:
- GestaoTicketsService: Ponto de entrada da apresentação. Devolve
  sempre OperationResult; apenas StorageError é propagada. Cada
  operação tem uma variante assíncrona (*_async).

Escrita concorrente:
    Atender e concluir gravam com `update(ticket, estado_esperado)`.
    Se outro técnico atuou entre a leitura e a escrita, o repositório
    devolve False, é lançada ConcurrencyError e a transação é desfeita.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from asgiref.sync import sync_to_async

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.result import OperationResult
from src.core.shared.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
    PermissionDeniedError,
    ConcurrencyError,
    StorageError,
)
from src.core.users.entities import PERFIS_ATENDIMENTO
from src.core.users.ports import UserDirectory

from .ports import TicketRepository
from .entities import TicketEntity, TicketEstado, TipoTicket, EstadoAtendimento
from .strategies import ContextoAtendimento
from .statistics import (
    PeriodoAnalise,
    EstatisticasDashboard,
    EstatisticasBasicas,
    EstatisticasTecnico,
    ComparacaoPeriodos,
    calcular_estatisticas_tecnicos,
    calcular_tendencias_mensais,
    calcular_estatisticas_dia_semana,
    eficiencia_geral,
    classificar_estado_sistema,
)
from .dtos import (
    CriarTicketInputDTO,
    AtenderTicketInputDTO,
    ConcluirAtendimentoInputDTO,
    TicketOutputDTO,
)
from .events import (
    TicketCriadoEvent,
    TicketAtendidoEvent,
    AtendimentoConcluidoEvent,
)

logger = logging.getLogger(__name__)


def _obter_ticket(ticket_repo: TicketRepository, ticket_id: int) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=str(ticket_id)
        )
    return ticket


def _verificar_tecnico(user_directory: UserDirectory, tecnico_id: str) -> None:
    """
    Apenas técnicos e administradores ativos atendem tickets.

    Raises:
        PermissionDeniedError: Se inativo, inexistente ou sem perfil
    """
    if not isinstance(tecnico_id, str) or not user_directory.is_active(tecnico_id):
        raise PermissionDeniedError(
            "Técnico inexistente ou inativo não pode atender tickets",
            user_id=tecnico_id
        )
    if not any(user_directory.has_role(tecnico_id, perfil) for perfil in PERFIS_ATENDIMENTO):
        raise PermissionDeniedError(
            "Técnico não tem permissões para atender tickets",
            user_id=tecnico_id
        )


def _gravar_transicao(
    ticket_repo: TicketRepository,
    ticket: TicketEntity,
    estado_esperado: TicketEstado,
) -> None:
    if not ticket_repo.update(ticket, estado_esperado):
        raise ConcurrencyError(
            f"Ticket {ticket.id} já não está no estado '{estado_esperado.value}'",
            estado_esperado=estado_esperado.value,
        )


class CriarTicketService:
    """
    Use Case: Submeter um novo ticket.

    Fluxo:
    1. Validar tipo e submetedor
    2. Criar entidade (validações da variante na entidade)
    3. Inserir via repositório (atribui ID)
    4. Disparar evento TicketCriado
    5. Retornar DTO de saída

    Example:
        service = CriarTicketService(ticket_repo, user_directory, uow)
        output = service.execute(CriarTicketInputDTO(
            tipo="Hardware",
            submetido_por_id="user-1",
            equipamento="Impressora",
            avaria="Papel encravado",
        ))
        print(output.id)
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        user_directory: UserDirectory,
        uow: UnitOfWork,
    ):
        """
        Inicializa service com dependências injetadas.

        Args:
            ticket_repo: Repositório para persistência
            user_directory: Consulta de utilizadores
            uow: Unit of Work para transação atómica
        """
        self.ticket_repo = ticket_repo
        self.user_directory = user_directory
        self.uow = uow

    def execute(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        """
        Executa criação de ticket em transação atómica.

        Raises:
            ValidationError: Se tipo/campos inválidos ou submetedor inativo
        """
        tipo = TipoTicket.from_string(input_dto.tipo)

        submetedor = input_dto.submetido_por_id
        if not isinstance(submetedor, str) or not self.user_directory.is_active(submetedor):
            raise ValidationError(
                "Utilizador inexistente ou inativo não pode submeter tickets",
                field="submetido_por_id"
            )

        with self.uow:
            ticket = TicketEntity.criar(
                tipo=tipo,
                submetido_por_id=input_dto.submetido_por_id,
                dados=input_dto.dados_especificos(),
            )

            self.ticket_repo.add(ticket)

            # Publicado após commit
            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    tipo=ticket.tipo.value,
                    submetido_por_id=ticket.submetido_por_id,
                    urgente=ticket.e_urgente,
                )
            )

        logger.info(f"Ticket {ticket.id} ({ticket.tipo.value}) criado por {ticket.submetido_por_id}")
        return TicketOutputDTO.from_entity(ticket)


class AtenderTicketService:
    """
    Use Case: Técnico inicia o atendimento (POR_ATENDER → EM_ATENDIMENTO).

    Raises:
        PermissionDeniedError: Se técnico inativo ou sem perfil
        EntityNotFoundError: Se ticket não existe
        InvalidStateError: Se ticket não está por atender
        ConcurrencyError: Se outro técnico atendeu entretanto
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        user_directory: UserDirectory,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.user_directory = user_directory
        self.uow = uow

    def execute(self, input_dto: AtenderTicketInputDTO) -> TicketOutputDTO:
        _verificar_tecnico(self.user_directory, input_dto.tecnico_id)

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)

            ticket.atender(input_dto.tecnico_id)
            _gravar_transicao(self.ticket_repo, ticket, TicketEstado.POR_ATENDER)

            self.uow.publish_event(
                TicketAtendidoEvent(
                    aggregate_id=ticket.id,
                    tecnico_id=input_dto.tecnico_id,
                    submetido_por_id=ticket.submetido_por_id,
                )
            )

        logger.info(f"Ticket {ticket.id} em atendimento por {input_dto.tecnico_id}")
        return TicketOutputDTO.from_entity(ticket)


class ConcluirAtendimentoService:
    """
    Use Case: Técnico conclui o atendimento (EM_ATENDIMENTO → ATENDIDO).

    A descrição é gravada em descricao_reparacao (Hardware) ou
    descricao_intervencao (Software).

    Raises:
        PermissionDeniedError: Se técnico inativo ou sem perfil
        EntityNotFoundError: Se ticket não existe
        InvalidStateError: Se ticket não está em atendimento
        ValidationError: Se resultado inválido ou descrição vazia
        ConcurrencyError: Se o ticket mudou entretanto
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        user_directory: UserDirectory,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.user_directory = user_directory
        self.uow = uow

    def execute(self, input_dto: ConcluirAtendimentoInputDTO) -> TicketOutputDTO:
        _verificar_tecnico(self.user_directory, input_dto.tecnico_id)
        estado_atendimento = EstadoAtendimento.from_string(input_dto.estado_atendimento)

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)

            ticket.concluir(estado_atendimento, input_dto.descricao, input_dto.pecas)
            _gravar_transicao(self.ticket_repo, ticket, TicketEstado.EM_ATENDIMENTO)

            self.uow.publish_event(
                AtendimentoConcluidoEvent(
                    aggregate_id=ticket.id,
                    tecnico_id=ticket.tecnico_id,
                    estado_atendimento=ticket.estado_atendimento.value,
                    tempo_atendimento_horas=ticket.tempo_atendimento_horas,
                    submetido_por_id=ticket.submetido_por_id,
                )
            )

        logger.info(
            f"Ticket {ticket.id} concluído por {input_dto.tecnico_id}: "
            f"{ticket.estado_atendimento.value}"
        )
        return TicketOutputDTO.from_entity(ticket)


class ObterTicketService:
    """
    Use Case: Obter detalhes de um ticket específico.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, ticket_id: int) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
        """
        return TicketOutputDTO.from_entity(_obter_ticket(self.ticket_repo, ticket_id))


class ListarTicketsService:
    """
    Use Case: Listar tickets com filtros.

    Não usa UoW pois é operação de leitura (não precisa de transação).
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(
        self,
        estado: Optional[str] = None,
        submetido_por_id: Optional[str] = None,
        tecnico_id: Optional[str] = None,
    ) -> List[TicketOutputDTO]:
        """
        Lista tickets com um filtro opcional (o primeiro indicado).

        Raises:
            ValidationError: Se estado inválido
        """
        if estado:
            tickets = self.ticket_repo.list_by_estado(TicketEstado.from_string(estado))
        elif submetido_por_id:
            tickets = self.ticket_repo.list_by_submetedor(submetido_por_id)
        elif tecnico_id:
            tickets = self.ticket_repo.list_by_tecnico(tecnico_id)
        else:
            tickets = self.ticket_repo.list_all()

        return [TicketOutputDTO.from_entity(t) for t in tickets]


class ProximoTicketService:
    """
    Use Case: Obter o próximo ticket a atender.

    Lê os tickets pendentes do repositório e aplica a estratégia
    ativa do contexto. Não altera nenhum ticket.
    """

    def __init__(self, ticket_repo: TicketRepository, contexto: ContextoAtendimento):
        self.ticket_repo = ticket_repo
        self.contexto = contexto

    def execute(self) -> Optional[TicketOutputDTO]:
        pendentes = self.ticket_repo.list_by_estado(TicketEstado.POR_ATENDER)
        ticket = self.contexto.selecionar_proximo(pendentes)
        if ticket is None:
            return None
        return TicketOutputDTO.from_entity(ticket)


class EstatisticasService:
    """
    Use Case: Estatísticas de um período.

    Obtém a fatia de tickets do repositório e delega os cálculos
    nas funções puras de statistics.py.
    """

    MESES_TENDENCIA = 6

    def __init__(self, ticket_repo: TicketRepository, user_directory: UserDirectory):
        self.ticket_repo = ticket_repo
        self.user_directory = user_directory

    def _tickets(self, periodo: PeriodoAnalise) -> List[TicketEntity]:
        return self.ticket_repo.list_by_periodo(periodo.inicio, periodo.fim)

    def dashboard(self, periodo: PeriodoAnalise) -> EstatisticasDashboard:
        return EstatisticasDashboard.calcular(self._tickets(periodo), periodo)

    def comparacao(self, periodo: PeriodoAnalise) -> ComparacaoPeriodos:
        return ComparacaoPeriodos.calcular(
            atual=self.dashboard(periodo),
            anterior=self.dashboard(periodo.periodo_anterior()),
        )

    def tecnicos(self, periodo: PeriodoAnalise) -> List[EstatisticasTecnico]:
        tickets = self._tickets(periodo)
        nomes = {}
        for tecnico_id in {t.tecnico_id for t in tickets if t.tecnico_id}:
            tecnico = self.user_directory.get_by_id(tecnico_id)
            if tecnico:
                nomes[tecnico_id] = tecnico.nome_apresentacao
        return calcular_estatisticas_tecnicos(tickets, nomes)

    def relatorio(self, periodo: PeriodoAnalise) -> Dict[str, Any]:
        """
        Relatório agregado: estatísticas básicas, dia da semana,
        tendência mensal e estado geral do sistema.
        """
        tickets = self._tickets(periodo)
        eficiencia = eficiencia_geral(tickets)

        inicio_tendencia = datetime(periodo.fim.year, periodo.fim.month, 1)
        for _ in range(self.MESES_TENDENCIA - 1):
            inicio_tendencia = (inicio_tendencia - timedelta(days=1)).replace(day=1)
        tickets_tendencia = self.ticket_repo.list_by_periodo(inicio_tendencia, periodo.fim)

        return {
            "periodo": periodo.to_dict(),
            "basicas": EstatisticasBasicas.calcular(tickets).to_dict(),
            "dia_semana": [
                d.to_dict() for d in calcular_estatisticas_dia_semana(tickets, periodo)
            ],
            "tendencias_mensais": [
                t.to_dict() for t in calcular_tendencias_mensais(
                    tickets_tendencia, self.MESES_TENDENCIA, referencia=periodo.fim
                )
            ],
            "eficiencia_geral": round(eficiencia, 2),
            "estado_sistema": classificar_estado_sistema(eficiencia),
        }


# =============================================================================
# Fachada
# =============================================================================

MENSAGEM_SEM_TICKETS = "Não há tickets disponíveis para atendimento"


class GestaoTicketsService:
    """
    Fachada de gestão de tickets (ponto de entrada da apresentação).

    Todas as operações devolvem OperationResult. Falhas esperadas
    (validação, permissão, estado, inexistência) tornam-se resultados
    de falha; StorageError é registada e propagada.

    Cada operação abre a sua própria Unit of Work através de
    `uow_factory`, e relê o ticket do repositório.

    Example:
        gestao = GestaoTicketsService(ticket_repo, user_directory, InMemoryUnitOfWork)
        resultado = gestao.criar_ticket_hardware("user-1", "Servidor", "Não liga")
        proximo = gestao.obter_proximo_ticket()
        await gestao.atender_ticket_async(proximo.data.id, "tec-1")
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        user_directory: UserDirectory,
        uow_factory: Callable[[], UnitOfWork],
        contexto: Optional[ContextoAtendimento] = None,
        dias_estatisticas: int = 30,
    ):
        self.ticket_repo = ticket_repo
        self.user_directory = user_directory
        self.uow_factory = uow_factory
        self.contexto = contexto or ContextoAtendimento()
        self.dias_estatisticas = dias_estatisticas

    def _executar(self, operacao: str, funcao: Callable, *args, **kwargs) -> OperationResult:
        try:
            return OperationResult.ok(funcao(*args, **kwargs))
        except StorageError:
            logger.error(f"Falha de armazenamento em '{operacao}'", exc_info=True)
            raise
        except DomainException as e:
            logger.warning(f"Operação '{operacao}' rejeitada: {e}")
            return OperationResult.from_exception(e)

    # =========================================================================
    # Ciclo de vida
    # =========================================================================

    def criar_ticket(self, input_dto: CriarTicketInputDTO) -> OperationResult:
        service = CriarTicketService(self.ticket_repo, self.user_directory, self.uow_factory())
        return self._executar("criar_ticket", service.execute, input_dto)

    def criar_ticket_hardware(
        self,
        submetido_por_id: str,
        equipamento: str,
        avaria: str,
    ) -> OperationResult:
        return self.criar_ticket(CriarTicketInputDTO(
            tipo=TipoTicket.HARDWARE.value,
            submetido_por_id=submetido_por_id,
            equipamento=equipamento,
            avaria=avaria,
        ))

    def criar_ticket_software(
        self,
        submetido_por_id: str,
        software: str,
        descricao_necessidade: str,
    ) -> OperationResult:
        return self.criar_ticket(CriarTicketInputDTO(
            tipo=TipoTicket.SOFTWARE.value,
            submetido_por_id=submetido_por_id,
            software=software,
            descricao_necessidade=descricao_necessidade,
        ))

    def atender_ticket(self, ticket_id: int, tecnico_id: str) -> OperationResult:
        service = AtenderTicketService(self.ticket_repo, self.user_directory, self.uow_factory())
        return self._executar(
            "atender_ticket",
            service.execute,
            AtenderTicketInputDTO(ticket_id=ticket_id, tecnico_id=tecnico_id),
        )

    def concluir_atendimento(
        self,
        ticket_id: int,
        tecnico_id: str,
        estado_atendimento: str,
        descricao: str,
        pecas: Optional[str] = None,
    ) -> OperationResult:
        service = ConcluirAtendimentoService(
            self.ticket_repo, self.user_directory, self.uow_factory()
        )
        return self._executar(
            "concluir_atendimento",
            service.execute,
            ConcluirAtendimentoInputDTO(
                ticket_id=ticket_id,
                tecnico_id=tecnico_id,
                estado_atendimento=estado_atendimento,
                descricao=descricao,
                pecas=pecas,
            ),
        )

    # =========================================================================
    # Atendimento
    # =========================================================================

    def obter_proximo_ticket(self) -> OperationResult:
        resultado = self._executar(
            "obter_proximo_ticket",
            ProximoTicketService(self.ticket_repo, self.contexto).execute,
        )
        if resultado.success and resultado.data is None:
            return OperationResult.falha(MENSAGEM_SEM_TICKETS, "NO_PENDING_TICKETS")
        return resultado

    def definir_estrategia(self, codigo: str) -> OperationResult:
        def _definir():
            estrategia = ContextoAtendimento.criar_estrategia(codigo)
            self.contexto.definir_estrategia(estrategia)
            return {"nome": estrategia.nome, "descricao": estrategia.descricao}

        return self._executar("definir_estrategia", _definir)

    def listar_estrategias(self) -> OperationResult:
        return OperationResult.ok({
            "ativa": self.contexto.estrategia.nome,
            "disponiveis": ContextoAtendimento.estrategias_disponiveis(),
        })

    # =========================================================================
    # Consultas
    # =========================================================================

    def obter_ticket(self, ticket_id: int) -> OperationResult:
        return self._executar(
            "obter_ticket", ObterTicketService(self.ticket_repo).execute, ticket_id
        )

    def listar_tickets(
        self,
        estado: Optional[str] = None,
        submetido_por_id: Optional[str] = None,
        tecnico_id: Optional[str] = None,
    ) -> OperationResult:
        return self._executar(
            "listar_tickets",
            ListarTicketsService(self.ticket_repo).execute,
            estado=estado,
            submetido_por_id=submetido_por_id,
            tecnico_id=tecnico_id,
        )

    def listar_tickets_utilizador(self, submetido_por_id: str) -> OperationResult:
        return self.listar_tickets(submetido_por_id=submetido_por_id)

    def listar_pendentes(self) -> OperationResult:
        return self.listar_tickets(estado=TicketEstado.POR_ATENDER.name)

    # =========================================================================
    # Estatísticas
    # =========================================================================

    def _estatisticas(self) -> EstatisticasService:
        return EstatisticasService(self.ticket_repo, self.user_directory)

    def gerar_estatisticas(self, inicio: datetime, fim: datetime) -> OperationResult:
        return self._executar(
            "gerar_estatisticas",
            lambda: self._estatisticas().dashboard(PeriodoAnalise(inicio, fim)),
        )

    def estatisticas_mes_atual(self) -> OperationResult:
        return self._executar(
            "estatisticas_mes_atual",
            lambda: self._estatisticas().dashboard(PeriodoAnalise.mes_atual()),
        )

    def estatisticas_ultimos_dias(self, dias: Optional[int] = None) -> OperationResult:
        return self._executar(
            "estatisticas_ultimos_dias",
            lambda: self._estatisticas().dashboard(
                PeriodoAnalise.ultimos_dias(self.dias_estatisticas if dias is None else dias)
            ),
        )

    def estatisticas_ultimos_30_dias(self) -> OperationResult:
        return self.estatisticas_ultimos_dias(30)

    def comparar_periodos(self, inicio: datetime, fim: datetime) -> OperationResult:
        return self._executar(
            "comparar_periodos",
            lambda: self._estatisticas().comparacao(PeriodoAnalise(inicio, fim)),
        )

    def ranking_tecnicos(self, inicio: datetime, fim: datetime) -> OperationResult:
        return self._executar(
            "ranking_tecnicos",
            lambda: self._estatisticas().tecnicos(PeriodoAnalise(inicio, fim)),
        )

    def gerar_relatorio(self, inicio: datetime, fim: datetime) -> OperationResult:
        return self._executar(
            "gerar_relatorio",
            lambda: self._estatisticas().relatorio(PeriodoAnalise(inicio, fim)),
        )

    # =========================================================================
    # Variantes assíncronas
    # =========================================================================

    async def criar_ticket_async(self, input_dto: CriarTicketInputDTO) -> OperationResult:
        return await sync_to_async(self.criar_ticket)(input_dto)

    async def criar_ticket_hardware_async(self, *args, **kwargs) -> OperationResult:
        return await sync_to_async(self.criar_ticket_hardware)(*args, **kwargs)

    async def criar_ticket_software_async(self, *args, **kwargs) -> OperationResult:
        return await sync_to_async(self.criar_ticket_software)(*args, **kwargs)

    async def atender_ticket_async(self, ticket_id: int, tecnico_id: str) -> OperationResult:
        return await sync_to_async(self.atender_ticket)(ticket_id, tecnico_id)

    async def concluir_atendimento_async(self, *args, **kwargs) -> OperationResult:
        return await sync_to_async(self.concluir_atendimento)(*args, **kwargs)

    async def obter_proximo_ticket_async(self) -> OperationResult:
        return await sync_to_async(self.obter_proximo_ticket)()

    async def definir_estrategia_async(self, codigo: str) -> OperationResult:
        return await sync_to_async(self.definir_estrategia)(codigo)

    async def listar_estrategias_async(self) -> OperationResult:
        return await sync_to_async(self.listar_estrategias)()

    async def obter_ticket_async(self, ticket_id: int) -> OperationResult:
        return await sync_to_async(self.obter_ticket)(ticket_id)

    async def listar_tickets_async(self, **filtros) -> OperationResult:
        return await sync_to_async(self.listar_tickets)(**filtros)

    async def listar_tickets_utilizador_async(self, submetido_por_id: str) -> OperationResult:
        return await sync_to_async(self.listar_tickets_utilizador)(submetido_por_id)

    async def listar_pendentes_async(self) -> OperationResult:
        return await sync_to_async(self.listar_pendentes)()

    async def gerar_estatisticas_async(self, inicio: datetime, fim: datetime) -> OperationResult:
        return await sync_to_async(self.gerar_estatisticas)(inicio, fim)

    async def estatisticas_mes_atual_async(self) -> OperationResult:
        return await sync_to_async(self.estatisticas_mes_atual)()

    async def estatisticas_ultimos_dias_async(self, dias: Optional[int] = None) -> OperationResult:
        return await sync_to_async(self.estatisticas_ultimos_dias)(dias)

    async def estatisticas_ultimos_30_dias_async(self) -> OperationResult:
        return await sync_to_async(self.estatisticas_ultimos_30_dias)()

    async def comparar_periodos_async(self, inicio: datetime, fim: datetime) -> OperationResult:
        return await sync_to_async(self.comparar_periodos)(inicio, fim)

    async def ranking_tecnicos_async(self, inicio: datetime, fim: datetime) -> OperationResult:
        return await sync_to_async(self.ranking_tecnicos)(inicio, fim)

    async def gerar_relatorio_async(self, inicio: datetime, fim: datetime) -> OperationResult:
        return await sync_to_async(self.gerar_relatorio)(inicio, fim)
