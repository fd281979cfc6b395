"""
API Views JSON para o domínio de Tickets.

Todas as views delegam na fachada GestaoTicketsService (obtida do
container DI) e traduzem o OperationResult para HTTP.

Endpoints:
- GET  /api/tickets/ - Listar tickets (filtros: estado, submetido_por_id, tecnico_id)
- POST /api/tickets/ - Criar ticket
- GET  /api/tickets/<id>/ - Obter ticket
- POST /api/tickets/<id>/atender/ - Iniciar atendimento
- POST /api/tickets/<id>/concluir/ - Concluir atendimento
- GET  /api/tickets/proximo/ - Próximo ticket pela estratégia ativa
- GET  /api/tickets/estrategias/ - Estratégias disponíveis e ativa
- POST /api/tickets/estrategias/ - Trocar estratégia
- GET  /api/tickets/estatisticas/ - Dashboard do período
- GET  /api/tickets/estatisticas/comparacao/ - Comparação com período anterior
- GET  /api/tickets/estatisticas/tecnicos/ - Ranking de técnicos
- GET  /api/tickets/estatisticas/relatorio/ - Relatório agregado

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Identificação:
- O utilizador vem do corpo (submetido_por_id / tecnico_id) ou do
  header X-User-Id.

Mapeamento de erros:
    VALIDATION_ERROR* → 400, PERMISSION_DENIED → 403,
    ENTITY_NOT_FOUND/NO_PENDING_TICKETS → 404,
    INVALID_STATE/CONCURRENCY_ERROR → 409, StorageError → 503
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from django.views import View
from django.http import JsonResponse, HttpRequest
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.result import OperationResult
from src.core.shared.exceptions import ValidationError, StorageError
from src.core.tickets.dtos import CriarTicketInputDTO
from src.config.container import get_container

logger = logging.getLogger(__name__)


STATUS_POR_CODIGO = {
    'PERMISSION_DENIED': 403,
    'ENTITY_NOT_FOUND': 404,
    'NO_PENDING_TICKETS': 404,
    'INVALID_STATE': 409,
    'CONCURRENCY_ERROR': 409,
}


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais

    Returns:
        JsonResponse formatada
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("O corpo do pedido deve ser um objeto JSON")
    return data


def get_user_id(request: HttpRequest) -> Optional[str]:
    """Extrai ID do utilizador do header X-User-Id."""
    return request.headers.get('X-User-Id') or None


def status_for_code(error_code: Optional[str]) -> int:
    if error_code and error_code.startswith('VALIDATION_ERROR'):
        return 400
    return STATUS_POR_CODIGO.get(error_code, 400)


def parse_datetime_param(valor: Optional[str], campo: str, fim_do_dia: bool = False) -> Optional[datetime]:
    """
    Converte parâmetro ISO (data ou data/hora) em datetime.

    Uma data simples em `fim` cobre o dia inteiro.

    Raises:
        ValidationError: Se formato inválido
    """
    if not valor:
        return None
    try:
        resultado = datetime.fromisoformat(valor)
    except ValueError:
        raise ValidationError(f"Data inválida em '{campo}': {valor}", field=campo)

    if fim_do_dia and len(valor) == 10:
        resultado = resultado.replace(hour=23, minute=59, second=59, microsecond=999999)
    return resultado


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso à fachada via container DI
    - Conversão de OperationResult e exceções em respostas
    """

    def get_container(self):
        """Retorna container de DI."""
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    @property
    def gestao(self):
        return self.get_service('gestao_tickets_service')

    def parse_body(self, request: HttpRequest) -> Dict:
        """Parseia body JSON."""
        return parse_json_body(request)

    def result_response(self, resultado: OperationResult, status: int = 200) -> JsonResponse:
        """Converte OperationResult em JsonResponse."""
        if resultado.success:
            return json_response(
                success=True,
                data=resultado.to_dict()['data'],
                status=status,
            )

        return json_response(
            success=False,
            error=resultado.error_message,
            status=status_for_code(resultado.error_code),
            meta={'code': resultado.error_code},
        )

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções que escapam à fachada.

        Args:
            e: Exceção capturada

        Returns:
            JsonResponse com erro
        """
        if isinstance(e, StorageError):
            return json_response(
                success=False,
                error=e.message,
                status=503,
                meta={'code': e.code}
            )

        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'code': e.code, 'field': e.field}
            )

        if isinstance(e, ValueError):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )

    def periodo(self, request: HttpRequest):
        """Lê `inicio` e `fim` da query string (ambos ou nenhum)."""
        inicio = parse_datetime_param(request.GET.get('inicio'), 'inicio')
        fim = parse_datetime_param(request.GET.get('fim'), 'fim', fim_do_dia=True)
        if (inicio is None) != (fim is None):
            raise ValidationError("Indique 'inicio' e 'fim' em conjunto", field='inicio')
        return inicio, fim


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    API para listar e criar tickets.

    GET /api/tickets/ - Lista tickets
    POST /api/tickets/ - Cria ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets com um filtro opcional.

        Query params:
        - estado: POR_ATENDER | EM_ATENDIMENTO | ATENDIDO (nome ou valor)
        - submetido_por_id: Tickets de um colaborador
        - tecnico_id: Tickets de um técnico
        """
        try:
            resultado = self.gestao.listar_tickets(
                estado=request.GET.get('estado') or None,
                submetido_por_id=request.GET.get('submetido_por_id') or None,
                tecnico_id=request.GET.get('tecnico_id') or None,
            )
            if not resultado.success:
                return self.result_response(resultado)

            return json_response(
                success=True,
                data=resultado.to_dict()['data'],
                meta={'total': len(resultado.data)}
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo ticket.

        Body JSON (Hardware):
        {
            "tipo": "Hardware",
            "submetido_por_id": "string (ou header X-User-Id)",
            "equipamento": "string",
            "avaria": "string"
        }

        Body JSON (Software):
        {
            "tipo": "Software",
            "submetido_por_id": "string (ou header X-User-Id)",
            "software": "string",
            "descricao_necessidade": "string"
        }
        """
        try:
            data = self.parse_body(request)

            input_dto = CriarTicketInputDTO(
                tipo=data.get('tipo', ''),
                submetido_por_id=data.get('submetido_por_id') or get_user_id(request) or '',
                equipamento=data.get('equipamento', ''),
                avaria=data.get('avaria', ''),
                software=data.get('software', ''),
                descricao_necessidade=data.get('descricao_necessidade', ''),
            )

            resultado = self.gestao.criar_ticket(input_dto)
            if resultado.success:
                logger.info(f"API: Ticket criado: {resultado.data.id}")

            return self.result_response(resultado, status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """
    GET /api/tickets/<id>/ - Obter ticket
    """

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            return self.result_response(self.gestao.obter_ticket(pk))
        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAtenderView(BaseAPIView):
    """
    API para iniciar atendimento.

    POST /api/tickets/<id>/atender/
    """

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Body JSON:
        {
            "tecnico_id": "string (ou header X-User-Id)"
        }
        """
        try:
            data = self.parse_body(request)
            tecnico_id = data.get('tecnico_id') or get_user_id(request)

            if not tecnico_id:
                return json_response(
                    success=False,
                    error="tecnico_id é obrigatório",
                    status=400
                )

            resultado = self.gestao.atender_ticket(pk, tecnico_id)
            if resultado.success:
                logger.info(f"API: Ticket {pk} em atendimento por {tecnico_id}")

            return self.result_response(resultado)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIConcluirView(BaseAPIView):
    """
    API para concluir atendimento.

    POST /api/tickets/<id>/concluir/
    """

    def post(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Body JSON:
        {
            "tecnico_id": "string (ou header X-User-Id)",
            "estado_atendimento": "Resolvido | Não Resolvido",
            "descricao": "string",
            "pecas": "string (opcional, Hardware)"
        }
        """
        try:
            data = self.parse_body(request)
            tecnico_id = data.get('tecnico_id') or get_user_id(request)

            if not tecnico_id:
                return json_response(
                    success=False,
                    error="tecnico_id é obrigatório",
                    status=400
                )

            resultado = self.gestao.concluir_atendimento(
                ticket_id=pk,
                tecnico_id=tecnico_id,
                estado_atendimento=data.get('estado_atendimento', ''),
                descricao=data.get('descricao', ''),
                pecas=data.get('pecas'),
            )
            if resultado.success:
                logger.info(f"API: Ticket {pk} concluído por {tecnico_id}")

            return self.result_response(resultado)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIProximoView(BaseAPIView):
    """
    GET /api/tickets/proximo/ - Próximo ticket pela estratégia ativa
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            return self.result_response(self.gestao.obter_proximo_ticket())
        except Exception as e:
            return self.handle_exception(e)


class TicketAPIEstrategiasView(BaseAPIView):
    """
    GET /api/tickets/estrategias/ - Lista estratégias
    POST /api/tickets/estrategias/ - Troca estratégia ativa
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            return self.result_response(self.gestao.listar_estrategias())
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "estrategia": "fifo | lifo | prioridade | hardware | software | round_robin"
        }
        """
        try:
            data = self.parse_body(request)
            return self.result_response(
                self.gestao.definir_estrategia(data.get('estrategia', ''))
            )
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Estatísticas
# =============================================================================

class TicketAPIEstatisticasView(BaseAPIView):
    """
    GET /api/tickets/estatisticas/

    Query params (opcionais):
    - inicio, fim: Período (ISO)
    - mes=atual: Mês corrente
    - dias: Últimos N dias
    Sem parâmetros usa a janela por omissão (ESTATISTICAS_DIAS_PADRAO).
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            inicio, fim = self.periodo(request)

            if inicio is not None:
                resultado = self.gestao.gerar_estatisticas(inicio, fim)
            elif request.GET.get('mes') == 'atual':
                resultado = self.gestao.estatisticas_mes_atual()
            else:
                dias = request.GET.get('dias')
                resultado = self.gestao.estatisticas_ultimos_dias(int(dias) if dias else None)

            return self.result_response(resultado)

        except Exception as e:
            return self.handle_exception(e)


class _EstatisticasPeriodoView(BaseAPIView):
    """Estatísticas que exigem `inicio` e `fim` explícitos."""

    operacao = None

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            inicio, fim = self.periodo(request)
            if inicio is None:
                raise ValidationError("Parâmetros 'inicio' e 'fim' são obrigatórios", field='inicio')

            return self.result_response(getattr(self.gestao, self.operacao)(inicio, fim))

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIComparacaoView(_EstatisticasPeriodoView):
    """GET /api/tickets/estatisticas/comparacao/?inicio=...&fim=..."""
    operacao = 'comparar_periodos'


class TicketAPITecnicosView(_EstatisticasPeriodoView):
    """GET /api/tickets/estatisticas/tecnicos/?inicio=...&fim=..."""
    operacao = 'ranking_tecnicos'


class TicketAPIRelatorioView(_EstatisticasPeriodoView):
    """GET /api/tickets/estatisticas/relatorio/?inicio=...&fim=..."""
    operacao = 'gerar_relatorio'
