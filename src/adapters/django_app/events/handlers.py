"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando os
eventos de tickets são publicados pela Unit of Work:

- TicketCriadoEvent → alerta a equipa se o ticket for urgente
- TicketAtendidoEvent → avisa o colaborador de que o pedido está a ser tratado
- AtendimentoConcluidoEvent → avisa o colaborador do resultado

Inclui também as tarefas periódicas agendadas pelo Celery Beat
(ver src/config/celery.py).

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Any, Optional
from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketCriadoEvent.

    Ações:
    - Notificar equipa de suporte se urgente
    - Registar métrica de volume por tipo

    Args:
        event_data: Dados do evento serializado
    """
    try:
        ticket_id = event_data.get('aggregate_id')
        tipo = event_data.get('tipo', '')
        submetido_por_id = event_data.get('submetido_por_id')
        urgente = event_data.get('urgente', False)

        logger.info(
            f"[HANDLER] TicketCriado: {ticket_id} | "
            f"Tipo: {tipo} | Submetido por: {submetido_por_id}"
        )

        if urgente:
            notify_support_team.delay(
                ticket_id=ticket_id,
                message=f"Novo ticket urgente de {tipo}",
                priority='high'
            )

        record_metric.delay(
            metric_name='tickets_criados',
            value=1,
            tags={'tipo': tipo, 'urgente': str(bool(urgente)).lower()}
        )

    except Exception as e:
        logger.error(f"Erro no handler TicketCriado: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_atendido(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketAtendidoEvent.

    Ações:
    - Notificar colaborador que submeteu

    Args:
        event_data: Dados do evento serializado
    """
    try:
        ticket_id = event_data.get('aggregate_id')
        tecnico_id = event_data.get('tecnico_id')
        submetido_por_id = event_data.get('submetido_por_id')

        logger.info(
            f"[HANDLER] TicketAtendido: {ticket_id} | "
            f"Técnico: {tecnico_id}"
        )

        if submetido_por_id:
            notify_user.delay(
                user_id=submetido_por_id,
                message=f"O seu ticket #{ticket_id} está em atendimento",
                channel='email'
            )

    except Exception as e:
        logger.error(f"Erro no handler TicketAtendido: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atendimento_concluido(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento AtendimentoConcluidoEvent.

    Ações:
    - Notificar colaborador do resultado
    - Registar métricas de resultado e tempo de atendimento

    Args:
        event_data: Dados do evento serializado
    """
    try:
        ticket_id = event_data.get('aggregate_id')
        tecnico_id = event_data.get('tecnico_id')
        estado_atendimento = event_data.get('estado_atendimento', '')
        tempo_horas = event_data.get('tempo_atendimento_horas')
        submetido_por_id = event_data.get('submetido_por_id')

        logger.info(
            f"[HANDLER] AtendimentoConcluido: {ticket_id} | "
            f"Técnico: {tecnico_id} | Resultado: {estado_atendimento}"
        )

        if submetido_por_id:
            notify_user.delay(
                user_id=submetido_por_id,
                message=f"O seu ticket #{ticket_id} foi atendido: {estado_atendimento}",
                channel='email'
            )

        record_metric.delay(
            metric_name='atendimentos_concluidos',
            value=1,
            tags={'resultado': estado_atendimento}
        )

        if tempo_horas is not None:
            record_metric.delay(
                metric_name='tempo_atendimento_horas',
                value=tempo_horas,
                tags={'tecnico_id': tecnico_id or ''}
            )

    except Exception as e:
        logger.error(f"Erro no handler AtendimentoConcluido: {e}", exc_info=True)
        raise


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Ponto de entrada de todos os eventos enviados pelo
    CeleryEventPublisher.

    Args:
        event_type: Tipo do evento (ex: 'TicketCriadoEvent')
        event_data: Dados do evento serializado
    """
    handlers = {
        'TicketCriadoEvent': handle_ticket_criado,
        'TicketAtendidoEvent': handle_ticket_atendido,
        'AtendimentoConcluidoEvent': handle_atendimento_concluido,
    }

    handler = handlers.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(
    self,
    user_id: str,
    message: str,
    channel: str = 'email',
    **kwargs
) -> None:
    """
    Notifica utilizador pelo canal indicado.

    O envio é apenas registado no log; não há integração de email.
    """
    logger.info(f"[NOTIFICATION] {channel.upper()} para {user_id}: {message}")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_support_team(
    self,
    ticket_id: Any,
    message: str,
    priority: str = 'normal'
) -> None:
    """Notifica a equipa de suporte (registado no log)."""
    logger.info(
        f"[NOTIFICATION] Equipa de suporte [{priority}]: "
        f"Ticket #{ticket_id} - {message}"
    )


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None
) -> None:
    logger.info(
        f"[METRIC] {metric_name}={value} | tags={tags or {}}"
    )


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def check_pending_urgent_tickets(self, horas: int = 4) -> int:
    """
    Alerta a equipa sobre tickets urgentes por atender há mais de `horas`.

    Executada periodicamente pelo Celery Beat.

    Returns:
        Número de tickets urgentes em espera
    """
    logger.info("[SCHEDULED] Verificando tickets urgentes por atender...")

    try:
        from src.config.container import get_container

        gestao = get_container().gestao_tickets_service()
        resultado = gestao.listar_pendentes()
        if not resultado.success:
            logger.warning(f"[SCHEDULED] Falha ao listar pendentes: {resultado.error_message}")
            return 0

        limite = datetime.now() - timedelta(hours=horas)
        em_espera = [
            t for t in resultado.data
            if t.urgente and t.criado_em <= limite
        ]

        logger.info(f"[SCHEDULED] Encontrados {len(em_espera)} tickets urgentes em espera")

        for ticket in em_espera:
            notify_support_team.delay(
                ticket_id=ticket.id,
                message=f"Ticket urgente por atender há mais de {horas}h: {ticket.informacao_especifica}",
                priority='high'
            )

        record_metric.delay(
            metric_name='tickets_urgentes_em_espera',
            value=len(em_espera),
            tags={}
        )

        return len(em_espera)

    except Exception as e:
        logger.error(f"Erro ao verificar tickets urgentes: {e}", exc_info=True)
        return 0


@shared_task(bind=True)
def generate_daily_report(self) -> Dict[str, Any]:
    """
    Gera relatório diário com as estatísticas das últimas 24 horas.

    Executada diariamente pelo Celery Beat.

    Returns:
        Dados do relatório
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")

    try:
        from src.config.container import get_container

        gestao = get_container().gestao_tickets_service()
        fim = datetime.now()
        resultado = gestao.gerar_estatisticas(fim - timedelta(days=1), fim)
        if not resultado.success:
            logger.warning(f"[SCHEDULED] Falha ao gerar estatísticas: {resultado.error_message}")
            return {}

        estatisticas = resultado.data
        report = {
            'data': fim.isoformat(),
            'total_tickets': estatisticas.total_tickets,
            'percentagem_atendidos': round(estatisticas.percentagem_atendidos, 2),
            'percentagem_resolvidos': round(estatisticas.percentagem_resolvidos, 2),
            'por_estado': estatisticas.tickets_por_estado,
        }

        logger.info(f"[SCHEDULED] Relatório gerado: {report}")

        return report

    except Exception as e:
        logger.error(f"Erro ao gerar relatório: {e}", exc_info=True)
        return {}
