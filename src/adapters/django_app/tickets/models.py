"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Hardware e Software partilham a tabela `tickets`: os campos de cada
variante são nulos na outra. Assim a transição de um ticket é sempre
uma única escrita de linha.
"""

from django.db import models


class TicketTipoChoices(models.TextChoices):
    """Choices para tipo de ticket (espelha TipoTicket do Core)."""
    HARDWARE = 'Hardware', 'Hardware'
    SOFTWARE = 'Software', 'Software'


class TicketEstadoChoices(models.TextChoices):
    """Choices para estado do ticket (espelha TicketEstado do Core)."""
    POR_ATENDER = 'Por Atender', 'Por Atender'
    EM_ATENDIMENTO = 'Em Atendimento', 'Em Atendimento'
    ATENDIDO = 'Atendido', 'Atendido'


class EstadoAtendimentoChoices(models.TextChoices):
    """Choices para resultado do atendimento (espelha EstadoAtendimento do Core)."""
    ABERTO = 'Aberto', 'Aberto'
    RESOLVIDO = 'Resolvido', 'Resolvido'
    NAO_RESOLVIDO = 'Não Resolvido', 'Não Resolvido'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Fields:
        id: Auto-incremento atribuído na inserção
        tipo: Variante (Hardware/Software)
        estado: Estado do ciclo de vida
        estado_atendimento: Resultado do atendimento
        submetido_por_id: ID do colaborador
        tecnico_id: ID do técnico
        criado_em, atendido_em, atualizado_em: Timestamps definidos pela Entity
        equipamento, avaria, descricao_reparacao, pecas: Campos Hardware
        software, descricao_necessidade, descricao_intervencao: Campos Software
    """

    id = models.BigAutoField(primary_key=True)

    tipo = models.CharField(
        max_length=20,
        choices=TicketTipoChoices.choices,
        db_index=True,
        help_text="Variante do ticket"
    )

    # Estado
    estado = models.CharField(
        max_length=30,
        choices=TicketEstadoChoices.choices,
        default=TicketEstadoChoices.POR_ATENDER,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    estado_atendimento = models.CharField(
        max_length=30,
        choices=EstadoAtendimentoChoices.choices,
        default=EstadoAtendimentoChoices.ABERTO,
        help_text="Resultado do atendimento"
    )

    # Utilizadores (strings para desacoplar do model de utilizadores)
    submetido_por_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do colaborador que submeteu"
    )

    tecnico_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do técnico que atendeu"
    )

    # Timestamps
    criado_em = models.DateTimeField(db_index=True, help_text="Data/hora de criação")
    atendido_em = models.DateTimeField(null=True, blank=True, help_text="Início do atendimento")
    atualizado_em = models.DateTimeField(help_text="Data/hora da última atualização")

    # Hardware
    equipamento = models.CharField(max_length=200, null=True, blank=True)
    avaria = models.TextField(null=True, blank=True)
    descricao_reparacao = models.TextField(null=True, blank=True)
    pecas = models.TextField(null=True, blank=True)

    # Software
    software = models.CharField(max_length=200, null=True, blank=True)
    descricao_necessidade = models.TextField(null=True, blank=True)
    descricao_intervencao = models.TextField(null=True, blank=True)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['criado_em', 'id']
        indexes = [
            # Índices compostos para queries frequentes
            models.Index(fields=['estado', 'criado_em']),
            models.Index(fields=['tecnico_id', 'estado']),
            models.Index(fields=['submetido_por_id', 'criado_em']),
        ]

    def __str__(self):
        return f"[{self.id}] {self.tipo} - {self.estado}"

    def __repr__(self):
        return f"<TicketModel id={self.id} tipo={self.tipo} estado={self.estado}>"
