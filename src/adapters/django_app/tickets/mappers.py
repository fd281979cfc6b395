"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity → TicketModel (para inserção)
- Converter TicketModel → TicketEntity (para uso no Core)
- Extrair os campos mutáveis para a escrita condicionada

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Any, Dict, Iterable, List

from src.core.tickets.entities import (
    TicketEntity,
    TicketEstado,
    EstadoAtendimento,
    TipoTicket,
)

from .models import TicketModel


# Campos que mudam nas transições; tipo, submetedor e criação são imutáveis
CAMPOS_MUTAVEIS = (
    'estado',
    'estado_atendimento',
    'tecnico_id',
    'atendido_em',
    'atualizado_em',
    'descricao_reparacao',
    'pecas',
    'descricao_intervencao',
)


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    - to_update_fields(): Entity → campos da escrita condicionada
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository.
            Se a entidade ainda não tem ID, o model também não.
        """
        return TicketModel(
            id=entity.id,
            tipo=entity.tipo.value,
            estado=entity.estado.value,
            estado_atendimento=entity.estado_atendimento.value,
            submetido_por_id=entity.submetido_por_id,
            tecnico_id=entity.tecnico_id,
            criado_em=entity.criado_em,
            atendido_em=entity.atendido_em,
            atualizado_em=entity.atualizado_em,
            equipamento=entity.equipamento,
            avaria=entity.avaria,
            descricao_reparacao=entity.descricao_reparacao,
            pecas=entity.pecas,
            software=entity.software,
            descricao_necessidade=entity.descricao_necessidade,
            descricao_intervencao=entity.descricao_intervencao,
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa as validações de criar_hardware/criar_software
            pois os dados já foram validados na criação original.
        """
        return TicketEntity(
            id=model.id,
            tipo=TipoTicket(model.tipo),
            submetido_por_id=model.submetido_por_id,
            estado=TicketEstado(model.estado),
            estado_atendimento=EstadoAtendimento(model.estado_atendimento),
            tecnico_id=model.tecnico_id,
            criado_em=model.criado_em,
            atendido_em=model.atendido_em,
            atualizado_em=model.atualizado_em,
            equipamento=model.equipamento,
            avaria=model.avaria,
            descricao_reparacao=model.descricao_reparacao,
            pecas=model.pecas,
            software=model.software,
            descricao_necessidade=model.descricao_necessidade,
            descricao_intervencao=model.descricao_intervencao,
        )

    @staticmethod
    def to_entity_list(models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]

    @staticmethod
    def to_update_fields(entity: TicketEntity) -> Dict[str, Any]:
        """
        Campos a gravar numa transição, já no formato do Model.

        Returns:
            Dict pronto para QuerySet.update(**campos)
        """
        model = TicketMapper.to_model(entity)
        return {campo: getattr(model, campo) for campo in CAMPOS_MUTAVEIS}
