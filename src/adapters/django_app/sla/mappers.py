"""
Mappers entre Entities de SLA e Models Django.
"""

from src.core.sla.entities import SLAEntity, StatusSLA, TicketSLAEntity

from .models import SLAModel, TicketSLAModel


class SLAMapper:

    @staticmethod
    def to_model(entity: SLAEntity) -> SLAModel:
        return SLAModel(
            id=entity.id,
            nome=entity.nome,
            descricao=entity.descricao,
            categoria=entity.categoria,
            prioridade=entity.prioridade,
            tempo_alvo=entity.tempo_alvo,
            unidade=entity.unidade,
            ativo=entity.ativo,
        )

    @staticmethod
    def to_entity(model: SLAModel) -> SLAEntity:
        return SLAEntity(
            id=model.id,
            nome=model.nome,
            descricao=model.descricao,
            categoria=model.categoria,
            prioridade=model.prioridade or None,
            tempo_alvo=model.tempo_alvo,
            unidade=model.unidade,
            ativo=model.ativo,
        )


class TicketSLAMapper:

    @staticmethod
    def to_model(entity: TicketSLAEntity) -> TicketSLAModel:
        return TicketSLAModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            sla_id=entity.sla_id,
            prazo_alvo=entity.prazo_alvo,
            status=entity.status.value,
            concluido_em=entity.concluido_em,
            minutos_violacao=entity.minutos_violacao,
        )

    @staticmethod
    def to_entity(model: TicketSLAModel) -> TicketSLAEntity:
        return TicketSLAEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            sla_id=model.sla_id,
            prazo_alvo=model.prazo_alvo,
            status=StatusSLA(model.status),
            concluido_em=model.concluido_em,
            minutos_violacao=model.minutos_violacao,
        )
