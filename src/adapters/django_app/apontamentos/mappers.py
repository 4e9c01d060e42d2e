"""
Mapper entre ApontamentoEntity e ApontamentoModel.
"""

from src.core.apontamentos.entities import ApontamentoEntity

from .models import ApontamentoModel


class ApontamentoMapper:

    @staticmethod
    def to_model(entity: ApontamentoEntity) -> ApontamentoModel:
        return ApontamentoModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            tarefa_projeto_id=entity.tarefa_projeto_id,
            usuario_id=entity.usuario_id,
            tempo_gasto=entity.tempo_gasto,
            data=entity.data,
            descricao=entity.descricao,
            validado=entity.validado,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            excluido_em=entity.excluido_em,
        )

    @staticmethod
    def to_entity(model: ApontamentoModel) -> ApontamentoEntity:
        return ApontamentoEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            tarefa_projeto_id=model.tarefa_projeto_id,
            usuario_id=model.usuario_id,
            tempo_gasto=model.tempo_gasto,
            data=model.data,
            descricao=model.descricao,
            validado=model.validado,
            validado_por_id=model.validado_por_id,
            validado_em=model.validado_em,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            excluido_em=model.excluido_em,
        )
