"""
Mappers entre Entities de Atrasos e Models Django.
"""

from decimal import Decimal

from src.core.atrasos.entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
)

from .models import AtrasoModel, JustificativaModel


class AtrasoMapper:

    @staticmethod
    def to_model(entity: AtrasoEntity) -> AtrasoModel:
        return AtrasoModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            usuario_id=entity.usuario_id,
            tempo_estimado=entity.tempo_estimado,
            tempo_real=entity.tempo_real,
            tempo_atraso=entity.tempo_atraso,
            percentual_atraso=Decimal(str(entity.percentual_atraso)),
            status=entity.status.value,
            detectado_em=entity.detectado_em,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    @staticmethod
    def to_entity(model: AtrasoModel) -> AtrasoEntity:
        return AtrasoEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            usuario_id=model.usuario_id,
            tempo_estimado=model.tempo_estimado,
            tempo_real=model.tempo_real,
            tempo_atraso=model.tempo_atraso,
            percentual_atraso=float(model.percentual_atraso),
            status=AtrasoStatus(model.status),
            detectado_em=model.detectado_em,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )


class JustificativaMapper:

    @staticmethod
    def to_model(entity: JustificativaEntity) -> JustificativaModel:
        return JustificativaModel(
            id=entity.id,
            atraso_id=entity.atraso_id,
            usuario_id=entity.usuario_id,
            justificativa=entity.justificativa,
            status=entity.status.value,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            comentario_validacao=entity.comentario_validacao or '',
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    @staticmethod
    def to_entity(model: JustificativaModel) -> JustificativaEntity:
        return JustificativaEntity(
            id=model.id,
            atraso_id=model.atraso_id,
            usuario_id=model.usuario_id,
            justificativa=model.justificativa,
            status=JustificativaStatus(model.status),
            validado_por_id=model.validado_por_id,
            validado_em=model.validado_em,
            comentario_validacao=model.comentario_validacao,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )
