"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity ↔ TicketModel
- Converter ResponsavelTicket, ComentarioEntity e HistoricoTicketEntry

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import List

from src.core.tickets.entities import (
    ComentarioEntity,
    HistoricoTicketEntry,
    ResponsavelTicket,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)

from .models import (
    TicketComentarioModel,
    TicketHistoricoModel,
    TicketModel,
    TicketResponsavelModel,
)


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return TicketModel(
            id=entity.id,
            codigo=entity.codigo,
            titulo=entity.titulo,
            descricao=entity.descricao,
            categoria=entity.categoria or '',
            origem=entity.origem,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            criador_id=entity.criador_id,
            solicitante_id=entity.solicitante_id,
            solicitante_nome=entity.solicitante_nome,
            solicitante_departamento=entity.solicitante_departamento,
            filial_id=entity.filial_id,
            software_id=entity.software_id,
            pai_id=entity.pai_id,
            atribuido_a_id=entity.atribuido_a_id,
            tempo_estimado=entity.tempo_estimado,
            tempo_real=entity.tempo_real,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            fechado_em=entity.fechado_em,
            excluido_em=entity.excluido_em,
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            codigo=model.codigo,
            titulo=model.titulo,
            descricao=model.descricao,
            categoria=model.categoria,
            origem=model.origem,
            status=TicketStatus(model.status),
            prioridade=TicketPriority(model.prioridade),
            criador_id=model.criador_id,
            solicitante_id=model.solicitante_id,
            solicitante_nome=model.solicitante_nome,
            solicitante_departamento=model.solicitante_departamento,
            filial_id=model.filial_id,
            software_id=model.software_id,
            pai_id=model.pai_id,
            atribuido_a_id=model.atribuido_a_id,
            tempo_estimado=model.tempo_estimado,
            tempo_real=model.tempo_real,
            validado_por_id=model.validado_por_id,
            validado_em=model.validado_em,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            fechado_em=model.fechado_em,
            excluido_em=model.excluido_em,
        )

    @staticmethod
    def to_entity_list(models: List[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]


class ResponsavelMapper:

    @staticmethod
    def to_model(entity: ResponsavelTicket) -> TicketResponsavelModel:
        return TicketResponsavelModel(
            ticket_id=entity.ticket_id,
            usuario_id=entity.usuario_id,
            eh_lider=entity.eh_lider,
        )

    @staticmethod
    def to_entity(model: TicketResponsavelModel) -> ResponsavelTicket:
        return ResponsavelTicket(
            ticket_id=model.ticket_id,
            usuario_id=model.usuario_id,
            eh_lider=model.eh_lider,
        )


class ComentarioMapper:

    @staticmethod
    def to_model(entity: ComentarioEntity) -> TicketComentarioModel:
        return TicketComentarioModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            usuario_id=entity.usuario_id,
            comentario=entity.comentario,
            interno=entity.interno,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            excluido_em=entity.excluido_em,
        )

    @staticmethod
    def to_entity(model: TicketComentarioModel) -> ComentarioEntity:
        return ComentarioEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            usuario_id=model.usuario_id,
            comentario=model.comentario,
            interno=model.interno,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            excluido_em=model.excluido_em,
        )


class HistoricoMapper:
    """Mapper do histórico (o UUID da entrada vira coluna própria)."""

    @staticmethod
    def to_model(entry: HistoricoTicketEntry) -> TicketHistoricoModel:
        return TicketHistoricoModel(
            uuid=entry.id,
            ticket_id=entry.ticket_id,
            usuario_id=entry.usuario_id or '',
            acao=entry.acao,
            campo=entry.campo,
            valor_antigo=entry.valor_antigo,
            valor_novo=entry.valor_novo,
            descricao=entry.descricao,
            criado_em=entry.criado_em,
        )

    @staticmethod
    def to_entity(model: TicketHistoricoModel) -> HistoricoTicketEntry:
        return HistoricoTicketEntry(
            id=model.uuid,
            ticket_id=model.ticket_id,
            usuario_id=model.usuario_id,
            acao=model.acao,
            campo=model.campo,
            valor_antigo=model.valor_antigo,
            valor_novo=model.valor_novo,
            descricao=model.descricao,
            criado_em=model.criado_em,
        )
