"""
Mappers entre Entities organizacionais e Models Django.
"""

from src.core.organizacao.entities import (
    CategoriaTicketEntity,
    DepartamentoEntity,
    FilialEntity,
    UsuarioEntity,
)

from .models import (
    CategoriaTicketModel,
    DepartamentoModel,
    FilialModel,
    UsuarioModel,
)


class FilialMapper:

    @staticmethod
    def to_model(entity: FilialEntity) -> FilialModel:
        return FilialModel(
            id=entity.id,
            nome=entity.nome,
            eh_fornecedor_software=entity.eh_fornecedor_software,
            ativo=entity.ativo,
        )

    @staticmethod
    def to_entity(model: FilialModel) -> FilialEntity:
        return FilialEntity(
            id=model.id,
            nome=model.nome,
            eh_fornecedor_software=model.eh_fornecedor_software,
            ativo=model.ativo,
        )


class DepartamentoMapper:

    @staticmethod
    def to_model(entity: DepartamentoEntity) -> DepartamentoModel:
        return DepartamentoModel(
            id=entity.id,
            nome=entity.nome,
            filial_id=entity.filial_id,
            eh_ti=entity.eh_ti,
            ativo=entity.ativo,
        )

    @staticmethod
    def to_entity(model: DepartamentoModel) -> DepartamentoEntity:
        return DepartamentoEntity(
            id=model.id,
            nome=model.nome,
            filial_id=model.filial_id,
            eh_ti=model.eh_ti,
            ativo=model.ativo,
        )


class UsuarioMapper:

    @staticmethod
    def to_model(entity: UsuarioEntity) -> UsuarioModel:
        return UsuarioModel(
            id=entity.id,
            username=entity.username,
            nome=entity.nome,
            sobrenome=entity.sobrenome,
            email=entity.email,
            filial_id=entity.filial_id,
            departamento_id=entity.departamento_id,
            papel_filial_id=entity.papel_filial_id,
            ativo=entity.ativo,
        )

    @staticmethod
    def to_entity(model: UsuarioModel) -> UsuarioEntity:
        return UsuarioEntity(
            id=model.id,
            username=model.username,
            nome=model.nome,
            sobrenome=model.sobrenome,
            email=model.email,
            filial_id=model.filial_id,
            departamento_id=model.departamento_id,
            papel_filial_id=model.papel_filial_id,
            ativo=model.ativo,
        )


class CategoriaMapper:

    @staticmethod
    def to_model(entity: CategoriaTicketEntity) -> CategoriaTicketModel:
        return CategoriaTicketModel(
            id=entity.id,
            slug=entity.slug,
            nome=entity.nome,
            ativo=entity.ativo,
        )

    @staticmethod
    def to_entity(model: CategoriaTicketModel) -> CategoriaTicketEntity:
        return CategoriaTicketEntity(
            id=model.id,
            slug=model.slug,
            nome=model.nome,
            ativo=model.ativo,
        )
