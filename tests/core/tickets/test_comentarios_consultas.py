"""
Testes Unitários - Comentários e consultas de tickets.

Coverage:
- Adicionar / editar / excluir comentário (somente o autor)
- Visibilidade de comentários internos
- ConsultaTicketsService: filtros, escopo e paginação
"""

from datetime import datetime, timedelta

import pytest

from src.core.shared.escopo import EscopoConsulta
from src.core.shared.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.politicas import Ator
from src.core.tickets.dtos import (
    AdicionarComentarioInputDTO,
    AtualizarComentarioInputDTO,
    ListarTicketsQueryDTO,
)
from src.core.tickets.entities import ResponsavelTicket, TicketEntity, TicketStatus


@pytest.fixture
def ticket(container):
    entidade = TicketEntity.criar(
        codigo="TKT-2025-0001",
        titulo="Sem rede",
        descricao="Cabo desconectado",
        criador_id="cli-1",
        filial_id="f-loja",
    )
    container.ticket_repository().save(entidade)
    return entidade


@pytest.fixture
def comentar(container, ticket):
    def adicionar(texto="Verificando", usuario_id="ti-1", interno=False):
        return container.adicionar_comentario_service().execute(
            AdicionarComentarioInputDTO(
                ticket_id=ticket.id, usuario_id=usuario_id, comentario=texto, interno=interno
            )
        )
    return adicionar


class TestComentarios:

    def test_adicionar_comentario(self, comentar, ticket, historico):
        output = comentar("  Trocando o cabo  ")

        assert output.comentario == "Trocando o cabo"
        assert output.ticket_id == ticket.id
        assert historico(ticket.id)[-1].acao == "comment_added"

    def test_comentario_vazio(self, comentar):
        with pytest.raises(ValidationError):
            comentar("   ")

    def test_ticket_inexistente(self, container):
        with pytest.raises(EntityNotFoundError):
            container.adicionar_comentario_service().execute(
                AdicionarComentarioInputDTO(ticket_id="fantasma", usuario_id="ti-1", comentario="x")
            )

    def test_autor_edita(self, container, comentar, ticket):
        comentario = comentar()

        output = container.atualizar_comentario_service().execute(
            AtualizarComentarioInputDTO(
                ticket_id=ticket.id, comentario_id=comentario.id,
                usuario_id="ti-1", comentario=" Resolvido ",
            )
        )

        assert output.comentario == "Resolvido"

    def test_outro_usuario_nao_edita(self, container, comentar, ticket):
        comentario = comentar()

        with pytest.raises(AuthorizationError) as exc_info:
            container.atualizar_comentario_service().execute(
                AtualizarComentarioInputDTO(
                    ticket_id=ticket.id, comentario_id=comentario.id,
                    usuario_id="ti-2", comentario="editado",
                )
            )

        assert exc_info.value.rule == "comentario.editar"

    def test_editar_para_vazio(self, container, comentar, ticket):
        comentario = comentar()
        with pytest.raises(ValidationError):
            container.atualizar_comentario_service().execute(
                AtualizarComentarioInputDTO(
                    ticket_id=ticket.id, comentario_id=comentario.id,
                    usuario_id="ti-1", comentario="  ",
                )
            )

    def test_comentario_de_outro_ticket(self, container, comentar):
        comentario = comentar()
        with pytest.raises(EntityNotFoundError):
            container.excluir_comentario_service().execute("outro-ticket", comentario.id, "ti-1")

    def test_autor_exclui(self, container, comentar, ticket):
        comentario = comentar()

        container.excluir_comentario_service().execute(ticket.id, comentario.id, "ti-1")

        assert container.comentario_repository().get_by_id(comentario.id) is None
        with pytest.raises(EntityNotFoundError):
            container.excluir_comentario_service().execute(ticket.id, comentario.id, "ti-1")

    def test_outro_usuario_nao_exclui(self, container, comentar, ticket):
        comentario = comentar()
        with pytest.raises(AuthorizationError):
            container.excluir_comentario_service().execute(ticket.id, comentario.id, "cli-1")


class TestListarComentarios:

    @pytest.fixture
    def comentarios(self, comentar):
        comentar("Público", usuario_id="cli-1")
        comentar("Interno", interno=True)

    @pytest.mark.usefixtures("comentarios")
    def test_usuario_comum_nao_ve_internos(self, container, ticket):
        itens = container.listar_comentarios_service().execute(ticket.id, Ator("cli-1"))
        assert [c.comentario for c in itens] == ["Público"]

    @pytest.mark.usefixtures("comentarios")
    def test_departamento_de_ti_ve_internos(self, container, ticket):
        itens = container.listar_comentarios_service().execute(
            ticket.id, Ator("ti-2", departamento_eh_ti=True)
        )
        assert [c.comentario for c in itens] == ["Público", "Interno"]

    @pytest.mark.usefixtures("comentarios")
    def test_permissao_explicita_ve_internos(self, container, ticket):
        ator = Ator("cli-2", permissoes=frozenset({"tickets.view_internal_comments"}))
        itens = container.listar_comentarios_service().execute(ticket.id, ator)
        assert len(itens) == 2


class TestConsultaTickets:

    @pytest.fixture
    def tickets(self, container):
        """Três tickets: dois da loja (um de cli-1), um da matriz."""
        repo = container.ticket_repository()
        base = datetime(2025, 3, 10, 9, 0)
        dados = [
            ("TKT-2025-0001", "cli-1", "f-loja", "high", base),
            ("TKT-2025-0002", "cli-2", "f-loja", "low", base + timedelta(hours=1)),
            ("TKT-2025-0003", "ti-1", "f-ti", "high", base + timedelta(hours=2)),
        ]
        criados = []
        for codigo, criador, filial, prioridade, criado_em in dados:
            ticket = TicketEntity(
                codigo=codigo, titulo=codigo, descricao="d", criador_id=criador,
                filial_id=filial, criado_em=criado_em,
            )
            ticket.prioridade = type(ticket.prioridade).from_string(prioridade)
            repo.save(ticket)
            criados.append(ticket)
        return criados

    @pytest.fixture
    def consulta(self, container):
        return container.consulta_tickets_service()

    def _codigos(self, resultado):
        return [item.codigo for item in resultado.items]

    @pytest.mark.usefixtures("tickets")
    def test_sem_escopo_mais_recentes_primeiro(self, consulta):
        resultado = consulta.listar()

        assert self._codigos(resultado) == ["TKT-2025-0003", "TKT-2025-0002", "TKT-2025-0001"]
        assert resultado.total == 3

    @pytest.mark.usefixtures("tickets")
    def test_filtro_prioridade(self, consulta):
        resultado = consulta.listar(ListarTicketsQueryDTO(prioridade="high"))
        assert self._codigos(resultado) == ["TKT-2025-0003", "TKT-2025-0001"]

    @pytest.mark.usefixtures("tickets")
    def test_paginacao(self, consulta):
        resultado = consulta.listar(ListarTicketsQueryDTO(pagina=2, por_pagina=2))

        assert self._codigos(resultado) == ["TKT-2025-0001"]
        assert resultado.total == 3
        assert resultado.total_paginas == 2
        assert resultado.tem_anterior
        assert not resultado.tem_proxima

    @pytest.mark.parametrize("filtro", [{"status": "aberto"}, {"prioridade": "urgente"}])
    def test_filtro_invalido(self, consulta, filtro):
        with pytest.raises(ValidationError):
            consulta.listar(ListarTicketsQueryDTO(**filtro))

    @pytest.mark.usefixtures("tickets")
    def test_escopo_view_own(self, consulta):
        escopo = EscopoConsulta(
            usuario_id="cli-1", filial_id="f-loja", permissoes=frozenset({"tickets.view_own"})
        )
        assert self._codigos(consulta.listar(escopo=escopo)) == ["TKT-2025-0001"]

    def test_escopo_view_own_inclui_responsavel(self, consulta, container, tickets):
        container.responsavel_repository().substituir(
            tickets[1].id, [ResponsavelTicket(tickets[1].id, "cli-1")]
        )
        escopo = EscopoConsulta(
            usuario_id="cli-1", filial_id="f-loja", permissoes=frozenset({"tickets.view_own"})
        )
        assert self._codigos(consulta.listar(escopo=escopo)) == ["TKT-2025-0002", "TKT-2025-0001"]

    @pytest.mark.usefixtures("tickets")
    def test_escopo_filial(self, consulta):
        escopo = EscopoConsulta(
            usuario_id="cli-2", filial_id="f-loja", permissoes=frozenset({"tickets.view_filiale"})
        )
        assert self._codigos(consulta.listar(escopo=escopo)) == ["TKT-2025-0002", "TKT-2025-0001"]

    @pytest.mark.usefixtures("tickets")
    def test_escopo_visao_global(self, consulta):
        escopo = EscopoConsulta(
            usuario_id="ti-1",
            permissoes=frozenset({"tickets.view_all", "reports.view_global"}),
        )
        assert consulta.listar(escopo=escopo).total == 3

    @pytest.mark.usefixtures("tickets")
    def test_escopo_sem_permissao(self, consulta):
        escopo = EscopoConsulta(usuario_id="cli-1", filial_id="f-loja")
        assert consulta.listar(escopo=escopo).total == 0

    def test_filtro_status(self, consulta, tickets):
        tickets[0].alterar_status(TicketStatus.EN_COURS)
        resultado = consulta.listar(ListarTicketsQueryDTO(status="en_cours"))
        assert self._codigos(resultado) == ["TKT-2025-0001"]

    def test_obter_por_codigo(self, consulta, tickets):
        assert consulta.obter_por_codigo("TKT-2025-0002").id == tickets[1].id

        with pytest.raises(EntityNotFoundError):
            consulta.obter_por_codigo("TKT-1999-0001")

    def test_obter_excluido(self, consulta, tickets):
        tickets[0].excluir()
        with pytest.raises(EntityNotFoundError):
            consulta.obter(tickets[0].id)
