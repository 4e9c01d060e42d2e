"""
Use Cases do Domínio de Apontamentos de Tempo.

Use Cases implementados:
- CriarApontamentoService: Registra tempo num ticket ou tarefa de projeto
- AtualizarApontamentoService: Altera apontamento não validado
- ExcluirApontamentoService: Exclui (lógico) apontamento não validado
- ValidarApontamentoService: Valida ou desfaz validação
- ConsultaApontamentosService: Consultas e totais

Tempo real do ticket:
    Toda mutação de apontamento vinculado a ticket recalcula
    `ticket.tempo_real = soma dos apontamentos` e aplica a regra de
    derivação de atraso na mesma unidade de trabalho, com o ator da
    operação como responsável por um atraso novo.
"""

from datetime import date, datetime
from typing import Callable, List, Optional, Union
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.escopo import EscopoConsulta
from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.organizacao.diretorio import DiretorioOrganizacional
from src.core.atrasos.derivacao import ReconciliadorAtrasos

from .entities import ApontamentoEntity, parse_data
from .ports import ApontamentoRepository
from .dtos import (
    CriarApontamentoInputDTO,
    AtualizarApontamentoInputDTO,
    ValidarApontamentoInputDTO,
    ApontamentoOutputDTO,
)
from .events import (
    ApontamentoRegistradoEvent,
    ApontamentoExcluidoEvent,
    ApontamentoValidadoEvent,
)

logger = logging.getLogger(__name__)


class RecalculoTempoReal:
    """
    Recalcula o tempo real de um ticket e reconcilia seu atraso.

    Example:
        recalculo = RecalculoTempoReal(apontamento_repo, ticket_repo, reconciliador)
        with uow:
            for evento in recalculo.aplicar(ticket_id, ator_id):
                uow.publish_event(evento)
    """

    def __init__(
        self,
        apontamento_repo: ApontamentoRepository,
        ticket_repo,
        reconciliador: ReconciliadorAtrasos,
    ):
        self.apontamento_repo = apontamento_repo
        self.ticket_repo = ticket_repo
        self.reconciliador = reconciliador

    def aplicar(self, ticket_id: Optional[str], ator_id: Optional[str] = None) -> List[DomainEvent]:
        if not ticket_id:
            return []

        ticket = self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            logger.warning(f"Recalculo de tempo real ignorado: ticket {ticket_id} inexistente")
            return []

        ticket.tempo_real = self.apontamento_repo.somar_por_ticket(ticket_id)
        ticket.atualizado_em = datetime.now()
        self.ticket_repo.save(ticket)

        return self.reconciliador.reconciliar(ticket, ator_id=ator_id)


def _obter_apontamento(repo: ApontamentoRepository, apontamento_id: str) -> ApontamentoEntity:
    apontamento = repo.get_by_id(apontamento_id)
    if not apontamento:
        raise EntityNotFoundError(
            f"Apontamento {apontamento_id} não encontrado",
            entity_type="Apontamento",
            entity_id=apontamento_id
        )
    return apontamento


class CriarApontamentoService:
    """
    Use Case: Registrar tempo trabalhado.

    Fluxo:
    1. Verificar ticket (quando informado)
    2. Criar apontamento (data YYYY-MM-DD, tempo > 0, não validado)
    3. Recalcular tempo real do ticket e reconciliar atraso
    4. Disparar ApontamentoRegistradoEvent

    Example:
        service = CriarApontamentoService(apontamento_repo, ticket_repo, recalculo, uow)
        output = service.execute(CriarApontamentoInputDTO(
            usuario_id="u1", tempo_gasto=30, data="2025-03-10", ticket_id=ticket.id,
        ))
    """

    def __init__(
        self,
        apontamento_repo: ApontamentoRepository,
        ticket_repo,
        recalculo: RecalculoTempoReal,
        uow: UnitOfWork,
    ):
        self.apontamento_repo = apontamento_repo
        self.ticket_repo = ticket_repo
        self.recalculo = recalculo
        self.uow = uow

    def execute(self, input_dto: CriarApontamentoInputDTO) -> ApontamentoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket inexistente
            ValidationError: Vínculo, tempo ou data inválidos
        """
        with self.uow:
            if input_dto.ticket_id and not self.ticket_repo.exists(input_dto.ticket_id):
                raise EntityNotFoundError(
                    f"Ticket {input_dto.ticket_id} não encontrado",
                    entity_type="Ticket",
                    entity_id=input_dto.ticket_id
                )

            apontamento = ApontamentoEntity.criar(
                usuario_id=input_dto.usuario_id,
                tempo_gasto=input_dto.tempo_gasto,
                data=input_dto.data,
                ticket_id=input_dto.ticket_id,
                tarefa_projeto_id=input_dto.tarefa_projeto_id,
                descricao=input_dto.descricao,
            )
            self.apontamento_repo.save(apontamento)

            for evento in self.recalculo.aplicar(apontamento.ticket_id, input_dto.usuario_id):
                self.uow.publish_event(evento)

            self.uow.publish_event(
                ApontamentoRegistradoEvent(
                    aggregate_id=apontamento.id,
                    usuario_id=apontamento.usuario_id,
                    ticket_id=apontamento.ticket_id,
                    tarefa_projeto_id=apontamento.tarefa_projeto_id,
                    tempo_gasto=apontamento.tempo_gasto,
                )
            )

        return ApontamentoOutputDTO.from_entity(apontamento)


class AtualizarApontamentoService:
    """Use Case: Alterar apontamento ainda não validado."""

    def __init__(
        self,
        apontamento_repo: ApontamentoRepository,
        recalculo: RecalculoTempoReal,
        uow: UnitOfWork,
    ):
        self.apontamento_repo = apontamento_repo
        self.recalculo = recalculo
        self.uow = uow

    def execute(self, input_dto: AtualizarApontamentoInputDTO) -> ApontamentoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Apontamento inexistente
            BusinessRuleViolationError: Apontamento validado
        """
        with self.uow:
            apontamento = _obter_apontamento(self.apontamento_repo, input_dto.apontamento_id)
            apontamento.atualizar(
                tempo_gasto=input_dto.tempo_gasto,
                descricao=input_dto.descricao,
                data=input_dto.data or None,
            )
            self.apontamento_repo.save(apontamento)

            for evento in self.recalculo.aplicar(apontamento.ticket_id, input_dto.ator_id):
                self.uow.publish_event(evento)

        return ApontamentoOutputDTO.from_entity(apontamento)


class ExcluirApontamentoService:
    """Use Case: Excluir apontamento não validado (exclusão lógica)."""

    def __init__(
        self,
        apontamento_repo: ApontamentoRepository,
        recalculo: RecalculoTempoReal,
        uow: UnitOfWork,
    ):
        self.apontamento_repo = apontamento_repo
        self.recalculo = recalculo
        self.uow = uow

    def execute(self, apontamento_id: str, ator_id: str) -> None:
        with self.uow:
            apontamento = _obter_apontamento(self.apontamento_repo, apontamento_id)
            apontamento.excluir()
            self.apontamento_repo.save(apontamento)

            for evento in self.recalculo.aplicar(apontamento.ticket_id, ator_id):
                self.uow.publish_event(evento)

            self.uow.publish_event(
                ApontamentoExcluidoEvent(
                    aggregate_id=apontamento.id,
                    excluido_por_id=ator_id,
                    ticket_id=apontamento.ticket_id,
                )
            )


class ValidarApontamentoService:
    """
    Use Case: Validar apontamento (ou desfazer com validado=False).

    Raises:
        EntityNotFoundError: Apontamento ou validador inexistente
    """

    def __init__(
        self,
        apontamento_repo: ApontamentoRepository,
        diretorio: DiretorioOrganizacional,
        uow: UnitOfWork,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.apontamento_repo = apontamento_repo
        self.diretorio = diretorio
        self.uow = uow
        self.relogio = relogio

    def execute(self, input_dto: ValidarApontamentoInputDTO) -> ApontamentoOutputDTO:
        with self.uow:
            apontamento = _obter_apontamento(self.apontamento_repo, input_dto.apontamento_id)
            self.diretorio.obter_usuario(input_dto.validador_id, papel="Validador")

            apontamento.definir_validacao(
                input_dto.validado, input_dto.validador_id, self.relogio()
            )
            self.apontamento_repo.save(apontamento)

            self.uow.publish_event(
                ApontamentoValidadoEvent(
                    aggregate_id=apontamento.id,
                    validador_id=input_dto.validador_id,
                    validado=input_dto.validado,
                )
            )

        return ApontamentoOutputDTO.from_entity(apontamento)


class ConsultaApontamentosService:
    """Consultas e totais de apontamentos (somente ativos)."""

    def __init__(self, apontamento_repo: ApontamentoRepository):
        self.apontamento_repo = apontamento_repo

    def obter(self, apontamento_id: str) -> ApontamentoOutputDTO:
        return ApontamentoOutputDTO.from_entity(
            _obter_apontamento(self.apontamento_repo, apontamento_id)
        )

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoOutputDTO]:
        return self._saida(self.apontamento_repo.listar(escopo))

    def listar_por_ticket(self, ticket_id: str) -> List[ApontamentoOutputDTO]:
        return self._saida(self.apontamento_repo.listar_por_ticket(ticket_id))

    def listar_por_usuario(self, usuario_id: str) -> List[ApontamentoOutputDTO]:
        return self._saida(self.apontamento_repo.listar_por_usuario(usuario_id))

    def listar_por_periodo(
        self,
        usuario_id: str,
        inicio: Union[str, date],
        fim: Union[str, date],
    ) -> List[ApontamentoOutputDTO]:
        """
        Raises:
            ValidationError: Datas inválidas ou início após o fim
        """
        data_inicio = parse_data(inicio)
        data_fim = parse_data(fim)
        if data_inicio > data_fim:
            raise ValidationError(
                "A data inicial deve ser anterior ou igual à data final",
                field="data"
            )
        return self._saida(
            self.apontamento_repo.listar_por_periodo(usuario_id, data_inicio, data_fim)
        )

    def listar_validados(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoOutputDTO]:
        return self._saida(self.apontamento_repo.listar_por_validacao(True, escopo))

    def listar_pendentes(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoOutputDTO]:
        return self._saida(self.apontamento_repo.listar_por_validacao(False, escopo))

    def total_por_ticket(self, ticket_id: str) -> int:
        return self.apontamento_repo.somar_por_ticket(ticket_id)

    def total_por_usuario(self, usuario_id: str) -> int:
        return self.apontamento_repo.somar_por_usuario(usuario_id)

    @staticmethod
    def _saida(apontamentos: List[ApontamentoEntity]) -> List[ApontamentoOutputDTO]:
        return [ApontamentoOutputDTO.from_entity(a) for a in apontamentos]
