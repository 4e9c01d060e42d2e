"""
Use Cases do Domínio de Atrasos.

Fluxo de justificativa:
- CriarJustificativaService: Responsável justifica o atraso (atraso → pending)
- AtualizarJustificativaService: Autor edita enquanto pendente
- ValidarJustificativaService: Validador aceita (atraso → justified)
  ou rejeita (atraso → unjustified)
- RejeitarJustificativaService: Atalho de rejeição por atraso
- ExcluirJustificativaService: Autor retira a justificativa pendente

Manutenção:
- ExcluirAtrasoService: Remove atraso e justificativa

Consultas:
- ConsultaAtrasosService
- ConsultaJustificativasService

Capacidades (dono/autor) são verificadas pela PoliticaAcesso com a
tripla (ator, recurso, ação).
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.escopo import EscopoConsulta
from src.core.shared.politicas import Acao, Ator, PoliticaAcesso
from src.core.shared.exceptions import (
    EntityNotFoundError,
    BusinessRuleViolationError,
    ValidationError,
)

from .entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
)
from .ports import AtrasoRepository, JustificativaRepository
from .dtos import (
    CriarJustificativaInputDTO,
    AtualizarJustificativaInputDTO,
    ValidarJustificativaInputDTO,
    AtrasoOutputDTO,
    JustificativaOutputDTO,
    EstatisticasAtrasoDTO,
)
from .events import (
    AtrasoRemovidoEvent,
    JustificativaSubmetidaEvent,
    JustificativaDecididaEvent,
)

logger = logging.getLogger(__name__)


def _obter_atraso(atraso_repo: AtrasoRepository, atraso_id: str) -> AtrasoEntity:
    atraso = atraso_repo.get_by_id(atraso_id)
    if not atraso:
        raise EntityNotFoundError(
            f"Atraso {atraso_id} não encontrado",
            entity_type="Atraso",
            entity_id=atraso_id
        )
    return atraso


def _justificativa_nao_encontrada(referencia: str) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"Justificativa {referencia} não encontrada",
        entity_type="Justificativa",
        entity_id=referencia
    )


# =============================================================================
# Justificativas
# =============================================================================

class CriarJustificativaService:
    """
    Use Case: Justificar um atraso.

    Fluxo:
    1. Buscar atraso
    2. Verificar que o ator é o responsável (atraso.justificar)
    3. Garantir que ainda não existe justificativa
    4. Criar justificativa "pending" e marcar atraso "pending"

    Example:
        service = CriarJustificativaService(atraso_repo, justificativa_repo, uow)
        output = service.execute(CriarJustificativaInputDTO(
            atraso_id=atraso.id,
            usuario_id="u1",
            justificativa="Dependência externa bloqueada",
        ))
    """

    def __init__(
        self,
        atraso_repo: AtrasoRepository,
        justificativa_repo: JustificativaRepository,
        uow: UnitOfWork,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.atraso_repo = atraso_repo
        self.justificativa_repo = justificativa_repo
        self.uow = uow
        self.politica = politica or PoliticaAcesso()

    def execute(self, input_dto: CriarJustificativaInputDTO) -> JustificativaOutputDTO:
        """
        Raises:
            EntityNotFoundError: Atraso inexistente
            AuthorizationError: Ator não é o responsável
            BusinessRuleViolationError: Justificativa já existe
            ValidationError: Texto vazio
        """
        with self.uow:
            atraso = _obter_atraso(self.atraso_repo, input_dto.atraso_id)
            self.politica.exigir(Ator(input_dto.usuario_id), atraso, Acao.JUSTIFICAR_ATRASO)

            if self.justificativa_repo.get_by_atraso(atraso.id):
                raise BusinessRuleViolationError(
                    "Já existe uma justificativa para este atraso",
                    rule="justificativa_unica"
                )

            justificativa = JustificativaEntity.criar(
                atraso_id=atraso.id,
                usuario_id=input_dto.usuario_id,
                justificativa=input_dto.justificativa,
            )
            atraso.marcar_pendente()

            self.justificativa_repo.save(justificativa)
            self.atraso_repo.save(atraso)

            self.uow.publish_event(
                JustificativaSubmetidaEvent(
                    aggregate_id=atraso.id,
                    justificativa_id=justificativa.id,
                    usuario_id=justificativa.usuario_id,
                )
            )

        logger.info(f"Justificativa criada para o atraso {atraso.id}")
        return JustificativaOutputDTO.from_entity(justificativa)


class AtualizarJustificativaService:
    """Use Case: Editar justificativa pendente (somente o autor)."""

    def __init__(
        self,
        justificativa_repo: JustificativaRepository,
        uow: UnitOfWork,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.justificativa_repo = justificativa_repo
        self.uow = uow
        self.politica = politica or PoliticaAcesso()

    def execute(self, input_dto: AtualizarJustificativaInputDTO) -> JustificativaOutputDTO:
        with self.uow:
            justificativa = self.justificativa_repo.get_by_id(input_dto.justificativa_id)
            if not justificativa:
                raise _justificativa_nao_encontrada(input_dto.justificativa_id)

            self.politica.exigir(
                Ator(input_dto.usuario_id), justificativa, Acao.EDITAR_JUSTIFICATIVA
            )
            justificativa.editar(input_dto.justificativa)
            self.justificativa_repo.save(justificativa)

        return JustificativaOutputDTO.from_entity(justificativa)


class ValidarJustificativaService:
    """
    Use Case: Validar ou rejeitar justificativa.

    Resultado no atraso:
        validada  → justified
        rejeitada → unjustified

    Raises:
        BusinessRuleViolationError: Justificativa já processada
    """

    def __init__(
        self,
        atraso_repo: AtrasoRepository,
        justificativa_repo: JustificativaRepository,
        uow: UnitOfWork,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.atraso_repo = atraso_repo
        self.justificativa_repo = justificativa_repo
        self.uow = uow
        self.relogio = relogio

    def execute(self, input_dto: ValidarJustificativaInputDTO) -> JustificativaOutputDTO:
        with self.uow:
            justificativa = self.justificativa_repo.get_by_id(input_dto.justificativa_id)
            if not justificativa:
                raise _justificativa_nao_encontrada(input_dto.justificativa_id)

            justificativa.decidir(
                validado=input_dto.validado,
                validador_id=input_dto.validador_id,
                comentario=input_dto.comentario,
                agora=self.relogio(),
            )
            self.justificativa_repo.save(justificativa)

            atraso = self.atraso_repo.get_by_id(justificativa.atraso_id)
            if atraso:
                if input_dto.validado:
                    atraso.marcar_justificado()
                else:
                    atraso.marcar_nao_justificado()
                self.atraso_repo.save(atraso)
            else:
                logger.warning(
                    f"Justificativa {justificativa.id} decidida sem atraso associado"
                )

            self.uow.publish_event(
                JustificativaDecididaEvent(
                    aggregate_id=justificativa.atraso_id,
                    justificativa_id=justificativa.id,
                    validador_id=input_dto.validador_id,
                    validado=input_dto.validado,
                )
            )

        decisao = "validada" if input_dto.validado else "rejeitada"
        logger.info(f"Justificativa {justificativa.id} {decisao} por {input_dto.validador_id}")
        return JustificativaOutputDTO.from_entity(justificativa)


class RejeitarJustificativaService:
    """
    Use Case: Rejeitar a justificativa de um atraso.

    Localiza a justificativa pelo atraso e delega ao
    ValidarJustificativaService com validado=False.
    """

    def __init__(
        self,
        justificativa_repo: JustificativaRepository,
        validar_service: ValidarJustificativaService,
    ):
        self.justificativa_repo = justificativa_repo
        self.validar_service = validar_service

    def execute(self, atraso_id: str, validador_id: str, comentario: str = "") -> JustificativaOutputDTO:
        justificativa = self.justificativa_repo.get_by_atraso(atraso_id)
        if not justificativa:
            raise _justificativa_nao_encontrada(f"do atraso {atraso_id}")

        return self.validar_service.execute(
            ValidarJustificativaInputDTO(
                justificativa_id=justificativa.id,
                validador_id=validador_id,
                validado=False,
                comentario=comentario,
            )
        )


class ExcluirJustificativaService:
    """
    Use Case: Retirar justificativa pendente.

    Somente o autor, somente enquanto pendente. O atraso volta a
    "unjustified".
    """

    def __init__(
        self,
        atraso_repo: AtrasoRepository,
        justificativa_repo: JustificativaRepository,
        uow: UnitOfWork,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.atraso_repo = atraso_repo
        self.justificativa_repo = justificativa_repo
        self.uow = uow
        self.politica = politica or PoliticaAcesso()

    def execute(self, atraso_id: str, usuario_id: str) -> None:
        with self.uow:
            justificativa = self.justificativa_repo.get_by_atraso(atraso_id)
            if not justificativa:
                raise _justificativa_nao_encontrada(f"do atraso {atraso_id}")

            self.politica.exigir(Ator(usuario_id), justificativa, Acao.EXCLUIR_JUSTIFICATIVA)
            justificativa.exigir_pendente(
                "Impossível excluir uma justificativa já validada ou rejeitada"
            )

            self.justificativa_repo.delete(justificativa.id)

            atraso = self.atraso_repo.get_by_id(atraso_id)
            if atraso:
                atraso.marcar_nao_justificado()
                self.atraso_repo.save(atraso)

        logger.info(f"Justificativa do atraso {atraso_id} excluída por {usuario_id}")


class ExcluirAtrasoService:
    """Use Case: Remover um atraso e sua justificativa."""

    def __init__(
        self,
        atraso_repo: AtrasoRepository,
        justificativa_repo: JustificativaRepository,
        uow: UnitOfWork,
    ):
        self.atraso_repo = atraso_repo
        self.justificativa_repo = justificativa_repo
        self.uow = uow

    def execute(self, atraso_id: str) -> None:
        with self.uow:
            atraso = _obter_atraso(self.atraso_repo, atraso_id)

            justificativa = self.justificativa_repo.get_by_atraso(atraso.id)
            if justificativa:
                self.justificativa_repo.delete(justificativa.id)

            self.atraso_repo.delete(atraso.id)
            self.uow.publish_event(
                AtrasoRemovidoEvent(aggregate_id=atraso.id, ticket_id=atraso.ticket_id)
            )


# =============================================================================
# Consultas
# =============================================================================

class ConsultaAtrasosService:
    """
    Consultas de atrasos.

    Leituras nunca disparam reconciliação; o estado reflete a última
    mutação de apontamento/estimativa ou a última varredura.
    """

    def __init__(self, atraso_repo: AtrasoRepository):
        self.atraso_repo = atraso_repo

    def obter(self, atraso_id: str) -> AtrasoOutputDTO:
        return AtrasoOutputDTO.from_entity(_obter_atraso(self.atraso_repo, atraso_id))

    def obter_por_ticket(self, ticket_id: str) -> AtrasoOutputDTO:
        atraso = self.atraso_repo.get_by_ticket(ticket_id)
        if not atraso:
            raise EntityNotFoundError(
                f"Nenhum atraso para o ticket {ticket_id}",
                entity_type="Atraso",
                entity_id=ticket_id
            )
        return AtrasoOutputDTO.from_entity(atraso)

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[AtrasoOutputDTO]:
        return [AtrasoOutputDTO.from_entity(a) for a in self.atraso_repo.listar(escopo)]

    def listar_por_usuario(
        self,
        usuario_id: str,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoOutputDTO]:
        return [
            AtrasoOutputDTO.from_entity(a)
            for a in self.atraso_repo.listar_por_usuario(usuario_id, escopo)
        ]

    def listar_por_status(
        self,
        status: str,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoOutputDTO]:
        try:
            status_enum = AtrasoStatus.from_string(status)
        except ValueError as e:
            raise ValidationError(str(e), field="status")

        return [
            AtrasoOutputDTO.from_entity(a)
            for a in self.atraso_repo.listar_por_status(status_enum, escopo)
        ]

    def listar_nao_justificados(
        self,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoOutputDTO]:
        return self.listar_por_status(AtrasoStatus.UNJUSTIFIED.value, escopo)

    def estatisticas_status(self) -> EstatisticasAtrasoDTO:
        return EstatisticasAtrasoDTO(por_status=self.atraso_repo.contar_por_status())


class ConsultaJustificativasService:
    """Consultas de justificativas."""

    def __init__(
        self,
        justificativa_repo: JustificativaRepository,
        atraso_repo: AtrasoRepository,
    ):
        self.justificativa_repo = justificativa_repo
        self.atraso_repo = atraso_repo

    def obter_por_atraso(self, atraso_id: str) -> JustificativaOutputDTO:
        justificativa = self.justificativa_repo.get_by_atraso(atraso_id)
        if not justificativa:
            raise _justificativa_nao_encontrada(f"do atraso {atraso_id}")
        return JustificativaOutputDTO.from_entity(justificativa)

    def obter_por_ticket(self, ticket_id: str) -> JustificativaOutputDTO:
        atraso = self.atraso_repo.get_by_ticket(ticket_id)
        if not atraso:
            raise EntityNotFoundError(
                f"Nenhum atraso para o ticket {ticket_id}",
                entity_type="Atraso",
                entity_id=ticket_id
            )
        return self.obter_por_atraso(atraso.id)

    def listar_por_usuario(self, usuario_id: str) -> List[JustificativaOutputDTO]:
        return self._saida(self.justificativa_repo.listar_por_usuario(usuario_id))

    def listar_validadas(self) -> List[JustificativaOutputDTO]:
        return self._saida(self.justificativa_repo.listar_por_status(JustificativaStatus.VALIDATED))

    def listar_rejeitadas(self) -> List[JustificativaOutputDTO]:
        return self._saida(self.justificativa_repo.listar_por_status(JustificativaStatus.REJECTED))

    def listar_pendentes(self) -> List[JustificativaOutputDTO]:
        return self._saida(self.justificativa_repo.listar_por_status(JustificativaStatus.PENDING))

    def historico(self) -> List[JustificativaOutputDTO]:
        return self._saida(self.justificativa_repo.listar_todas())

    @staticmethod
    def _saida(justificativas: List[JustificativaEntity]) -> List[JustificativaOutputDTO]:
        return [JustificativaOutputDTO.from_entity(j) for j in justificativas]
