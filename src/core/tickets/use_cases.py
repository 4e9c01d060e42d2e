"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Cria novo ticket (código, filial, responsáveis, SLA)
- AtualizarTicketService: Atualização parcial campo a campo
- AtribuirTicketService: Define responsáveis e líder
- AlterarStatusTicketService: Muda status (com notificações)
- ValidarTicketService: Valida resolução (en_attente → resolu)
- FecharTicketService: Fecha ticket (cloture) e conclui SLA
- ExcluirTicketService: Exclusão lógica
- AdicionarComentarioService / AtualizarComentarioService /
  ExcluirComentarioService / ListarComentariosService: Comentários
- ConsultaTicketsService: Consultas

Responsabilidades dos Use Cases:
- Validar entrada antes de qualquer escrita
- Gerenciar transações (via UoW) das escritas principais
- Disparar eventos de domínio
- Após o commit: histórico, SLA e notificações (nunca falham a operação)
- Retornar DTOs de saída

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.escopo import EscopoConsulta
from src.core.shared.politicas import Acao, Ator, PoliticaAcesso
from src.core.shared.exceptions import (
    EntityNotFoundError,
    ValidationError,
)
from src.core.organizacao.diretorio import DiretorioOrganizacional
from src.core.notificacoes.notificador import Notificador
from src.core.notificacoes.ports import (
    TICKET_CRIADO,
    TICKET_SUBMETIDO_VALIDACAO,
    TICKET_INVALIDADO,
    TICKET_VALIDADO,
)
from src.core.sla.service import GestorSLA
from src.core.atrasos.derivacao import ReconciliadorAtrasos

from .ports import (
    TicketRepository,
    ResponsavelRepository,
    ComentarioRepository,
    HistoricoRepository,
)
from .entities import (
    TicketEntity,
    TicketPriority,
    TicketStatus,
    ComentarioEntity,
    AcaoHistorico,
    ResponsavelTicket,
)
from .atribuicao import (
    ValidadorAtribuicao,
    normalizar_responsaveis,
    responsavel_principal,
    montar_vinculos,
)
from .codigo import GeradorCodigoTicket
from .historico import EscritorHistorico
from .dtos import (
    CriarTicketInputDTO,
    AtualizarTicketInputDTO,
    AtribuirTicketInputDTO,
    AlterarStatusInputDTO,
    ValidarTicketInputDTO,
    FecharTicketInputDTO,
    AdicionarComentarioInputDTO,
    AtualizarComentarioInputDTO,
    TicketOutputDTO,
    TicketListItemDTO,
    ComentarioOutputDTO,
    HistoricoOutputDTO,
    ListarTicketsQueryDTO,
    PaginatedResultDTO,
)
from .events import (
    TicketCriadoEvent,
    TicketAtualizadoEvent,
    TicketAtribuidoEvent,
    TicketStatusAlteradoEvent,
    TicketValidadoEvent,
    TicketExcluidoEvent,
    TicketComentarioAdicionadoEvent,
)

logger = logging.getLogger(__name__)


ORIGEM_SENTINELA = "kronos"

# (campo, valor antigo, valor novo) registrados no histórico
Alteracao = Tuple[str, str, str]


def _link_ticket(ticket_id: str) -> str:
    return f"/app/tickets/{ticket_id}"


def _texto(valor) -> str:
    return "" if valor is None else str(valor)


def _obter_ticket(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id
        )
    return ticket


def _validar_pai(ticket_repo: TicketRepository, pai_id: str) -> None:
    if not pai_id:
        raise ValidationError("Ticket pai inválido", field="pai_id")
    if not ticket_repo.exists(pai_id):
        raise EntityNotFoundError(
            f"Ticket pai {pai_id} não encontrado",
            entity_type="Ticket",
            entity_id=pai_id
        )


def _parse_prioridade(valor: str) -> TicketPriority:
    try:
        return TicketPriority.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field="prioridade")


def _parse_status(valor: str) -> TicketStatus:
    try:
        return TicketStatus.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field="status")


# =============================================================================
# Comandos do ciclo de vida
# =============================================================================

class CriarTicketService:
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Resolver criador, filial, categoria, responsáveis, pai e solicitante
    2. Gerar código TKT-<ano>-<seq>
    3. Persistir ticket e responsáveis (transação)
    4. Disparar evento TicketCriado
    5. Pós-commit: histórico "created", SLA, notificação à TI fornecedora

    Example:
        service = container.criar_ticket_service()
        output = service.execute(CriarTicketInputDTO(
            titulo="Impressora parada",
            descricao="A impressora do 2º andar não liga",
            criador_id="user123",
            categoria="incident",
            prioridade="high",
        ))
        print(output.codigo)  # TKT-2025-0001
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        responsavel_repo: ResponsavelRepository,
        diretorio: DiretorioOrganizacional,
        gerador_codigo: GeradorCodigoTicket,
        uow: UnitOfWork,
        historico: EscritorHistorico,
        gestor_sla: GestorSLA,
        notificador: Notificador,
        relogio: Callable[[], datetime] = datetime.now,
        origem_sentinela: str = ORIGEM_SENTINELA,
    ):
        self.ticket_repo = ticket_repo
        self.responsavel_repo = responsavel_repo
        self.diretorio = diretorio
        self.validador = ValidadorAtribuicao(diretorio)
        self.gerador_codigo = gerador_codigo
        self.uow = uow
        self.historico = historico
        self.gestor_sla = gestor_sla
        self.notificador = notificador
        self.relogio = relogio
        self.origem_sentinela = origem_sentinela

    def execute(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        """
        Executa criação de ticket.

        Raises:
            EntityNotFoundError: Criador, responsável, pai ou solicitante inexistente
            ValidationError: Dados inválidos
            AuthorizationError: Atribuição fora do departamento de TI
            CodeGenerationError: Código único não encontrado
        """
        criador = self.diretorio.obter_usuario(input_dto.criador_id, papel="Usuário criador")
        filial_id = self.diretorio.resolver_filial(criador, input_dto.filial_id)
        self.diretorio.validar_categoria(input_dto.categoria)

        responsaveis, lider = normalizar_responsaveis(
            input_dto.responsaveis_ids, input_dto.lider_id
        )
        if responsaveis:
            self.validador.validar(responsaveis, criador.id)

        if input_dto.pai_id is not None:
            _validar_pai(self.ticket_repo, input_dto.pai_id)

        solicitante_nome = input_dto.solicitante_nome
        if input_dto.solicitante_id is not None:
            solicitante = self.diretorio.obter_usuario(
                input_dto.solicitante_id, papel="Usuário solicitante"
            )
            solicitante_nome = solicitante_nome or solicitante.nome_exibicao

        prioridade = (
            _parse_prioridade(input_dto.prioridade)
            if input_dto.prioridade else TicketPriority.MEDIUM
        )

        eh_ti_fornecedor = self.diretorio.eh_ti_fornecedor(criador.id)
        origem = self.origem_sentinela
        if eh_ti_fornecedor and input_dto.origem:
            origem = input_dto.origem

        with self.uow:
            agora = self.relogio()
            codigo = self.gerador_codigo.gerar(agora.year)

            ticket = TicketEntity.criar(
                codigo=codigo,
                titulo=input_dto.titulo,
                descricao=input_dto.descricao,
                criador_id=criador.id,
                prioridade=prioridade,
                categoria=input_dto.categoria,
                origem=origem,
                criado_em=agora,
                solicitante_id=input_dto.solicitante_id or None,
                solicitante_nome=solicitante_nome,
                solicitante_departamento=input_dto.solicitante_departamento,
                filial_id=filial_id,
                software_id=input_dto.software_id,
                pai_id=input_dto.pai_id,
                atribuido_a_id=responsavel_principal(responsaveis, lider),
                tempo_estimado=input_dto.tempo_estimado,
            )

            self.ticket_repo.save(ticket)
            vinculos = montar_vinculos(ticket.id, responsaveis, lider)
            if vinculos:
                self.responsavel_repo.substituir(ticket.id, vinculos)

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    codigo=ticket.codigo,
                    criador_id=ticket.criador_id,
                    titulo=ticket.titulo,
                    prioridade=ticket.prioridade.value,
                    categoria=ticket.categoria,
                    filial_id=ticket.filial_id,
                )
            )

        logger.info(f"Ticket {ticket.codigo} criado por {criador.id}")

        self.historico.registrar(
            ticket.id, criador.id, AcaoHistorico.CREATED, descricao="Ticket criado"
        )
        self.gestor_sla.aplicar(ticket)
        self._notificar_criacao(ticket, criador.nome_exibicao)

        return TicketOutputDTO.from_entity(ticket, vinculos)

    def _notificar_criacao(self, ticket: TicketEntity, nome_criador: str) -> None:
        filial = self.diretorio.nome_filial(ticket.filial_id)
        self.notificador.notificar_ti_fornecedor(
            TICKET_CRIADO,
            titulo=f"Novo ticket: {ticket.titulo}",
            mensagem=(
                f"Um novo ticket foi criado por {nome_criador or 'um usuário'} "
                f"({filial}). Código: {ticket.codigo}"
            ),
            link_url=_link_ticket(ticket.id),
            metadata={
                "ticket_id": ticket.id,
                "ticket_code": ticket.codigo,
                "filial_id": ticket.filial_id,
                "created_by_id": ticket.criador_id,
            },
        )


class AtualizarTicketService:
    """
    Use Case: Atualização parcial de ticket.

    Cada campo informado é aplicado e registrado no histórico
    ("updated", campo, antigo, novo). Uma nova estimativa reconcilia
    o atraso do ticket na mesma transação.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        responsavel_repo: ResponsavelRepository,
        diretorio: DiretorioOrganizacional,
        reconciliador: ReconciliadorAtrasos,
        uow: UnitOfWork,
        historico: EscritorHistorico,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.ticket_repo = ticket_repo
        self.responsavel_repo = responsavel_repo
        self.diretorio = diretorio
        self.validador = ValidadorAtribuicao(diretorio)
        self.reconciliador = reconciliador
        self.uow = uow
        self.historico = historico
        self.relogio = relogio

    def execute(self, input_dto: AtualizarTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket, solicitante, pai ou responsável inexistente
            ValidationError: Valor inválido
            AuthorizationError: Atribuição fora do departamento de TI
        """
        alteracoes: List[Alteracao] = []
        estimativa: Optional[Alteracao] = None

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)
            agora = self.relogio()

            if input_dto.titulo:
                TicketEntity._validar_titulo(input_dto.titulo)
                alteracoes.append(("title", ticket.titulo, input_dto.titulo))
                ticket.titulo = input_dto.titulo.strip()

            if input_dto.descricao:
                alteracoes.append(("description", ticket.descricao, input_dto.descricao))
                ticket.descricao = input_dto.descricao.strip()

            if input_dto.categoria:
                self.diretorio.validar_categoria(input_dto.categoria)
                if ticket.categoria != input_dto.categoria:
                    alteracoes.append(("category", ticket.categoria, input_dto.categoria))
                ticket.categoria = input_dto.categoria

            if input_dto.status:
                novo_status = _parse_status(input_dto.status)
                anterior = ticket.alterar_status(novo_status, agora)
                alteracoes.append(("status", anterior.value, novo_status.value))

            if input_dto.prioridade:
                prioridade = _parse_prioridade(input_dto.prioridade)
                alteracoes.append(("priority", ticket.prioridade.value, prioridade.value))
                ticket.prioridade = prioridade

            self._aplicar_solicitante(ticket, input_dto, alteracoes)

            if input_dto.solicitante_departamento:
                alteracoes.append((
                    "requester_department",
                    ticket.solicitante_departamento,
                    input_dto.solicitante_departamento,
                ))
                ticket.solicitante_departamento = input_dto.solicitante_departamento

            if input_dto.software_id is not None and (input_dto.software_id or None) != ticket.software_id:
                alteracoes.append(("software_id", _texto(ticket.software_id), input_dto.software_id))
                ticket.software_id = input_dto.software_id or None

            if input_dto.pai_id is not None:
                anterior_pai = ticket.pai_id
                ticket.definir_pai(input_dto.pai_id)
                _validar_pai(self.ticket_repo, input_dto.pai_id)
                alteracoes.append(("parent_id", _texto(anterior_pai), input_dto.pai_id))

            if input_dto.altera_responsaveis:
                responsaveis, lider = normalizar_responsaveis(
                    input_dto.responsaveis_ids, input_dto.lider_id
                )
                self.validador.validar(responsaveis, input_dto.ator_id)

                anterior_responsavel = ticket.atribuido_a_id
                principal = responsavel_principal(responsaveis, lider)
                if principal:
                    ticket.atribuido_a_id = principal
                if ticket.atribuido_a_id != anterior_responsavel:
                    alteracoes.append((
                        "assigned_to", _texto(anterior_responsavel), _texto(ticket.atribuido_a_id)
                    ))
                self.responsavel_repo.substituir(
                    ticket.id, montar_vinculos(ticket.id, responsaveis, lider)
                )

            if input_dto.tempo_estimado is not None:
                anterior_estimado = ticket.definir_tempo_estimado(input_dto.tempo_estimado)
                estimativa = (
                    "estimated_time", _texto(anterior_estimado), _texto(input_dto.tempo_estimado)
                )

            ticket.atualizado_em = agora
            self.ticket_repo.save(ticket)

            if estimativa is not None:
                for evento in self.reconciliador.reconciliar(ticket, ator_id=input_dto.ator_id):
                    self.uow.publish_event(evento)

            campos = [campo for campo, _, _ in alteracoes]
            if estimativa is not None:
                campos.append(estimativa[0])
            self.uow.publish_event(
                TicketAtualizadoEvent(
                    aggregate_id=ticket.id,
                    campos=campos,
                    atualizado_por_id=input_dto.ator_id,
                )
            )

        for campo, antigo, novo in alteracoes:
            self.historico.registrar(
                ticket.id, input_dto.ator_id, AcaoHistorico.UPDATED, campo, antigo, novo
            )
        if estimativa is not None:
            self.historico.registrar(
                ticket.id, input_dto.ator_id, AcaoHistorico.ESTIMATED_TIME_SET, *estimativa
            )

        return TicketOutputDTO.from_entity(
            ticket, self.responsavel_repo.listar_por_ticket(ticket.id)
        )

    def _aplicar_solicitante(
        self,
        ticket: TicketEntity,
        input_dto: AtualizarTicketInputDTO,
        alteracoes: List[Alteracao],
    ) -> None:
        """
        solicitante_id tem precedência e preenche o nome a partir do
        usuário; "" remove o solicitante e mantém o nome.
        """
        if input_dto.solicitante_id is not None:
            novo_id = input_dto.solicitante_id or None
            solicitante = None
            if novo_id:
                solicitante = self.diretorio.obter_usuario(novo_id, papel="Usuário solicitante")

            if ticket.solicitante_id != novo_id:
                alteracoes.append(("requester_id", _texto(ticket.solicitante_id), _texto(novo_id)))
                ticket.solicitante_id = novo_id
                if solicitante is not None:
                    ticket.solicitante_nome = solicitante.nome_exibicao

        elif input_dto.solicitante_nome:
            alteracoes.append(("requester_name", ticket.solicitante_nome, input_dto.solicitante_nome))
            ticket.solicitante_nome = input_dto.solicitante_nome


class AtribuirTicketService:
    """
    Use Case: Atribuir ticket a um ou mais responsáveis.

    Fluxo:
    1. Normalizar responsáveis (lista ou usuário único) e líder
    2. Verificar autorização da atribuição
    3. Definir responsável principal; "ouvert" avança para "en_cours"
    4. Aplicar estimativa opcional e reconciliar atraso
    5. Substituir vínculos; histórico "assigned"
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        responsavel_repo: ResponsavelRepository,
        diretorio: DiretorioOrganizacional,
        reconciliador: ReconciliadorAtrasos,
        uow: UnitOfWork,
        historico: EscritorHistorico,
    ):
        self.ticket_repo = ticket_repo
        self.responsavel_repo = responsavel_repo
        self.validador = ValidadorAtribuicao(diretorio)
        self.reconciliador = reconciliador
        self.uow = uow
        self.historico = historico

    def execute(self, input_dto: AtribuirTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket ou responsável inexistente
            ValidationError: Nenhum responsável / líder inválido
            AuthorizationError: Atribuição fora do departamento de TI
        """
        ids = list(input_dto.usuarios_ids)
        if not ids and input_dto.usuario_id:
            ids = [input_dto.usuario_id]

        responsaveis, lider = normalizar_responsaveis(ids, input_dto.lider_id)
        if not responsaveis:
            raise ValidationError("Nenhum usuário atribuído", field="usuarios_ids")

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)
            self.validador.validar(responsaveis, input_dto.atribuido_por_id)

            anterior = ticket.atribuido_a_id
            principal = responsavel_principal(responsaveis, lider)
            ticket.atribuir(principal)

            anterior_estimado = None
            if input_dto.tempo_estimado is not None:
                anterior_estimado = ticket.definir_tempo_estimado(input_dto.tempo_estimado)

            self.ticket_repo.save(ticket)
            vinculos = montar_vinculos(ticket.id, responsaveis, lider)
            self.responsavel_repo.substituir(ticket.id, vinculos)

            if input_dto.tempo_estimado is not None:
                for evento in self.reconciliador.reconciliar(
                    ticket, ator_id=input_dto.atribuido_por_id
                ):
                    self.uow.publish_event(evento)

            self.uow.publish_event(
                TicketAtribuidoEvent(
                    aggregate_id=ticket.id,
                    responsavel_id=principal,
                    responsaveis_ids=list(responsaveis),
                    atribuido_por_id=input_dto.atribuido_por_id,
                )
            )

        self.historico.registrar(
            ticket.id,
            input_dto.atribuido_por_id,
            AcaoHistorico.ASSIGNED,
            "assigned_to",
            f"user#{anterior}" if anterior else "",
            f"user#{principal}",
        )
        if input_dto.tempo_estimado is not None:
            self.historico.registrar(
                ticket.id,
                input_dto.atribuido_por_id,
                AcaoHistorico.ESTIMATED_TIME_SET,
                "estimated_time",
                _texto(anterior_estimado),
                _texto(input_dto.tempo_estimado),
            )

        return TicketOutputDTO.from_entity(ticket, vinculos)


class AlterarStatusTicketService:
    """
    Use Case: Alterar status do ticket.

    Notificações:
    - Entrada em "en_attente": solicitante (senão criador) é convidado
      a validar a resolução
    - Saída de "resolu" para outro status que não "cloture":
      TI fornecedora é avisada da invalidação
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        diretorio: DiretorioOrganizacional,
        uow: UnitOfWork,
        historico: EscritorHistorico,
        notificador: Notificador,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.ticket_repo = ticket_repo
        self.diretorio = diretorio
        self.uow = uow
        self.historico = historico
        self.notificador = notificador
        self.relogio = relogio

    def execute(self, input_dto: AlterarStatusInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket inexistente
            ValidationError: Status inválido
        """
        novo_status = _parse_status(input_dto.status)

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)
            anterior = ticket.alterar_status(novo_status, self.relogio())
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketStatusAlteradoEvent(
                    aggregate_id=ticket.id,
                    status_anterior=anterior.value,
                    status_novo=novo_status.value,
                    alterado_por_id=input_dto.alterado_por_id,
                )
            )

        self.historico.registrar(
            ticket.id,
            input_dto.alterado_por_id,
            AcaoHistorico.STATUS_CHANGED,
            "status",
            anterior.value,
            novo_status.value,
        )
        self._notificar(ticket, anterior, novo_status, input_dto.alterado_por_id)

        return TicketOutputDTO.from_entity(ticket)

    def _notificar(
        self,
        ticket: TicketEntity,
        anterior: TicketStatus,
        novo: TicketStatus,
        ator_id: str,
    ) -> None:
        link = _link_ticket(ticket.id)

        if novo == TicketStatus.EN_ATTENTE and anterior != TicketStatus.EN_ATTENTE:
            destinatario = ticket.solicitante_id or ticket.criador_id
            resolvedor = self.diretorio.nome_usuario(ator_id, padrao="A equipe de TI")
            self.notificador.notificar(
                destinatario,
                TICKET_SUBMETIDO_VALIDACAO,
                titulo=f"Ticket enviado para validação: {ticket.titulo}",
                mensagem=(
                    f"Seu ticket {ticket.codigo} foi tratado por {resolvedor} e aguarda "
                    f"sua validação. Valide se o problema foi resolvido ou invalide "
                    f"o ticket caso contrário."
                ),
                link_url=link,
                metadata={
                    "ticket_id": ticket.id,
                    "ticket_code": ticket.codigo,
                    "resolved_by_id": ator_id,
                },
            )

        if anterior == TicketStatus.RESOLU and novo not in (TicketStatus.RESOLU, TicketStatus.CLOTURE):
            self.notificador.notificar_ti_fornecedor(
                TICKET_INVALIDADO,
                titulo=f"Ticket invalidado: {ticket.titulo}",
                mensagem=(
                    f"O ticket {ticket.codigo} ({self.diretorio.nome_filial(ticket.filial_id)}) "
                    f"foi invalidado por {self.diretorio.nome_usuario(ator_id)}. "
                    f"O ticket precisa de uma nova resolução."
                ),
                link_url=link,
                metadata={
                    "ticket_id": ticket.id,
                    "ticket_code": ticket.codigo,
                    "invalidated_by_id": ator_id,
                    "new_status": novo.value,
                },
            )


class ValidarTicketService:
    """
    Use Case: Validar a resolução de um ticket.

    Fluxo:
    1. Ticket deve estar "en_attente"; validador deve existir
    2. Status → "resolu", carimbo de validação
    3. Apontamentos do ticket marcados como validados (mesma transação)
    4. Pós-commit: histórico "validated" + "status_changed", conclusão
       do SLA, notificação à TI fornecedora e ao criador
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        apontamento_repo,
        diretorio: DiretorioOrganizacional,
        uow: UnitOfWork,
        historico: EscritorHistorico,
        gestor_sla: GestorSLA,
        notificador: Notificador,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.ticket_repo = ticket_repo
        self.apontamento_repo = apontamento_repo
        self.diretorio = diretorio
        self.uow = uow
        self.historico = historico
        self.gestor_sla = gestor_sla
        self.notificador = notificador
        self.relogio = relogio

    def execute(self, input_dto: ValidarTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket ou validador inexistente
            BusinessRuleViolationError: Ticket não está em "en_attente"
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, input_dto.ticket_id)
            ticket.exigir_aguardando_validacao()
            validador = self.diretorio.obter_usuario(input_dto.validador_id, papel="Validador")

            agora = self.relogio()
            anterior = ticket.validar(validador.id, agora)
            self.ticket_repo.save(ticket)

            validados = self.apontamento_repo.validar_por_ticket(ticket.id, validador.id, agora)
            if validados:
                logger.info(f"{validados} apontamento(s) validados com o ticket {ticket.codigo}")

            self.uow.publish_event(
                TicketValidadoEvent(aggregate_id=ticket.id, validador_id=validador.id)
            )

        self.historico.registrar(
            ticket.id, validador.id, AcaoHistorico.VALIDATED,
            "status", anterior.value, TicketStatus.RESOLU.value,
        )
        self.historico.registrar(
            ticket.id, validador.id, AcaoHistorico.STATUS_CHANGED,
            "status", anterior.value, TicketStatus.RESOLU.value,
        )
        self.gestor_sla.registrar_conclusao(ticket.id)
        self._notificar(ticket, validador.nome_exibicao)

        return TicketOutputDTO.from_entity(ticket)

    def _notificar(self, ticket: TicketEntity, nome_validador: str) -> None:
        link = _link_ticket(ticket.id)
        metadata = {
            "ticket_id": ticket.id,
            "ticket_code": ticket.codigo,
            "validated_by_id": ticket.validado_por_id,
        }
        self.notificador.notificar_ti_fornecedor(
            TICKET_VALIDADO,
            titulo=f"Ticket validado: {ticket.titulo}",
            mensagem=(
                f"O ticket {ticket.codigo} ({self.diretorio.nome_filial(ticket.filial_id)}) "
                f"foi validado por {nome_validador or 'um usuário'}."
            ),
            link_url=link,
            metadata=metadata,
        )
        self.notificador.notificar(
            ticket.criador_id,
            TICKET_VALIDADO,
            titulo=f"Seu ticket foi validado: {ticket.titulo}",
            mensagem=f"O ticket {ticket.codigo} foi validado. O problema é considerado resolvido.",
            link_url=link,
            metadata=metadata,
        )


class FecharTicketService:
    """
    Use Case: Fechar ticket.

    Delega a AlterarStatusTicketService com "cloture" e então conclui
    o SLA do ticket.
    """

    def __init__(self, alterar_status: AlterarStatusTicketService, gestor_sla: GestorSLA):
        self.alterar_status = alterar_status
        self.gestor_sla = gestor_sla

    def execute(self, input_dto: FecharTicketInputDTO) -> TicketOutputDTO:
        output = self.alterar_status.execute(
            AlterarStatusInputDTO(
                ticket_id=input_dto.ticket_id,
                status=TicketStatus.CLOTURE.value,
                alterado_por_id=input_dto.fechado_por_id,
            )
        )
        self.gestor_sla.registrar_conclusao(input_dto.ticket_id)
        return output


class ExcluirTicketService:
    """Use Case: Exclusão lógica de ticket."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        historico: EscritorHistorico,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.historico = historico
        self.relogio = relogio

    def execute(self, ticket_id: str, ator_id: str) -> None:
        """
        Raises:
            EntityNotFoundError: Ticket inexistente (ou já excluído)
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            ticket.excluir(self.relogio())
            self.ticket_repo.save(ticket)
            self.uow.publish_event(
                TicketExcluidoEvent(aggregate_id=ticket.id, excluido_por_id=ator_id)
            )

        logger.info(f"Ticket {ticket.codigo} excluído por {ator_id}")
        self.historico.registrar(
            ticket.id, ator_id, AcaoHistorico.DELETED, descricao="Ticket excluído"
        )


# =============================================================================
# Comentários
# =============================================================================

def _obter_comentario_do_ticket(
    comentario_repo: ComentarioRepository,
    ticket_id: str,
    comentario_id: str,
) -> ComentarioEntity:
    comentario = comentario_repo.get_by_id(comentario_id)
    if not comentario or comentario.ticket_id != ticket_id:
        raise EntityNotFoundError(
            f"Comentário {comentario_id} não encontrado para o ticket {ticket_id}",
            entity_type="Comentario",
            entity_id=comentario_id
        )
    return comentario


class AdicionarComentarioService:
    """Use Case: Comentar um ticket (histórico "comment_added")."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        uow: UnitOfWork,
        historico: EscritorHistorico,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.uow = uow
        self.historico = historico

    def execute(self, input_dto: AdicionarComentarioInputDTO) -> ComentarioOutputDTO:
        with self.uow:
            if not self.ticket_repo.exists(input_dto.ticket_id):
                raise EntityNotFoundError(
                    f"Ticket {input_dto.ticket_id} não encontrado",
                    entity_type="Ticket",
                    entity_id=input_dto.ticket_id
                )

            comentario = ComentarioEntity.criar(
                ticket_id=input_dto.ticket_id,
                usuario_id=input_dto.usuario_id,
                comentario=input_dto.comentario,
                interno=input_dto.interno,
            )
            self.comentario_repo.save(comentario)

            self.uow.publish_event(
                TicketComentarioAdicionadoEvent(
                    aggregate_id=input_dto.ticket_id,
                    comentario_id=comentario.id,
                    autor_id=comentario.usuario_id,
                    conteudo_preview=comentario.comentario[:100],
                    e_interno=comentario.interno,
                )
            )

        self.historico.registrar(
            input_dto.ticket_id,
            input_dto.usuario_id,
            AcaoHistorico.COMMENT_ADDED,
            descricao="Comentário adicionado",
        )
        return ComentarioOutputDTO.from_entity(comentario)


class AtualizarComentarioService:
    """Use Case: Editar comentário (somente o autor)."""

    def __init__(
        self,
        comentario_repo: ComentarioRepository,
        uow: UnitOfWork,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.comentario_repo = comentario_repo
        self.uow = uow
        self.politica = politica or PoliticaAcesso()

    def execute(self, input_dto: AtualizarComentarioInputDTO) -> ComentarioOutputDTO:
        with self.uow:
            comentario = _obter_comentario_do_ticket(
                self.comentario_repo, input_dto.ticket_id, input_dto.comentario_id
            )
            self.politica.exigir(Ator(input_dto.usuario_id), comentario, Acao.EDITAR_COMENTARIO)
            comentario.editar(input_dto.comentario)
            self.comentario_repo.save(comentario)

        return ComentarioOutputDTO.from_entity(comentario)


class ExcluirComentarioService:
    """Use Case: Excluir comentário (lógico, somente o autor)."""

    def __init__(
        self,
        comentario_repo: ComentarioRepository,
        uow: UnitOfWork,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.comentario_repo = comentario_repo
        self.uow = uow
        self.politica = politica or PoliticaAcesso()

    def execute(self, ticket_id: str, comentario_id: str, usuario_id: str) -> None:
        with self.uow:
            comentario = _obter_comentario_do_ticket(self.comentario_repo, ticket_id, comentario_id)
            self.politica.exigir(Ator(usuario_id), comentario, Acao.EXCLUIR_COMENTARIO)
            comentario.excluir()
            self.comentario_repo.save(comentario)


class ListarComentariosService:
    """
    Use Case: Listar comentários de um ticket.

    Comentários internos só aparecem para quem tem a capacidade
    comentario.ver_interno.
    """

    def __init__(
        self,
        comentario_repo: ComentarioRepository,
        politica: Optional[PoliticaAcesso] = None,
    ):
        self.comentario_repo = comentario_repo
        self.politica = politica or PoliticaAcesso()

    def execute(self, ticket_id: str, ator: Ator) -> List[ComentarioOutputDTO]:
        ve_internos = self.politica.permite(ator, None, Acao.VER_COMENTARIO_INTERNO)
        return [
            ComentarioOutputDTO.from_entity(c)
            for c in self.comentario_repo.listar_por_ticket(ticket_id)
            if ve_internos or not c.interno
        ]


# =============================================================================
# Consultas
# =============================================================================

class ConsultaTicketsService:
    """
    Consultas de tickets.

    Example:
        consulta = ConsultaTicketsService(ticket_repo, responsavel_repo, historico_repo)
        pagina = consulta.listar(ListarTicketsQueryDTO(status="en_cours"), escopo)
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        responsavel_repo: ResponsavelRepository,
        historico_repo: HistoricoRepository,
    ):
        self.ticket_repo = ticket_repo
        self.responsavel_repo = responsavel_repo
        self.historico_repo = historico_repo

    def obter(self, ticket_id: str) -> TicketOutputDTO:
        ticket = _obter_ticket(self.ticket_repo, ticket_id)
        return TicketOutputDTO.from_entity(ticket, self.responsavel_repo.listar_por_ticket(ticket.id))

    def obter_por_codigo(self, codigo: str) -> TicketOutputDTO:
        ticket = self.ticket_repo.get_by_codigo(codigo)
        if not ticket:
            raise EntityNotFoundError(
                f"Ticket {codigo} não encontrado",
                entity_type="Ticket",
                entity_id=codigo
            )
        return TicketOutputDTO.from_entity(ticket, self.responsavel_repo.listar_por_ticket(ticket.id))

    def listar(
        self,
        query: Optional[ListarTicketsQueryDTO] = None,
        escopo: Optional[EscopoConsulta] = None,
    ) -> PaginatedResultDTO:
        """
        Lista tickets visíveis ao escopo, mais recentes primeiro.

        Raises:
            ValidationError: Filtro de status/prioridade inválido
        """
        query = query or ListarTicketsQueryDTO()
        if query.status:
            _parse_status(query.status)
        if query.prioridade:
            _parse_prioridade(query.prioridade)

        tickets, total = self.ticket_repo.listar(query, escopo)
        return PaginatedResultDTO(
            items=[TicketListItemDTO.from_entity(t) for t in tickets],
            total=total,
            pagina=query.pagina,
            por_pagina=query.por_pagina,
        )

    def historico(self, ticket_id: str) -> List[HistoricoOutputDTO]:
        return [
            HistoricoOutputDTO.from_entity(e)
            for e in self.historico_repo.listar_por_ticket(ticket_id)
        ]

    def responsaveis(self, ticket_id: str) -> List[ResponsavelTicket]:
        return self.responsavel_repo.listar_por_ticket(ticket_id)
