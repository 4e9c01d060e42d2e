"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, agendador,
  escritor de histórico)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: valores vindos de settings (get_container)

Adapters Django são importados sob demanda: o módulo pode ser
carregado antes de `django.setup()`.
"""

from datetime import timedelta
from typing import Any, Callable, Dict, Optional
import importlib

from dependency_injector import containers, providers

from src.core.apontamentos.use_cases import (
    AtualizarApontamentoService,
    ConsultaApontamentosService,
    CriarApontamentoService,
    ExcluirApontamentoService,
    RecalculoTempoReal,
    ValidarApontamentoService,
)
from src.core.atrasos.agendador import AgendadorReconciliacao
from src.core.atrasos.derivacao import ReconciliadorAtrasos
from src.core.atrasos.use_cases import (
    ConsultaAtrasosService,
    ConsultaJustificativasService,
    CriarJustificativaService,
    AtualizarJustificativaService,
    ExcluirAtrasoService,
    ExcluirJustificativaService,
    RejeitarJustificativaService,
    ValidarJustificativaService,
)
from src.core.notificacoes.notificador import Notificador
from src.core.organizacao.diretorio import DiretorioOrganizacional
from src.core.shared.politicas import PoliticaAcesso
from src.core.sla.service import GestorSLA
from src.core.tickets.codigo import GeradorCodigoTicket
from src.core.tickets.historico import EscritorHistorico
from src.core.tickets.use_cases import (
    AdicionarComentarioService,
    AlterarStatusTicketService,
    AtribuirTicketService,
    AtualizarComentarioService,
    AtualizarTicketService,
    ConsultaTicketsService,
    CriarTicketService,
    ExcluirComentarioService,
    ExcluirTicketService,
    FecharTicketService,
    ListarComentariosService,
    ValidarTicketService,
)


def _lazy(modulo: str, nome: str) -> Callable[..., Any]:
    """Callable que importa `modulo.nome` somente quando chamado."""
    def criar(*args, **kwargs):
        return getattr(importlib.import_module(modulo), nome)(*args, **kwargs)
    criar.__name__ = nome
    return criar


_DJANGO = 'src.adapters.django_app'

CONFIG_PADRAO: Dict[str, Any] = {
    'delay_sync': {
        'cooldown_seconds': 120,
        'page_size': 500,
        'threaded': False,
    },
    'history': {
        'queue_size': 1000,
    },
    'tickets': {
        'source_sentinel': 'kronos',
    },
    'events': {
        'publisher_mode': 'logging',
    },
    'notifications': {
        'mode': 'sync',
    },
}


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do Django
    - Infrastructure: publisher de eventos, notificações
    - Repositories: Persistência (Django ORM)
    - Domain services: diretório, reconciliador, histórico, SLA
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.criar_ticket_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default=CONFIG_PADRAO)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy(f'{_DJANGO}.events.publishers', 'get_event_publisher'),
        mode=config.events.publisher_mode,
    )

    notificacao_service = providers.Selector(
        config.notifications.mode,
        sync=providers.Singleton(_lazy(f'{_DJANGO}.notificacoes.services', 'DjangoNotificacaoService')),
        celery=providers.Singleton(_lazy(f'{_DJANGO}.notificacoes.services', 'CeleryNotificacaoService')),
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    usuario_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.organizacao.repositories', 'DjangoUsuarioRepository')
    )
    departamento_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.organizacao.repositories', 'DjangoDepartamentoRepository')
    )
    filial_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.organizacao.repositories', 'DjangoFilialRepository')
    )
    categoria_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.organizacao.repositories', 'DjangoCategoriaRepository')
    )

    ticket_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.tickets.repositories', 'DjangoTicketRepository')
    )
    responsavel_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.tickets.repositories', 'DjangoResponsavelRepository')
    )
    comentario_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.tickets.repositories', 'DjangoComentarioRepository')
    )
    historico_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.tickets.repositories', 'DjangoHistoricoRepository')
    )

    atraso_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.atrasos.repositories', 'DjangoAtrasoRepository')
    )
    justificativa_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.atrasos.repositories', 'DjangoJustificativaRepository')
    )

    apontamento_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.apontamentos.repositories', 'DjangoApontamentoRepository')
    )

    sla_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.sla.repositories', 'DjangoSLARepository')
    )
    ticket_sla_repository = providers.Singleton(
        _lazy(f'{_DJANGO}.sla.repositories', 'DjangoTicketSLARepository')
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy(f'{_DJANGO}.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Domain services (Singleton)
    # =========================================================================

    diretorio = providers.Singleton(
        DiretorioOrganizacional,
        usuario_repo=usuario_repository,
        departamento_repo=departamento_repository,
        filial_repo=filial_repository,
        categoria_repo=categoria_repository,
    )

    politica = providers.Singleton(PoliticaAcesso)

    reconciliador = providers.Singleton(ReconciliadorAtrasos, atraso_repo=atraso_repository)

    agendador = providers.Singleton(
        AgendadorReconciliacao,
        ticket_repo=ticket_repository,
        reconciliador=reconciliador,
        uow_factory=unit_of_work.provider,
        cooldown=providers.Factory(timedelta, seconds=config.delay_sync.cooldown_seconds.as_int()),
        tamanho_pagina=config.delay_sync.page_size.as_int(),
        assincrono=config.delay_sync.threaded,
    )

    historico = providers.Singleton(
        EscritorHistorico,
        historico_repo=historico_repository,
        tamanho_fila=config.history.queue_size.as_int(),
    )

    gerador_codigo = providers.Singleton(GeradorCodigoTicket, ticket_repo=ticket_repository)

    gestor_sla = providers.Singleton(
        GestorSLA,
        sla_repo=sla_repository,
        ticket_sla_repo=ticket_sla_repository,
    )

    notificador = providers.Singleton(
        Notificador,
        servico=notificacao_service,
        diretorio=diretorio,
    )

    recalculo = providers.Factory(
        RecalculoTempoReal,
        apontamento_repo=apontamento_repository,
        ticket_repo=ticket_repository,
        reconciliador=reconciliador,
    )

    # =========================================================================
    # Services / Use Cases - Tickets
    # =========================================================================

    criar_ticket_service = providers.Factory(
        CriarTicketService,
        ticket_repo=ticket_repository,
        responsavel_repo=responsavel_repository,
        diretorio=diretorio,
        gerador_codigo=gerador_codigo,
        uow=unit_of_work,
        historico=historico,
        gestor_sla=gestor_sla,
        notificador=notificador,
        origem_sentinela=config.tickets.source_sentinel,
    )

    atualizar_ticket_service = providers.Factory(
        AtualizarTicketService,
        ticket_repo=ticket_repository,
        responsavel_repo=responsavel_repository,
        diretorio=diretorio,
        reconciliador=reconciliador,
        uow=unit_of_work,
        historico=historico,
    )

    atribuir_ticket_service = providers.Factory(
        AtribuirTicketService,
        ticket_repo=ticket_repository,
        responsavel_repo=responsavel_repository,
        diretorio=diretorio,
        reconciliador=reconciliador,
        uow=unit_of_work,
        historico=historico,
    )

    alterar_status_service = providers.Factory(
        AlterarStatusTicketService,
        ticket_repo=ticket_repository,
        diretorio=diretorio,
        uow=unit_of_work,
        historico=historico,
        notificador=notificador,
    )

    validar_ticket_service = providers.Factory(
        ValidarTicketService,
        ticket_repo=ticket_repository,
        apontamento_repo=apontamento_repository,
        diretorio=diretorio,
        uow=unit_of_work,
        historico=historico,
        gestor_sla=gestor_sla,
        notificador=notificador,
    )

    fechar_ticket_service = providers.Factory(
        FecharTicketService,
        alterar_status=alterar_status_service,
        gestor_sla=gestor_sla,
    )

    excluir_ticket_service = providers.Factory(
        ExcluirTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        historico=historico,
    )

    consulta_tickets_service = providers.Factory(
        ConsultaTicketsService,
        ticket_repo=ticket_repository,
        responsavel_repo=responsavel_repository,
        historico_repo=historico_repository,
    )

    # Comentários
    adicionar_comentario_service = providers.Factory(
        AdicionarComentarioService,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
        historico=historico,
    )

    atualizar_comentario_service = providers.Factory(
        AtualizarComentarioService,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
        politica=politica,
    )

    excluir_comentario_service = providers.Factory(
        ExcluirComentarioService,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
        politica=politica,
    )

    listar_comentarios_service = providers.Factory(
        ListarComentariosService,
        comentario_repo=comentario_repository,
        politica=politica,
    )

    # =========================================================================
    # Services / Use Cases - Atrasos
    # =========================================================================

    criar_justificativa_service = providers.Factory(
        CriarJustificativaService,
        atraso_repo=atraso_repository,
        justificativa_repo=justificativa_repository,
        uow=unit_of_work,
        politica=politica,
    )

    atualizar_justificativa_service = providers.Factory(
        AtualizarJustificativaService,
        justificativa_repo=justificativa_repository,
        uow=unit_of_work,
        politica=politica,
    )

    validar_justificativa_service = providers.Factory(
        ValidarJustificativaService,
        atraso_repo=atraso_repository,
        justificativa_repo=justificativa_repository,
        uow=unit_of_work,
    )

    rejeitar_justificativa_service = providers.Factory(
        RejeitarJustificativaService,
        justificativa_repo=justificativa_repository,
        validar_service=validar_justificativa_service,
    )

    excluir_justificativa_service = providers.Factory(
        ExcluirJustificativaService,
        atraso_repo=atraso_repository,
        justificativa_repo=justificativa_repository,
        uow=unit_of_work,
        politica=politica,
    )

    excluir_atraso_service = providers.Factory(
        ExcluirAtrasoService,
        atraso_repo=atraso_repository,
        justificativa_repo=justificativa_repository,
        uow=unit_of_work,
    )

    consulta_atrasos_service = providers.Factory(ConsultaAtrasosService, atraso_repo=atraso_repository)

    consulta_justificativas_service = providers.Factory(
        ConsultaJustificativasService,
        justificativa_repo=justificativa_repository,
        atraso_repo=atraso_repository,
    )

    # =========================================================================
    # Services / Use Cases - Apontamentos
    # =========================================================================

    criar_apontamento_service = providers.Factory(
        CriarApontamentoService,
        apontamento_repo=apontamento_repository,
        ticket_repo=ticket_repository,
        recalculo=recalculo,
        uow=unit_of_work,
    )

    atualizar_apontamento_service = providers.Factory(
        AtualizarApontamentoService,
        apontamento_repo=apontamento_repository,
        recalculo=recalculo,
        uow=unit_of_work,
    )

    excluir_apontamento_service = providers.Factory(
        ExcluirApontamentoService,
        apontamento_repo=apontamento_repository,
        recalculo=recalculo,
        uow=unit_of_work,
    )

    validar_apontamento_service = providers.Factory(
        ValidarApontamentoService,
        apontamento_repo=apontamento_repository,
        diretorio=diretorio,
        uow=unit_of_work,
    )

    consulta_apontamentos_service = providers.Factory(
        ConsultaApontamentosService,
        apontamento_repo=apontamento_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def config_from_settings() -> Dict[str, Any]:
    """Lê os valores do container a partir de django.conf.settings."""
    from django.conf import settings

    return {
        'delay_sync': {
            'cooldown_seconds': settings.DELAY_SYNC_COOLDOWN_SECONDS,
            'page_size': settings.DELAY_SYNC_PAGE_SIZE,
            'threaded': settings.DELAY_SYNC_THREADED,
        },
        'history': {
            'queue_size': settings.HISTORY_QUEUE_SIZE,
        },
        'tickets': {
            'source_sentinel': settings.TICKET_SOURCE_SENTINEL,
        },
        'events': {
            'publisher_mode': settings.EVENT_PUBLISHER_MODE,
        },
        'notifications': {
            'mode': 'celery' if settings.NOTIFICATIONS_ASYNC else 'sync',
        },
    }


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), configurada a partir
    das settings do Django.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict(config_from_settings())

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Encerra o escritor de histórico do container anterior.
    """
    global _container

    if _container is not None:
        escritor = _container.historico()
        escritor.fechar()
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

@containers.copy(Container)
class TestingContainer(Container):
    """
    Container para testes: mesmas regras de montagem, ports em memória.

    A varredura de atrasos roda de forma síncrona.

    Example:
        container = TestingContainer()
        container.ticket_repository().save(ticket)
        container.criar_ticket_service().execute(dto)
    """

    notificacao_service = providers.Singleton(
        _lazy('src.core.notificacoes.ports', 'InMemoryNotificacaoService')
    )

    usuario_repository = providers.Singleton(
        _lazy('src.core.organizacao.ports', 'InMemoryUsuarioRepository')
    )
    departamento_repository = providers.Singleton(
        _lazy('src.core.organizacao.ports', 'InMemoryDepartamentoRepository')
    )
    filial_repository = providers.Singleton(
        _lazy('src.core.organizacao.ports', 'InMemoryFilialRepository')
    )
    categoria_repository = providers.Singleton(
        _lazy('src.core.organizacao.ports', 'InMemoryCategoriaRepository')
    )

    responsavel_repository = providers.Singleton(
        _lazy('src.core.tickets.ports', 'InMemoryResponsavelRepository')
    )
    ticket_repository = providers.Singleton(
        _lazy('src.core.tickets.ports', 'InMemoryTicketRepository'),
        responsavel_repo=responsavel_repository,
    )
    comentario_repository = providers.Singleton(
        _lazy('src.core.tickets.ports', 'InMemoryComentarioRepository')
    )
    historico_repository = providers.Singleton(
        _lazy('src.core.tickets.ports', 'InMemoryHistoricoRepository')
    )

    justificativa_repository = providers.Singleton(
        _lazy('src.core.atrasos.ports', 'InMemoryJustificativaRepository')
    )
    atraso_repository = providers.Singleton(
        _lazy('src.core.atrasos.ports', 'InMemoryAtrasoRepository'),
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        justificativa_repo=justificativa_repository,
    )

    apontamento_repository = providers.Singleton(
        _lazy('src.core.apontamentos.ports', 'InMemoryApontamentoRepository'),
        ticket_repo=ticket_repository,
    )

    sla_repository = providers.Singleton(
        _lazy('src.core.sla.ports', 'InMemorySLARepository')
    )
    ticket_sla_repository = providers.Singleton(
        _lazy('src.core.sla.ports', 'InMemoryTicketSLARepository')
    )

    unit_of_work = providers.Factory(
        _lazy(f'{_DJANGO}.shared.unit_of_work', 'InMemoryUnitOfWork')
    )
