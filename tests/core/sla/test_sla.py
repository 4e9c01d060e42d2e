"""
Testes Unitários - SLA.

Coverage:
- Conversão de unidades e prazo
- Situação inicial (on_time / at_risk / violated)
- Conclusão com minutos de violação
- GestorSLA: busca por prioridade, fallback, idempotência, falhas
"""

from datetime import datetime, timedelta

import pytest

from src.core.shared.exceptions import ValidationError
from src.core.sla.entities import SLAEntity, StatusSLA, TicketSLAEntity, UnidadeSLA
from src.core.sla.ports import InMemorySLARepository, InMemoryTicketSLARepository
from src.core.sla.service import GestorSLA
from src.core.tickets.entities import TicketEntity, TicketPriority


T0 = datetime(2025, 3, 10, 9, 0)


class TestSLAEntity:

    @pytest.mark.parametrize("unidade,esperado", [
        ("minutes", timedelta(minutes=4)),
        ("HOURS", timedelta(hours=4)),
        ("days", timedelta(days=4)),
        ("semanas", timedelta(minutes=4)),
        ("", timedelta(minutes=4)),
    ])
    def test_duracao(self, unidade, esperado):
        assert SLAEntity(tempo_alvo=4, unidade=unidade).duracao() == esperado

    def test_unidade_desconhecida_vira_minutos(self):
        assert UnidadeSLA.from_string("fortnight") == UnidadeSLA.MINUTES

    def test_tempo_alvo_negativo(self):
        with pytest.raises(ValidationError):
            SLAEntity(tempo_alvo=-1)

    def test_prazo(self):
        sla = SLAEntity(tempo_alvo=4, unidade="hours")
        assert sla.calcular_prazo(T0) == T0 + timedelta(hours=4)


class TestTicketSLAEntity:

    @pytest.fixture
    def sla(self):
        return SLAEntity(nome="Padrão", tempo_alvo=4, unidade="hours")

    @pytest.mark.parametrize("decorrido,status", [
        (timedelta(0), StatusSLA.ON_TIME),
        (timedelta(hours=2), StatusSLA.ON_TIME),
        (timedelta(hours=3, minutes=1), StatusSLA.AT_RISK),
        (timedelta(hours=4), StatusSLA.AT_RISK),
        (timedelta(hours=4, seconds=1), StatusSLA.VIOLATED),
    ])
    def test_status_inicial(self, sla, decorrido, status):
        ticket_sla = TicketSLAEntity.aplicar("t1", sla, T0, T0 + decorrido)

        assert ticket_sla.status == status
        assert ticket_sla.prazo_alvo == T0 + timedelta(hours=4)

    def test_janela_zero(self):
        sla = SLAEntity(tempo_alvo=0)
        assert TicketSLAEntity.aplicar("t1", sla, T0, T0).status == StatusSLA.ON_TIME

    def test_concluir_violado(self, sla):
        ticket_sla = TicketSLAEntity.aplicar("t1", sla, T0, T0)

        ticket_sla.concluir(T0 + timedelta(hours=5))

        assert ticket_sla.status == StatusSLA.VIOLATED
        assert ticket_sla.minutos_violacao == 60
        assert ticket_sla.concluido_em == T0 + timedelta(hours=5)

    def test_concluir_no_prazo(self, sla):
        ticket_sla = TicketSLAEntity.aplicar("t1", sla, T0, T0 + timedelta(hours=5))
        assert ticket_sla.status == StatusSLA.VIOLATED

        ticket_sla.concluir(T0 + timedelta(hours=3))

        assert ticket_sla.status == StatusSLA.ON_TIME
        assert ticket_sla.minutos_violacao is None


class Relogio:

    def __init__(self):
        self.agora = T0

    def __call__(self):
        return self.agora


class SLARepositoryQuebrado(InMemorySLARepository):

    def buscar_ativo(self, categoria, prioridade):
        raise RuntimeError("banco indisponível")


class TestGestorSLA:

    @pytest.fixture
    def sla_repo(self):
        repo = InMemorySLARepository()
        repo.save(SLAEntity(nome="Geral", categoria="incident", tempo_alvo=8, unidade="hours"))
        repo.save(SLAEntity(
            nome="Crítico", categoria="incident", prioridade="critical", tempo_alvo=1, unidade="hours",
        ))
        repo.save(SLAEntity(nome="Inativo", categoria="request", tempo_alvo=1, ativo=False))
        return repo

    @pytest.fixture
    def relogio(self):
        return Relogio()

    @pytest.fixture
    def gestor(self, sla_repo, relogio):
        return GestorSLA(sla_repo, InMemoryTicketSLARepository(), relogio=relogio)

    def _ticket(self, categoria="incident", prioridade=TicketPriority.MEDIUM):
        return TicketEntity(
            codigo="TKT-2025-0001", titulo="t", descricao="d", criador_id="u",
            categoria=categoria, prioridade=prioridade, criado_em=T0,
        )

    def test_regra_da_prioridade(self, gestor):
        ticket_sla = gestor.aplicar(self._ticket(prioridade=TicketPriority.CRITICAL))
        assert ticket_sla.prazo_alvo == T0 + timedelta(hours=1)

    def test_regra_generica(self, gestor):
        ticket_sla = gestor.aplicar(self._ticket())
        assert ticket_sla.prazo_alvo == T0 + timedelta(hours=8)

    def test_sem_regra(self, gestor):
        assert gestor.aplicar(self._ticket(categoria="outra")) is None

    def test_regra_inativa(self, gestor):
        assert gestor.aplicar(self._ticket(categoria="request")) is None

    def test_nao_reaplica(self, gestor):
        ticket = self._ticket()
        primeiro = gestor.aplicar(ticket)

        assert gestor.aplicar(ticket) is None
        assert gestor.obter(ticket.id) is primeiro

    def test_conclusao(self, gestor, relogio):
        ticket = self._ticket(prioridade=TicketPriority.CRITICAL)
        gestor.aplicar(ticket)

        relogio.agora = T0 + timedelta(hours=1, minutes=30)
        ticket_sla = gestor.registrar_conclusao(ticket.id)

        assert ticket_sla.status == StatusSLA.VIOLATED
        assert ticket_sla.minutos_violacao == 30

    def test_conclusao_sem_sla(self, gestor):
        assert gestor.registrar_conclusao("sem-sla") is None

    def test_falha_nao_propaga(self):
        gestor = GestorSLA(SLARepositoryQuebrado(), InMemoryTicketSLARepository())
        assert gestor.aplicar(self._ticket()) is None
