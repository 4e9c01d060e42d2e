"""
Testes Unitários - Escritor de Histórico.

Coverage:
- Persistência na ordem de submissão
- Fila cheia: descarte contado, sem bloquear
- Falha de persistência: contada, consumidor continua
- Encerramento
"""

import threading

import pytest

from src.core.tickets.entities import AcaoHistorico
from src.core.tickets.historico import EscritorHistorico
from src.core.tickets.ports import InMemoryHistoricoRepository


class RepositorioInstavel(InMemoryHistoricoRepository):
    """Falha ao gravar entradas com descrição "falha"."""

    def adicionar(self, entry):
        if entry.descricao == "falha":
            raise RuntimeError("banco indisponível")
        super().adicionar(entry)


class RepositorioBloqueado(InMemoryHistoricoRepository):
    """Só grava depois que `liberar` é sinalizado."""

    def __init__(self):
        super().__init__()
        self.liberar = threading.Event()

    def adicionar(self, entry):
        self.liberar.wait(5)
        super().adicionar(entry)


@pytest.fixture
def repo():
    return InMemoryHistoricoRepository()


class TestEscritorHistorico:

    def test_persiste_na_ordem_de_submissao(self, repo):
        escritor = EscritorHistorico(repo)
        try:
            for n in range(20):
                assert escritor.registrar("t1", "u1", AcaoHistorico.UPDATED, "title", str(n), str(n + 1))
            assert escritor.flush()
        finally:
            escritor.fechar()

        entradas = repo.listar_por_ticket("t1")
        assert [e.valor_antigo for e in entradas] == [str(n) for n in range(20)]
        assert all(e.acao == "updated" for e in entradas)

    def test_aceita_acao_como_texto(self, repo):
        escritor = EscritorHistorico(repo)
        escritor.registrar("t1", "u1", "custom")
        escritor.fechar()

        assert repo.listar_por_ticket("t1")[0].acao == "custom"

    def test_fila_cheia_descarta_sem_bloquear(self, repo):
        """Sem consumidor, a segunda entrada não cabe numa fila de tamanho 1."""
        escritor = EscritorHistorico(repo, tamanho_fila=1, iniciar=False)

        assert escritor.registrar("t1", "u1", AcaoHistorico.CREATED)
        assert not escritor.registrar("t1", "u1", AcaoHistorico.UPDATED)
        assert escritor.descartados == 1
        assert escritor.pendentes == 1
        assert not escritor.flush(timeout=0.05)

        escritor.iniciar()
        assert escritor.flush()
        escritor.fechar()
        assert [e.acao for e in repo.listar_por_ticket("t1")] == ["created"]

    def test_fila_cheia_com_consumidor_ocupado(self):
        repo = RepositorioBloqueado()
        escritor = EscritorHistorico(repo, tamanho_fila=2)

        resultados = [escritor.registrar("t1", "u1", AcaoHistorico.UPDATED) for _ in range(10)]

        repo.liberar.set()
        escritor.flush()
        escritor.fechar()
        assert not all(resultados)
        assert escritor.descartados == resultados.count(False)
        assert len(repo.listar_por_ticket("t1")) == resultados.count(True)

    def test_falha_de_persistencia_nao_interrompe(self):
        repo = RepositorioInstavel()
        escritor = EscritorHistorico(repo)

        escritor.registrar("t1", "u1", AcaoHistorico.UPDATED, descricao="ok 1")
        escritor.registrar("t1", "u1", AcaoHistorico.UPDATED, descricao="falha")
        escritor.registrar("t1", "u1", AcaoHistorico.UPDATED, descricao="ok 2")
        escritor.flush()
        escritor.fechar()

        assert escritor.falhas == 1
        assert [e.descricao for e in repo.listar_por_ticket("t1")] == ["ok 1", "ok 2"]

    def test_fechar_persiste_pendentes_e_encerra(self, repo):
        escritor = EscritorHistorico(repo)
        escritor.registrar("t1", "u1", AcaoHistorico.DELETED)

        escritor.fechar()

        assert not escritor.ativo
        assert len(repo.listar_por_ticket("t1")) == 1

    def test_iniciar_idempotente(self, repo):
        escritor = EscritorHistorico(repo)
        thread = escritor._thread
        escritor.iniciar()
        assert escritor._thread is thread
        escritor.fechar()
