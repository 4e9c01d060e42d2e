"""
Política de Acesso - Verificação de capacidades.

Cada operação consulta a política UMA vez com a tripla explícita
(ator, recurso, ação), em vez de espalhar flags booleanas pelos
parâmetros dos serviços.

Example:
    politica = PoliticaAcesso()
    politica.exigir(ator, atraso, Acao.JUSTIFICAR_ATRASO)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional
import logging

from .exceptions import AuthorizationError

logger = logging.getLogger(__name__)


class Acao(Enum):
    """Ações sujeitas a verificação de capacidade."""

    JUSTIFICAR_ATRASO = "atraso.justificar"
    EDITAR_JUSTIFICATIVA = "justificativa.editar"
    EXCLUIR_JUSTIFICATIVA = "justificativa.excluir"
    EDITAR_COMENTARIO = "comentario.editar"
    EXCLUIR_COMENTARIO = "comentario.excluir"
    VER_COMENTARIO_INTERNO = "comentario.ver_interno"


@dataclass(frozen=True)
class Ator:
    """
    Quem executa a operação.

    Attributes:
        usuario_id: ID do usuário
        permissoes: Permissões do papel
        departamento_eh_ti: Se o departamento do usuário é de TI
    """

    usuario_id: str
    permissoes: FrozenSet[str] = field(default_factory=frozenset)
    departamento_eh_ti: bool = False


PERMISSAO_VER_INTERNOS = "tickets.view_internal_comments"


class PoliticaAcesso:
    """
    Política de capacidades do domínio.

    Regras:
    - atraso.justificar: ator é o dono do atraso
    - justificativa.editar / excluir: ator é o autor
    - comentario.editar / excluir: ator é o autor
    - comentario.ver_interno: permissão explícita ou departamento de TI
    """

    _MENSAGENS = {
        Acao.JUSTIFICAR_ATRASO: "Apenas o responsável pelo atraso pode justificá-lo",
        Acao.EDITAR_JUSTIFICATIVA: "Apenas o autor pode modificar a justificativa",
        Acao.EXCLUIR_JUSTIFICATIVA: "Apenas o autor pode excluir a justificativa",
        Acao.EDITAR_COMENTARIO: "Apenas o autor do comentário pode modificá-lo",
        Acao.EXCLUIR_COMENTARIO: "Apenas o autor do comentário pode excluí-lo",
        Acao.VER_COMENTARIO_INTERNO: "Comentários internos restritos à equipe de TI",
    }

    def permite(self, ator: Ator, recurso: Optional[Any], acao: Acao) -> bool:
        """
        Avalia a tripla (ator, recurso, ação).

        Args:
            ator: Quem executa
            recurso: Entidade alvo (None para capacidades globais)
            acao: Ação desejada

        Returns:
            True se permitido
        """
        if acao == Acao.VER_COMENTARIO_INTERNO:
            return ator.departamento_eh_ti or PERMISSAO_VER_INTERNOS in ator.permissoes

        # Demais ações exigem que o ator seja o dono/autor do recurso
        return recurso is not None and getattr(recurso, "usuario_id", None) == ator.usuario_id

    def exigir(self, ator: Ator, recurso: Optional[Any], acao: Acao) -> None:
        """
        Como `permite`, mas lança exceção quando negado.

        Raises:
            AuthorizationError: Se a ação não é permitida
        """
        if not self.permite(ator, recurso, acao):
            logger.info(f"Acesso negado: {acao.value} para usuário {ator.usuario_id}")
            raise AuthorizationError(self._MENSAGENS[acao], rule=acao.value)
