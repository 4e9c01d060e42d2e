"""
Atribuição de tickets - normalização e autorização de responsáveis.

Regras:
- Responsáveis são deduplicados (ordem preservada) e IDs vazios descartados
- Líder "" é inválido; líder com lista vazia gera [líder]
- Líder fora da lista é rejeitado
- Responsável principal = líder, senão o primeiro responsável
- Atribuidor da TI da filial fornecedora só atribui a colegas do
  próprio departamento; demais atribuidores só precisam que os
  responsáveis existam
"""

from typing import Iterable, List, Optional, Tuple

from src.core.shared.exceptions import AuthorizationError, ValidationError
from src.core.organizacao.diretorio import DiretorioOrganizacional

from .entities import ResponsavelTicket


REGRA_DEPARTAMENTO = "cross_department_assignment"


def normalizar_responsaveis(
    responsaveis_ids: Iterable[str],
    lider_id: Optional[str] = None,
) -> Tuple[List[str], Optional[str]]:
    """
    Normaliza a lista de responsáveis e o líder.

    Returns:
        (responsáveis únicos, líder)

    Raises:
        ValidationError: Líder vazio ou fora da lista
    """
    unicos: List[str] = []
    for usuario_id in responsaveis_ids or ():
        if usuario_id and usuario_id not in unicos:
            unicos.append(usuario_id)

    if lider_id is not None:
        if not lider_id:
            raise ValidationError("Responsável líder inválido", field="lider_id")
        if not unicos:
            return [lider_id], lider_id
        if lider_id not in unicos:
            raise ValidationError(
                "O líder deve fazer parte dos responsáveis",
                field="lider_id"
            )

    return unicos, lider_id


def responsavel_principal(responsaveis_ids: List[str], lider_id: Optional[str]) -> Optional[str]:
    """Líder se definido, senão o primeiro responsável, senão None."""
    if lider_id:
        return lider_id
    if responsaveis_ids:
        return responsaveis_ids[0]
    return None


def montar_vinculos(
    ticket_id: str,
    responsaveis_ids: List[str],
    lider_id: Optional[str],
) -> List[ResponsavelTicket]:
    return [
        ResponsavelTicket(ticket_id=ticket_id, usuario_id=uid, eh_lider=(uid == lider_id))
        for uid in responsaveis_ids
    ]


class ValidadorAtribuicao:
    """
    Verifica se o atribuidor pode atribuir o ticket aos responsáveis.

    Example:
        validador = ValidadorAtribuicao(diretorio)
        validador.validar(["u1", "u2"], atribuidor_id="ti-1")
    """

    def __init__(self, diretorio: DiretorioOrganizacional):
        self.diretorio = diretorio

    def validar(self, responsaveis_ids: List[str], atribuidor_id: str) -> None:
        """
        Raises:
            EntityNotFoundError: Atribuidor ou responsável inexistente
            AuthorizationError: Atribuição fora do departamento de TI
        """
        if not self.diretorio.eh_ti_fornecedor(atribuidor_id):
            for usuario_id in responsaveis_ids:
                self.diretorio.obter_usuario(usuario_id, papel="Usuário atribuído")
            return

        atribuidor = self.diretorio.obter_usuario(atribuidor_id, papel="Usuário atribuidor")
        if not atribuidor.departamento_id:
            raise AuthorizationError(
                "O usuário atribuidor não pertence a nenhum departamento",
                rule=REGRA_DEPARTAMENTO,
            )

        for usuario_id in responsaveis_ids:
            responsavel = self.diretorio.obter_usuario(usuario_id, papel="Usuário atribuído")
            if not responsavel.departamento_id:
                raise AuthorizationError(
                    f"O usuário atribuído {usuario_id} não pertence a nenhum departamento",
                    rule=REGRA_DEPARTAMENTO,
                )

            if responsavel.departamento_id != atribuidor.departamento_id:
                raise AuthorizationError(
                    f"O usuário atribuído {usuario_id} não pertence ao mesmo departamento de TI",
                    rule=REGRA_DEPARTAMENTO,
                )
