"""
Diretório Organizacional.

Fachada de leitura sobre usuários, departamentos, filiais e categorias
que responde às perguntas do ciclo de vida de tickets:

- Qual a filial efetiva de um usuário?
- O usuário é da TI da filial fornecedora de software?
- Quem compõe o grupo de TI da filial fornecedora?
- Uma categoria (slug) é válida?
"""

from typing import List, Optional
import logging

from src.core.shared.exceptions import EntityNotFoundError, ValidationError

from .entities import UsuarioEntity
from .ports import (
    CategoriaRepository,
    DepartamentoRepository,
    FilialRepository,
    UsuarioRepository,
)

logger = logging.getLogger(__name__)


class DiretorioOrganizacional:
    """
    Consultas organizacionais usadas pelos use cases.

    Attributes:
        usuario_repo: Repositório de usuários
        departamento_repo: Repositório de departamentos
        filial_repo: Repositório de filiais
        categoria_repo: Repositório de categorias
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        departamento_repo: DepartamentoRepository,
        filial_repo: FilialRepository,
        categoria_repo: CategoriaRepository,
    ):
        self.usuario_repo = usuario_repo
        self.departamento_repo = departamento_repo
        self.filial_repo = filial_repo
        self.categoria_repo = categoria_repo

    def obter_usuario(self, usuario_id: str, papel: str = "Usuário") -> UsuarioEntity:
        """
        Busca usuário obrigatório.

        Args:
            usuario_id: ID do usuário
            papel: Papel do usuário na operação (para a mensagem de erro)

        Raises:
            EntityNotFoundError: Se o usuário não existe
        """
        usuario = self.usuario_repo.get_by_id(usuario_id) if usuario_id else None
        if not usuario:
            raise EntityNotFoundError(
                f"{papel} {usuario_id} não encontrado",
                entity_type="Usuario",
                entity_id=usuario_id,
            )
        return usuario

    def usuario_existe(self, usuario_id: str) -> bool:
        return bool(usuario_id) and self.usuario_repo.get_by_id(usuario_id) is not None

    def nome_usuario(self, usuario_id: Optional[str], padrao: str = "Um usuário") -> str:
        """Nome de exibição para mensagens (padrão se desconhecido)."""
        usuario = self.usuario_repo.get_by_id(usuario_id) if usuario_id else None
        return usuario.nome_exibicao if usuario else padrao

    def nome_filial(self, filial_id: Optional[str], padrao: str = "uma filial") -> str:
        filial = self.filial_repo.get_by_id(filial_id) if filial_id else None
        return filial.nome if filial and filial.nome else padrao

    def resolver_filial(
        self,
        usuario: UsuarioEntity,
        filial_explicita: Optional[str] = None,
    ) -> Optional[str]:
        """
        Resolve a filial efetiva (primeira ocorrência vence).

        Ordem: valor explícito → filial do usuário → filial do papel →
        filial do departamento.
        """
        if filial_explicita:
            return filial_explicita
        if usuario.filial_id:
            return usuario.filial_id
        if usuario.papel_filial_id:
            return usuario.papel_filial_id
        if usuario.departamento_id:
            departamento = self.departamento_repo.get_by_id(usuario.departamento_id)
            if departamento and departamento.filial_id:
                return departamento.filial_id
        return None

    def eh_ti_fornecedor(self, usuario_id: str) -> bool:
        """
        Verifica se o usuário pertence a um departamento de TI da
        filial fornecedora de software.
        """
        usuario = self.usuario_repo.get_by_id(usuario_id)
        if not usuario or not usuario.departamento_id:
            return False

        departamento = self.departamento_repo.get_by_id(usuario.departamento_id)
        if not departamento or not departamento.filial_id:
            return False

        filial = self.filial_repo.get_by_id(departamento.filial_id)
        if not filial:
            return False

        return filial.eh_fornecedor_software and departamento.eh_ti

    def departamento_eh_ti(self, usuario_id: str) -> bool:
        """Se o departamento do usuário é marcado como TI."""
        usuario = self.usuario_repo.get_by_id(usuario_id)
        if not usuario or not usuario.departamento_id:
            return False
        departamento = self.departamento_repo.get_by_id(usuario.departamento_id)
        return bool(departamento and departamento.eh_ti)

    def usuarios_ti_fornecedor(self) -> List[str]:
        """
        IDs dos usuários ativos dos departamentos de TI ativos
        da filial fornecedora.
        """
        fornecedor = self.filial_repo.get_fornecedor_software()
        if not fornecedor:
            logger.warning("Filial fornecedora de software não configurada")
            return []

        departamentos = self.departamento_repo.list_ti_ativos_por_filial(fornecedor.id)
        if not departamentos:
            logger.warning(
                f"Nenhum departamento de TI ativo na filial fornecedora {fornecedor.id}"
            )
            return []

        usuarios = self.usuario_repo.list_ativos_por_departamentos(
            [d.id for d in departamentos]
        )
        return [u.id for u in usuarios]

    def validar_categoria(self, slug: str) -> None:
        """
        Valida slug de categoria contra as categorias ativas.

        Slug vazio é aceito (ticket sem categoria).

        Raises:
            ValidationError: Se a categoria não existe ou está inativa
        """
        if not slug:
            return

        categoria = self.categoria_repo.get_by_slug(slug)
        if not categoria:
            raise ValidationError(
                f"Categoria desconhecida: {slug!r}",
                field="categoria",
            )
        if not categoria.ativo:
            raise ValidationError(
                f"A categoria {slug!r} não está mais ativa",
                field="categoria",
            )
