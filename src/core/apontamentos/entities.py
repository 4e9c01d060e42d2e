"""
Entidades do Domínio de Apontamentos de Tempo.

Um Apontamento registra minutos trabalhados por um usuário numa data,
vinculado a um ticket OU a uma tarefa de projeto (exatamente um dos
dois).

Regras de Negócio Encapsuladas:
- tempo_gasto > 0
- data no formato YYYY-MM-DD
- Apontamento validado não pode ser alterado nem excluído
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union
import uuid

from src.core.shared.exceptions import ValidationError, BusinessRuleViolationError


FORMATO_DATA = "%Y-%m-%d"


def parse_data(valor: Union[str, date]) -> date:
    """
    Converte "YYYY-MM-DD" em date.

    Raises:
        ValidationError: Formato inválido
    """
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    try:
        return datetime.strptime((valor or "").strip(), FORMATO_DATA).date()
    except ValueError:
        raise ValidationError(
            "Formato de data inválido, esperado: YYYY-MM-DD",
            field="data"
        )


@dataclass
class ApontamentoEntity:
    """
    Entidade de Domínio: Apontamento de tempo.

    Attributes:
        id: Identificador único (UUID)
        ticket_id: Ticket apontado (ou None)
        tarefa_projeto_id: Tarefa de projeto apontada (ou None)
        usuario_id: Quem trabalhou
        tempo_gasto: Minutos (> 0)
        data: Dia do trabalho
        descricao: Texto livre
        validado: Se foi validado
        validado_por_id / validado_em: Carimbo da validação
        excluido_em: Exclusão lógica
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: Optional[str] = None
    tarefa_projeto_id: Optional[str] = None
    usuario_id: str = ""
    tempo_gasto: int = 0
    data: date = field(default_factory=date.today)
    descricao: str = ""
    validado: bool = False
    validado_por_id: Optional[str] = None
    validado_em: Optional[datetime] = None
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)
    excluido_em: Optional[datetime] = None

    @classmethod
    def criar(
        cls,
        usuario_id: str,
        tempo_gasto: int,
        data: Union[str, date],
        ticket_id: Optional[str] = None,
        tarefa_projeto_id: Optional[str] = None,
        descricao: str = "",
    ) -> "ApontamentoEntity":
        """
        Raises:
            ValidationError: Vínculo, usuário, tempo ou data inválidos
        """
        if bool(ticket_id) == bool(tarefa_projeto_id):
            raise ValidationError(
                "Informe um ticket ou uma tarefa de projeto (exatamente um)",
                field="ticket_id"
            )
        if not usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")

        return cls(
            ticket_id=ticket_id or None,
            tarefa_projeto_id=tarefa_projeto_id or None,
            usuario_id=usuario_id,
            tempo_gasto=cls._validar_tempo(tempo_gasto),
            data=parse_data(data),
            descricao=descricao or "",
            validado=False,
        )

    @staticmethod
    def _validar_tempo(tempo_gasto: int) -> int:
        if tempo_gasto is None or tempo_gasto <= 0:
            raise ValidationError(
                "O tempo gasto deve ser maior que zero",
                field="tempo_gasto"
            )
        return int(tempo_gasto)

    def _exigir_nao_validado(self, mensagem: str) -> None:
        if self.validado:
            raise BusinessRuleViolationError(mensagem, rule="apontamento_validado")

    def atualizar(
        self,
        tempo_gasto: Optional[int] = None,
        descricao: str = "",
        data: Optional[Union[str, date]] = None,
    ) -> bool:
        """
        Aplica os campos informados.

        Returns:
            True se o tempo gasto mudou

        Raises:
            BusinessRuleViolationError: Apontamento já validado
        """
        self._exigir_nao_validado("Impossível modificar um apontamento validado")

        tempo_mudou = False
        if tempo_gasto is not None:
            novo = self._validar_tempo(tempo_gasto)
            tempo_mudou = novo != self.tempo_gasto
            self.tempo_gasto = novo
        if descricao:
            self.descricao = descricao
        if data:
            self.data = parse_data(data)

        self.atualizado_em = datetime.now()
        return tempo_mudou

    def definir_validacao(
        self,
        validado: bool,
        validador_id: str,
        agora: Optional[datetime] = None,
    ) -> None:
        """Valida (ou desfaz a validação de) o apontamento."""
        agora = agora or datetime.now()
        self.validado = validado
        self.validado_por_id = validador_id if validado else None
        self.validado_em = agora if validado else None
        self.atualizado_em = agora

    def excluir(self, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            BusinessRuleViolationError: Apontamento já validado
        """
        self._exigir_nao_validado("Impossível excluir um apontamento validado")
        self.excluido_em = agora or datetime.now()

    @property
    def esta_excluido(self) -> bool:
        return self.excluido_em is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApontamentoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
