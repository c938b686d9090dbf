# analise_estoque/models.py
"""
Modelos (dataclasses) dos registros produzidos pelos analisadores.

Observação importante:
- Todos os registros são criados a cada análise; nada é compartilhado entre
  chamadas. O único campo preenchido depois da construção é
  ``RegistroEstoque.quantidade_total`` (segunda passada dos grupos de
  variantes).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .constants import PLACEHOLDER_VAZIO


@dataclass(frozen=True)
class LinhaEstoque:
    """Linha bruta de estoque antes da classificação."""
    codigo: str
    descricao: str
    quantidade: float
    indice_linha: int
    estacao: str = PLACEHOLDER_VAZIO
    rack: str = PLACEHOLDER_VAZIO
    linha_prod: str = PLACEHOLDER_VAZIO
    coluna_prod: str = PLACEHOLDER_VAZIO


@dataclass
class RegistroEstoque:
    """Item de estoque classificado."""
    id: str
    codigo: str
    descricao: str
    quantidade: float
    status: Tuple[str, ...]
    quantidade_total: float
    estacao: str = PLACEHOLDER_VAZIO
    rack: str = PLACEHOLDER_VAZIO
    linha_prod: str = PLACEHOLDER_VAZIO
    coluna_prod: str = PLACEHOLDER_VAZIO
    variantes: Optional[List[str]] = None   # Codigos irmaos (sem o proprio)
    grupo_id: Optional[str] = None          # Grupo de variantes

    def tem_status(self, status: str) -> bool:
        return status in self.status


@dataclass
class RegistroSetor:
    """Item da análise de setores (retaguarda x soma dos setores)."""
    codigo: str
    descricao: str
    total_fisico: float
    setores: Dict[str, float]     # chave da coluna -> valor
    subtotais: Dict[str, float]   # bucket (estoque/salao) -> soma
    unidade: str
    diferenca: float
    divergente: bool


@dataclass
class RegistroPedido:
    """Pedido com tempo de faturamento medido em dias úteis."""
    id: str
    codigo_pedido: str
    valor_praticado: float
    data_aprovacao_original: date
    data_aprovacao: date          # Ajustada para dia util de aprovacao
    data_faturamento: date
    dias_uteis: int
    dentro_do_prazo: bool
    status: str
    unidade: str
    codigo_estrutura_pai: str = ""


@dataclass
class ResultadoEstoque:
    layout: str
    registros: List[RegistroEstoque] = field(default_factory=list)
    metricas: Dict[str, Any] = field(default_factory=dict)
    sem_endereco: List[RegistroEstoque] = field(default_factory=list)


@dataclass
class ResultadoSetores:
    layout: str
    registros: List[RegistroSetor] = field(default_factory=list)
    metricas: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResultadoPedidos:
    registros: List[RegistroPedido] = field(default_factory=list)
    metricas: Dict[str, Any] = field(default_factory=dict)
    distribuicao_atraso: List[Dict[str, Any]] = field(default_factory=list)
    # Unidade conhecida -> metricas / distribuicao apenas dos seus pedidos
    metricas_por_unidade: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    distribuicao_por_unidade: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

    @property
    def atrasados(self) -> List[RegistroPedido]:
        return [p for p in self.registros if not p.dentro_do_prazo]
