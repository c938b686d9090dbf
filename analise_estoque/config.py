# analise_estoque/config.py
"""
Configurações globais e valores padrão das análises.
"""

from dataclasses import dataclass, field
from typing import Dict

from .constants import (
    LARGURA_MAXIMA_COLUNA,
    UNIDADE_MATRIZ,
    UNIDADE_FILIAL,
)


@dataclass
class ConfigAnalise:
    """Valores padrão para parâmetros das análises."""
    prazo_sla_dias_uteis: int = 1  # Pedido no prazo se faturado em até 1 dia útil
    tolerancia_divergencia: float = 0.01  # Absorve arredondamento de ponto flutuante
    largura_maxima_coluna: int = LARGURA_MAXIMA_COLUNA
    # CodigoEstruturaPai -> unidade
    unidades_por_codigo: Dict[str, str] = field(default_factory=lambda: {
        "1001": UNIDADE_MATRIZ,
        "1002": UNIDADE_FILIAL,
    })
    # Marcador no cabecalho do salao (normalizado) -> unidade
    marcadores_unidade: Dict[str, str] = field(default_factory=lambda: {
        "matriz": UNIDADE_MATRIZ,
        "filial": UNIDADE_FILIAL,
    })


# Instância global dos valores padrão
DEFAULTS = ConfigAnalise()
