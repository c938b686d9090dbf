"""
setores.py - Reconciliacao do total fisico com a soma dos setores.

Cada item tem um total fisico (retaguarda) e a sua distribuicao entre dois
buckets logicos: estoque (captacao) e salao de vendas. No layout simples cada
bucket e uma coluna; no layout com alocacao cada bucket se divide em
"alocado" e "disponivel". A diferenca e a contagem de zerados/negativos sao
sempre calculadas da mesma forma, variando apenas as colunas de cada bucket.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import ConfigAnalise, DEFAULTS
from .constants import (
    ALIASES_SETOR_CODIGO,
    ALIASES_SETOR_DESCRICAO,
    ALIASES_SETOR_TOTAL_FISICO,
    ALIASES_SETOR_ESTOQUE,
    ALIASES_SETOR_SALAO,
    ALIASES_SETOR_ESTOQUE_ALOCADO,
    ALIASES_SETOR_ESTOQUE_DISPONIVEL,
    ALIASES_SETOR_SALAO_ALOCADO,
    ALIASES_SETOR_SALAO_DISPONIVEL,
    BUCKET_ESTOQUE,
    BUCKET_SALAO,
    BUCKETS_SETORES,
    LAYOUT_SETORES_SIMPLES,
    LAYOUT_SETORES_ALOCACAO,
    UNIDADE_DESCONHECIDA,
)
from .io import (
    CampoColuna,
    Grade,
    detectar_layout_setores,
    normalizar_cabecalho,
    resolver_colunas,
    texto_celula,
    valor_celula,
)
from .models import RegistroSetor, ResultadoSetores
from .parsers import parse_numero_br

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColunaSetor:
    """Coluna de contribuicao de um setor para um bucket logico."""
    chave: str
    rotulo: str
    bucket: str
    aliases: Sequence[Any]


@dataclass(frozen=True)
class LayoutSetores:
    """Conjunto de colunas de setor de um layout de planilha."""
    nome: str
    colunas: Tuple[ColunaSetor, ...]

    @property
    def chaves(self) -> List[str]:
        return [c.chave for c in self.colunas]

    def colunas_do_bucket(self, bucket: str) -> List[str]:
        return [c.chave for c in self.colunas if c.bucket == bucket]

    def campos(self) -> List[CampoColuna]:
        comuns = [
            CampoColuna('codigo', 'Código', ALIASES_SETOR_CODIGO),
            CampoColuna('total_fisico', 'Total Físico', ALIASES_SETOR_TOTAL_FISICO),
        ]
        setores = [CampoColuna(c.chave, c.rotulo, c.aliases) for c in self.colunas]
        descricao = [
            CampoColuna('descricao', 'Descrição', ALIASES_SETOR_DESCRICAO, obrigatorio=False),
        ]
        return comuns + setores + descricao

    def subtotais(self, valores: Dict[str, float]) -> Dict[str, float]:
        return {
            bucket: sum(valores[chave] for chave in self.colunas_do_bucket(bucket))
            for bucket in BUCKETS_SETORES
        }


LAYOUT_SIMPLES = LayoutSetores(LAYOUT_SETORES_SIMPLES, (
    ColunaSetor('estoque', 'Estoque (Captação)', BUCKET_ESTOQUE, ALIASES_SETOR_ESTOQUE),
    ColunaSetor('salao', 'Salão de Vendas', BUCKET_SALAO, ALIASES_SETOR_SALAO),
))

LAYOUT_ALOCACAO = LayoutSetores(LAYOUT_SETORES_ALOCACAO, (
    ColunaSetor('estoque_alocado', 'Estoque Alocado', BUCKET_ESTOQUE, ALIASES_SETOR_ESTOQUE_ALOCADO),
    ColunaSetor('estoque_disponivel', 'Estoque Disponível', BUCKET_ESTOQUE, ALIASES_SETOR_ESTOQUE_DISPONIVEL),
    ColunaSetor('salao_alocado', 'Salão Alocado', BUCKET_SALAO, ALIASES_SETOR_SALAO_ALOCADO),
    ColunaSetor('salao_disponivel', 'Salão Disponível', BUCKET_SALAO, ALIASES_SETOR_SALAO_DISPONIVEL),
))

LAYOUTS_SETORES = {
    LAYOUT_SETORES_SIMPLES: LAYOUT_SIMPLES,
    LAYOUT_SETORES_ALOCACAO: LAYOUT_ALOCACAO,
}


def detectar_unidade(
    linha_cabecalho: Sequence[Any],
    indices_salao: Sequence[Optional[int]],
    marcadores: Dict[str, str]
) -> str:
    """
    Identifica a unidade do arquivo pelo cabecalho da(s) coluna(s) do salao.

    Args:
        linha_cabecalho: Cabecalhos brutos
        indices_salao: Indices das colunas do bucket salao
        marcadores: {marcador normalizado: nome da unidade}

    Returns:
        Nome da unidade, ou UNIDADE_DESCONHECIDA
    """
    for idx in indices_salao:
        if idx is None:
            continue
        cabecalho = normalizar_cabecalho(linha_cabecalho[idx])
        for marcador, unidade in marcadores.items():
            if normalizar_cabecalho(marcador) in cabecalho:
                return unidade
    return UNIDADE_DESCONHECIDA


def calcular_metricas_setores(
    registros: Sequence[RegistroSetor],
    layout: LayoutSetores,
    unidade: str
) -> Dict[str, Any]:
    """
    Agrega os totais por coluna e por bucket e conta zerados/negativos.

    Zerados e negativos sao contados sobre o subtotal do bucket
    (alocado + disponivel), nao sobre cada coluna.

    Args:
        registros: Registros da analise de setores
        layout: Layout usado na leitura
        unidade: Unidade detectada no arquivo

    Returns:
        Dicionario com metricas gerais
    """
    metricas = {
        'unidade': unidade,
        'layout': layout.nome,
        'total_itens': len(registros),
        'totais_setores': {chave: 0.0 for chave in layout.chaves},
        'totais_buckets': {bucket: 0.0 for bucket in BUCKETS_SETORES},
        'zerados': {bucket: 0 for bucket in BUCKETS_SETORES},
        'negativos': {bucket: 0 for bucket in BUCKETS_SETORES},
        'itens_divergentes': 0,
    }
    if not registros:
        return metricas

    df_setores = pd.DataFrame([r.setores for r in registros], columns=layout.chaves)
    df_buckets = pd.DataFrame([r.subtotais for r in registros], columns=BUCKETS_SETORES)

    metricas['totais_setores'] = {k: float(v) for k, v in df_setores.sum().items()}
    metricas['totais_buckets'] = {k: float(v) for k, v in df_buckets.sum().items()}
    metricas['zerados'] = {k: int(v) for k, v in (df_buckets == 0).sum().items()}
    metricas['negativos'] = {k: int(v) for k, v in (df_buckets < 0).sum().items()}
    metricas['itens_divergentes'] = int(np.count_nonzero([r.divergente for r in registros]))

    return metricas


def analisar_setores(
    grade: Grade,
    config: Optional[ConfigAnalise] = None
) -> ResultadoSetores:
    """
    Analisa uma planilha de setores (layout detectado pelos cabecalhos).

    Args:
        grade: Grade de celulas (linha 0 = cabecalho)
        config: Parametros da analise (tolerancia, marcadores de unidade)

    Returns:
        ResultadoSetores com registros e metricas

    Raises:
        DataValidationError: Se colunas obrigatorias faltarem
    """
    config = config or DEFAULTS

    if len(grade) < 2:
        return ResultadoSetores(
            layout=LAYOUT_SETORES_SIMPLES,
            metricas=calcular_metricas_setores([], LAYOUT_SIMPLES, UNIDADE_DESCONHECIDA),
        )

    layout = LAYOUTS_SETORES[detectar_layout_setores(grade[0])]
    indices = resolver_colunas(grade[0], layout.campos(), f"Setores ({layout.nome})")

    indices_salao = [indices[chave] for chave in layout.colunas_do_bucket(BUCKET_SALAO)]
    unidade = detectar_unidade(grade[0], indices_salao, config.marcadores_unidade)
    if unidade == UNIDADE_DESCONHECIDA:
        logger.warning("Unidade nao identificada nos cabecalhos do salao")

    registros = []
    for row in grade[1:]:
        if not row:
            continue

        codigo = texto_celula(row, indices['codigo'])
        if not codigo:
            continue

        total_fisico = parse_numero_br(valor_celula(row, indices['total_fisico']))
        setores = {
            chave: parse_numero_br(valor_celula(row, indices[chave]))
            for chave in layout.chaves
        }
        diferenca = total_fisico - sum(setores.values())

        registros.append(RegistroSetor(
            codigo=codigo,
            descricao=texto_celula(row, indices['descricao']),
            total_fisico=total_fisico,
            setores=setores,
            subtotais=layout.subtotais(setores),
            unidade=unidade,
            diferenca=diferenca,
            divergente=abs(diferenca) > config.tolerancia_divergencia,
        ))

    metricas = calcular_metricas_setores(registros, layout, unidade)

    logger.info(
        "Setores analisados (%s, %s): %d itens, %d divergentes",
        layout.nome, unidade, metricas['total_itens'], metricas['itens_divergentes'],
    )

    return ResultadoSetores(layout=layout.nome, registros=registros, metricas=metricas)
