"""
pedidos.py - Tempo de vida dos pedidos (aprovacao -> faturamento).

Este modulo contem:
- Leitura das linhas de pedidos e identificacao da unidade pela estrutura pai
- Ajuste da data de aprovacao para dia util (segunda a sexta)
- Contagem de dias uteis ate o faturamento (segunda a sabado)
- Metricas de SLA e distribuicao de atrasos, gerais e por unidade
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .calendario import CalendarioComercial
from .config import ConfigAnalise, DEFAULTS
from .constants import (
    ALIASES_CODIGO_PEDIDO,
    ALIASES_VALOR_PRATICADO,
    ALIASES_DATA_APROVACAO,
    ALIASES_DATA_FATURAMENTO,
    ALIASES_ESTRUTURA_PAI,
    FAIXAS_ATRASO,
    STATUS_NO_PRAZO,
    STATUS_ATRASADO,
    UNIDADE_DESCONHECIDA,
)
from .io import CampoColuna, Grade, resolver_colunas, texto_celula, valor_celula
from .models import RegistroPedido, ResultadoPedidos
from .parsers import arredondar, arredondar_percentual, parse_data_br, parse_numero_br

logger = logging.getLogger(__name__)

CAMPOS_PEDIDOS = [
    CampoColuna('codigo_pedido', 'CodigoPedido', ALIASES_CODIGO_PEDIDO),
    CampoColuna('valor_praticado', 'ValorPraticado', ALIASES_VALOR_PRATICADO),
    CampoColuna('data_aprovacao', 'Data Aprovacao', ALIASES_DATA_APROVACAO),
    CampoColuna('data_faturamento', 'DataFaturamento', ALIASES_DATA_FATURAMENTO),
    CampoColuna('estrutura_pai', 'CodigoEstruturaPai', ALIASES_ESTRUTURA_PAI, obrigatorio=False),
]


def unidade_por_codigo(codigo: str, tabela: Dict[str, str]) -> str:
    """Unidade da estrutura pai ("1001" -> Matriz); desconhecida se fora da tabela."""
    return tabela.get(codigo.strip(), UNIDADE_DESCONHECIDA)


def faixa_atraso(dias_uteis: int, prazo: int = 1) -> str:
    """
    Faixa de atraso de um pedido atrasado.

    Os dias de atraso sao os dias uteis alem do prazo; a ultima faixa
    acumula 5 ou mais.
    """
    dias_atraso = max(dias_uteis - prazo, 1)
    indice = min(dias_atraso, len(FAIXAS_ATRASO)) - 1
    return FAIXAS_ATRASO[indice]


def calcular_metricas_pedidos(registros: Sequence[RegistroPedido]) -> Dict[str, Any]:
    """
    Calcula as metricas de SLA de um conjunto de pedidos.

    Args:
        registros: Pedidos analisados (todos ou de uma unidade)

    Returns:
        Dicionario com contagens, valores, percentuais inteiros e o tempo
        medio em dias uteis (1 casa decimal)
    """
    if not registros:
        return {
            'total_pedidos': 0,
            'valor_total': 0.0,
            'pedidos_no_prazo': 0,
            'valor_no_prazo': 0.0,
            'percentual_no_prazo': 0,
            'pedidos_atrasados': 0,
            'valor_atrasados': 0.0,
            'percentual_atrasados': 0,
            'tempo_medio_dias_uteis': 0.0,
        }

    df = pd.DataFrame({
        'valor': [p.valor_praticado for p in registros],
        'dias': [p.dias_uteis for p in registros],
        'no_prazo': [p.dentro_do_prazo for p in registros],
    })
    no_prazo = df[df['no_prazo']]
    atrasados = df[~df['no_prazo']]
    total = len(df)

    return {
        'total_pedidos': total,
        'valor_total': float(df['valor'].sum()),
        'pedidos_no_prazo': len(no_prazo),
        'valor_no_prazo': float(no_prazo['valor'].sum()),
        'percentual_no_prazo': arredondar_percentual(len(no_prazo), total),
        'pedidos_atrasados': len(atrasados),
        'valor_atrasados': float(atrasados['valor'].sum()),
        'percentual_atrasados': arredondar_percentual(len(atrasados), total),
        'tempo_medio_dias_uteis': arredondar(float(df['dias'].mean()), 1),
    }


def calcular_distribuicao_atraso(
    registros: Sequence[RegistroPedido],
    prazo: int = 1
) -> List[Dict[str, Any]]:
    """
    Distribuicao dos pedidos atrasados por faixa de atraso.

    Apenas faixas com pedidos aparecem, na ordem de FAIXAS_ATRASO. O
    percentual e calculado sobre os atrasados, nao sobre o total.

    Args:
        registros: Pedidos analisados
        prazo: Prazo do SLA em dias uteis

    Returns:
        Lista de {'dias_atraso', 'quantidade', 'percentual'}
    """
    atrasados = [p for p in registros if not p.dentro_do_prazo]
    if not atrasados:
        return []

    contagem = pd.Series(
        [faixa_atraso(p.dias_uteis, prazo) for p in atrasados]
    ).value_counts()

    return [
        {
            'dias_atraso': faixa,
            'quantidade': int(contagem[faixa]),
            'percentual': arredondar_percentual(int(contagem[faixa]), len(atrasados)),
        }
        for faixa in FAIXAS_ATRASO
        if faixa in contagem.index
    ]


def analisar_pedidos(
    grade: Grade,
    config: Optional[ConfigAnalise] = None,
    calendario: Optional[CalendarioComercial] = None
) -> ResultadoPedidos:
    """
    Analisa uma planilha de pedidos.

    A data de aprovacao e ajustada pela regra de aprovacao (segunda a sexta);
    os dias decorridos usam a regra de faturamento (segunda a sabado).

    Args:
        grade: Grade de celulas (linha 0 = cabecalho)
        config: Parametros (prazo do SLA, tabela de unidades)
        calendario: Calendario comercial; um novo e criado se omitido

    Returns:
        ResultadoPedidos com registros, metricas gerais e por unidade

    Raises:
        DataValidationError: Se colunas obrigatorias faltarem
    """
    config = config or DEFAULTS
    calendario = calendario or CalendarioComercial()
    unidades = list(dict.fromkeys(config.unidades_por_codigo.values()))

    registros: List[RegistroPedido] = []
    if len(grade) >= 2:
        indices = resolver_colunas(grade[0], CAMPOS_PEDIDOS, "Pedidos")

        for i, row in enumerate(grade[1:], start=1):
            if not row:
                continue

            codigo = texto_celula(row, indices['codigo_pedido'])
            if not codigo:
                continue

            aprovacao = parse_data_br(valor_celula(row, indices['data_aprovacao']))
            faturamento = parse_data_br(valor_celula(row, indices['data_faturamento']))
            if aprovacao is None or faturamento is None:
                continue

            aprovacao_ajustada = calendario.proximo_dia_util(aprovacao)
            dias_uteis = calendario.dias_uteis_entre(aprovacao_ajustada, faturamento)
            dentro_do_prazo = dias_uteis <= config.prazo_sla_dias_uteis
            estrutura_pai = texto_celula(row, indices['estrutura_pai'])

            registros.append(RegistroPedido(
                id=f"pedido-{i}",
                codigo_pedido=codigo,
                valor_praticado=parse_numero_br(valor_celula(row, indices['valor_praticado'])),
                data_aprovacao_original=aprovacao,
                data_aprovacao=aprovacao_ajustada,
                data_faturamento=faturamento,
                dias_uteis=dias_uteis,
                dentro_do_prazo=dentro_do_prazo,
                status=STATUS_NO_PRAZO if dentro_do_prazo else STATUS_ATRASADO,
                unidade=unidade_por_codigo(estrutura_pai, config.unidades_por_codigo),
                codigo_estrutura_pai=estrutura_pai,
            ))

        ignoradas = len(grade) - 1 - len(registros)
        if ignoradas:
            logger.debug("%d linhas de pedidos ignoradas (sem codigo ou data invalida)", ignoradas)

    prazo = config.prazo_sla_dias_uteis
    por_unidade = {u: [p for p in registros if p.unidade == u] for u in unidades}

    resultado = ResultadoPedidos(
        registros=registros,
        metricas=calcular_metricas_pedidos(registros),
        distribuicao_atraso=calcular_distribuicao_atraso(registros, prazo),
        metricas_por_unidade={
            u: calcular_metricas_pedidos(pedidos) for u, pedidos in por_unidade.items()
        },
        distribuicao_por_unidade={
            u: calcular_distribuicao_atraso(pedidos, prazo) for u, pedidos in por_unidade.items()
        },
    )

    logger.info(
        "Pedidos analisados: %d pedidos, %d no prazo, %d atrasados",
        resultado.metricas['total_pedidos'],
        resultado.metricas['pedidos_no_prazo'],
        resultado.metricas['pedidos_atrasados'],
    )

    return resultado
