"""
relatorios.py - Cards de metricas e tabelas para exibicao.

Este modulo contem funcoes para formatar as metricas dos analisadores
para exibicao na interface do usuario.
"""

from typing import Any, Dict, List

import pandas as pd

from .constants import BUCKET_ESTOQUE, BUCKET_SALAO, FAIXAS_ATRASO
from .parsers import formatar_moeda, formatar_numero, formatar_percentual


def _card(label: str, valor: Any, formato: str, icone: str) -> Dict[str, Any]:
    return {'label': label, 'valor': valor, 'formato': formato, 'icone': icone}


def gerar_resumo_estoque(metricas: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Gera lista de metricas de estoque formatadas para exibicao em cards.

    Args:
        metricas: Dicionario retornado por calcular_metricas_estoque

    Returns:
        Lista de dicionarios com label, valor, formato e icone
    """
    return [
        _card('Total de Itens', metricas['total_itens'], 'numero', ':package:'),
        _card('Zerados', metricas['itens_zerados'], 'numero', ':zero:'),
        _card('Negativos', metricas['itens_negativos'], 'numero', ':warning:'),
        _card('Grupos Duplicados', metricas['grupos_duplicados'], 'numero', ':busts_in_silhouette:'),
        _card('Sem Endereço', metricas['itens_sem_endereco'], 'numero', ':round_pushpin:'),
    ]


def gerar_resumo_setores(metricas: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Cards da analise de setores."""
    return [
        _card('Unidade', metricas['unidade'], 'texto', ':office:'),
        _card('Total de Itens', metricas['total_itens'], 'numero', ':package:'),
        _card('Divergentes', metricas['itens_divergentes'], 'numero', ':warning:'),
        _card('Estoque Zerado', metricas['zerados'][BUCKET_ESTOQUE], 'numero', ':zero:'),
        _card('Salão Zerado', metricas['zerados'][BUCKET_SALAO], 'numero', ':zero:'),
    ]


def gerar_resumo_pedidos(metricas: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Cards da analise de pedidos (gerais ou de uma unidade)."""
    return [
        _card('Total de Pedidos', metricas['total_pedidos'], 'numero', ':receipt:'),
        _card('Valor Total', metricas['valor_total'], 'moeda', ':moneybag:'),
        _card('% No Prazo', metricas['percentual_no_prazo'], 'percentual', ':white_check_mark:'),
        _card('Atrasados', metricas['pedidos_atrasados'], 'numero', ':hourglass:'),
        _card('Tempo Médio (dias úteis)', metricas['tempo_medio_dias_uteis'], 'decimal', ':stopwatch:'),
    ]


def formatar_valor(valor: Any, formato: str) -> str:
    """
    Formata um valor de acordo com o tipo especificado.

    Args:
        valor: Valor a ser formatado
        formato: Tipo de formato ('numero', 'decimal', 'moeda', 'percentual')

    Returns:
        String formatada
    """
    if valor is None or (isinstance(valor, float) and pd.isna(valor)):
        return "-"

    if formato == 'moeda':
        return formatar_moeda(valor)
    elif formato == 'percentual':
        return formatar_percentual(valor)
    elif formato == 'numero':
        return formatar_numero(valor)
    elif formato == 'decimal':
        return formatar_numero(valor, 1)
    else:
        return str(valor)


def tabela_distribuicao(distribuicao: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Tabela da distribuicao de atrasos com todas as faixas.

    Faixas sem pedidos aparecem com zero para manter o grafico estavel.
    """
    por_faixa = {d['dias_atraso']: d for d in distribuicao}
    return pd.DataFrame([
        {
            'Atraso': faixa,
            'Pedidos': por_faixa.get(faixa, {}).get('quantidade', 0),
            '%': por_faixa.get(faixa, {}).get('percentual', 0),
        }
        for faixa in FAIXAS_ATRASO
    ])
