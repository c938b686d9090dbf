"""
estoque.py - Classificacao de itens de estoque.

Este modulo contem:
- Leitura das linhas de estoque (layouts "Total Fisico" e "Total - Disponivel")
- Deteccao de codigos duplicados e de variantes (sufixo " V<numero>")
- Classificacao por status e soma de quantidades por grupo de variantes
- Metricas do painel e relatorio de itens sem endereco
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .constants import (
    ALIASES_COD_MATERIAL,
    ALIASES_DESC_MATERIAL,
    ALIASES_TOTAL_FISICO,
    ALIASES_TOTAL_DISPONIVEL,
    ALIASES_ESTACAO,
    ALIASES_RACK,
    ALIASES_LINHA_PROD,
    ALIASES_COLUNA_PROD,
    PLACEHOLDER_VAZIO,
    STATUS_ZERADO,
    STATUS_NEGATIVO,
    STATUS_DUPLICADO,
    STATUS_VARIANTE,
    PRIORIDADE_STATUS,
    PRIORIDADE_SEM_STATUS,
    PREFIXO_GRUPO_VARIANTE,
    TEMPLATE_AUTO,
    TEMPLATE_ESTOQUE_PADRAO,
    TEMPLATE_ESTOQUE_DISPONIVEL,
)
from .io import (
    CampoColuna,
    DataValidationError,
    Grade,
    detectar_layout_estoque,
    resolver_colunas,
    texto_celula,
    valor_celula,
)
from .models import LinhaEstoque, RegistroEstoque, ResultadoEstoque
from .parsers import arredondar_percentual, parse_numero_br

logger = logging.getLogger(__name__)

# " V1", " v12" no final da descricao
RE_SUFIXO_VARIANTE = re.compile(r'\s+V\d+$', re.IGNORECASE)

COLUNAS_ENDERECO = ['estacao', 'rack', 'linha_prod', 'coluna_prod']

_CAMPOS_ENDERECO = [
    CampoColuna('estacao', 'Estação', ALIASES_ESTACAO, obrigatorio=False),
    CampoColuna('rack', 'Rack', ALIASES_RACK, obrigatorio=False),
    CampoColuna('linha_prod', 'Linha Prod Alocado', ALIASES_LINHA_PROD, obrigatorio=False),
    CampoColuna('coluna_prod', 'Coluna Prod Alocado', ALIASES_COLUNA_PROD, obrigatorio=False),
]

CAMPOS_POR_LAYOUT = {
    TEMPLATE_ESTOQUE_PADRAO: [
        CampoColuna('codigo', 'Cod Material', ALIASES_COD_MATERIAL),
        CampoColuna('descricao', 'Desc Material', ALIASES_DESC_MATERIAL),
        CampoColuna('quantidade', 'Total Físico', ALIASES_TOTAL_FISICO),
    ] + _CAMPOS_ENDERECO,
    TEMPLATE_ESTOQUE_DISPONIVEL: [
        CampoColuna('codigo', 'Cod Material', ALIASES_COD_MATERIAL),
        CampoColuna('descricao', 'Desc Material', ALIASES_DESC_MATERIAL),
        CampoColuna('quantidade', 'Total - Disponível', ALIASES_TOTAL_DISPONIVEL),
    ] + _CAMPOS_ENDERECO,
}

NOMES_LAYOUT = {
    TEMPLATE_ESTOQUE_PADRAO: "Estoque (Total Fisico)",
    TEMPLATE_ESTOQUE_DISPONIVEL: "Estoque (Total - Disponivel)",
}


def extrair_descricao_base(descricao: str) -> str:
    """
    Remove o sufixo de variante (" V<numero>") do final da descricao.

    Exemplos:
        "Widget V1"   -> "Widget"
        "Caixa 10 v2" -> "Caixa 10"
        "Widget"      -> "Widget"
    """
    if RE_SUFIXO_VARIANTE.search(descricao):
        return RE_SUFIXO_VARIANTE.sub('', descricao).strip()
    return descricao


def extrair_linhas_estoque(grade: Grade, layout: str) -> Tuple[List[LinhaEstoque], bool]:
    """
    Converte as linhas de dados da grade em LinhaEstoque.

    Linhas sem codigo ou sem descricao sao ignoradas.

    Args:
        grade: Grade de celulas (linha 0 = cabecalho)
        layout: TEMPLATE_ESTOQUE_PADRAO ou TEMPLATE_ESTOQUE_DISPONIVEL

    Returns:
        Tupla (lista de LinhaEstoque, possui_colunas_endereco)

    Raises:
        DataValidationError: Se colunas obrigatorias faltarem
    """
    if layout not in CAMPOS_POR_LAYOUT:
        raise DataValidationError(f"Layout de estoque desconhecido: {layout}")

    indices = resolver_colunas(grade[0], CAMPOS_POR_LAYOUT[layout], NOMES_LAYOUT[layout])
    possui_endereco = any(indices[c] is not None for c in COLUNAS_ENDERECO)

    linhas = []
    for i, row in enumerate(grade[1:], start=1):
        if not row:
            continue

        codigo = texto_celula(row, indices['codigo'])
        descricao = texto_celula(row, indices['descricao'])
        if not codigo or not descricao:
            continue

        endereco = {
            c: texto_celula(row, indices[c], PLACEHOLDER_VAZIO) for c in COLUNAS_ENDERECO
        }
        linhas.append(LinhaEstoque(
            codigo=codigo,
            descricao=descricao,
            quantidade=parse_numero_br(valor_celula(row, indices['quantidade'])),
            indice_linha=i,
            **endereco
        ))

    ignoradas = len(grade) - 1 - len(linhas)
    if ignoradas:
        logger.debug("%d linhas de estoque ignoradas (sem codigo/descricao)", ignoradas)

    return linhas, possui_endereco


def _status_quantidade(quantidade: float) -> List[str]:
    if quantidade == 0:
        return [STATUS_ZERADO]
    if quantidade < 0:
        return [STATUS_NEGATIVO]
    return []


def prioridade(registro: RegistroEstoque) -> int:
    """Prioridade de exibicao: negativo=1, zerado=2, variante=3, duplicado=4, demais=5."""
    for status, valor in PRIORIDADE_STATUS:
        if status in registro.status:
            return valor
    return PRIORIDADE_SEM_STATUS


def classificar_itens(linhas: Sequence[LinhaEstoque]) -> List[RegistroEstoque]:
    """
    Classifica as linhas de estoque e agrupa variantes.

    Primeira passada: agrupa por codigo exato e por descricao base, atribui
    status e monta os registros. Segunda passada: soma as quantidades de cada
    grupo de variantes e grava em ``quantidade_total`` de todos os membros.

    Args:
        linhas: Linhas brutas de estoque

    Returns:
        Registros ordenados por prioridade (ordenacao estavel)
    """
    if not linhas:
        return []

    df = pd.DataFrame({
        'codigo': [linha.codigo for linha in linhas],
        'base': [extrair_descricao_base(linha.descricao) for linha in linhas],
    })
    # Agrupamentos completos antes de qualquer classificacao
    qtd_por_codigo = df.groupby('codigo', sort=False)['codigo'].transform('size')
    qtd_por_base = df.groupby('base', sort=False)['base'].transform('size')
    codigos_por_base = df.groupby('base', sort=False)['codigo'].agg(list).to_dict()

    registros = []
    grupos_variantes: Dict[str, List[RegistroEstoque]] = {}

    for pos, linha in enumerate(linhas):
        base = df.at[pos, 'base']
        status = _status_quantidade(linha.quantidade)

        if qtd_por_codigo.iat[pos] > 1:
            status.append(STATUS_DUPLICADO)

        tem_variantes = qtd_por_base.iat[pos] > 1
        variantes = None
        grupo_id = None
        if tem_variantes:
            status.append(STATUS_VARIANTE)
            grupo_id = f"{PREFIXO_GRUPO_VARIANTE}{base}"
            variantes = list(dict.fromkeys(
                c for c in codigos_por_base[base] if c != linha.codigo
            )) or None

        registro = RegistroEstoque(
            id=f"{linha.codigo}-{linha.indice_linha}",
            codigo=linha.codigo,
            descricao=linha.descricao,
            quantidade=linha.quantidade,
            status=tuple(status),
            quantidade_total=linha.quantidade,
            estacao=linha.estacao,
            rack=linha.rack,
            linha_prod=linha.linha_prod,
            coluna_prod=linha.coluna_prod,
            variantes=variantes,
            grupo_id=grupo_id,
        )
        registros.append(registro)
        if tem_variantes:
            grupos_variantes.setdefault(base, []).append(registro)

    # Segunda passada: total do grupo de variantes
    for membros in grupos_variantes.values():
        total = sum(r.quantidade for r in membros)
        for registro in membros:
            registro.quantidade_total = total

    return sorted(registros, key=prioridade)


def possui_endereco(registro: RegistroEstoque) -> bool:
    return not (
        registro.estacao == PLACEHOLDER_VAZIO and registro.rack == PLACEHOLDER_VAZIO
    )


def itens_sem_endereco(registros: Sequence[RegistroEstoque]) -> List[RegistroEstoque]:
    """Registros sem estacao e sem rack cadastrados."""
    return [r for r in registros if not possui_endereco(r)]


def calcular_metricas_estoque(
    registros: Sequence[RegistroEstoque],
    sem_endereco: Optional[Sequence[RegistroEstoque]] = None
) -> Dict[str, Any]:
    """
    Calcula metricas gerais para exibicao em cards.

    Args:
        registros: Registros classificados
        sem_endereco: Registros sem endereco (opcional)

    Returns:
        Dicionario com metricas gerais
    """
    grupos = set()
    zerados = 0
    negativos = 0

    for registro in registros:
        if registro.quantidade == 0:
            zerados += 1
        elif registro.quantidade < 0:
            negativos += 1

        if registro.tem_status(STATUS_DUPLICADO) or registro.tem_status(STATUS_VARIANTE):
            grupos.add(registro.grupo_id or registro.codigo)

    total = len(registros)
    qtd_sem_endereco = len(sem_endereco) if sem_endereco else 0

    return {
        'total_itens': total,
        'itens_zerados': zerados,
        'itens_negativos': negativos,
        'grupos_duplicados': len(grupos),
        'itens_sem_endereco': qtd_sem_endereco,
        'percentual_sem_endereco': arredondar_percentual(qtd_sem_endereco, total),
    }


def analisar_estoque(grade: Grade, layout: str = TEMPLATE_AUTO) -> ResultadoEstoque:
    """
    Analisa uma planilha de estoque completa.

    Args:
        grade: Grade de celulas (linha 0 = cabecalho)
        layout: TEMPLATE_AUTO, TEMPLATE_ESTOQUE_PADRAO ou TEMPLATE_ESTOQUE_DISPONIVEL

    Returns:
        ResultadoEstoque com registros, metricas e itens sem endereco

    Raises:
        DataValidationError: Se colunas obrigatorias faltarem
    """
    if len(grade) < 2:
        layout_vazio = TEMPLATE_ESTOQUE_PADRAO if layout == TEMPLATE_AUTO else layout
        return ResultadoEstoque(layout=layout_vazio, metricas=calcular_metricas_estoque([]))

    if layout == TEMPLATE_AUTO:
        layout = detectar_layout_estoque(grade[0])

    linhas, tem_colunas_endereco = extrair_linhas_estoque(grade, layout)
    registros = classificar_itens(linhas)
    sem_endereco = itens_sem_endereco(registros) if tem_colunas_endereco else []
    metricas = calcular_metricas_estoque(registros, sem_endereco)

    logger.info(
        "Estoque analisado (%s): %d itens, %d zerados, %d negativos, %d grupos",
        layout, metricas['total_itens'], metricas['itens_zerados'],
        metricas['itens_negativos'], metricas['grupos_duplicados'],
    )

    return ResultadoEstoque(
        layout=layout,
        registros=registros,
        metricas=metricas,
        sem_endereco=sem_endereco,
    )
