"""
io.py - Funcoes de leitura de planilhas e resolucao de cabecalhos.

Este modulo contem:
- Leitura de arquivos Excel/CSV em uma grade (linhas x colunas)
- Normalizacao de cabecalhos (minusculas, sem acento, espacos colapsados)
- Resolucao de colunas por aliases, com erro descritivo para obrigatorias
- Deteccao do layout de estoque e de setores pelos cabecalhos
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .constants import (
    MARCADOR_LAYOUT_DISPONIVEL,
    QUALIFICADORES_ALOCACAO,
    TEMPLATE_ESTOQUE_PADRAO,
    TEMPLATE_ESTOQUE_DISPONIVEL,
    LAYOUT_SETORES_SIMPLES,
    LAYOUT_SETORES_ALOCACAO,
)

logger = logging.getLogger(__name__)

ENCODINGS_CSV = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']
SEPARADORES_CSV = ['|', ';', ',', '\t']

Alias = Union[str, Tuple[str, ...]]
Grade = List[List[Any]]


class DataValidationError(Exception):
    """Excecao customizada para erros de leitura ou validacao de planilhas."""
    pass


@dataclass(frozen=True)
class CampoColuna:
    """Campo semantico procurado nos cabecalhos."""
    chave: str
    rotulo: str
    aliases: Sequence[Alias]
    obrigatorio: bool = True


def normalizar_cabecalho(texto: Any) -> str:
    """
    Normaliza um texto de cabecalho para comparacao.

    Regras:
    1. Converter para string minuscula
    2. Remover acentos
    3. Colapsar espacos internos e remover das pontas

    Args:
        texto: Valor da celula de cabecalho (pode ser None ou numero)

    Returns:
        Texto normalizado ("" para celula vazia)
    """
    if texto is None:
        return ""
    if isinstance(texto, float) and pd.isna(texto):
        return ""

    texto_str = unicodedata.normalize('NFD', str(texto).lower())
    texto_str = ''.join(c for c in texto_str if not unicodedata.combining(c))
    texto_str = re.sub(r'\s+', ' ', texto_str)

    return texto_str.strip()


def _alias_corresponde(cabecalho: str, alias: Alias) -> bool:
    if isinstance(alias, str):
        alvo = normalizar_cabecalho(alias)
        return cabecalho == alvo or alvo in cabecalho
    return all(normalizar_cabecalho(parte) in cabecalho for parte in alias)


def encontrar_coluna(
    cabecalhos: Sequence[str],
    aliases: Sequence[Alias],
    ignorar: Optional[set] = None
) -> Optional[int]:
    """
    Procura o indice da primeira coluna que corresponde a algum alias.

    Os aliases sao testados em ordem; para cada alias vence o primeiro
    cabecalho que corresponde e nao esta em ``ignorar``.

    Args:
        cabecalhos: Cabecalhos ja normalizados
        aliases: Lista ordenada de aliases (texto ou tupla de textos)
        ignorar: Indices ja atribuidos a outros campos

    Returns:
        Indice da coluna ou None
    """
    ignorar = ignorar or set()
    for alias in aliases:
        for idx, cabecalho in enumerate(cabecalhos):
            if idx in ignorar or not cabecalho:
                continue
            if _alias_corresponde(cabecalho, alias):
                return idx
    return None


def resolver_colunas(
    linha_cabecalho: Sequence[Any],
    campos: Sequence[CampoColuna],
    nome_planilha: str
) -> Dict[str, Optional[int]]:
    """
    Mapeia cada campo semantico para o indice da coluna na planilha.

    Args:
        linha_cabecalho: Primeira linha da grade (cabecalhos brutos)
        campos: Campos procurados, em ordem de prioridade
        nome_planilha: Nome do layout para mensagens de erro

    Returns:
        Dicionario {chave_do_campo: indice ou None}

    Raises:
        DataValidationError: Se algum campo obrigatorio nao for encontrado
    """
    cabecalhos = [normalizar_cabecalho(h) for h in linha_cabecalho]
    indices: Dict[str, Optional[int]] = {}
    usados = set()
    faltantes = []

    for campo in campos:
        idx = encontrar_coluna(cabecalhos, campo.aliases, usados)
        indices[campo.chave] = idx
        if idx is not None:
            usados.add(idx)
        elif campo.obrigatorio:
            faltantes.append(campo.rotulo)

    if faltantes:
        logger.error("Cabecalhos encontrados em %s: %s", nome_planilha, cabecalhos)
        raise DataValidationError(
            f"Colunas obrigatorias nao encontradas em {nome_planilha}: "
            + ', '.join(f'"{f}"' for f in faltantes)
        )

    return indices


def detectar_layout_estoque(linha_cabecalho: Sequence[Any]) -> str:
    """
    Escolhe entre os layouts de estoque pelo marcador "Total - Disponivel".

    Returns:
        TEMPLATE_ESTOQUE_DISPONIVEL se o marcador existir, senao
        TEMPLATE_ESTOQUE_PADRAO
    """
    cabecalhos = [normalizar_cabecalho(h) for h in linha_cabecalho]
    if any(MARCADOR_LAYOUT_DISPONIVEL in h for h in cabecalhos):
        return TEMPLATE_ESTOQUE_DISPONIVEL
    return TEMPLATE_ESTOQUE_PADRAO


def detectar_layout_setores(linha_cabecalho: Sequence[Any]) -> str:
    """Layout com alocacao se algum cabecalho tiver "alocado"/"disponivel"."""
    cabecalhos = [normalizar_cabecalho(h) for h in linha_cabecalho]
    for cabecalho in cabecalhos:
        if any(q in cabecalho for q in QUALIFICADORES_ALOCACAO):
            return LAYOUT_SETORES_ALOCACAO
    return LAYOUT_SETORES_SIMPLES


def valor_celula(linha: Sequence[Any], indice: Optional[int]) -> Any:
    """Valor bruto da celula, ou None se a coluna nao existir na linha."""
    if indice is None or indice >= len(linha):
        return None
    return linha[indice]


def texto_celula(linha: Sequence[Any], indice: Optional[int], padrao: str = "") -> str:
    """
    Texto da celula sem espacos nas pontas.

    Numeros inteiros lidos como float (1001.0) voltam sem a parte decimal.
    Celulas vazias retornam ``padrao``.
    """
    valor = valor_celula(linha, indice)
    if valor is None:
        return padrao
    if isinstance(valor, float):
        if pd.isna(valor):
            return padrao
        if valor.is_integer():
            valor = int(valor)

    texto = str(valor).strip()
    return texto if texto else padrao


def _decodificar_csv(conteudo: bytes) -> str:
    for enc in ENCODINGS_CSV:
        try:
            return conteudo.decode(enc)
        except UnicodeDecodeError:
            continue
    raise DataValidationError(
        "Nao foi possivel decodificar o arquivo CSV. "
        "Tente converter para Excel (.xlsx) antes de enviar."
    )


def _detectar_separador(primeira_linha: str) -> str:
    contagem = {sep: primeira_linha.count(sep) for sep in SEPARADORES_CSV}
    separador = max(contagem, key=contagem.get)
    return separador if contagem[separador] > 0 else ','


def _ler_csv(conteudo: bytes) -> pd.DataFrame:
    texto = _decodificar_csv(conteudo)
    if not texto.strip():
        return pd.DataFrame()

    separador = _detectar_separador(texto.splitlines()[0])

    return pd.read_csv(
        StringIO(texto),
        sep=separador,
        header=None,
        dtype=str,
        engine="python",
        quotechar='"',
        keep_default_na=False,
    )


def dataframe_para_grade(df: pd.DataFrame) -> Grade:
    """Converte um DataFrame sem cabecalho em lista de linhas (NaN -> None)."""
    if df.empty:
        return []
    df_obj = df.astype(object)
    return df_obj.where(pd.notna(df_obj), None).values.tolist()


def ler_planilha(conteudo: bytes, nome_arquivo: str) -> Grade:
    """
    Le um arquivo Excel ou CSV e retorna a grade de celulas.

    A linha 0 da grade e sempre o cabecalho.

    Args:
        conteudo: Bytes do arquivo carregado
        nome_arquivo: Nome do arquivo para detectar extensao

    Returns:
        Lista de linhas, cada uma com os valores brutos das celulas

    Raises:
        DataValidationError: Se o formato nao for suportado ou a leitura falhar
    """
    nome_lower = nome_arquivo.lower()

    try:
        if nome_lower.endswith('.xlsx') or nome_lower.endswith('.xls'):
            # openpyxl para xlsx, engine padrao do pandas para xls antigo
            engine = 'openpyxl' if nome_lower.endswith('.xlsx') else None
            df = pd.read_excel(BytesIO(conteudo), header=None, engine=engine)
        elif nome_lower.endswith('.csv'):
            df = _ler_csv(conteudo)
        else:
            raise DataValidationError(
                f"Formato de arquivo nao suportado: {nome_arquivo}. "
                "Use .xlsx, .xls ou .csv"
            )
    except DataValidationError:
        raise
    except Exception as e:
        raise DataValidationError(f"Erro ao ler arquivo {nome_arquivo}: {str(e)}") from e

    grade = dataframe_para_grade(df)
    logger.info("Planilha %s lida: %d linhas", nome_arquivo, len(grade))
    return grade
