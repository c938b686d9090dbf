"""
Conversão de células de planilha em valores tipados e formatação pt-BR.

As planilhas exportadas pelo ERP misturam números nativos, textos no
formato brasileiro ("1.234,56", "(50)", "50-"), seriais de data do Excel e
datas "DD/MM/AAAA HH:MM:SS". Os parsers deste módulo aceitam qualquer
valor de célula e nunca levantam exceção.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

import pandas as pd

from .constants import FORMATO_DATA, PREFIXO_MOEDA

# Dia zero dos seriais de data do Excel (serial 1 = 31/12/1899)
EPOCA_EXCEL = datetime(1899, 12, 30)

_RE_CARACTERES_NUMERICOS = re.compile(r"[^\d,.\-]")
_RE_PREFIXO_FLOAT = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_RE_PREFIXO_INT = re.compile(r"^\s*[+-]?\d+")


def _e_numero(valor: Any) -> bool:
    return isinstance(valor, numbers.Real) and not isinstance(valor, bool)


def parse_numero_br(valor: Any) -> float:
    """
    Converte um valor de célula em número.

    Regras:
    1. Números nativos passam direto (NaN vira 0)
    2. Texto vazio ou "-" vira 0
    3. Sinal negativo por "-" inicial, "(" inicial ou "-" final
    4. Com vírgula, pontos são milhar e a vírgula é o decimal
    5. Falha de conversão vira 0

    Args:
        valor: Valor bruto da célula (número, texto, None...)

    Returns:
        Número convertido, nunca NaN
    """
    if valor is None:
        return 0.0

    if _e_numero(valor):
        numero = float(valor)
        return 0.0 if math.isnan(numero) else numero

    texto = str(valor).strip()
    if texto == "" or texto == "-":
        return 0.0

    negativo = texto.startswith("-") or texto.startswith("(") or texto.endswith("-")

    limpo = _RE_CARACTERES_NUMERICOS.sub("", texto)
    if "," in limpo:
        limpo = limpo.replace(".", "").replace(",", ".")

    # Interpreta apenas o prefixo numerico ("50-" -> 50)
    match = _RE_PREFIXO_FLOAT.match(limpo)
    if not match:
        return 0.0
    numero = float(match.group(0))

    if negativo and numero > 0:
        numero = -numero
    return numero


def parse_data_br(valor: Any) -> Optional[date]:
    """
    Converte um valor de célula em data (sem hora).

    Aceita serial de data do Excel, datetime/date nativos e textos no formato
    "DD/MM/AAAA" com ou sem hora ("10/12/2025 11:43:46").

    Args:
        valor: Valor bruto da célula

    Returns:
        Data convertida, ou None se não for possível interpretar
    """
    if valor is None or valor is pd.NaT:
        return None

    if isinstance(valor, pd.Timestamp):
        return None if pd.isna(valor) else valor.date()
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor

    if _e_numero(valor):
        if math.isnan(valor) or math.isinf(valor):
            return None
        try:
            return (EPOCA_EXCEL + timedelta(days=float(valor))).date()
        except OverflowError:
            return None

    texto = str(valor).strip()
    if not texto:
        return None

    parte_data = texto.split(" ")[0]
    partes = parte_data.split("/")
    if len(partes) != 3:
        return None

    numeros = []
    for parte in partes:
        match = _RE_PREFIXO_INT.match(parte)
        if not match:
            return None
        numeros.append(int(match.group(0)))

    dia, mes, ano = numeros
    # Dia/mes fora do intervalo transbordam para os seguintes (31/02 -> 03/03)
    ano += (mes - 1) // 12
    mes = (mes - 1) % 12 + 1
    try:
        return date(ano, mes, 1) + timedelta(days=dia - 1)
    except (ValueError, OverflowError):
        return None


def arredondar(valor: float, casas: int = 0) -> float:
    """
    Arredonda meio para cima (0,5 -> 1), como a interface do ERP.

    Args:
        valor: Valor a ser arredondado
        casas: Casas decimais

    Returns:
        Valor arredondado
    """
    try:
        quantum = Decimal(1).scaleb(-casas)
        return float(Decimal(str(valor)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return valor


def arredondar_percentual(parte: float, total: float) -> int:
    """Percentual inteiro de ``parte`` sobre ``total`` (0 se total for 0)."""
    if not total:
        return 0
    return int(arredondar(parte / total * 100))


def formatar_numero(valor: float, casas: int = 0) -> str:
    """Formata número com separador de milhar brasileiro (1.234,5)."""
    texto = f"{valor:,.{casas}f}"
    return texto.replace(',', 'X').replace('.', ',').replace('X', '.')


def formatar_moeda(valor: float) -> str:
    """
    Formata valor monetário no padrão brasileiro.

    Exemplo: 1234.5 -> "R$ 1.234,50"; -10 -> "-R$ 10,00"
    """
    sinal = "-" if valor < 0 else ""
    return f"{sinal}{PREFIXO_MOEDA}{formatar_numero(abs(valor), 2)}"


def formatar_data(data: Optional[date]) -> str:
    """Formata data no padrão brasileiro (DD/MM/AAAA)."""
    if data is None:
        return "-"
    return data.strftime(FORMATO_DATA)


def formatar_percentual(valor: float) -> str:
    return f"{formatar_numero(valor, 1)}%"
