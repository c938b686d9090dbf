import math
from datetime import date, datetime

import pandas as pd
import pytest

from analise_estoque.parsers import (
    arredondar,
    arredondar_percentual,
    formatar_data,
    formatar_moeda,
    formatar_numero,
    formatar_percentual,
    parse_data_br,
    parse_numero_br,
)


@pytest.mark.parametrize(
    "valor,esperado",
    [
        ("1.234,56", 1234.56),
        ("(50)", -50.0),
        ("50-", -50.0),
        ("-10,5", -10.5),
        ("R$ 1.234,56", 1234.56),
        ("1234.5", 1234.5),
        ("", 0.0),
        ("-", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        (12, 12.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_numero_br(valor, esperado):
    assert math.isclose(parse_numero_br(valor), esperado)


@pytest.mark.parametrize(
    "valor,esperado",
    [
        ("05/01/2026", date(2026, 1, 5)),
        ("10/12/2025 11:43:46", date(2025, 12, 10)),
        (45658, date(2025, 1, 1)),
        (datetime(2026, 1, 5, 10, 30), date(2026, 1, 5)),
        (pd.Timestamp("2026-01-05 08:00"), date(2026, 1, 5)),
        (date(2026, 1, 5), date(2026, 1, 5)),
        ("31/02/2026", date(2026, 3, 3)),
        ("01/13/2025", date(2026, 1, 1)),
        (pd.NaT, None),
        (float("nan"), None),
        ("not a date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_data_br(valor, esperado):
    assert parse_data_br(valor) == esperado


def test_parse_data_br_mes_janeiro():
    data = parse_data_br("05/01/2026")
    assert (data.year, data.month, data.day) == (2026, 1, 5)


def test_arredondar_meio_para_cima():
    assert arredondar(2.5) == 3.0
    assert arredondar(0.125, 2) == 0.13
    assert arredondar(3.84, 1) == 3.8


def test_arredondar_percentual():
    assert arredondar_percentual(1, 3) == 33
    assert arredondar_percentual(2, 3) == 67
    assert arredondar_percentual(5, 0) == 0


def test_formatacao_brasileira():
    assert formatar_moeda(1234.5) == "R$\u00a01.234,50"
    assert formatar_moeda(-10) == "-R$\u00a010,00"
    assert formatar_numero(1234567) == "1.234.567"
    assert formatar_percentual(40) == "40,0%"
    assert formatar_data(date(2026, 1, 5)) == "05/01/2026"
    assert formatar_data(None) == "-"
