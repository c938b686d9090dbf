import math
from datetime import date

import pandas as pd
import pytest

from analise_estoque.calendario import CalendarioComercial, DadosCalendario, FeriadoFixo
from analise_estoque.constants import (
    STATUS_ATRASADO,
    STATUS_NO_PRAZO,
    UNIDADE_DESCONHECIDA,
    UNIDADE_FILIAL,
    UNIDADE_MATRIZ,
)
from analise_estoque.io import DataValidationError
from analise_estoque.pedidos import (
    analisar_pedidos,
    calcular_distribuicao_atraso,
    faixa_atraso,
    unidade_por_codigo,
)

CABECALHO = ["CodigoPedido", "ValorPraticado", "Data Aprovação", "DataFaturamento", "CodigoEstruturaPai"]

# 2026-01-02 sexta, 03 sabado, 04 domingo, 05 segunda
GRADE = [
    CABECALHO,
    ["P1", "1.000,00", "05/01/2026", "06/01/2026", "1001"],
    ["P2", 200, "03/01/2026 09:15:00", "05/01/2026", 1002.0],
    ["P3", 300, "02/01/2026", "07/01/2026", 1001],
    ["P4", 400, "05/01/2026", "07/01/2026", "9999"],
    ["P5", 500, "05/01/2026", "19/01/2026", "1002"],
    ["P6", 600, "xx", "07/01/2026", "1001"],
    ["", 700, "05/01/2026", "06/01/2026", "1001"],
]


@pytest.fixture
def resultado():
    return analisar_pedidos(GRADE)


def test_registros(resultado):
    por_codigo = {p.codigo_pedido: p for p in resultado.registros}

    assert list(por_codigo) == ["P1", "P2", "P3", "P4", "P5"]
    assert [por_codigo[c].dias_uteis for c in por_codigo] == [1, 0, 4, 2, 12]
    assert por_codigo["P1"].status == STATUS_NO_PRAZO
    assert por_codigo["P3"].status == STATUS_ATRASADO
    assert por_codigo["P1"].valor_praticado == 1000.0


def test_data_aprovacao_ajustada(resultado):
    p2 = resultado.registros[1]
    assert p2.data_aprovacao_original == date(2026, 1, 3)
    assert p2.data_aprovacao == date(2026, 1, 5)

    p3 = resultado.registros[2]
    assert p3.data_aprovacao == p3.data_aprovacao_original


def test_domingo_ajustado_para_segunda():
    grade = [CABECALHO, ["P1", 10, "04/01/2026", "06/01/2026", "1001"]]
    pedido = analisar_pedidos(grade).registros[0]
    assert pedido.data_aprovacao == date(2026, 1, 5)
    assert pedido.dias_uteis == 1
    assert pedido.dentro_do_prazo


def test_prazo_equivale_a_um_dia_util(resultado):
    for pedido in resultado.registros:
        assert pedido.dentro_do_prazo == (pedido.dias_uteis <= 1)


def test_unidades(resultado):
    unidades = [p.unidade for p in resultado.registros]
    assert unidades == [
        UNIDADE_MATRIZ, UNIDADE_FILIAL, UNIDADE_MATRIZ, UNIDADE_DESCONHECIDA, UNIDADE_FILIAL,
    ]
    assert resultado.registros[1].codigo_estrutura_pai == "1002"


def test_metricas_gerais(resultado):
    metricas = resultado.metricas
    assert metricas['total_pedidos'] == 5
    assert math.isclose(metricas['valor_total'], 2400)
    assert metricas['pedidos_no_prazo'] == 2
    assert math.isclose(metricas['valor_no_prazo'], 1200)
    assert metricas['percentual_no_prazo'] == 40
    assert metricas['pedidos_atrasados'] == 3
    assert math.isclose(metricas['valor_atrasados'], 1200)
    assert metricas['percentual_atrasados'] == 60
    assert metricas['tempo_medio_dias_uteis'] == 3.8


def test_metricas_por_unidade(resultado):
    assert set(resultado.metricas_por_unidade) == {UNIDADE_MATRIZ, UNIDADE_FILIAL}

    matriz = resultado.metricas_por_unidade[UNIDADE_MATRIZ]
    assert matriz['total_pedidos'] == 2
    assert matriz['percentual_no_prazo'] == 50
    assert matriz['tempo_medio_dias_uteis'] == 2.5

    assert resultado.distribuicao_por_unidade[UNIDADE_MATRIZ] == [
        {'dias_atraso': "3 dias", 'quantidade': 1, 'percentual': 100},
    ]
    assert resultado.distribuicao_por_unidade[UNIDADE_FILIAL] == [
        {'dias_atraso': "5+ dias", 'quantidade': 1, 'percentual': 100},
    ]


def test_distribuicao_atraso(resultado):
    distribuicao = resultado.distribuicao_atraso
    assert [d['dias_atraso'] for d in distribuicao] == ["1 dia", "3 dias", "5+ dias"]
    assert sum(d['quantidade'] for d in distribuicao) == resultado.metricas['pedidos_atrasados']
    assert abs(sum(d['percentual'] for d in distribuicao) - 100) <= len(distribuicao)


def test_atrasados(resultado):
    assert [p.codigo_pedido for p in resultado.atrasados] == ["P3", "P4", "P5"]


@pytest.mark.parametrize(
    "dias_uteis,faixa",
    [(2, "1 dia"), (3, "2 dias"), (5, "4 dias"), (6, "5+ dias"), (20, "5+ dias")],
)
def test_faixa_atraso(dias_uteis, faixa):
    assert faixa_atraso(dias_uteis) == faixa


def test_distribuicao_sem_atrasados():
    grade = [CABECALHO, ["P1", 10, "05/01/2026", "05/01/2026", "1001"]]
    assert calcular_distribuicao_atraso(analisar_pedidos(grade).registros) == []


def test_unidade_por_codigo():
    tabela = {"1001": UNIDADE_MATRIZ}
    assert unidade_por_codigo(" 1001 ", tabela) == UNIDADE_MATRIZ
    assert unidade_por_codigo("", tabela) == UNIDADE_DESCONHECIDA


def test_calendario_injetado():
    dados = DadosCalendario((FeriadoFixo(1, 6, 'Feriado local'),), {2026: {}})
    grade = [CABECALHO, ["P1", 10, "05/01/2026", "07/01/2026", "1001"]]
    pedido = analisar_pedidos(grade, calendario=CalendarioComercial(dados)).registros[0]
    assert pedido.dias_uteis == 1
    assert pedido.dentro_do_prazo


def test_coluna_obrigatoria_ausente():
    with pytest.raises(DataValidationError):
        analisar_pedidos([["CodigoPedido", "ValorPraticado"], ["P1", 10]])


@pytest.mark.parametrize("grade", [[], [CABECALHO]])
def test_grade_vazia(grade):
    resultado = analisar_pedidos(grade)
    assert resultado.registros == []
    assert resultado.metricas['total_pedidos'] == 0
    assert resultado.metricas_por_unidade[UNIDADE_MATRIZ]['total_pedidos'] == 0
    assert resultado.distribuicao_atraso == []


def test_data_vazia_do_excel_ignora_apenas_a_linha():
    grade = [
        CABECALHO,
        ["P1", 10, pd.NaT, "06/01/2026", "1001"],
        ["P2", 10, "05/01/2026", pd.NaT, "1001"],
        ["P3", 10, "05/01/2026", "06/01/2026", "1001"],
    ]
    resultado = analisar_pedidos(grade)
    assert [p.codigo_pedido for p in resultado.registros] == ["P3"]
    assert resultado.metricas['total_pedidos'] == 1


def test_ids_por_linha_da_grade(resultado):
    assert [p.id for p in resultado.registros] == [
        "pedido-1", "pedido-2", "pedido-3", "pedido-4", "pedido-5",
    ]
