import math

import pytest

from analise_estoque.config import ConfigAnalise
from analise_estoque.constants import (
    LAYOUT_SETORES_ALOCACAO,
    LAYOUT_SETORES_SIMPLES,
    UNIDADE_DESCONHECIDA,
    UNIDADE_FILIAL,
    UNIDADE_MATRIZ,
)
from analise_estoque.io import DataValidationError
from analise_estoque.setores import LAYOUT_ALOCACAO, LAYOUT_SIMPLES, analisar_setores

CABECALHO_SIMPLES = ["Cod Material", "Desc Material", "Total Físico", "Captação", "Salão de Vendas Matriz"]
CABECALHO_ALOCACAO = [
    "Cod Material",
    "Desc Material",
    "Total Físico",
    "Estoque Alocado",
    "Estoque Disponível",
    "Salão Filial Alocado",
    "Salão Filial Disponível",
]


def test_layouts_mapeiam_buckets():
    assert LAYOUT_SIMPLES.colunas_do_bucket("estoque") == ["estoque"]
    assert LAYOUT_ALOCACAO.colunas_do_bucket("salao") == ["salao_alocado", "salao_disponivel"]
    assert LAYOUT_ALOCACAO.subtotais({
        "estoque_alocado": 1, "estoque_disponivel": 2, "salao_alocado": 3, "salao_disponivel": 4,
    }) == {"estoque": 3, "salao": 7}


def test_layout_simples():
    grade = [
        CABECALHO_SIMPLES,
        ["A1", "Item", 10, 4, 6],
        ["A2", "Item 2", 10, 4, 5],
        ["A3", "Item 3", 0, 0, 0],
        ["A4", "Item 4", "5", "-2", "7"],
        ["", "Sem codigo", 1, 1, 0],
    ]
    resultado = analisar_setores(grade)
    metricas = resultado.metricas

    assert resultado.layout == LAYOUT_SETORES_SIMPLES
    assert [r.codigo for r in resultado.registros] == ["A1", "A2", "A3", "A4"]
    assert [r.divergente for r in resultado.registros] == [False, True, False, False]
    assert resultado.registros[1].diferenca == 1
    assert all(r.unidade == UNIDADE_MATRIZ for r in resultado.registros)

    assert metricas['unidade'] == UNIDADE_MATRIZ
    assert metricas['total_itens'] == 4
    assert metricas['itens_divergentes'] == 1
    assert metricas['totais_setores'] == {"estoque": 6.0, "salao": 18.0}
    assert metricas['totais_buckets'] == {"estoque": 6.0, "salao": 18.0}
    assert metricas['zerados'] == {"estoque": 1, "salao": 1}
    assert metricas['negativos'] == {"estoque": 1, "salao": 0}


def test_layout_alocacao():
    grade = [
        CABECALHO_ALOCACAO,
        ["B1", "Item", 10, 2, 3, 1, 4],
        ["B2", "Item 2", 10, 0, 0, 3, 4],
        ["B3", "Item 3", 1, 0.5, 0, 0.5, 0.005],
    ]
    resultado = analisar_setores(grade)
    b1, b2, b3 = resultado.registros

    assert resultado.layout == LAYOUT_SETORES_ALOCACAO
    assert resultado.metricas['unidade'] == UNIDADE_FILIAL
    assert b1.subtotais == {"estoque": 5, "salao": 5}
    assert not b1.divergente
    assert b2.divergente and math.isclose(b2.diferenca, 3)
    # dentro da tolerancia de 0,01
    assert not b3.divergente
    assert resultado.metricas['zerados'] == {"estoque": 1, "salao": 0}
    assert set(resultado.metricas['totais_setores']) == {
        "estoque_alocado", "estoque_disponivel", "salao_alocado", "salao_disponivel",
    }


def test_diferenca_igual_total_menos_setores():
    grade = [
        CABECALHO_ALOCACAO,
        ["C1", "Item", "12,5", "1", "2,25", "(1)", "3"],
        ["C2", "Item", 7, 1, 1, 1, 1],
    ]
    for registro in analisar_setores(grade).registros:
        esperado = registro.total_fisico - sum(registro.setores.values())
        assert math.isclose(registro.diferenca, esperado)
        assert registro.divergente == (abs(esperado) > 0.01)


def test_unidade_nao_identificada():
    grade = [
        ["Codigo", "Total Fisico", "Estoque", "Salao de Vendas"],
        ["A1", 1, 1, 0],
    ]
    resultado = analisar_setores(grade)
    assert resultado.metricas['unidade'] == UNIDADE_DESCONHECIDA


def test_tolerancia_configuravel():
    grade = [CABECALHO_SIMPLES, ["A1", "Item", 10, 4, 5.5]]
    config = ConfigAnalise(tolerancia_divergencia=1.0)
    assert not analisar_setores(grade, config).registros[0].divergente


def test_coluna_obrigatoria_ausente():
    with pytest.raises(DataValidationError):
        analisar_setores([["Cod Material", "Total Fisico", "Captação"], ["A1", 1, 1]])


def test_grade_vazia():
    resultado = analisar_setores([])
    assert resultado.registros == []
    assert resultado.metricas['total_itens'] == 0
    assert resultado.metricas['zerados'] == {"estoque": 0, "salao": 0}
