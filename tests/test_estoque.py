import math

import pytest

from analise_estoque.constants import (
    STATUS_DUPLICADO,
    STATUS_NEGATIVO,
    STATUS_VARIANTE,
    STATUS_ZERADO,
    TEMPLATE_ESTOQUE_DISPONIVEL,
    TEMPLATE_ESTOQUE_PADRAO,
)
from analise_estoque.estoque import analisar_estoque, extrair_descricao_base, prioridade
from analise_estoque.io import DataValidationError

CABECALHO = ["Cod Material", "Desc Material", "Total Físico"]
CABECALHO_ENDERECO = CABECALHO + ["Estação", "Rack", "Linha Prod Alocado", "Coluna Prod Alocado"]


@pytest.mark.parametrize(
    "descricao,esperado",
    [
        ("Widget V1", "Widget"),
        ("Caixa 10 v2", "Caixa 10"),
        ("Widget", "Widget"),
        ("Versao V", "Versao V"),
    ],
)
def test_extrair_descricao_base(descricao, esperado):
    assert extrair_descricao_base(descricao) == esperado


def test_cenario_duplicado_e_variantes():
    grade = [
        CABECALHO,
        ["A1", "Widget V1", 0],
        ["A1", "Widget V1", 5],
        ["A2", "Widget V2", 5],
    ]
    resultado = analisar_estoque(grade)
    registros = resultado.registros

    assert resultado.layout == TEMPLATE_ESTOQUE_PADRAO
    assert [r.codigo for r in registros] == ["A1", "A1", "A2"]
    assert all(math.isclose(r.quantidade_total, 10) for r in registros)

    zerado, a1, a2 = registros
    assert zerado.status == (STATUS_ZERADO, STATUS_DUPLICADO, STATUS_VARIANTE)
    assert a1.status == (STATUS_DUPLICADO, STATUS_VARIANTE)
    assert a2.status == (STATUS_VARIANTE,)
    assert a1.variantes == ["A2"]
    assert a2.variantes == ["A1"]
    assert a2.grupo_id == "variante-Widget"

    assert resultado.metricas['total_itens'] == 3
    assert resultado.metricas['itens_zerados'] == 1
    assert resultado.metricas['grupos_duplicados'] == 1


def test_ordenacao_por_prioridade():
    grade = [
        CABECALHO,
        ["OK", "Ok", 7],
        ["D", "Dup", 1],
        ["V", "Caixa V1", 3],
        ["N", "Neg", -1],
        ["D", "Dup outro", 2],
        ["W", "Caixa V2", 4],
        ["Z", "Zero", 0],
    ]
    registros = analisar_estoque(grade).registros

    assert [r.codigo for r in registros] == ["N", "Z", "V", "W", "D", "D", "OK"]
    assert [prioridade(r) for r in registros] == [1, 2, 3, 3, 4, 4, 5]
    assert registros[0].status == (STATUS_NEGATIVO,)
    assert registros[-1].status == ()
    assert registros[-1].variantes is None


def test_ids_deterministicos():
    grade = [CABECALHO, ["A1", "Item", 1], ["", "Sem codigo", 1], ["B1", "Outro", 2]]
    registros = analisar_estoque(grade).registros
    assert sorted(r.id for r in registros) == ["A1-1", "B1-3"]


def test_linhas_invalidas_ignoradas():
    grade = [
        CABECALHO,
        ["A1", "Item", "1.234,5"],
        ["", "Sem codigo", 1],
        ["B1", None, 1],
        [],
    ]
    registros = analisar_estoque(grade).registros
    assert len(registros) == 1
    assert math.isclose(registros[0].quantidade, 1234.5)


def test_layout_disponivel_detectado():
    grade = [
        ["Cod Material", "Desc Material", "Total - Disponível"],
        ["A1", "Item", "(3)"],
    ]
    resultado = analisar_estoque(grade)
    assert resultado.layout == TEMPLATE_ESTOQUE_DISPONIVEL
    assert resultado.registros[0].quantidade == -3
    assert resultado.metricas['itens_negativos'] == 1


def test_coluna_obrigatoria_ausente():
    with pytest.raises(DataValidationError) as exc:
        analisar_estoque([["Cod Material", "Total Fisico"], ["A1", 1]])
    assert "Desc Material" in str(exc.value)


def test_itens_sem_endereco():
    grade = [
        CABECALHO_ENDERECO,
        ["A1", "Item", 1, "E1", "R1", "L1", "C1"],
        ["B1", "Outro", 2, "", None, "", ""],
    ]
    resultado = analisar_estoque(grade)

    assert [r.codigo for r in resultado.sem_endereco] == ["B1"]
    assert resultado.sem_endereco[0].estacao == "-"
    assert resultado.metricas['itens_sem_endereco'] == 1
    assert resultado.metricas['percentual_sem_endereco'] == 50


def test_sem_colunas_de_endereco():
    resultado = analisar_estoque([CABECALHO, ["A1", "Item", 1]])
    assert resultado.sem_endereco == []
    assert resultado.registros[0].rack == "-"


@pytest.mark.parametrize("grade", [[], [CABECALHO]])
def test_grade_vazia(grade):
    resultado = analisar_estoque(grade)
    assert resultado.registros == []
    assert resultado.metricas['total_itens'] == 0
    assert resultado.metricas['percentual_sem_endereco'] == 0


def test_grupo_de_variantes_com_mesmo_codigo():
    grade = [CABECALHO, ["A1", "Widget", 1], ["A1", "Widget", 2]]
    registros = analisar_estoque(grade).registros

    assert all(r.variantes is None for r in registros)
    assert all(r.status == (STATUS_DUPLICADO, STATUS_VARIANTE) for r in registros)
    assert all(math.isclose(r.quantidade_total, 3) for r in registros)
