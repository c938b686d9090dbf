import pytest

from analise_estoque.constants import (
    TEMPLATE_AUTO,
    TEMPLATE_ESTOQUE_DISPONIVEL,
    TEMPLATE_ESTOQUE_PADRAO,
    TEMPLATE_PEDIDOS,
    TEMPLATE_SETORES,
)
from analise_estoque.io import DataValidationError
from analise_estoque.models import ResultadoEstoque, ResultadoPedidos, ResultadoSetores
from analise_estoque.processamento import processar_arquivo, processar_grade

GRADE_ESTOQUE = [
    ["Cod Material", "Desc Material", "Total - Disponível"],
    ["A1", "Item", 2],
]


def test_template_invalido():
    with pytest.raises(DataValidationError):
        processar_grade(GRADE_ESTOQUE, "inventario")


def test_auto_detecta_layout_de_estoque():
    resultado = processar_grade(GRADE_ESTOQUE, TEMPLATE_AUTO)
    assert isinstance(resultado, ResultadoEstoque)
    assert resultado.layout == TEMPLATE_ESTOQUE_DISPONIVEL


def test_template_explicito_prevalece():
    grade = [["Cod Material", "Desc Material", "Total Fisico"], ["A1", "Item", 2]]
    resultado = processar_grade(grade, TEMPLATE_ESTOQUE_PADRAO)
    assert resultado.layout == TEMPLATE_ESTOQUE_PADRAO
    assert resultado.registros[0].quantidade == 2


def test_setores_e_pedidos_despachados():
    grade_setores = [["Cod Material", "Total Fisico", "Captação", "Salão"], ["A1", 2, 1, 1]]
    assert isinstance(processar_grade(grade_setores, TEMPLATE_SETORES), ResultadoSetores)
    assert isinstance(processar_grade([], TEMPLATE_PEDIDOS), ResultadoPedidos)


def test_processar_arquivo_csv():
    conteudo = "Cod Material;Desc Material;Total Fisico\nA1;Item;1,5\nA2;Item V2;0\n".encode('utf-8')
    resultado = processar_arquivo(conteudo, "estoque.csv")

    assert resultado.metricas['total_itens'] == 2
    assert resultado.metricas['itens_zerados'] == 1
    assert resultado.registros[1].quantidade == 1.5


def test_processar_arquivo_formato_invalido():
    with pytest.raises(DataValidationError):
        processar_arquivo(b"", "estoque.txt", TEMPLATE_AUTO)
