"""
export.py - Funcoes de exportacao dos relatorios.

Este modulo contem funcoes para converter os registros de qualquer
analisador em linhas com rotulos legiveis e exporta-las para Excel ou CSV.
"""

from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from .constants import (
    LARGURA_MAXIMA_COLUNA,
    PLACEHOLDER_VAZIO,
    ROTULOS_ESTOQUE,
    ROTULOS_SEM_ENDERECO,
    ROTULOS_SETORES,
    ROTULOS_PEDIDOS,
    ROTULOS_STATUS_PEDIDO,
)
from .models import RegistroEstoque, RegistroSetor, RegistroPedido
from .parsers import formatar_data

Linha = Dict[str, Any]


def _valor_exportacao(valor: Any) -> Any:
    if valor is None:
        return PLACEHOLDER_VAZIO
    if isinstance(valor, (list, tuple)):
        return ', '.join(str(v) for v in valor)
    if isinstance(valor, date):
        return formatar_data(valor)
    return valor


def _linha_estoque(registro: RegistroEstoque) -> Linha:
    return {
        rotulo: _valor_exportacao(getattr(registro, chave))
        for chave, rotulo in ROTULOS_ESTOQUE.items()
    }


def _linha_setor(registro: RegistroSetor) -> Linha:
    linha = {
        ROTULOS_SETORES['codigo']: registro.codigo,
        ROTULOS_SETORES['descricao']: registro.descricao or PLACEHOLDER_VAZIO,
        ROTULOS_SETORES['unidade']: registro.unidade,
        ROTULOS_SETORES['total_fisico']: registro.total_fisico,
    }
    for chave, valor in registro.setores.items():
        linha[ROTULOS_SETORES.get(chave, chave)] = valor
    linha[ROTULOS_SETORES['diferenca']] = registro.diferenca
    linha[ROTULOS_SETORES['divergente']] = 'Sim' if registro.divergente else 'Não'
    return linha


def _linha_pedido(registro: RegistroPedido) -> Linha:
    linha = {
        rotulo: _valor_exportacao(getattr(registro, chave))
        for chave, rotulo in ROTULOS_PEDIDOS.items()
    }
    linha[ROTULOS_PEDIDOS['status']] = ROTULOS_STATUS_PEDIDO.get(
        registro.status, registro.status
    )
    return linha


def linhas_exportacao(registros: Sequence[Any]) -> List[Linha]:
    """
    Converte registros de qualquer analisador em linhas {rotulo: valor}.

    Listas sao unidas por ", ", datas saem em DD/MM/AAAA e listas de
    variantes ausentes viram "-".

    Args:
        registros: RegistroEstoque, RegistroSetor ou RegistroPedido

    Returns:
        Lista de dicionarios na ordem dos registros
    """
    linhas = []
    for registro in registros:
        if isinstance(registro, RegistroEstoque):
            linhas.append(_linha_estoque(registro))
        elif isinstance(registro, RegistroSetor):
            linhas.append(_linha_setor(registro))
        elif isinstance(registro, RegistroPedido):
            linhas.append(_linha_pedido(registro))
        else:
            raise TypeError(f"Registro nao exportavel: {type(registro).__name__}")
    return linhas


def linhas_sem_endereco(registros: Sequence[RegistroEstoque]) -> List[Linha]:
    """Linhas do relatorio de itens sem endereco."""
    return [
        {
            rotulo: _valor_exportacao(getattr(registro, chave))
            for chave, rotulo in ROTULOS_SEM_ENDERECO.items()
        }
        for registro in registros
    ]


def calcular_larguras_colunas(
    linhas: Sequence[Linha],
    maximo: int = LARGURA_MAXIMA_COLUNA
) -> Dict[str, int]:
    """
    Calcula a largura de cada coluna pelo maior conteudo.

    Args:
        linhas: Linhas {rotulo: valor}
        maximo: Largura maxima permitida

    Returns:
        Dicionario {rotulo: largura}
    """
    larguras: Dict[str, int] = {}
    for linha in linhas:
        for rotulo, valor in linha.items():
            atual = larguras.get(rotulo, len(str(rotulo)))
            larguras[rotulo] = max(atual, len(str(valor)))

    return {rotulo: min(largura + 2, maximo) for rotulo, largura in larguras.items()}


def para_dataframe(linhas: Sequence[Linha]) -> pd.DataFrame:
    """DataFrame com as colunas na ordem da primeira linha."""
    return pd.DataFrame(list(linhas))


def exportar_csv(linhas: Sequence[Linha]) -> bytes:
    """
    Exporta as linhas para formato CSV.

    Args:
        linhas: Linhas {rotulo: valor}

    Returns:
        Bytes do arquivo CSV (UTF-8 com BOM)
    """
    return para_dataframe(linhas).to_csv(index=False).encode('utf-8-sig')


def exportar_excel(
    linhas: Sequence[Linha],
    nome_aba: str = "Dados",
    largura_maxima: Optional[int] = None
) -> bytes:
    """
    Exporta as linhas para formato Excel (.xlsx).

    Args:
        linhas: Linhas {rotulo: valor}
        nome_aba: Nome da aba na planilha
        largura_maxima: Largura maxima das colunas

    Returns:
        Bytes do arquivo Excel
    """
    df = para_dataframe(linhas)
    larguras = calcular_larguras_colunas(linhas, largura_maxima or LARGURA_MAXIMA_COLUNA)

    # Limite do Excel para nome de aba
    nome_aba = nome_aba[:31]
    output = BytesIO()

    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=nome_aba, index=False)

        worksheet = writer.sheets[nome_aba]
        for idx, col in enumerate(df.columns):
            col_letter = get_column_letter(idx + 1)
            worksheet.column_dimensions[col_letter].width = larguras.get(col, len(str(col)) + 2)

    return output.getvalue()
