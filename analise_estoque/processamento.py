"""
processamento.py - Ponto de entrada das analises.

Recebe a grade (ou os bytes do arquivo) e o template selecionado e despacha
para exatamente um analisador. A deteccao automatica escolhe apenas entre os
dois layouts de estoque; setores e pedidos precisam ser selecionados.
"""

import logging
from typing import Optional, Union

from .calendario import CalendarioComercial
from .config import ConfigAnalise, DEFAULTS
from .constants import (
    TEMPLATE_AUTO,
    TEMPLATE_SETORES,
    TEMPLATE_PEDIDOS,
    TEMPLATES_ESTOQUE,
    TEMPLATES_VALIDOS,
)
from .estoque import analisar_estoque
from .io import DataValidationError, Grade, ler_planilha
from .models import ResultadoEstoque, ResultadoPedidos, ResultadoSetores
from .pedidos import analisar_pedidos
from .setores import analisar_setores

logger = logging.getLogger(__name__)

Resultado = Union[ResultadoEstoque, ResultadoSetores, ResultadoPedidos]


def processar_grade(
    grade: Grade,
    template: str = TEMPLATE_AUTO,
    config: Optional[ConfigAnalise] = None,
    calendario: Optional[CalendarioComercial] = None
) -> Resultado:
    """
    Executa a analise correspondente ao template.

    Args:
        grade: Grade de celulas (linha 0 = cabecalho)
        template: Um de TEMPLATES_VALIDOS
        config: Parametros das analises
        calendario: Calendario usado na analise de pedidos

    Returns:
        ResultadoEstoque, ResultadoSetores ou ResultadoPedidos

    Raises:
        DataValidationError: Template invalido ou colunas obrigatorias ausentes
    """
    if template not in TEMPLATES_VALIDOS:
        raise DataValidationError(
            f"Template invalido: {template}. Use um de: {', '.join(TEMPLATES_VALIDOS)}"
        )

    config = config or DEFAULTS
    logger.debug("Processando grade de %d linhas com template %s", len(grade), template)

    if template == TEMPLATE_AUTO or template in TEMPLATES_ESTOQUE:
        return analisar_estoque(grade, template)
    if template == TEMPLATE_SETORES:
        return analisar_setores(grade, config)
    if template == TEMPLATE_PEDIDOS:
        return analisar_pedidos(grade, config, calendario)

    raise DataValidationError(f"Template sem analisador: {template}")


def processar_arquivo(
    conteudo: bytes,
    nome_arquivo: str,
    template: str = TEMPLATE_AUTO,
    config: Optional[ConfigAnalise] = None
) -> Resultado:
    """Le o arquivo enviado e executa a analise do template."""
    grade = ler_planilha(conteudo, nome_arquivo)
    return processar_grade(grade, template, config)
