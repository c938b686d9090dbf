"""
analise_estoque - Analise de planilhas de estoque, setores e pedidos.

Este pacote contem os modulos de processamento de dados:
- constants / config: Constantes e parametros das analises
- io: Leitura de planilhas e resolucao de cabecalhos
- parsers: Numeros e datas no formato brasileiro
- calendario: Dias uteis e feriados nacionais
- estoque / setores / pedidos: Analisadores
- export / relatorios: Exportacao e cards de metricas
"""

from .constants import *
from .config import ConfigAnalise, DEFAULTS
from .log import configurar_logging
from .io import (
    DataValidationError,
    CampoColuna,
    normalizar_cabecalho,
    resolver_colunas,
    detectar_layout_estoque,
    detectar_layout_setores,
    ler_planilha,
)
from .parsers import (
    parse_numero_br,
    parse_data_br,
    arredondar,
    formatar_moeda,
    formatar_data,
    formatar_numero,
    formatar_percentual,
)
from .calendario import CalendarioComercial, DadosCalendario, FeriadoFixo, FERIADOS_NACIONAIS
from .models import (
    RegistroEstoque,
    RegistroSetor,
    RegistroPedido,
    ResultadoEstoque,
    ResultadoSetores,
    ResultadoPedidos,
)
from .estoque import analisar_estoque, classificar_itens, itens_sem_endereco
from .setores import analisar_setores, LayoutSetores, LAYOUT_SIMPLES, LAYOUT_ALOCACAO
from .pedidos import analisar_pedidos, calcular_metricas_pedidos, calcular_distribuicao_atraso
from .export import (
    linhas_exportacao,
    linhas_sem_endereco,
    calcular_larguras_colunas,
    exportar_excel,
    exportar_csv,
)
from .relatorios import (
    gerar_resumo_estoque,
    gerar_resumo_setores,
    gerar_resumo_pedidos,
    formatar_valor,
    tabela_distribuicao,
)
from .processamento import processar_grade, processar_arquivo
