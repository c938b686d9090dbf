"""
app.py - Interface principal Streamlit para Controle de Estoque.

Aplicacao para analisar exportacoes do ERP: saude do estoque (zerados,
negativos, duplicados e variantes), reconciliacao de setores e tempo de
faturamento dos pedidos.
"""

import logging

import streamlit as st

from analise_estoque.constants import (
    APP_TITLE,
    APP_SUBTITLE,
    OPCOES_TEMPLATE,
    TEMPLATE_SETORES,
    TEMPLATE_PEDIDOS,
    ARQUIVO_ESTOQUE,
    ARQUIVO_SETORES,
    ARQUIVO_PEDIDOS,
    ARQUIVO_PEDIDOS_ATRASADOS,
    ARQUIVO_SEM_ENDERECO,
    ABA_ESTOQUE,
    ABA_SETORES,
    ABA_PEDIDOS,
    ABA_SEM_ENDERECO,
)
from analise_estoque.config import DEFAULTS
from analise_estoque.io import DataValidationError
from analise_estoque.log import configurar_logging
from analise_estoque.processamento import processar_arquivo
from analise_estoque.export import (
    linhas_exportacao,
    linhas_sem_endereco,
    para_dataframe,
    exportar_csv,
    exportar_excel,
)
from analise_estoque.relatorios import (
    gerar_resumo_estoque,
    gerar_resumo_setores,
    gerar_resumo_pedidos,
    formatar_valor,
    tabela_distribuicao,
)

MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

configurar_logging(logging.INFO)
logger = logging.getLogger("analise_estoque.app")


# =============================================================================
# CONFIGURACAO DA PAGINA
# =============================================================================
st.set_page_config(
    page_title=APP_TITLE,
    page_icon=":package:",
    layout="wide",
    initial_sidebar_state="expanded"
)


# =============================================================================
# FUNCOES DE CACHE
# =============================================================================
@st.cache_data(show_spinner=False)
def processar_arquivo_cached(conteudo: bytes, nome_arquivo: str, template: str):
    """
    Processa o arquivo com cache baseado no conteudo e no template.

    Returns:
        ResultadoEstoque, ResultadoSetores ou ResultadoPedidos
    """
    return processar_arquivo(conteudo, nome_arquivo, template)


# =============================================================================
# COMPONENTES
# =============================================================================
def exibir_cards(cards):
    colunas = st.columns(len(cards))
    for coluna, card in zip(colunas, cards):
        with coluna:
            st.metric(
                label=f"{card['icone']} {card['label']}",
                value=formatar_valor(card['valor'], card['formato'])
            )


def botoes_download(linhas, nome_arquivo: str, nome_aba: str, key: str):
    """Botoes de download Excel e CSV para as linhas exportadas."""
    col_dl1, col_dl2, col_dl3 = st.columns([1, 1, 2])
    with col_dl1:
        st.download_button(
            ":arrow_down: Excel",
            data=exportar_excel(linhas, nome_aba, DEFAULTS.largura_maxima_coluna),
            file_name=nome_arquivo,
            mime=MIME_XLSX,
            key=f"{key}_xlsx"
        )
    with col_dl2:
        st.download_button(
            ":arrow_down: CSV",
            data=exportar_csv(linhas),
            file_name=nome_arquivo.replace('.xlsx', '.csv'),
            mime="text/csv",
            key=f"{key}_csv"
        )


def exibir_estoque(resultado):
    exibir_cards(gerar_resumo_estoque(resultado.metricas))
    st.markdown("---")

    st.subheader(":clipboard: Itens de Estoque")
    linhas = linhas_exportacao(resultado.registros)
    if linhas:
        st.dataframe(para_dataframe(linhas), use_container_width=True, hide_index=True)
        botoes_download(linhas, ARQUIVO_ESTOQUE, ABA_ESTOQUE, "estoque")
    else:
        st.info("Nenhum item encontrado na planilha.")

    if resultado.sem_endereco:
        st.markdown("---")
        st.subheader(":round_pushpin: Itens sem Endereço")
        linhas_endereco = linhas_sem_endereco(resultado.sem_endereco)
        st.dataframe(para_dataframe(linhas_endereco), use_container_width=True, hide_index=True)
        botoes_download(linhas_endereco, ARQUIVO_SEM_ENDERECO, ABA_SEM_ENDERECO, "sem_endereco")


def exibir_setores(resultado):
    exibir_cards(gerar_resumo_setores(resultado.metricas))
    st.markdown("---")

    st.subheader(":bar_chart: Reconciliação de Setores")
    linhas = linhas_exportacao(resultado.registros)
    if linhas:
        apenas_divergentes = st.checkbox("Mostrar apenas divergentes")
        if apenas_divergentes:
            linhas = linhas_exportacao([r for r in resultado.registros if r.divergente])
        st.dataframe(para_dataframe(linhas), use_container_width=True, hide_index=True)
        botoes_download(linhas, ARQUIVO_SETORES, ABA_SETORES, "setores")
    else:
        st.info("Nenhum item encontrado na planilha.")


def exibir_pedidos(resultado):
    tab_geral, *tabs_unidades = st.tabs(
        ["Geral"] + list(resultado.metricas_por_unidade.keys())
    )

    with tab_geral:
        exibir_cards(gerar_resumo_pedidos(resultado.metricas))
        st.subheader(":hourglass: Distribuição de Atrasos")
        st.bar_chart(tabela_distribuicao(resultado.distribuicao_atraso), x='Atraso', y='Pedidos')

    for tab, unidade in zip(tabs_unidades, resultado.metricas_por_unidade):
        with tab:
            exibir_cards(gerar_resumo_pedidos(resultado.metricas_por_unidade[unidade]))
            st.dataframe(
                tabela_distribuicao(resultado.distribuicao_por_unidade[unidade]),
                use_container_width=True,
                hide_index=True
            )

    st.markdown("---")
    st.subheader(":receipt: Pedidos")
    linhas = linhas_exportacao(resultado.registros)
    if linhas:
        st.dataframe(para_dataframe(linhas), use_container_width=True, hide_index=True)
        botoes_download(linhas, ARQUIVO_PEDIDOS, ABA_PEDIDOS, "pedidos")
    else:
        st.info("Nenhum pedido encontrado na planilha.")

    if resultado.atrasados:
        st.subheader(":warning: Pedidos Atrasados")
        botoes_download(
            linhas_exportacao(resultado.atrasados),
            ARQUIVO_PEDIDOS_ATRASADOS,
            ABA_PEDIDOS,
            "atrasados"
        )


# =============================================================================
# INTERFACE PRINCIPAL
# =============================================================================
def main():
    # Header
    st.title(f":package: {APP_TITLE}")
    st.markdown(f"*{APP_SUBTITLE}*")
    st.markdown("---")

    # ==========================================================================
    # SIDEBAR - Upload e template
    # ==========================================================================
    with st.sidebar:
        st.header(":file_folder: Upload da Planilha")

        opcao = st.selectbox("Tipo de análise", list(OPCOES_TEMPLATE.keys()))
        template = OPCOES_TEMPLATE[opcao]

        arquivo = st.file_uploader(
            "Planilha exportada do ERP",
            type=['xlsx', 'xls', 'csv'],
            key='planilha',
        )

    if arquivo is None:
        st.info(":point_left: Faça upload da planilha na barra lateral para começar.")
        return

    with st.spinner("Processando planilha..."):
        try:
            resultado = processar_arquivo_cached(arquivo.getvalue(), arquivo.name, template)
        except DataValidationError as e:
            logger.warning("Planilha rejeitada: %s", e)
            st.error(f":x: Erro de validacao: {str(e)}")
            return

    if template == TEMPLATE_SETORES:
        exibir_setores(resultado)
    elif template == TEMPLATE_PEDIDOS:
        exibir_pedidos(resultado)
    else:
        exibir_estoque(resultado)


# =============================================================================
# EXECUCAO
# =============================================================================
if __name__ == "__main__":
    main()
