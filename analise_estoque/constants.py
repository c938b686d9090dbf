"""
constants.py - Constantes e configuracoes do projeto Analise de Estoque.

Define aliases de cabecalhos, status, rotulos de exportacao e textos da
interface para garantir consistencia entre os analisadores.
"""

# =============================================================================
# TEMPLATES DE PLANILHA
# =============================================================================
TEMPLATE_AUTO = "auto"
TEMPLATE_ESTOQUE_PADRAO = "estoque-padrao"          # Layout A (Total Fisico)
TEMPLATE_ESTOQUE_DISPONIVEL = "estoque-disponivel"  # Layout B (Total - Disponivel)
TEMPLATE_SETORES = "setores"
TEMPLATE_PEDIDOS = "pedidos"

TEMPLATES_ESTOQUE = [TEMPLATE_ESTOQUE_PADRAO, TEMPLATE_ESTOQUE_DISPONIVEL]
TEMPLATES_VALIDOS = [
    TEMPLATE_AUTO,
    TEMPLATE_ESTOQUE_PADRAO,
    TEMPLATE_ESTOQUE_DISPONIVEL,
    TEMPLATE_SETORES,
    TEMPLATE_PEDIDOS,
]

# Marcador (normalizado) que identifica o layout B de estoque
MARCADOR_LAYOUT_DISPONIVEL = "total - disponivel"

# Qualificadores (normalizados) que identificam o layout de setores com alocacao
QUALIFICADORES_ALOCACAO = ["alocado", "disponivel"]

# =============================================================================
# ALIASES DE COLUNAS - ESTOQUE
# =============================================================================
ALIASES_COD_MATERIAL = ["cod material"]
ALIASES_DESC_MATERIAL = ["desc material"]
ALIASES_TOTAL_FISICO = ["total fisico", "quantidade"]
ALIASES_TOTAL_DISPONIVEL = [MARCADOR_LAYOUT_DISPONIVEL]
ALIASES_ESTACAO = ["estacao"]
ALIASES_RACK = ["rack"]
ALIASES_LINHA_PROD = ["linha prod alocado", "linha"]
ALIASES_COLUNA_PROD = ["coluna prod alocado", "coluna"]

# =============================================================================
# ALIASES DE COLUNAS - SETORES
# =============================================================================
ALIASES_SETOR_CODIGO = ["cod material", "codigo", "material"]
ALIASES_SETOR_DESCRICAO = ["desc material", "descricao"]
ALIASES_SETOR_TOTAL_FISICO = ["total fisico", "retaguarda"]
ALIASES_SETOR_ESTOQUE = ["captacao", "estoque"]
ALIASES_SETOR_SALAO = ["salao de vendas", "salao"]
ALIASES_SETOR_ESTOQUE_ALOCADO = [("estoque", "alocado"), ("captacao", "alocado")]
ALIASES_SETOR_ESTOQUE_DISPONIVEL = [("estoque", "disponivel"), ("captacao", "disponivel")]
ALIASES_SETOR_SALAO_ALOCADO = [("salao", "alocado")]
ALIASES_SETOR_SALAO_DISPONIVEL = [("salao", "disponivel")]

# Buckets logicos da reconciliacao
BUCKET_ESTOQUE = "estoque"
BUCKET_SALAO = "salao"
BUCKETS_SETORES = [BUCKET_ESTOQUE, BUCKET_SALAO]

LAYOUT_SETORES_SIMPLES = "simples"
LAYOUT_SETORES_ALOCACAO = "alocacao"

# =============================================================================
# ALIASES DE COLUNAS - PEDIDOS
# =============================================================================
ALIASES_CODIGO_PEDIDO = ["codigopedido", "codigo pedido", "codigo", "pedido"]
ALIASES_VALOR_PRATICADO = ["valorpraticado", "valor praticado", "valor"]
ALIASES_DATA_APROVACAO = ["data aprovacao", "dataaprovacao", "aprovacao"]
ALIASES_DATA_FATURAMENTO = ["datafaturamento", "data faturamento", "faturamento"]
ALIASES_ESTRUTURA_PAI = ["codigoestruturapai", "codigo estrutura pai", "estrutura pai"]

# =============================================================================
# VALORES ESPECIAIS E FLAGS
# =============================================================================
PLACEHOLDER_VAZIO = "-"  # Valor padrao de colunas opcionais ausentes

# Status de itens de estoque
STATUS_ZERADO = "zerado"
STATUS_NEGATIVO = "negativo"
STATUS_DUPLICADO = "duplicado"
STATUS_VARIANTE = "variante"

# Prioridade de ordenacao (menor aparece primeiro)
PRIORIDADE_STATUS = [
    (STATUS_NEGATIVO, 1),
    (STATUS_ZERADO, 2),
    (STATUS_VARIANTE, 3),
    (STATUS_DUPLICADO, 4),
]
PRIORIDADE_SEM_STATUS = 5

PREFIXO_GRUPO_VARIANTE = "variante-"

# Status de pedidos
STATUS_NO_PRAZO = "no-prazo"
STATUS_ATRASADO = "atrasado"

# Unidades (sites)
UNIDADE_MATRIZ = "Matriz"
UNIDADE_FILIAL = "Filial"
UNIDADE_DESCONHECIDA = "Unidade não identificada"

# Faixas da distribuicao de atraso (dias alem do prazo)
FAIXAS_ATRASO = ["1 dia", "2 dias", "3 dias", "4 dias", "5+ dias"]

# =============================================================================
# ROTULOS DE EXPORTACAO
# =============================================================================
ROTULOS_ESTOQUE = {
    'codigo': 'Código',
    'descricao': 'Descrição',
    'estacao': 'Estação',
    'rack': 'Rack',
    'linha_prod': 'Linha Prod Alocado',
    'coluna_prod': 'Coluna Prod Alocado',
    'quantidade': 'Total Físico',
    'quantidade_total': 'Total (com variantes)',
    'status': 'Status',
    'variantes': 'Variantes',
}

ROTULOS_SEM_ENDERECO = {
    'codigo': 'Código',
    'descricao': 'Descrição',
    'quantidade': 'Quantidade',
    'estacao': 'Estação',
    'rack': 'Rack',
    'linha_prod': 'Linha Prod',
    'coluna_prod': 'Coluna Prod',
}

ROTULOS_SETORES = {
    'codigo': 'Código',
    'descricao': 'Descrição',
    'unidade': 'Unidade',
    'total_fisico': 'Total Físico (Retaguarda)',
    'estoque': 'Estoque (Captação)',
    'salao': 'Salão de Vendas',
    'estoque_alocado': 'Est. Alocado',
    'estoque_disponivel': 'Est. Disponível',
    'salao_alocado': 'Salão Alocado',
    'salao_disponivel': 'Salão Disponível',
    'diferenca': 'Diferença',
    'divergente': 'Divergente',
}

ROTULOS_PEDIDOS = {
    'codigo_pedido': 'Código Pedido',
    'unidade': 'Unidade',
    'valor_praticado': 'Valor Praticado',
    'data_aprovacao_original': 'Data Aprovação (Original)',
    'data_aprovacao': 'Data Aprovação (Ajustada)',
    'data_faturamento': 'Data Faturamento',
    'dias_uteis': 'Dias Úteis',
    'status': 'Status',
}

ROTULOS_STATUS_PEDIDO = {
    STATUS_NO_PRAZO: 'No Prazo',
    STATUS_ATRASADO: 'Atrasado',
}

# =============================================================================
# ARQUIVOS DE EXPORTACAO
# =============================================================================
ARQUIVO_ESTOQUE = "relatorio-estoque.xlsx"
ARQUIVO_SETORES = "relatorio-setores.xlsx"
ARQUIVO_PEDIDOS = "relatorio-pedidos.xlsx"
ARQUIVO_PEDIDOS_ATRASADOS = "pedidos-atrasados.xlsx"
ARQUIVO_SEM_ENDERECO = "itens-sem-endereco.xlsx"

ABA_ESTOQUE = "Relatório"
ABA_SETORES = "Setores"
ABA_PEDIDOS = "Pedidos"
ABA_SEM_ENDERECO = "Itens sem Endereço"

LARGURA_MAXIMA_COLUNA = 50

# =============================================================================
# TEXTOS DA INTERFACE
# =============================================================================
APP_TITLE = "Controle de Estoque"
APP_SUBTITLE = "Saude do estoque, reconciliacao de setores e prazo de faturamento"

OPCOES_TEMPLATE = {
    "Estoque (detectar layout)": TEMPLATE_AUTO,
    "Estoque - Total Fisico": TEMPLATE_ESTOQUE_PADRAO,
    "Estoque - Total Disponivel": TEMPLATE_ESTOQUE_DISPONIVEL,
    "Analise de Setores": TEMPLATE_SETORES,
    "Tempo de Vida dos Pedidos": TEMPLATE_PEDIDOS,
}

# =============================================================================
# FORMATACAO
# =============================================================================
FORMATO_DATA = "%d/%m/%Y"
PREFIXO_MOEDA = "R$\u00a0"  # Espaco nao separavel, como o Intl pt-BR
