# analise_estoque/log.py
"""
Configuração de logging da aplicação.

Os módulos usam ``logging.getLogger(__name__)``; esta função apenas instala
os handlers no logger raiz do pacote.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOGGER_PACOTE = 'analise_estoque'


def configurar_logging(nivel: int = logging.INFO, arquivo: Optional[str] = None) -> logging.Logger:
    """
    Configura o logger do pacote com saída em console e, opcionalmente, arquivo.

    Chamadas repetidas substituem os handlers instalados anteriormente.

    Args:
        nivel: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        arquivo: Caminho do arquivo de log (opcional)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(LOGGER_PACOTE)
    logger.setLevel(nivel)

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(nivel)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if arquivo:
        log_path = Path(arquivo)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(nivel)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger
