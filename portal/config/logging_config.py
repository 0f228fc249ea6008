"""
Configuração de logging estruturado do Portal.
Fornece loggers configurados para cada módulo.
"""

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configura o logging global da aplicação.

    Args:
        level: Nível de logging (default: INFO)
        log_file: Caminho opcional para arquivo de log
    """
    formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if sys.platform == "win32":
        # Console do Windows quebra com acentos sem reconfigurar
        sys.stdout.reconfigure(encoding='utf-8')

    root_logger = logging.getLogger('portal')
    root_logger.setLevel(level)

    # Evita handlers duplicados quando a app é recarregada
    if not any(getattr(h, "_portal_console", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._portal_console = True
        root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Retorna logger para um módulo específico.

    Args:
        name: Nome do módulo (ex: 'database', 'payments')

    Returns:
        Logger configurado com prefixo 'portal.'

    Example:
        >>> logger = get_logger('database')
        >>> logger.info("Conectado ao banco")
        # Output: 2026-01-09 17:30:00 | INFO     | portal.database | Conectado ao banco
    """
    return logging.getLogger(f'portal.{name}')


# Loggers pré-configurados para importação direta
config_logger = get_logger('config')
db_logger = get_logger('database')
service_logger = get_logger('service')
server_logger = get_logger('server')
