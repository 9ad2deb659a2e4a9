"""
Configuración de logging: stdlib logging con salida Rich en terminal.

Nivel: argumento explícito → CTPLANE_LOG_LEVEL → WARNING.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


DEFAULT_LEVEL = "WARNING"


def resolve_level(level: Optional[str] = None) -> int:
    name = (level or os.environ.get("CTPLANE_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Instala un RichHandler en el logger 'ctplane' (idempotente)."""
    logger = logging.getLogger("ctplane")
    logger.setLevel(resolve_level(level))
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
