"""
Reintento acotado por tiempo.

La función recibida devuelve un resultado o lanza RetryableError / NonRetryableError.
Cualquier otra excepción se propaga tal cual (no se reintenta).
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from ctplane.core.errors import NonRetryableError, RetryableError


logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_DELAY_SECONDS = 0.5
MAX_DELAY_SECONDS = 10.0


def retry_context(
    timeout: float,
    fn: Callable[[], T],
    sleep: Optional[Callable[[float], None]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> T:
    """
    Ejecuta fn hasta que tenga éxito, falle sin reintento o se agote el plazo.

    Args:
        timeout: Plazo total en segundos
        fn: Operación a ejecutar
        sleep: Función de espera (inyectable para tests)
        clock: Reloj monotónico (inyectable para tests)

    Returns:
        El resultado de fn

    Raises:
        El error original envuelto en NonRetryableError, o el último
        RetryableError desenvuelto si se agota el plazo.
    """
    sleep = sleep or time.sleep
    clock = clock or time.monotonic
    deadline = clock() + timeout
    delay = MIN_DELAY_SECONDS
    attempt = 0
    last_error: Optional[Exception] = None

    while True:
        attempt += 1
        try:
            return fn()
        except NonRetryableError as e:
            raise e.error
        except RetryableError as e:
            last_error = e.error
            logger.debug("Intento %d fallido (reintentable): %s", attempt, e.error)

        remaining = deadline - clock()
        if remaining <= 0:
            break
        sleep(min(delay, remaining))
        delay = min(delay * 2, MAX_DELAY_SECONDS)

    logger.debug("Plazo de reintento agotado tras %d intentos", attempt)
    raise last_error
