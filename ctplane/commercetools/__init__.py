"""
Provider commercetools: cliente HTTP, modelos de la API y recursos declarativos.
"""

from ctplane.commercetools.provider import CommercetoolsProvider

__all__ = ["CommercetoolsProvider"]
