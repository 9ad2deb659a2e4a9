"""
Provider commercetools: registro de tipos de recurso y construcción del cliente.
"""

import logging
from typing import Dict, Mapping, Optional

import requests

from ctplane.commercetools.client import CommercetoolsClient
from ctplane.commercetools.config import ProviderSettings, settings_from_env
from ctplane.commercetools.resource_discount_code import TYPE_NAME as DISCOUNT_CODE, resource_discount_code
from ctplane.core.infra.contracts import ResourceContract


logger = logging.getLogger(__name__)


class CommercetoolsProvider:
    """Provider de recursos commercetools"""

    name = "commercetools"

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        environ: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            settings: Configuración explícita; si None se lee de entorno al configurar
            environ: Entorno alternativo a os.environ
            session: Sesión HTTP para el cliente (tests)
        """
        self._settings = settings
        self._environ = environ
        self._session = session

    def resources(self) -> Dict[str, ResourceContract]:
        return {
            DISCOUNT_CODE: resource_discount_code(),
        }

    def configure(self) -> CommercetoolsClient:
        settings = self._settings or settings_from_env(self._environ)
        logger.debug(
            "Configurando cliente commercetools: proyecto=%s api=%s",
            settings.project_key,
            settings.api_url,
        )
        return CommercetoolsClient(settings, session=self._session)
