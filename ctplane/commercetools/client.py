"""
Cliente HTTP para la API de commercetools.

- Autenticación OAuth2 (client credentials) contra el auth_url, token cacheado hasta expirar.
- Endpoints de discount codes: create / get / update / delete.
- Respuestas != 2xx se convierten en CommercetoolsApiError; fallos de red en ProviderError.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from ctplane.commercetools.config import ProviderSettings
from ctplane.commercetools.models import (
    DiscountCode,
    DiscountCodeDraft,
    DiscountCodeUpdate,
    DiscountCodeUpdateAction,
)
from ctplane.core.errors import CommercetoolsApiError, ProviderError


logger = logging.getLogger(__name__)

USER_AGENT = "ctplane/1.0.0"

# Margen para renovar el token antes de que expire
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class CommercetoolsClient:
    """Cliente para la API HTTP de commercetools"""

    def __init__(
        self,
        settings: ProviderSettings,
        session: Optional[requests.Session] = None,
        clock=time.monotonic,
    ):
        """
        Inicializa el cliente

        Args:
            settings: Credenciales y endpoints del proyecto
            session: Sesión HTTP (inyectable para tests)
            clock: Reloj monotónico para la expiración del token
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self._clock = clock
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self.api_url = f"{settings.api_url}/{settings.project_key}"

    @property
    def discount_codes(self) -> "DiscountCodesEndpoint":
        return DiscountCodesEndpoint(self)

    def _get_token(self) -> str:
        """Obtiene (o reutiliza) un access token OAuth2"""
        if self._token and self._clock() < self._token_expires_at:
            return self._token

        url = f"{self.settings.auth_url}/oauth/token"
        logger.debug("Solicitando token OAuth2 a %s", url)
        try:
            response = self.session.post(
                url,
                data={"grant_type": "client_credentials", "scope": self.settings.effective_scopes},
                auth=(self.settings.client_id, self.settings.client_secret),
                timeout=self.settings.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError("Timeout al obtener token de commercetools") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Error de conexión con el servidor de autorización: {e}") from e

        if response.status_code != 200:
            raise _api_error(response)

        try:
            payload = response.json()
            self._token = payload["access_token"]
            expires_in = int(payload.get("expires_in", 172800))
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(f"Respuesta de token inválida: {e}") from e
        self._token_expires_at = self._clock() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        return self._token

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Realiza una petición autenticada a la API

        Args:
            method: Método HTTP (GET, POST, DELETE)
            endpoint: Ruta relativa al proyecto (ej: discount-codes/<id>)
            params: Parámetros de query
            data: Body JSON

        Returns:
            Body JSON de la respuesta, o None si la respuesta no tiene body

        Raises:
            CommercetoolsApiError: respuesta con status != 2xx
            ProviderError: error de red, timeout o body que no es JSON
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        headers = {"Authorization": f"Bearer {self._get_token()}"}
        logger.debug("%s %s", method.upper(), url)
        try:
            response = self.session.request(
                method.upper(),
                url,
                headers=headers,
                params=params,
                json=data,
                timeout=self.settings.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError(f"Timeout en {method.upper()} {endpoint}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Error de conexión con commercetools: {e}") from e

        if response.status_code == 401:
            # Token revocado o expirado antes de tiempo: se descarta para la próxima llamada
            self._token = None
        if not 200 <= response.status_code < 300:
            raise _api_error(response)
        if response.status_code == 204 or not (response.text or "").strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Respuesta no JSON en {method.upper()} {endpoint}") from e


class DiscountCodesEndpoint:
    """Operaciones sobre /discount-codes"""

    path = "discount-codes"

    def __init__(self, client: CommercetoolsClient):
        self.client = client

    def create(self, draft: DiscountCodeDraft) -> Optional[DiscountCode]:
        data = self.client.request("POST", self.path, data=draft.to_payload())
        return _discount_code(data)

    def get(self, discount_code_id: str) -> Optional[DiscountCode]:
        data = self.client.request("GET", f"{self.path}/{discount_code_id}")
        return _discount_code(data)

    def update(
        self,
        discount_code_id: str,
        version: int,
        actions: List[DiscountCodeUpdateAction],
    ) -> Optional[DiscountCode]:
        body = DiscountCodeUpdate(version=version, actions=actions)
        data = self.client.request("POST", f"{self.path}/{discount_code_id}", data=body.to_payload())
        return _discount_code(data)

    def delete(self, discount_code_id: str, version: int, data_erasure: bool = False) -> Optional[DiscountCode]:
        params = {"version": version, "dataErasure": str(data_erasure).lower()}
        data = self.client.request("DELETE", f"{self.path}/{discount_code_id}", params=params)
        return _discount_code(data)


def _discount_code(data: Optional[Dict[str, Any]]) -> Optional[DiscountCode]:
    """Body JSON → DiscountCode; sin body → None"""
    if not data:
        return None
    try:
        return DiscountCode(**data)
    except (PydanticValidationError, TypeError) as e:
        raise ProviderError(f"Discount code con formato inesperado: {e}") from e


def _api_error(response: requests.Response) -> CommercetoolsApiError:
    """Convierte una respuesta de error en CommercetoolsApiError"""
    try:
        body = response.json()
    except ValueError:
        return CommercetoolsApiError(response.status_code, response.text[:200] or response.reason or "Error")

    if not isinstance(body, dict):
        return CommercetoolsApiError(response.status_code, str(body)[:200])

    # Errores OAuth: {"error": ..., "error_description": ...}
    message = body.get("message") or body.get("error_description") or body.get("error") or "Error"
    errors = body.get("errors") or []
    if not errors and "error" in body:
        errors = [{"code": body["error"], "message": message}]
    return CommercetoolsApiError(response.status_code, message, errors)
