"""
Fixtures compartidas: API de commercetools en memoria.

FakeCommercetoolsSession sustituye a requests.Session en el cliente y emula
el endpoint OAuth y /discount-codes (create, get, update actions, delete).
"""

import json
import uuid
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import pytest

from ctplane.commercetools.client import CommercetoolsClient
from ctplane.commercetools.config import ProviderSettings
from ctplane.commercetools.provider import CommercetoolsProvider


API_URL = "http://localhost:8989"
AUTH_URL = "http://localhost:8989"
PROJECT_KEY = "unittest"


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)
        self.reason = "Fake"

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


def _error(status: int, code: str, message: str) -> FakeResponse:
    return FakeResponse(
        status,
        {"statusCode": status, "message": message, "errors": [{"code": code, "message": message}]},
    )


class FakeCommercetoolsSession:
    """Emulación mínima de la API de commercetools para tests"""

    def __init__(self):
        self.headers: Dict[str, str] = {}
        self.discount_codes: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.token_requests = 0
        self._failures: List[FakeResponse] = []

    def fail_next(self, status: int, code: str = "General", message: str = "Injected failure", times: int = 1):
        """Las próximas `times` peticiones a la API (no OAuth) devuelven este error"""
        for _ in range(times):
            self._failures.append(_error(status, code, message))

    def seed(self, **fields) -> Dict[str, Any]:
        """Crea un discount code directamente en el 'servidor'"""
        code_id = str(uuid.uuid4())
        obj = {
            "id": code_id,
            "version": 1,
            "isActive": True,
            "cartDiscounts": [],
            "groups": [],
            "references": [],
        }
        obj.update(fields)
        self.discount_codes[code_id] = obj
        return obj

    def updates(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == "POST" and c["path"].strip("/").count("/") == 2]

    # requests.Session API

    def post(self, url, data=None, auth=None, timeout=None):
        self.token_requests += 1
        if auth != ("client-id", "client-secret"):
            return FakeResponse(401, {"error": "invalid_client", "error_description": "Bad credentials"})
        return FakeResponse(200, {
            "access_token": f"token-{self.token_requests}",
            "token_type": "Bearer",
            "expires_in": 172800,
            "scope": data.get("scope"),
        })

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        path = urlparse(url).path
        self.calls.append({"method": method, "path": path, "params": params, "json": json, "headers": headers})
        if self._failures:
            return self._failures.pop(0)
        if not (headers or {}).get("Authorization", "").startswith("Bearer "):
            return _error(401, "invalid_token", "Missing token")

        parts = path.strip("/").split("/")
        if len(parts) < 2 or parts[0] != PROJECT_KEY or parts[1] != "discount-codes":
            return _error(404, "ResourceNotFound", f"Unknown path {path}")

        if len(parts) == 2 and method == "POST":
            return self._create(json)
        if len(parts) == 3:
            code_id = parts[2]
            if code_id not in self.discount_codes:
                return _error(404, "ResourceNotFound", f"The Resource with ID '{code_id}' was not found.")
            if method == "GET":
                return FakeResponse(200, dict(self.discount_codes[code_id]))
            if method == "POST":
                return self._update(code_id, json)
            if method == "DELETE":
                return self._delete(code_id, params or {})
        return _error(405, "MethodNotAllowed", f"{method} {path}")

    def _create(self, draft: Dict[str, Any]) -> FakeResponse:
        if not draft.get("code"):
            return _error(400, "InvalidJsonInput", "Request body does not contain valid JSON.")
        if any(c["code"] == draft["code"] for c in self.discount_codes.values()):
            return _error(400, "DuplicateField", f"A duplicate value '\"{draft['code']}\"' exists for field 'code'.")
        obj = self.seed()
        obj.update({k: v for k, v in draft.items() if k != "cartDiscounts"})
        obj["cartDiscounts"] = [{"typeId": "cart-discount", "id": r["id"]} for r in draft.get("cartDiscounts", [])]
        return FakeResponse(201, dict(obj))

    def _update(self, code_id: str, body: Dict[str, Any]) -> FakeResponse:
        obj = self.discount_codes[code_id]
        if body.get("version") != obj["version"]:
            return _error(409, "ConcurrentModification", "Object has a different version than expected.")
        for action in body.get("actions", []):
            name = action["action"]
            if name == "setName":
                _set_or_unset(obj, "name", action.get("name"))
            elif name == "setDescription":
                _set_or_unset(obj, "description", action.get("description"))
            elif name == "setCartPredicate":
                _set_or_unset(obj, "cartPredicate", action.get("cartPredicate"))
            elif name == "setMaxApplications":
                _set_or_unset(obj, "maxApplications", action.get("maxApplications"))
            elif name == "setMaxApplicationsPerCustomer":
                _set_or_unset(obj, "maxApplicationsPerCustomer", action.get("maxApplicationsPerCustomer"))
            elif name == "changeCartDiscounts":
                obj["cartDiscounts"] = [{"typeId": "cart-discount", "id": r["id"]} for r in action["cartDiscounts"]]
            elif name == "changeGroups":
                obj["groups"] = list(action["groups"])
            elif name == "changeIsActive":
                obj["isActive"] = action["isActive"]
            elif name == "setValidFrom":
                _set_or_unset(obj, "validFrom", action.get("validFrom"))
            elif name == "setValidUntil":
                _set_or_unset(obj, "validUntil", action.get("validUntil"))
            else:
                return _error(400, "InvalidOperation", f"Unknown action {name}")
        obj["version"] += 1
        return FakeResponse(200, dict(obj))

    def _delete(self, code_id: str, params: Dict[str, Any]) -> FakeResponse:
        obj = self.discount_codes[code_id]
        if int(params.get("version", -1)) != obj["version"]:
            return _error(409, "ConcurrentModification", "Object has a different version than expected.")
        del self.discount_codes[code_id]
        return FakeResponse(200, obj)


def _set_or_unset(obj: Dict[str, Any], key: str, value: Any) -> None:
    if value is None:
        obj.pop(key, None)
    else:
        obj[key] = value


@pytest.fixture
def fake_api():
    return FakeCommercetoolsSession()


@pytest.fixture
def settings():
    return ProviderSettings(
        client_id="client-id",
        client_secret="client-secret",
        project_key=PROJECT_KEY,
        scopes=f"manage_project:{PROJECT_KEY}",
        api_url=API_URL,
        auth_url=AUTH_URL,
    )


@pytest.fixture
def client(settings, fake_api):
    return CommercetoolsClient(settings, session=fake_api)


@pytest.fixture
def provider(settings, fake_api):
    return CommercetoolsProvider(settings=settings, session=fake_api)
