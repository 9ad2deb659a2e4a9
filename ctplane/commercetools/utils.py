"""
Helpers puros del provider commercetools: marshalling de strings/tiempos,
formateo para logs y clasificación de errores para reintentos.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from ctplane.core.errors import (
    CommercetoolsApiError,
    NonRetryableError,
    ProviderError,
    RetryableError,
    ValidationError,
)


# BCP 47 simplificado: idioma (2-3 letras) + subtags opcionales (región, script, variante)
_LANGUAGE_TAG = re.compile(r"^[a-zA-Z]{2,3}(-[a-zA-Z0-9]{1,8})*$")

# time.RFC3339: fecha y hora completas, separador T, fracción opcional, Z u offset
_RFC3339 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$")


def validate_localized_string_key(value: Any, path: str) -> None:
    """
    Valida que todas las claves de un LocalizedString sean códigos de idioma.

    Raises:
        ValidationError: con el nombre de la clave inválida
    """
    if not isinstance(value, dict):
        raise ValidationError(f"{path}: debe ser un mapa idioma → texto")
    for key in value:
        if not isinstance(key, str) or not _LANGUAGE_TAG.match(key):
            raise ValidationError(f"{path}: '{key}' no es un código de idioma válido")


def unmarshall_localized_string(value: Any) -> Dict[str, str]:
    """Mapa idioma → texto; None o vacío → {}"""
    if not value:
        return {}
    return {str(k): str(v) for k, v in dict(value).items()}


def expand_string_array(values: Optional[List[Any]]) -> List[str]:
    """Lista de valores → lista de strings (descarta None)"""
    return [str(v) for v in (values or []) if v is not None]


def unmarshall_time(value: str) -> datetime:
    """
    RFC3339 → datetime con zona horaria.

    Solo se acepta la forma completa YYYY-MM-DDTHH:MM:SS[.frac](Z|±HH:MM);
    otras variantes ISO 8601 (espacio como separador, sin segundos, formato
    básico) se rechazan.

    Raises:
        ValidationError: si el valor no es RFC3339
    """
    raw = value.strip()
    match = _RFC3339.match(raw)
    if not match:
        raise ValidationError(f"'{value}' no es una fecha RFC3339 válida")
    fraction, zone = match.group(1), match.group(2)
    if zone == "Z":
        zone = "+00:00"
    # fromisoformat solo admite 3 o 6 decimales antes de 3.11
    if fraction:
        fraction = "." + (fraction[1:] + "000000")[:6]
    raw = raw[:19] + (fraction or "") + zone
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"'{value}' no es una fecha RFC3339 válida") from None
    return parsed


def validate_time(value: Any, path: str) -> None:
    """Validador de esquema para campos de fecha RFC3339"""
    if value:
        try:
            unmarshall_time(value)
        except ValidationError as e:
            raise ValidationError(f"{path}: {e}") from None


def marshall_time(value: Optional[datetime]) -> str:
    """datetime → RFC3339 a segundos (UTC como 'Z'); None → ''"""
    if value is None:
        return ""
    value = value.replace(microsecond=0)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def canonical_time(value: Any) -> Any:
    """
    Forma canónica de una fecha deseada: UTC a segundos, igual que la que
    devuelve una lectura. Valores no RFC3339 se devuelven sin cambios; el
    handler los rechaza al crear o actualizar.
    """
    if not isinstance(value, str) or not _RFC3339.match(value.strip()):
        return value
    try:
        parsed = unmarshall_time(value)
    except ValidationError:
        return value
    return marshall_time(parsed.astimezone(timezone.utc))


def string_format_object(obj: Union[BaseModel, Dict[str, Any], Any]) -> str:
    """Representación JSON indentada para logs de depuración"""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(by_alias=True, exclude_none=True, mode="json")
    return json.dumps(obj, indent=2, sort_keys=True, default=str)


def string_format_actions(actions: List[BaseModel]) -> str:
    """Una línea por acción de update, en el orden de envío"""
    lines = []
    for action in actions:
        payload = action.model_dump(by_alias=True, exclude_none=True, mode="json")
        name = payload.pop("action", type(action).__name__)
        lines.append(f"- {name}: {json.dumps(payload, sort_keys=True)}")
    return "\n".join(lines)


def string_format_error_extras(error: CommercetoolsApiError) -> str:
    """Detalle de los errores devueltos por la API (code, message y campos extra)"""
    if not error.errors:
        return ""
    return json.dumps(error.errors, indent=2, sort_keys=True, default=str)


def handle_commercetools_error(error: Exception) -> Union[RetryableError, NonRetryableError]:
    """
    Clasifica un error para retry_context.

    - Respuesta de la API con status 5xx: reintentable.
    - Respuesta de la API 4xx: no reintentable (la petición es inválida).
    - Error de red / timeout: reintentable.
    - Cualquier otro: no reintentable.
    """
    if isinstance(error, CommercetoolsApiError):
        if error.status_code >= 500:
            return RetryableError(error)
        first = error.errors[0] if error.errors else {}
        if first.get("code") == "InvalidJsonInput":
            detail = first.get("detailedErrorMessage") or first.get("message", "")
            error = CommercetoolsApiError(
                error.status_code,
                f"invalid JSON input: {detail}",
                error.errors,
            )
        return NonRetryableError(error)
    if isinstance(error, ProviderError):
        return RetryableError(error)
    return NonRetryableError(error)
