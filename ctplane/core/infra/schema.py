"""
Declaración de esquema de recursos y vista de datos para los handlers.

Un ResourceSchema describe los campos expuestos al archivo declarativo
(tipo, requerido/opcional/computado, default, descripción, validación).
ResourceData es lo que recibe cada handler CRUD: estado previo + config deseada.
"""

import copy
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ctplane.core.errors import ValidationError


class FieldType(str, Enum):
    """Tipos de campo soportados"""
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    LIST = "list"
    LOCALIZED_STRING = "localized_string"


# Validador de campo: recibe (valor, path) y lanza ValidationError si no es válido
FieldValidator = Callable[[Any, str], None]

# Normalizador: devuelve la forma canónica del valor deseado (la misma que produce una lectura)
FieldNormalizer = Callable[[Any], Any]


_ZERO_VALUES: Dict[FieldType, Any] = {
    FieldType.STRING: "",
    FieldType.BOOL: False,
    FieldType.INT: 0,
    FieldType.LIST: [],
    FieldType.LOCALIZED_STRING: {},
}


class FieldSchema:
    """Definición de un campo del recurso."""
    def __init__(
        self,
        type: FieldType,
        description: str = "",
        required: bool = False,
        optional: bool = False,
        computed: bool = False,
        default: Any = None,
        elem: Optional[FieldType] = None,
        validate: Optional[FieldValidator] = None,
        normalize: Optional[FieldNormalizer] = None,
        immutable: bool = False,
    ):
        if required and (optional or computed):
            raise ValueError("Un campo requerido no puede ser opcional ni computado")
        self.type = type
        self.description = description
        self.required = required
        self.optional = optional
        self.computed = computed
        self.default = default
        self.elem = elem
        self.validate = validate
        self.normalize = normalize
        # Sin acción de update: un cambio requiere recrear el recurso
        self.immutable = immutable

    def zero_value(self) -> Any:
        return copy.deepcopy(_ZERO_VALUES[self.type])

    @property
    def mode(self) -> str:
        if self.required:
            return "required"
        if self.computed and not self.optional:
            return "computed"
        return "optional"


class ResourceSchema:
    """Esquema completo de un tipo de recurso."""
    def __init__(self, type_name: str, fields: Dict[str, FieldSchema], description: str = ""):
        self.type_name = type_name
        self.fields = fields
        self.description = description

    def field(self, key: str) -> FieldSchema:
        try:
            return self.fields[key]
        except KeyError:
            raise ValidationError(f"Campo desconocido para {self.type_name}: {key}") from None

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Valida una configuración deseada contra el esquema.
        Devuelve lista de mensajes de error; si vacía, es válida.
        """
        errors: List[str] = []
        if not isinstance(config, dict):
            return [f"La configuración de {self.type_name} debe ser un diccionario"]

        for key in config:
            if key not in self.fields:
                errors.append(f"{key}: campo desconocido")
            elif self.fields[key].computed and not self.fields[key].optional:
                errors.append(f"{key}: campo computado, no se puede asignar")

        for key, fs in self.fields.items():
            value = config.get(key)
            if value is None:
                if fs.required:
                    errors.append(f"{key}: campo requerido")
                continue
            type_error = _check_type(fs, value)
            if type_error:
                errors.append(f"{key}: {type_error}")
                continue
            if fs.validate:
                try:
                    fs.validate(value, key)
                except ValidationError as e:
                    errors.append(str(e))
        return errors

    def normalize(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Config con defaults aplicados y campos no declarados a su valor cero."""
        out: Dict[str, Any] = {}
        for key, fs in self.fields.items():
            if fs.computed and not fs.optional:
                continue
            value = config.get(key)
            if value is None:
                value = copy.deepcopy(fs.default) if fs.default is not None else fs.zero_value()
            elif fs.normalize:
                value = fs.normalize(value)
            out[key] = value
        return out


def _check_type(fs: FieldSchema, value: Any) -> Optional[str]:
    if fs.type == FieldType.STRING and not isinstance(value, str):
        return "debe ser una cadena"
    if fs.type == FieldType.BOOL and not isinstance(value, bool):
        return "debe ser booleano"
    if fs.type == FieldType.INT and (isinstance(value, bool) or not isinstance(value, int)):
        return "debe ser entero"
    if fs.type == FieldType.LIST:
        if not isinstance(value, list):
            return "debe ser una lista"
        if fs.elem == FieldType.STRING and not all(isinstance(v, str) for v in value):
            return "todos los elementos deben ser cadenas"
    if fs.type == FieldType.LOCALIZED_STRING:
        if not isinstance(value, dict):
            return "debe ser un mapa idioma → texto"
        if not all(isinstance(v, str) for v in value.values()):
            return "todos los valores deben ser cadenas"
    return None


class ResourceData:
    """
    Vista de un recurso durante una operación CRUD.

    - prior: atributos del estado local (última lectura); vacío en create.
    - config: configuración deseada ya normalizada; None en read/delete/import.
    Los handlers leen con get(), comparan con has_change() y escriben lo
    observado con set(). El resultado final se obtiene con state().
    """

    def __init__(
        self,
        schema: ResourceSchema,
        resource_id: str = "",
        prior: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.schema = schema
        self._id = resource_id
        self._prior: Dict[str, Any] = dict(prior or {})
        self._config: Optional[Dict[str, Any]] = schema.normalize(config) if config is not None else None
        self._observed: Dict[str, Any] = {}

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """ID vacío = el recurso no existe remotamente."""
        self._id = value or ""

    def get(self, key: str) -> Any:
        """Valor actual del campo: observado > deseado > previo > default/cero."""
        fs = self.schema.field(key)
        if key in self._observed:
            return self._observed[key]
        if self._config is not None and key in self._config:
            return self._config[key]
        if key in self._prior and self._prior[key] is not None:
            return self._prior[key]
        if fs.default is not None:
            return copy.deepcopy(fs.default)
        return fs.zero_value()

    def get_prior(self, key: str) -> Any:
        fs = self.schema.field(key)
        value = self._prior.get(key)
        return fs.zero_value() if value is None else value

    def has_change(self, key: str) -> bool:
        """True si el valor deseado difiere del estado previo."""
        if self._config is None:
            return False
        return self.get_prior(key) != self._config.get(key)

    def set(self, key: str, value: Any) -> None:
        fs = self.schema.field(key)
        self._observed[key] = fs.zero_value() if value is None else value

    def state(self) -> Dict[str, Any]:
        """Atributos resultantes: prior + deseado + observado."""
        out: Dict[str, Any] = {}
        for key in self.schema.fields:
            out[key] = self.get(key)
        return out
