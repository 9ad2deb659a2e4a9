"""
Contratos, esquema y diagnósticos para recursos de infraestructura.

Los providers (commercetools) implementan estos contratos;
el core no depende de ningún provider concreto.
"""

from ctplane.core.infra.contracts import ProviderContract, ResourceContract, Resource, PlanResult
from ctplane.core.infra.schema import FieldSchema, FieldType, ResourceData, ResourceSchema

__all__ = [
    "ProviderContract",
    "ResourceContract",
    "Resource",
    "PlanResult",
    "FieldSchema",
    "FieldType",
    "ResourceData",
    "ResourceSchema",
]
