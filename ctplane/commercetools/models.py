"""
Modelos de la API de commercetools (Discount Codes)
Usa Pydantic para validación y serialización (camelCase en el wire)
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


LocalizedString = Dict[str, str]


class ApiModel(BaseModel):
    """Base: snake_case en Python, camelCase en JSON"""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class CartDiscountResourceIdentifier(ApiModel):
    """Referencia de escritura a un cart discount"""
    type_id: Literal["cart-discount"] = "cart-discount"
    id: Optional[str] = None
    key: Optional[str] = None


class CartDiscountReference(ApiModel):
    """Referencia de lectura a un cart discount"""
    type_id: str = "cart-discount"
    id: str


class DiscountCodeDraft(ApiModel):
    """Cuerpo de creación (POST /discount-codes)"""
    code: str
    cart_discounts: List[CartDiscountResourceIdentifier]
    name: Optional[LocalizedString] = None
    description: Optional[LocalizedString] = None
    cart_predicate: Optional[str] = None
    is_active: Optional[bool] = None
    max_applications: Optional[int] = None
    max_applications_per_customer: Optional[int] = None
    groups: Optional[List[str]] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None


class DiscountCode(ApiModel):
    """Discount code tal como lo devuelve la API"""
    id: str
    version: int
    code: str
    cart_discounts: List[CartDiscountReference] = Field(default_factory=list)
    name: Optional[LocalizedString] = None
    description: Optional[LocalizedString] = None
    cart_predicate: Optional[str] = None
    is_active: bool = True
    max_applications: Optional[int] = None
    max_applications_per_customer: Optional[int] = None
    groups: List[str] = Field(default_factory=list)
    references: List[Dict[str, Any]] = Field(default_factory=list)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_modified_at: Optional[datetime] = None


# Update actions (POST /discount-codes/{id})


class DiscountCodeSetNameAction(ApiModel):
    action: Literal["setName"] = "setName"
    name: Optional[LocalizedString] = None


class DiscountCodeSetDescriptionAction(ApiModel):
    action: Literal["setDescription"] = "setDescription"
    description: Optional[LocalizedString] = None


class DiscountCodeSetCartPredicateAction(ApiModel):
    action: Literal["setCartPredicate"] = "setCartPredicate"
    cart_predicate: Optional[str] = None


class DiscountCodeSetMaxApplicationsAction(ApiModel):
    action: Literal["setMaxApplications"] = "setMaxApplications"
    max_applications: Optional[int] = None


class DiscountCodeSetMaxApplicationsPerCustomerAction(ApiModel):
    action: Literal["setMaxApplicationsPerCustomer"] = "setMaxApplicationsPerCustomer"
    max_applications_per_customer: Optional[int] = None


class DiscountCodeChangeCartDiscountsAction(ApiModel):
    action: Literal["changeCartDiscounts"] = "changeCartDiscounts"
    cart_discounts: List[CartDiscountResourceIdentifier]


class DiscountCodeChangeGroupsAction(ApiModel):
    action: Literal["changeGroups"] = "changeGroups"
    groups: List[str]


class DiscountCodeChangeIsActiveAction(ApiModel):
    action: Literal["changeIsActive"] = "changeIsActive"
    is_active: bool


class DiscountCodeSetValidFromAction(ApiModel):
    action: Literal["setValidFrom"] = "setValidFrom"
    valid_from: Optional[datetime] = None


class DiscountCodeSetValidUntilAction(ApiModel):
    action: Literal["setValidUntil"] = "setValidUntil"
    valid_until: Optional[datetime] = None


DiscountCodeUpdateAction = Union[
    DiscountCodeSetNameAction,
    DiscountCodeSetDescriptionAction,
    DiscountCodeSetCartPredicateAction,
    DiscountCodeSetMaxApplicationsAction,
    DiscountCodeSetMaxApplicationsPerCustomerAction,
    DiscountCodeChangeCartDiscountsAction,
    DiscountCodeChangeGroupsAction,
    DiscountCodeChangeIsActiveAction,
    DiscountCodeSetValidFromAction,
    DiscountCodeSetValidUntilAction,
]


class DiscountCodeUpdate(ApiModel):
    """Cuerpo de actualización: versión esperada + acciones en orden"""
    version: int
    actions: List[DiscountCodeUpdateAction] = Field(default_factory=list)
