"""
Recurso commercetools_discount_code.

Con los discount codes se pueden dar cart discounts específicos a un conjunto
de usuarios. Se definen por un código que se añade al carrito para que se
apliquen los cart discounts referenciados.

Ver https://docs.commercetools.com/api/projects/discountCodes
"""

import logging
from typing import List

from ctplane.commercetools.client import CommercetoolsClient
from ctplane.commercetools.models import (
    CartDiscountReference,
    CartDiscountResourceIdentifier,
    DiscountCode,
    DiscountCodeChangeCartDiscountsAction,
    DiscountCodeChangeGroupsAction,
    DiscountCodeChangeIsActiveAction,
    DiscountCodeDraft,
    DiscountCodeSetCartPredicateAction,
    DiscountCodeSetDescriptionAction,
    DiscountCodeSetMaxApplicationsAction,
    DiscountCodeSetMaxApplicationsPerCustomerAction,
    DiscountCodeSetNameAction,
    DiscountCodeSetValidFromAction,
    DiscountCodeSetValidUntilAction,
    DiscountCodeUpdateAction,
)
from ctplane.commercetools.utils import (
    canonical_time,
    expand_string_array,
    handle_commercetools_error,
    marshall_time,
    string_format_actions,
    string_format_error_extras,
    string_format_object,
    unmarshall_localized_string,
    unmarshall_time,
    validate_localized_string_key,
    validate_time,
)
from ctplane.core.errors import CommercetoolsApiError, CtplaneError, ProviderError
from ctplane.core.infra.contracts import Resource
from ctplane.core.infra.schema import FieldSchema, FieldType, ResourceData, ResourceSchema
from ctplane.core.runtime.retry import retry_context


logger = logging.getLogger(__name__)

TYPE_NAME = "commercetools_discount_code"

CREATE_TIMEOUT_SECONDS = 60.0


DISCOUNT_CODE_SCHEMA = ResourceSchema(
    TYPE_NAME,
    description=(
        "With discount codes it is possible to give specific cart discounts to an eligible set of users. "
        "They are defined by a string value which can be added to a cart so that specific cart discounts "
        "can be applied to the cart.\n\n"
        "See also the [Discount Code Api Documentation](https://docs.commercetools.com/api/projects/discountCodes)"
    ),
    fields={
        "name": FieldSchema(
            FieldType.LOCALIZED_STRING,
            description="[LocalizedString](https://docs.commercetools.com/api/types#localizedstring)",
            optional=True,
            validate=validate_localized_string_key,
        ),
        "description": FieldSchema(
            FieldType.LOCALIZED_STRING,
            description="[LocalizedString](https://docs.commercetools.com/api/types#localizedstring)",
            optional=True,
            validate=validate_localized_string_key,
        ),
        "code": FieldSchema(
            FieldType.STRING,
            description=(
                "Unique identifier of this discount code. This value is added to the cart to enable "
                "the related cart discounts in the cart"
            ),
            required=True,
            immutable=True,
        ),
        "valid_from": FieldSchema(
            FieldType.STRING,
            description="The time from which the discount can be applied on a cart. Before that time the code is invalid",
            optional=True,
            validate=validate_time,
            normalize=canonical_time,
        ),
        "valid_until": FieldSchema(
            FieldType.STRING,
            description="The time until the discount can be applied on a cart. After that time the code is invalid",
            optional=True,
            validate=validate_time,
            normalize=canonical_time,
        ),
        "is_active": FieldSchema(FieldType.BOOL, optional=True, default=True),
        "predicate": FieldSchema(
            FieldType.STRING,
            description="[Cart Predicate](https://docs.commercetools.com/api/projects/predicates#cart-predicates)",
            optional=True,
        ),
        "max_applications_per_customer": FieldSchema(
            FieldType.INT,
            description="The discount code can only be applied maxApplicationsPerCustomer times per customer",
            optional=True,
        ),
        "max_applications": FieldSchema(
            FieldType.INT,
            description="The discount code can only be applied maxApplications times",
            optional=True,
        ),
        "groups": FieldSchema(
            FieldType.LIST,
            description="The groups to which this discount code belong",
            optional=True,
            elem=FieldType.STRING,
        ),
        "cart_discounts": FieldSchema(
            FieldType.LIST,
            description="The referenced matching cart discounts can be applied to the cart once the DiscountCode is added",
            required=True,
            elem=FieldType.STRING,
        ),
        "version": FieldSchema(FieldType.INT, computed=True),
    },
)


def resource_discount_code_create(d: ResourceData, client: CommercetoolsClient) -> None:
    draft = DiscountCodeDraft(
        name=unmarshall_localized_string(d.get("name")),
        description=unmarshall_localized_string(d.get("description")),
        code=d.get("code"),
        cart_predicate=d.get("predicate") or None,
        is_active=d.get("is_active"),
        max_applications_per_customer=d.get("max_applications_per_customer") or None,
        max_applications=d.get("max_applications") or None,
        groups=unmarshall_discount_code_groups(d),
        cart_discounts=unmarshall_discount_code_cart_discounts(d),
    )

    if d.get("valid_from"):
        draft.valid_from = unmarshall_time(d.get("valid_from"))
    if d.get("valid_until"):
        draft.valid_until = unmarshall_time(d.get("valid_until"))

    def post() -> DiscountCode:
        try:
            return client.discount_codes.create(draft)
        except CtplaneError as e:
            raise handle_commercetools_error(e) from e

    discount_code = retry_context(CREATE_TIMEOUT_SECONDS, post)
    # Respuesta 2xx sin body
    if discount_code is None:
        raise ProviderError("No discount code created")

    d.set_id(discount_code.id)
    d.set("version", discount_code.version)

    resource_discount_code_read(d, client)


def resource_discount_code_read(d: ResourceData, client: CommercetoolsClient) -> None:
    logger.debug("Reading discount code from commercetools, with discount code id: %s", d.id)

    try:
        discount_code = client.discount_codes.get(d.id)
    except CommercetoolsApiError as e:
        if e.status_code == 404:
            d.set_id("")
            return
        raise

    if discount_code is None:
        logger.debug("No discount code found")
        d.set_id("")
        return

    logger.debug("Found following discount code:\n%s", string_format_object(discount_code))

    d.set("version", discount_code.version)
    d.set("code", discount_code.code)
    d.set("name", discount_code.name)
    d.set("description", discount_code.description)
    d.set("predicate", discount_code.cart_predicate)
    d.set("cart_discounts", marshall_discount_code_cart_discounts(discount_code.cart_discounts))
    d.set("groups", discount_code.groups)
    d.set("is_active", discount_code.is_active)
    d.set("valid_from", marshall_time(discount_code.valid_from))
    d.set("valid_until", marshall_time(discount_code.valid_until))
    d.set("max_applications_per_customer", discount_code.max_applications_per_customer)
    d.set("max_applications", discount_code.max_applications)


def resource_discount_code_update(d: ResourceData, client: CommercetoolsClient) -> None:
    discount_code = client.discount_codes.get(d.id)
    if discount_code is None:
        raise ProviderError(f"Discount code {d.id} not found")

    actions = build_update_actions(d)
    if not actions:
        logger.debug("No update actions for discount code %s", d.id)
        resource_discount_code_read(d, client)
        return

    logger.debug("Will perform update operation with the following actions:\n%s", string_format_actions(actions))

    try:
        client.discount_codes.update(discount_code.id, discount_code.version, actions)
    except CommercetoolsApiError as e:
        logger.debug("%s: %s", e, string_format_error_extras(e))
        raise

    resource_discount_code_read(d, client)


def build_update_actions(d: ResourceData) -> List[DiscountCodeUpdateAction]:
    """Una acción por campo cambiado, en orden fijo"""
    actions: List[DiscountCodeUpdateAction] = []

    if d.has_change("name"):
        actions.append(DiscountCodeSetNameAction(name=unmarshall_localized_string(d.get("name"))))

    if d.has_change("description"):
        actions.append(
            DiscountCodeSetDescriptionAction(description=unmarshall_localized_string(d.get("description")))
        )

    if d.has_change("predicate"):
        actions.append(DiscountCodeSetCartPredicateAction(cart_predicate=d.get("predicate") or None))

    if d.has_change("max_applications"):
        actions.append(DiscountCodeSetMaxApplicationsAction(max_applications=d.get("max_applications") or None))

    if d.has_change("max_applications_per_customer"):
        actions.append(
            DiscountCodeSetMaxApplicationsPerCustomerAction(
                max_applications_per_customer=d.get("max_applications_per_customer") or None
            )
        )

    if d.has_change("cart_discounts"):
        actions.append(
            DiscountCodeChangeCartDiscountsAction(cart_discounts=unmarshall_discount_code_cart_discounts(d))
        )

    if d.has_change("groups"):
        actions.append(DiscountCodeChangeGroupsAction(groups=unmarshall_discount_code_groups(d)))

    if d.has_change("is_active"):
        actions.append(DiscountCodeChangeIsActiveAction(is_active=d.get("is_active")))

    if d.has_change("valid_from"):
        if d.get("valid_from"):
            actions.append(DiscountCodeSetValidFromAction(valid_from=unmarshall_time(d.get("valid_from"))))
        else:
            actions.append(DiscountCodeSetValidFromAction())

    if d.has_change("valid_until"):
        if d.get("valid_until"):
            actions.append(DiscountCodeSetValidUntilAction(valid_until=unmarshall_time(d.get("valid_until"))))
        else:
            actions.append(DiscountCodeSetValidUntilAction())

    return actions


def resource_discount_code_delete(d: ResourceData, client: CommercetoolsClient) -> None:
    version = d.get("version")
    try:
        client.discount_codes.delete(d.id, version, data_erasure=True)
    except CtplaneError as e:
        logger.error("Error during deleting discount code resource %s", e)


def unmarshall_discount_code_groups(d: ResourceData) -> List[str]:
    return expand_string_array(d.get("groups"))


def unmarshall_discount_code_cart_discounts(d: ResourceData) -> List[CartDiscountResourceIdentifier]:
    return [CartDiscountResourceIdentifier(id=i) for i in expand_string_array(d.get("cart_discounts"))]


def marshall_discount_code_cart_discounts(values: List[CartDiscountReference]) -> List[str]:
    return [v.id for v in values]


def resource_discount_code() -> Resource:
    return Resource(
        DISCOUNT_CODE_SCHEMA,
        create=resource_discount_code_create,
        read=resource_discount_code_read,
        update=resource_discount_code_update,
        delete=resource_discount_code_delete,
    )
