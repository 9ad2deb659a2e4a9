from datetime import datetime, timedelta, timezone

import pytest

from ctplane.commercetools.models import (
    DiscountCode,
    DiscountCodeChangeGroupsAction,
    DiscountCodeSetValidFromAction,
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
from ctplane.core.errors import (
    CommercetoolsApiError,
    NonRetryableError,
    ProviderError,
    RetryableError,
    ValidationError,
)


def test_unmarshall_time_accepts_zulu_and_offsets():
    assert unmarshall_time("2018-01-02T15:04:05Z") == datetime(2018, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
    parsed = unmarshall_time("2018-01-02T17:04:05+02:00")
    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed == datetime(2018, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [
    "not-a-date",
    "2018-13-45T00:00:00Z",
    "2018-01-02T15:04:05",
    "2030-06-01 00:00:00Z",
    "2030-06-01T00:00Z",
    "20300601T000000Z",
    "2030-06-01",
    "2030-06-01T00:00:00+0200",
])
def test_unmarshall_time_rejects_invalid(value):
    with pytest.raises(ValidationError):
        unmarshall_time(value)


def test_unmarshall_time_accepts_any_fraction_length():
    assert unmarshall_time("2030-06-01T00:00:00.5Z").microsecond == 500000
    assert unmarshall_time("2030-06-01T00:00:00.123456789Z").microsecond == 123456


def test_marshall_time_uses_rfc3339_seconds():
    assert marshall_time(None) == ""
    assert marshall_time(datetime(2018, 1, 2, 15, 4, 5, 123000, tzinfo=timezone.utc)) == "2018-01-02T15:04:05Z"
    offset = timezone(timedelta(hours=-5))
    assert marshall_time(datetime(2018, 1, 2, 10, 0, 0, tzinfo=offset)) == "2018-01-02T10:00:00-05:00"


def test_marshall_unmarshall_time_is_stable():
    value = "2030-06-01T00:00:00Z"
    assert marshall_time(unmarshall_time(value)) == value


@pytest.mark.parametrize("key", ["en", "nl-NL", "de-CH-1996", "zh-Hans-CN"])
def test_validate_localized_string_key_accepts_language_tags(key):
    validate_localized_string_key({key: "text"}, "name")


@pytest.mark.parametrize("key", ["english", "e", "en_US", "", "12"])
def test_validate_localized_string_key_rejects_invalid_tags(key):
    with pytest.raises(ValidationError) as exc:
        validate_localized_string_key({key: "text"}, "name")
    assert "name" in str(exc.value)
    assert f"'{key}'" in str(exc.value)


def test_unmarshall_localized_string_and_string_arrays():
    assert unmarshall_localized_string(None) == {}
    assert unmarshall_localized_string({"en": "Sale"}) == {"en": "Sale"}
    assert expand_string_array(None) == []
    assert expand_string_array(["a", None, "b"]) == ["a", "b"]


def test_handle_error_classifies_server_errors_as_retryable():
    error = CommercetoolsApiError(503, "Service unavailable")
    wrapped = handle_commercetools_error(error)
    assert isinstance(wrapped, RetryableError)
    assert wrapped.error is error


def test_handle_error_classifies_client_errors_as_non_retryable():
    error = CommercetoolsApiError(400, "Duplicate", [{"code": "DuplicateField", "message": "dup"}])
    assert isinstance(handle_commercetools_error(error), NonRetryableError)


def test_handle_error_expands_invalid_json_input():
    error = CommercetoolsApiError(
        400,
        "Request body does not contain valid JSON.",
        [{"code": "InvalidJsonInput", "message": "bad", "detailedErrorMessage": "code: Missing required value"}],
    )
    wrapped = handle_commercetools_error(error)
    assert isinstance(wrapped, NonRetryableError)
    assert "invalid JSON input: code: Missing required value" in str(wrapped.error)


def test_handle_error_retries_transport_errors():
    assert isinstance(handle_commercetools_error(ProviderError("connection reset")), RetryableError)
    assert isinstance(handle_commercetools_error(ValueError("boom")), NonRetryableError)


def test_string_format_actions_lists_actions_in_order():
    actions = [
        DiscountCodeChangeGroupsAction(groups=[]),
        DiscountCodeSetValidFromAction(),
    ]
    text = string_format_actions(actions)
    assert text.splitlines() == ['- changeGroups: {"groups": []}', "- setValidFrom: {}"]


def test_string_format_object_and_error_extras():
    dc = DiscountCode(id="1", version=2, code="X")
    assert '"code": "X"' in string_format_object(dc)
    error = CommercetoolsApiError(400, "bad", [{"code": "InvalidField", "field": "code"}])
    assert '"field": "code"' in string_format_error_extras(error)
    assert string_format_error_extras(CommercetoolsApiError(500, "x")) == ""


def test_canonical_time_matches_read_form():
    assert canonical_time("2030-06-01T02:00:00.750+02:00") == "2030-06-01T00:00:00Z"
    assert canonical_time("2030-06-01T00:00:00Z") == "2030-06-01T00:00:00Z"
    assert canonical_time("tomorrow") == "tomorrow"
    assert canonical_time("") == ""


def test_validate_time_prefixes_path():
    validate_time("", "valid_from")
    validate_time("2030-06-01T00:00:00Z", "valid_from")
    with pytest.raises(ValidationError, match="^valid_from: "):
        validate_time("2030-06-01T00:00Z", "valid_from")
