import pytest

from ctplane.commercetools.resource_discount_code import DISCOUNT_CODE_SCHEMA, TYPE_NAME
from ctplane.core.errors import ConfigError, ValidationError
from ctplane.core.project.loader import DeclarativeLoader
from ctplane.core.project.validator import validate_address, validate_desired_config


VALID_YAML = """
version: 1
resources:
  - type: commercetools_discount_code
    name: summer
    config:
      code: SUMMER
      cart_discounts: [cd-1]
  - type: commercetools_discount_code
    name: winter
    config:
      code: WINTER
      cart_discounts: [cd-2]
      max_applications: 5
"""


def _loader(tmp_path, content):
    path = tmp_path / "ctplane.yaml"
    path.write_text(content, encoding="utf-8")
    return DeclarativeLoader(path)


def test_load_valid_file(tmp_path):
    loader = _loader(tmp_path, VALID_YAML)
    root = loader.load()

    assert root.version == 1
    assert loader.addresses() == [
        "commercetools_discount_code.summer",
        "commercetools_discount_code.winter",
    ]
    winter = loader.get_resource("commercetools_discount_code.winter")
    assert winter.config["max_applications"] == 5
    assert loader.get_resource("commercetools_discount_code.autumn") is None


def test_empty_file_has_no_resources(tmp_path):
    loader = _loader(tmp_path, "")
    loader.load()
    assert loader.resources() == []


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="no encontrado"):
        DeclarativeLoader(tmp_path / "nope.yaml").load()


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigError, match="YAML inválido"):
        _loader(tmp_path, "resources: [unclosed").load()


def test_invalid_structure(tmp_path):
    with pytest.raises(ConfigError, match="Estructura inválida"):
        _loader(tmp_path, "resources:\n  - name: missing-type\n").load()


def test_top_level_list_is_rejected(tmp_path):
    with pytest.raises(ConfigError, match="Estructura inválida"):
        _loader(tmp_path, "- a\n- b\n").load()


@pytest.mark.parametrize("name", ["", "with.dot", "with space", "a/b"])
def test_invalid_resource_names(tmp_path, name):
    content = f"resources:\n  - type: commercetools_discount_code\n    name: '{name}'\n"
    with pytest.raises(ConfigError):
        _loader(tmp_path, content).load()


def test_duplicate_address(tmp_path):
    content = VALID_YAML.replace("name: winter", "name: summer")
    with pytest.raises(ConfigError, match="duplicado"):
        _loader(tmp_path, content).load()


@pytest.mark.parametrize("address", ["", "nodot", "a.b.c", ".x", "x."])
def test_validate_address_rejects(address):
    with pytest.raises(ValidationError):
        validate_address(address)


def test_validate_desired_config_prefixes_address(tmp_path):
    content = VALID_YAML + (
        "  - type: unknown_thing\n"
        "    name: other\n"
        "  - type: commercetools_discount_code\n"
        "    name: broken\n"
        "    config:\n"
        "      cart_discounts: cd-1\n"
    )
    loader = _loader(tmp_path, content)
    loader.load()

    errors = validate_desired_config(loader.resources(), {TYPE_NAME: DISCOUNT_CODE_SCHEMA})
    assert "unknown_thing.other: tipo de recurso desconocido 'unknown_thing'" in errors
    assert "commercetools_discount_code.broken: code: campo requerido" in errors
    assert any(e.startswith("commercetools_discount_code.broken: cart_discounts:") for e in errors)
    assert not any("summer" in e or "winter" in e for e in errors)
