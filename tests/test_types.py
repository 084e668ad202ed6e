import json

import pytest

from pallet_probe.core.errors import ProbeError, TypeDefinitionsError
from pallet_probe.core.types import as_type_registry, load_type_definitions


def test_loads_document_unmodified(tmp_path):
    doc = {"AccountRole": "u8", "Account": {"roles": "AccountRole", "create_time": "Moment"}}
    path = tmp_path / "types.json"
    path.write_text(json.dumps(doc))

    assert load_type_definitions(str(path)) == doc


def test_missing_file(tmp_path):
    path = tmp_path / "nope.json"
    with pytest.raises(TypeDefinitionsError) as excinfo:
        load_type_definitions(str(path))
    assert excinfo.value.path == str(path)
    assert "not found" in str(excinfo.value)
    assert isinstance(excinfo.value, ProbeError)


def test_malformed_json(tmp_path):
    path = tmp_path / "types.json"
    path.write_text("{\"AccountRole\": ")
    with pytest.raises(TypeDefinitionsError, match="invalid JSON"):
        load_type_definitions(str(path))


def test_top_level_must_be_object(tmp_path):
    path = tmp_path / "types.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(TypeDefinitionsError, match="JSON object"):
        load_type_definitions(str(path))


def test_flat_definitions_are_wrapped():
    flat = {"AccountRole": "u8"}
    assert as_type_registry(flat) == {"types": {"AccountRole": "u8"}}


def test_registry_envelope_passes_through():
    registry = {"runtime_id": 1, "types": {"AccountRole": "u8"}}
    assert as_type_registry(registry) is registry


def test_invalid_utf8(tmp_path):
    path = tmp_path / "types.json"
    path.write_bytes(b'{"AccountRole": "\xff\xfe"}')
    with pytest.raises(TypeDefinitionsError, match="UTF-8"):
        load_type_definitions(str(path))
