"""
Custom type definitions for the node's runtime.

The definitions file is whatever the chain's developers ship for polkadot.js
(``types.json``); we parse it and hand it to the client untouched.
"""

import json
from typing import Any, Dict

from pallet_probe.core.errors import TypeDefinitionsError


def load_type_definitions(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf8") as fh:
            definitions = json.load(fh)
    except FileNotFoundError as exc:
        raise TypeDefinitionsError(path, "file not found") from exc
    except OSError as exc:
        raise TypeDefinitionsError(path, str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise TypeDefinitionsError(path, f"not valid UTF-8 ({exc})") from exc
    except json.JSONDecodeError as exc:
        raise TypeDefinitionsError(path, f"invalid JSON ({exc})") from exc

    if not isinstance(definitions, dict):
        raise TypeDefinitionsError(path, f"expected a JSON object, got {type(definitions).__name__}")
    return definitions


def as_type_registry(definitions: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap flat polkadot.js definitions in the ``{"types": ...}`` registry envelope.

    Documents that already carry a ``types`` mapping are returned as-is.
    """
    if isinstance(definitions.get("types"), dict):
        return definitions
    return {"types": definitions}
