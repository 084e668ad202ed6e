"""
config.py — probe configuration
-------------------------------
Configuration is resolved once at startup, in this order (later wins):

  1. ``DEFAULT_CONFIG`` literals below.
  2. The YAML file named by ``PROBE_CONFIG_PATH`` (default ``probe_config.yml``).
     A missing file is fine; defaults are used.
  3. Environment overrides: ``ws_url``, ``types`` and ``PROBE_TIMEOUT``.
     A ``.env`` file in the working directory is loaded first, without
     clobbering variables that are already set.

The result is an immutable ``ProbeConfig`` that is handed to the probe; nothing
downstream reads the environment again.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from dotenv import find_dotenv, load_dotenv

from pallet_probe.core.errors import ConfigError

CONFIG_PATH_ENV = "PROBE_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "probe_config.yml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "ws_url": "ws://localhost:9944",
    "types": "../pallets/types.json",
    "type_registry_preset": None,
    "ss58_format": None,
    "timeout": 30.0,
    "extra_rpc": [],
}

# environment variable -> config key
ENV_OVERRIDES: Dict[str, str] = {
    "ws_url": "ws_url",
    "types": "types",
    "PROBE_TIMEOUT": "timeout",
}


@dataclass(frozen=True)
class RpcCall:
    method: str
    params: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ProbeConfig:
    """Everything the probe needs to know, resolved up front."""

    ws_url: str
    types_path: str
    timeout: float
    type_registry_preset: Optional[str] = None
    ss58_format: Optional[int] = None
    extra_rpc: Tuple[RpcCall, ...] = field(default_factory=tuple)


def read_config_file(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        print(f"Configuration file {path!r} not found. Using defaults.", file=sys.stderr)
        return {}
    try:
        with open(path, "r") as fh:
            loaded = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file {path!r} is not valid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Configuration file {path!r} could not be read: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Configuration file {path!r} must contain a mapping, got {type(loaded).__name__}.")
    return loaded


def _parse_extra_rpc(raw: Any) -> Tuple[RpcCall, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError("Config field 'extra_rpc' must be a list.")
    calls: List[RpcCall] = []
    for entry in raw:
        if isinstance(entry, str) and entry.strip():
            calls.append(RpcCall(method=entry.strip()))
        elif isinstance(entry, dict) and str(entry.get("method") or "").strip():
            params = entry.get("params") or []
            if not isinstance(params, list):
                raise ConfigError(f"Params for RPC method {entry['method']!r} must be a list.")
            calls.append(RpcCall(method=str(entry["method"]).strip(), params=tuple(params)))
        else:
            raise ConfigError(f"Invalid 'extra_rpc' entry: {entry!r}")
    return tuple(calls)


def build_config(values: Mapping[str, Any]) -> ProbeConfig:
    """Validate merged raw values and freeze them into a ``ProbeConfig``."""
    ws_url = str(values.get("ws_url") or "").strip()
    if not ws_url:
        raise ConfigError("Config field 'ws_url' must be a non-empty string.")

    types_path = str(values.get("types") or "").strip()
    if not types_path:
        raise ConfigError("Config field 'types' must be a non-empty path.")

    try:
        timeout = float(values.get("timeout"))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Config field 'timeout' must be a number, got {values.get('timeout')!r}.") from exc
    if timeout <= 0:
        raise ConfigError("Config field 'timeout' must be > 0.")

    preset = values.get("type_registry_preset")
    if preset is not None:
        preset = str(preset).strip() or None

    ss58_format = values.get("ss58_format")
    if ss58_format is not None:
        try:
            ss58_format = int(ss58_format)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Config field 'ss58_format' must be an integer, got {ss58_format!r}.") from exc

    return ProbeConfig(
        ws_url=ws_url,
        types_path=types_path,
        timeout=timeout,
        type_registry_preset=preset,
        ss58_format=ss58_format,
        extra_rpc=_parse_extra_rpc(values.get("extra_rpc")),
    )


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ProbeConfig:
    """Resolve defaults, the YAML file and environment overrides into a ``ProbeConfig``.

    ``environ`` defaults to ``os.environ`` (after loading ``.env``); pass an
    explicit mapping to keep the process environment out of the picture.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    cfg = DEFAULT_CONFIG.copy()
    cfg.update(read_config_file(path or environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)))

    for env_name, key in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            cfg[key] = value

    return build_config(cfg)
