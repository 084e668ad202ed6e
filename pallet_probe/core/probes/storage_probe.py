"""
storage_probe.py — read a handful of storage items from a Substrate node

Overview
--------
Connects to a node over its WebSocket RPC endpoint with the chain's custom
type definitions loaded, reads three storage items and prints them:

- `Timestamp.Now` (int): the node's current on-chain time in milliseconds.
- `TransactionPayment.NextFeeMultiplier`: fixed-point multiplier, printed as
  decoded by the client (raw FixedU128 inner value).
- `TransactionPayment.StorageVersion`: pallet storage release tag (e.g. `V2`).

Optionally, any methods listed under `extra_rpc` in the config are called
afterwards and their results printed as well.

Output
------
On success stdout carries exactly these lines, in this order:

    timestamp.now <value>
    transactionPayment.nextFeeMultiplier is <value>
    transactionPayment.storageVersion is <value>

followed by one `<method> is <result>` line per extra RPC call, in config
order (`<method>(<params>) is <result>` for calls with params). Nothing is
printed to stdout if any step fails; a single notice goes to stderr and the
process exits with status 1.

Protocol, SCALE decoding and the metadata cache all live in
`substrate-interface`; this module only wires it up.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, TextIO, Tuple

from substrateinterface import SubstrateInterface
from substrateinterface.exceptions import SubstrateRequestException
from websocket import WebSocketException

from pallet_probe.core.config import ProbeConfig, RpcCall, load_config
from pallet_probe.core.errors import (
    ConnectionFailed,
    ProbeError,
    QueryFailed,
    RpcCallFailed,
    TypeDefinitionsError,
)
from pallet_probe.core.types import as_type_registry, load_type_definitions

# (pallet, storage function, output label)
TIMESTAMP_NOW = ("Timestamp", "Now", "timestamp.now")
NEXT_FEE_MULTIPLIER = ("TransactionPayment", "NextFeeMultiplier", "transactionPayment.nextFeeMultiplier is")
STORAGE_VERSION = ("TransactionPayment", "StorageVersion", "transactionPayment.storageVersion is")

TRANSPORT_ERRORS = (OSError, WebSocketException, SubstrateRequestException)
# raised by scalecodec while building the registry or decoding a value
DECODE_ERRORS = (ValueError, TypeError, NotImplementedError)

ClientFactory = Callable[..., Any]


# ---------------- Results ----------------

@dataclass
class StorageReadings:
    timestamp: int
    next_fee_multiplier: Any
    storage_version: Any

    def lines(self) -> List[str]:
        return [
            f"{TIMESTAMP_NOW[2]} {self.timestamp}",
            f"{NEXT_FEE_MULTIPLIER[2]} {self.next_fee_multiplier}",
            f"{STORAGE_VERSION[2]} {self.storage_version}",
        ]


@dataclass
class ProbeOutcome:
    """What `run_probe` hands back: either readings or the error that stopped it."""

    readings: Optional[StorageReadings] = None
    error: Optional[ProbeError] = None
    rpc_results: List[Tuple[RpcCall, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.readings is not None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def lines(self) -> List[str]:
        if not self.ok:
            return []
        out = self.readings.lines()
        out.extend(f"{rpc_label(call)} is {result}" for call, result in self.rpc_results)
        return out


def rpc_label(call: RpcCall) -> str:
    if not call.params:
        return call.method
    params = ", ".join(str(p) for p in call.params)
    return f"{call.method}({params})"


# ---------------- Client ----------------

def connect(
    config: ProbeConfig,
    type_registry: Dict[str, Any],
    client_factory: ClientFactory = SubstrateInterface,
) -> SubstrateInterface:
    """Build the RPC client for `config.ws_url` with the custom types registered.

    The websocket read timeout is always set so a silent node cannot hang us.
    The client loads the registry while connecting, so type definitions the
    codec rejects surface here as `TypeDefinitionsError`.
    """
    kwargs: Dict[str, Any] = {
        "url": config.ws_url,
        "type_registry": type_registry,
        "ws_options": {"timeout": config.timeout},
    }
    if config.type_registry_preset:
        kwargs["type_registry_preset"] = config.type_registry_preset
    if config.ss58_format is not None:
        kwargs["ss58_format"] = config.ss58_format
    try:
        return client_factory(**kwargs)
    except TRANSPORT_ERRORS as exc:
        raise ConnectionFailed(config.ws_url, str(exc) or type(exc).__name__) from exc
    except DECODE_ERRORS as exc:
        raise TypeDefinitionsError(config.types_path, f"rejected by the type registry ({exc!r})") from exc


def query_value(substrate: SubstrateInterface, pallet: str, storage_function: str) -> Any:
    item = f"{pallet}.{storage_function}"
    try:
        result = substrate.query(pallet, storage_function)
    except (*DECODE_ERRORS, *TRANSPORT_ERRORS) as exc:
        # StorageFunctionNotFound is a ValueError
        raise QueryFailed(item, str(exc) or type(exc).__name__) from exc
    return getattr(result, "value", result)


def read_storage(substrate: SubstrateInterface) -> StorageReadings:
    """Query the three storage items in order; any failure aborts the lot."""
    now = query_value(substrate, *TIMESTAMP_NOW[:2])
    try:
        now = int(now)
    except (TypeError, ValueError) as exc:
        raise QueryFailed("Timestamp.Now", f"not an integer: {now!r}") from exc

    multiplier = query_value(substrate, *NEXT_FEE_MULTIPLIER[:2])
    version = query_value(substrate, *STORAGE_VERSION[:2])
    return StorageReadings(timestamp=now, next_fee_multiplier=multiplier, storage_version=version)


def call_extra_rpc(substrate: SubstrateInterface, config: ProbeConfig) -> List[Tuple[RpcCall, Any]]:
    results: List[Tuple[RpcCall, Any]] = []
    for call in config.extra_rpc:
        try:
            response = substrate.rpc_request(call.method, list(call.params))
        except TRANSPORT_ERRORS as exc:
            raise RpcCallFailed(call.method, str(exc) or type(exc).__name__) from exc
        if response.get("error"):
            raise RpcCallFailed(call.method, str(response["error"]))
        results.append((call, response.get("result")))
    return results


# ---------------- Probe ----------------

def run_probe(config: ProbeConfig, client_factory: ClientFactory = SubstrateInterface) -> ProbeOutcome:
    """Load types, connect, read storage, run extra RPC calls.

    Expected failures come back in `ProbeOutcome.error`; the client is closed
    either way.
    """
    try:
        registry = as_type_registry(load_type_definitions(config.types_path))
        substrate = connect(config, registry, client_factory)
    except ProbeError as exc:
        return ProbeOutcome(error=exc)

    try:
        readings = read_storage(substrate)
        rpc_results = call_extra_rpc(substrate, config)
    except ProbeError as exc:
        return ProbeOutcome(error=exc)
    finally:
        substrate.close()

    return ProbeOutcome(readings=readings, rpc_results=rpc_results)


def main(
    environ: Optional[Mapping[str, str]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    client_factory: ClientFactory = SubstrateInterface,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        config = load_config(environ=environ)
    except ProbeError as exc:
        print(f"⚠️  {exc}", file=err)
        return 1

    print(f"Connecting to {config.ws_url} (types: {config.types_path})", file=err)
    outcome = run_probe(config, client_factory=client_factory)
    if not outcome.ok:
        print(f"⚠️  {outcome.error}", file=err)
        return outcome.exit_code

    for line in outcome.lines():
        print(line, file=out)
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
