import json
from types import SimpleNamespace

import pytest

STORAGE = {
    ("Timestamp", "Now"): 1_600_000_000_000,
    ("TransactionPayment", "NextFeeMultiplier"): 1_000_000_000_000_000_000,
    ("TransactionPayment", "StorageVersion"): "V2",
}


class FakeSubstrate:
    """Stands in for SubstrateInterface; records how it was built and used."""

    instances = []

    def __init__(self, storage=None, rpc=None, fail_on=None, **kwargs):
        self.kwargs = kwargs
        self.storage = dict(STORAGE if storage is None else storage)
        self.rpc = rpc or {}
        self.fail_on = fail_on
        self.queries = []
        self.rpc_calls = []
        self.closed = False
        FakeSubstrate.instances.append(self)

    def query(self, module, storage_function):
        self.queries.append((module, storage_function))
        if (module, storage_function) == self.fail_on:
            raise ConnectionResetError("connection reset by peer")
        if (module, storage_function) not in self.storage:
            raise ValueError(f'Storage function "{module}.{storage_function}" not found')
        return SimpleNamespace(value=self.storage[(module, storage_function)])

    def rpc_request(self, method, params):
        self.rpc_calls.append((method, params))
        return {"jsonrpc": "2.0", "id": len(self.rpc_calls), **self.rpc.get(method, {"result": None})}

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_fakes():
    FakeSubstrate.instances = []
    yield
    FakeSubstrate.instances = []


@pytest.fixture
def fake_factory():
    def factory(**kwargs):
        return FakeSubstrate(**kwargs)
    return factory


@pytest.fixture
def types_file(tmp_path):
    path = tmp_path / "types.json"
    path.write_text(json.dumps({"AccountRole": "u8", "Address": "AccountId"}))
    return path


@pytest.fixture
def env(tmp_path, types_file):
    """Environment pointing at a missing config file and a valid types file."""
    return {
        "PROBE_CONFIG_PATH": str(tmp_path / "absent.yml"),
        "ws_url": "ws://node.test:9944",
        "types": str(types_file),
    }
