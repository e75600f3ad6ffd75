import asyncio
import pytest

from dfs_core.transport.transport_local import LocalLedger


class ScriptedGateway:
    """Async gateway stand-in whose queries stay pending until the test releases them."""

    def __init__(self, identity):
        self.identity = identity
        self.pending = []
        self.calls = []

    async def list_files(self, owner, caller=None):
        return await self._wait("display", owner, caller)

    async def list_grants(self, caller=None):
        return await self._wait("shareAccess", caller, caller)

    async def _wait(self, op, key, caller):
        fut = asyncio.get_running_loop().create_future()
        self.pending.append((op, key, fut))
        self.calls.append((op, key, caller))
        return await fut

    def release(self, op, key, result=None, error=None):
        for i, (o, k, fut) in enumerate(self.pending):
            if o == op and k == key and not fut.done():
                del self.pending[i]
                if error is not None:
                    fut.set_exception(error)
                else:
                    fut.set_result(result)
                return
        raise AssertionError(f"no pending {op} for {key}")


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json body")
        return self._payload


async def _settle(rounds=10):
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def ledger():
    return LocalLedger()


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def settle():
    return _settle
