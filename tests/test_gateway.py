import asyncio
import pytest

from dfs_core.errors import AccessDenied, InvalidInput, Rejected, TransportError, Unauthenticated
from dfs_core.gateway import LedgerGateway
from dfs_core.identity import IdentityContext
from dfs_core.models import AccessGrant
from dfs_core.transport.transport_base import BaseLedgerTransport
from dfs_core.transport.transport_local import LocalLedger


class RecordingTransport(BaseLedgerTransport):
    name = "recording"

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def call(self, function, args, account=None):
        self.calls.append(("call", function, args, account))
        return self.result

    def transact(self, function, args, account):
        self.calls.append(("transact", function, args, account))
        return {"tx_hash": "0xfeed", "status": "success"}


def test_validation_happens_before_any_transport_call():
    transport = RecordingTransport()
    gw = LedgerGateway(transport, IdentityContext(""))

    async def scenario():
        with pytest.raises(Unauthenticated):
            await gw.register_file("0xA", "https://host/f1")
        with pytest.raises(Unauthenticated):
            await gw.set_access("0xB", True)
        with pytest.raises(Unauthenticated):
            await gw.list_grants()
        with pytest.raises(Unauthenticated):
            await gw.list_files("0xA")

        gw.identity = IdentityContext("0xA")
        with pytest.raises(InvalidInput):
            await gw.register_file("0xA", "")
        with pytest.raises(InvalidInput):
            await gw.register_file("0xA", "   ")
        with pytest.raises(InvalidInput):
            await gw.set_access("", True)
        with pytest.raises(InvalidInput):
            await gw.list_files("")

    asyncio.run(scenario())
    assert transport.calls == []


def test_set_access_selects_entry_point_by_flag():
    transport = RecordingTransport()
    gw = LedgerGateway(transport, IdentityContext("0xA"))

    async def scenario():
        await gw.set_access("0xB", True)
        await gw.set_access("0xB", False)

    asyncio.run(scenario())
    assert [c[1] for c in transport.calls] == ["allow", "disallow"]
    assert all(c[3] == "0xA" for c in transport.calls)


def test_list_grants_decodes_dicts_and_tuples():
    transport = RecordingTransport(result=[{"user": "0xB", "access": True}, ("0xC", False)])
    gw = LedgerGateway(transport, IdentityContext("0xA"))

    grants = asyncio.run(gw.list_grants())
    assert grants == (AccessGrant("0xB", True), AccessGrant("0xC", False))


def test_list_grants_keeps_duplicates():
    dup = [{"user": "0xB", "access": True}, {"user": "0xB", "access": False}]
    gw = LedgerGateway(RecordingTransport(result=dup), IdentityContext("0xA"))
    assert len(asyncio.run(gw.list_grants())) == 2


def test_malformed_results_are_transport_errors():
    gw = LedgerGateway(RecordingTransport(result="nope"), IdentityContext("0xA"))
    with pytest.raises(TransportError):
        asyncio.run(gw.list_files("0xA"))

    gw = LedgerGateway(RecordingTransport(result=[{"who": "0xB"}]), IdentityContext("0xA"))
    with pytest.raises(TransportError):
        asyncio.run(gw.list_grants())


def test_explicit_caller_overrides_active_identity():
    transport = RecordingTransport(result=[])
    gw = LedgerGateway(transport, IdentityContext("0xA"))
    asyncio.run(gw.list_files("0xZ", caller="0xB"))
    assert transport.calls[-1] == ("call", "display", ["0xZ"], "0xB")


def test_register_then_list_against_local_ledger(ledger):
    gw = LedgerGateway(ledger, IdentityContext("0xA"))

    async def scenario():
        receipt = await gw.register_file("0xA", "https://host/f1")
        assert receipt["status"] == "success"
        return await gw.list_files("0xA")

    assert asyncio.run(scenario()) == ("https://host/f1",)


def test_ledger_errors_surface_unchanged():
    ledger = LocalLedger(declined={"0xA"})
    gw = LedgerGateway(ledger, IdentityContext("0xA"))
    with pytest.raises(Rejected):
        asyncio.run(gw.register_file("0xA", "https://host/f1"))

    gw = LedgerGateway(ledger, IdentityContext("0xB"))
    with pytest.raises(AccessDenied):
        asyncio.run(gw.list_files("0xA"))
