# dfs_core/transport/transport_http.py
import requests
from typing import Any, List, Optional

from dfs_core.constants import ACCESS_DENIED_REASON, DEFAULT_CONTRACT_ADDRESS
from dfs_core.logger import get_logger
from dfs_core.transport.transport_base import (
    AccessDenied,
    BaseLedgerTransport,
    Receipt,
    Rejected,
    TransportError,
)
from dfs_core.utils import short

log = get_logger("DFS.Transport.HTTP")


class HTTPLedgerAdapter(BaseLedgerTransport):
    """
    HTTP transport adapter for a ledger gateway service.

    Endpoints:
    - POST {base}/call      read-only contract call  -> {"result": ...}
    - POST {base}/transact  signed contract mutation -> receipt

    Supports Bearer authentication via set_token() or the DFS_LEDGER_TOKEN setting.
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        contract_address: str = DEFAULT_CONTRACT_ADDRESS,
        timeout: float = 10.0,
        token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.contract_address = contract_address
        self.timeout = timeout
        self._token = token

    def set_token(self, token: str):
        self._token = token

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _body(self, function: str, args: List[Any], account: Optional[str]) -> dict:
        return {
            "contract": self.contract_address,
            "function": function,
            "args": list(args),
            "account": account,
        }

    def _post(self, path: str, body: dict) -> requests.Response:
        url = f"{self.base_url}{path}"
        log.debug(f"[HTTP LEDGER] → {url} | function={body['function']} account={short(body['account'])}")
        try:
            return requests.post(url, json=body, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"[HTTP LEDGER] {url} unreachable: {e}")
            raise TransportError(f"ledger unreachable: {e}", {"url": url}) from e

    @staticmethod
    def _error_text(res: requests.Response) -> str:
        try:
            data = res.json()
        except ValueError:
            return res.text
        if isinstance(data, dict):
            return str(data.get("error") or data.get("message") or data)
        return str(data)

    @staticmethod
    def _json(res: requests.Response) -> Any:
        try:
            return res.json()
        except ValueError as e:
            raise TransportError(f"malformed ledger response: {res.text[:200]}") from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def call(self, function: str, args: List[Any], account: Optional[str] = None) -> Any:
        res = self._post("/call", self._body(function, args, account))
        log.info(f"[HTTP CALL] {function} {res.status_code} {res.reason}")

        if res.ok:
            data = self._json(res)
            if not isinstance(data, dict) or "result" not in data:
                raise TransportError(f"malformed ledger response: {data!r}"[:300])
            return data["result"]

        detail = self._error_text(res)
        details = {"function": function, "status": res.status_code}
        if res.status_code == 403 or (400 <= res.status_code < 500 and ACCESS_DENIED_REASON in detail):
            raise AccessDenied(detail or ACCESS_DENIED_REASON, details)
        log.error(f"[HTTP CALL] {res.status_code}: {detail}")
        raise TransportError(detail, details)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def transact(self, function: str, args: List[Any], account: str) -> Receipt:
        res = self._post("/transact", self._body(function, args, account))
        log.info(f"[HTTP TX] {function} {res.status_code} {res.reason}")

        if res.ok:
            receipt = self._json(res)
            if not isinstance(receipt, dict):
                raise TransportError(f"malformed receipt: {receipt!r}"[:300])
            if receipt.get("status") == "reverted":
                raise Rejected(str(receipt.get("error") or "transaction reverted"), {"function": function, "receipt": receipt})
            return receipt

        detail = self._error_text(res)
        details = {"function": function, "status": res.status_code}
        if 400 <= res.status_code < 500:
            raise Rejected(detail, details)
        log.error(f"[HTTP TX] {res.status_code}: {detail}")
        raise TransportError(detail, details)

    def healthz(self) -> dict:
        try:
            res = requests.get(f"{self.base_url}/healthz", headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            return {"status": "down", "transport": self.name, "error": str(e)}
        return {"status": "ok" if res.ok else "down", "transport": self.name}
