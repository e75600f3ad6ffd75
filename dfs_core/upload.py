# dfs_core/upload.py
import requests
from typing import BinaryIO, Optional

from dfs_core.constants import DEFAULT_IPFS_GATEWAY, DEFAULT_PINATA_API_URL
from dfs_core.errors import ConfigurationError, InvalidInput, UploadFailed
from dfs_core.logger import get_logger

log = get_logger("DFS.Upload")


class PinataUploader:
    """
    Pins a file through Pinata's pinFileToIPFS endpoint and returns its gateway URL.

    Any failure after the request is attempted surfaces as a single UploadFailed;
    callers treat the returned URL as an opaque string.
    """

    def __init__(
        self,
        jwt: Optional[str],
        api_url: str = DEFAULT_PINATA_API_URL,
        gateway_base: str = DEFAULT_IPFS_GATEWAY,
        timeout: float = 60.0,
    ):
        self.jwt = jwt
        self.api_url = api_url
        self.gateway_base = gateway_base.rstrip("/")
        self.timeout = timeout

    def gateway_url(self, cid: str) -> str:
        return f"{self.gateway_base}/{cid}"

    def upload(self, fileobj: Optional[BinaryIO], name: str = "upload") -> str:
        if fileobj is None:
            raise InvalidInput("select a file first")
        if not self.jwt:
            raise ConfigurationError("missing Pinata JWT (DFS_PINATA_JWT)")

        filename = (name or "upload").strip() or "upload"
        headers = {"Authorization": f"Bearer {self.jwt}"}
        log.info(f"[UPLOAD] → {self.api_url} | file={filename}")

        try:
            res = requests.post(
                self.api_url,
                files={"file": (filename, fileobj)},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"[UPLOAD] transport failure: {e}")
            raise UploadFailed("upload failed") from e

        if not res.ok:
            log.error(f"[UPLOAD] {res.status_code}: {res.text[:300]}")
            raise UploadFailed("upload failed", {"status": res.status_code})

        try:
            cid = str(res.json().get("IpfsHash") or "").strip()
        except (ValueError, AttributeError) as e:
            log.error(f"[UPLOAD] malformed response: {res.text[:300]}")
            raise UploadFailed("upload failed") from e
        if not cid:
            log.error(f"[UPLOAD] response missing IpfsHash: {res.text[:300]}")
            raise UploadFailed("upload failed")

        url = self.gateway_url(cid)
        log.info(f"[UPLOAD] pinned {filename} cid={cid}")
        return url
