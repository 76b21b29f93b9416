"""Low level HTTP calls for each Gofile endpoint."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional, Sequence, Union

import httpx

from .config import ClientConfig
from .errors import NetworkError, ValidationError
from .payloads import AttributeUpdate, delete_payload, folder_payload, update_payload
from .streamer import UploadStream
from .utils import ProgressCallback

logger = logging.getLogger(__name__)

UPLOAD_URL_TEMPLATE = "https://{server}.gofile.io/contents/uploadfile"

# POST is not idempotent, so it is only retried when the connection never opened.
_CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def upload_server_url(server: str) -> str:
    """Return the upload endpoint hosted on ``server`` (e.g. ``store1``)."""

    if not server:
        raise ValidationError("An upload server name is required")
    return UPLOAD_URL_TEMPLATE.format(server=server)


def _require(name: str, value: str) -> str:
    if not value:
        raise ValidationError(f"{name} is required")
    return value


class GofileTransport:
    """Builds authenticated requests for the Gofile REST API and sends them.

    Each method performs exactly one logical call and returns the raw
    :class:`httpx.Response`; decoding is left to :class:`~gofilepy.GofileClient`.
    """

    def __init__(self, config: ClientConfig, http_client: Optional[httpx.Client] = None):
        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=config.timeout)

        if config.token:
            logger.debug("Initialized with token: %s", config.masked_token)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        if extra:
            headers.update(extra)
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def _should_retry(self, method: str, exc: httpx.TransportError) -> bool:
        if method == "POST":
            return isinstance(exc, _CONNECT_ERRORS)
        return True

    def _send(
        self,
        method: str,
        url: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute a request, retrying transport failures with exponential backoff."""

        safe_context = context or {}
        headers = self._headers(kwargs.pop("headers", None))
        attempts = self.config.retry_count + 1
        for attempt in range(attempts):
            try:
                logger.debug("HTTP %s %s | payload=%s", method, url, safe_context)
                response = self.client.request(method, url, headers=headers, **kwargs)
                logger.debug("Response status: %s", response.status_code)
                return response
            except httpx.TransportError as exc:
                last_attempt = attempt + 1 >= attempts
                if last_attempt or not self._should_retry(method, exc):
                    logger.error("HTTP %s %s failed: %s", method, url, exc)
                    raise NetworkError(
                        f"Failed HTTP request to {url}",
                        context={"method": method, "attempts": attempt + 1, **safe_context},
                    ) from exc
                delay = self.config.retry_backoff * (2 ** attempt)
                logger.warning(
                    "HTTP %s %s failed (%s), retrying in %.1fs (%s/%s)",
                    method, url, exc, delay, attempt + 1, self.config.retry_count,
                )
                time.sleep(delay)
        raise AssertionError("unreachable")

    def get_servers(self, zone: Optional[str] = None) -> httpx.Response:
        """List upload servers, optionally limited to one zone (``eu``, ``na``)."""

        params = {"zone": zone} if zone else None
        return self._send("GET", self._url("/servers"), params=params, context={"zone": zone})

    def create_folder(self, parent_folder_id: str, folder_name: Optional[str] = None) -> httpx.Response:
        payload = folder_payload(parent_folder_id, folder_name)
        return self._send(
            "POST", self._url("/contents/createFolder"), json=payload, context=payload
        )

    def delete_content(self, content_ids: Sequence[str]) -> httpx.Response:
        payload = delete_payload(content_ids)
        return self._send("DELETE", self._url("/contents"), json=payload, context=payload)

    def update_content(self, content_id: str, update: AttributeUpdate) -> httpx.Response:
        _require("content_id", content_id)
        payload = update_payload(update)
        context: Dict[str, Any] = {"content_id": content_id, "attribute": update.attribute}
        return self._send(
            "PUT", self._url(f"/contents/{content_id}/update"), json=payload, context=context
        )

    def get_account_id(self) -> httpx.Response:
        return self._send("GET", self._url("/accounts/getid"))

    def get_account_info(self, account_id: str) -> httpx.Response:
        _require("account_id", account_id)
        return self._send(
            "GET", self._url(f"/accounts/{account_id}"), context={"account_id": account_id}
        )

    def upload_file(
        self,
        server: str,
        file_path: Union[str, "os.PathLike[str]"],
        folder_id: Optional[str] = None,
        callback: Optional[ProgressCallback] = None,
    ) -> httpx.Response:
        """Stream ``file_path`` to ``server`` as a multipart upload.

        The file is opened before the request is built, so a bad path raises
        :class:`~gofilepy.errors.FileOpenError` without touching the network.
        Uploads are never retried.
        """

        url = upload_server_url(server)
        stream = UploadStream(file_path, folder_id, callback)
        headers = self._headers(
            {
                "Content-Type": stream.content_type,
                "Content-Length": str(stream.content_length),
            }
        )
        logger.info("Starting upload: %s (%s bytes) -> %s", stream.file_name, stream.size, url)
        try:
            response = self.client.post(
                url, content=stream, headers=headers, timeout=self.config.upload_timeout
            )
        except httpx.TimeoutException as exc:
            logger.error("Upload timed out at %s", url)
            raise NetworkError(
                "Upload timed out", context={"url": url, "file": stream.file_name}
            ) from exc
        except (httpx.HTTPError, OSError, NetworkError) as exc:
            logger.error("Upload of %s to %s failed: %s", stream.file_name, url, exc)
            raise NetworkError(
                f"Upload failed: {exc}", context={"url": url, "file": stream.file_name}
            ) from exc
        finally:
            stream.close()

        logger.info("Upload finished: %s (HTTP %s)", stream.file_name, response.status_code)
        return response
