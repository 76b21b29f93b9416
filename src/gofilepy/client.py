"""High level client for the Gofile API."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional, TypeVar, Union

import httpx

from .config import ClientConfig
from .errors import DecodeError, GofileError
from .models import (
    AccountIdResponse,
    AccountInfoResponse,
    DeleteContentResponse,
    FolderResponse,
    ServersResponse,
    UpdateContentResponse,
    UploadFileResponse,
)
from .payloads import AttributeUpdate, attribute_update
from .transport import GofileTransport
from .utils import ProgressCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GofileClient:
    """Typed wrapper around Gofile's REST endpoints.

    Responses are decoded into the records from :mod:`gofilepy.models`. The
    remote ``status`` is passed through untouched: a response whose status is
    ``"error-..."`` is returned, not raised, so check ``response.ok``.

    Example:
        with GofileClient(token="...") as client:
            server = client.get_server("eu")
            root = client.get_root_folder()
            result = client.upload_file(server, "report.pdf", root)
            print(result.download_page)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        retry_count: Optional[int] = None,
        timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Instantiate the client; ``token`` defaults to ``$GOFILE_TOKEN``."""

        self.config = config or ClientConfig.from_env(
            token, retry_count=retry_count, timeout=timeout
        )
        self.transport = GofileTransport(self.config, http_client=http_client)

    def __enter__(self) -> "GofileClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""

        self.transport.close()

    @property
    def token(self) -> Optional[str]:
        return self.config.token

    def _decode(
        self, response: httpx.Response, factory: Callable[[Dict[str, Any]], T]
    ) -> T:
        """Parse the response body as a JSON object and build the typed record."""

        try:
            document = response.json()
        except ValueError as exc:  # httpx raises ValueError for invalid JSON
            logger.debug("Failed to parse JSON: %s", response.text.strip()[:200])
            raise DecodeError(
                "Invalid JSON returned by Gofile API",
                context={"status_code": response.status_code, "url": str(response.url)},
            ) from exc

        logger.debug("Response body: %s", document)
        if not isinstance(document, dict):
            raise DecodeError(
                "Gofile API returned unexpected payload structure",
                context={"status_code": response.status_code, "url": str(response.url)},
            )
        result = factory(document)
        if document.get("status") != "ok":
            logger.debug("Gofile reported status %r", document.get("status"))
        return result

    def get_servers(self, zone: Optional[str] = None) -> ServersResponse:
        """Return the upload servers, optionally restricted to a zone (``eu``, ``na``)."""

        return self._decode(self.transport.get_servers(zone), ServersResponse.from_data)

    def get_server(self, zone: Optional[str] = None) -> str:
        """Return the name of the first upload server offered for ``zone``."""

        servers = self.get_servers(zone)
        candidates = servers.servers or servers.servers_all_zone
        if not candidates:
            raise GofileError(
                "No upload server available",
                context={"zone": zone, "status": servers.status},
            )
        logger.debug("Selected upload server %s (%s)", candidates[0].name, candidates[0].zone)
        return candidates[0].name

    def create_folder(
        self, parent_folder_id: str, folder_name: Optional[str] = None
    ) -> FolderResponse:
        """Create a folder under the provided parent folder."""

        logger.debug("Creating folder '%s' in '%s'", folder_name, parent_folder_id)
        return self._decode(
            self.transport.create_folder(parent_folder_id, folder_name),
            FolderResponse.from_data,
        )

    def delete_content(self, *content_ids: str) -> DeleteContentResponse:
        """Delete one or more files or folders by their content IDs."""

        logger.debug("Deleting content IDs: %s", content_ids)
        return self._decode(
            self.transport.delete_content(list(content_ids)),
            DeleteContentResponse.from_data,
        )

    def update_content(
        self,
        content_id: str,
        attribute: Union[str, AttributeUpdate],
        value: Any = None,
    ) -> UpdateContentResponse:
        """Change one attribute of a file or folder.

        ``attribute`` is either an :class:`~gofilepy.payloads.AttributeUpdate`
        or one of these names with a value of the matching type:

        - ``name``, ``description``, ``password``: str
        - ``tags``: list of str
        - ``public``: bool
        - ``expiry``: RFC3339 str (or an aware datetime)
        """

        if isinstance(attribute, AttributeUpdate):
            update = attribute
        else:
            update = attribute_update(attribute, value)
        logger.debug("Updating %s of %s", update.attribute, content_id)
        return self._decode(
            self.transport.update_content(content_id, update),
            UpdateContentResponse.from_data,
        )

    def get_account_id(self) -> AccountIdResponse:
        return self._decode(self.transport.get_account_id(), AccountIdResponse.from_data)

    def get_account_info(self, account_id: str) -> AccountInfoResponse:
        """Fetch account details; this is where the root folder ID comes from."""

        return self._decode(
            self.transport.get_account_info(account_id), AccountInfoResponse.from_data
        )

    def get_root_folder(self) -> str:
        """Resolve the authenticated account's root folder ID."""

        account = self.get_account_id()
        if not account.ok or not account.id:
            raise GofileError(
                "Could not resolve account ID", context={"status": account.status}
            )
        info = self.get_account_info(account.id)
        if not info.ok or not info.root_folder:
            raise GofileError(
                "Could not resolve root folder", context={"status": info.status}
            )
        return info.root_folder

    def upload_file(
        self,
        server: str,
        file_path: Union[str, "os.PathLike[str]"],
        folder_id: Optional[str] = None,
        callback: Optional[ProgressCallback] = None,
    ) -> UploadFileResponse:
        """Upload a local file to ``server``.

        ``callback`` is called from the upload thread with
        ``(bytes_done, total_bytes)`` after every read of the file. Keep it
        cheap; the upload waits for it.
        """

        response = self.transport.upload_file(server, file_path, folder_id, callback)
        return self._decode(response, UploadFileResponse.from_data)
