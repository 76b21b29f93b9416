"""Typed records for Gofile API responses.

Every record keeps the remote ``status`` verbatim. A status other than
``"ok"`` is not raised as an error here; check :attr:`ok` before trusting
the other fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _section(document: Dict[str, Any]) -> Dict[str, Any]:
    data = document.get("data")
    return data if isinstance(data, dict) else {}


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else _int(value)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class ServerInfo:
    """An upload server and the zone it belongs to."""

    name: str
    zone: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ServerInfo":
        return cls(name=str(data.get("name", "")), zone=str(data.get("zone", "")))


def _servers(items: Any) -> List[ServerInfo]:
    if not isinstance(items, list):
        return []
    return [ServerInfo.from_data(item) for item in items if isinstance(item, dict)]


@dataclass(frozen=True, slots=True)
class ServersResponse:
    """Result of ``GET /servers``."""

    status: str
    servers: List[ServerInfo]
    servers_all_zone: List[ServerInfo]
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "ServersResponse":
        data = _section(document)
        return cls(
            status=str(document.get("status", "")),
            servers=_servers(data.get("servers")),
            servers_all_zone=_servers(data.get("serversAllZone")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class AccountIdResponse:
    """Result of ``GET /accounts/getid``."""

    status: str
    id: str
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "AccountIdResponse":
        data = _section(document)
        return cls(
            status=str(document.get("status", "")),
            id=str(data.get("id", "")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class AccountStats:
    """Usage counters for the account's root folder."""

    folder_count: int = 0
    file_count: int = 0
    storage: int = 0

    @classmethod
    def from_data(cls, data: Any) -> "AccountStats":
        if not isinstance(data, dict):
            return cls()
        return cls(
            folder_count=_int(data.get("folderCount")),
            file_count=_int(data.get("fileCount")),
            storage=_int(data.get("storage")),
        )


@dataclass(frozen=True, slots=True)
class AccountInfoResponse:
    """Result of ``GET /accounts/{id}``. ``root_folder`` is where uploads usually go."""

    status: str
    id: str
    email: str
    tier: str
    token: str
    root_folder: str
    create_time: int
    ip_traffic_30: int
    stats_current: AccountStats
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "AccountInfoResponse":
        data = _section(document)
        return cls(
            status=str(document.get("status", "")),
            id=str(data.get("id", "")),
            email=str(data.get("email", "")),
            tier=str(data.get("tier", "")),
            token=str(data.get("token", "")),
            root_folder=str(data.get("rootFolder", "")),
            create_time=_int(data.get("createTime")),
            ip_traffic_30=_int(data.get("ipTraffic30")),
            stats_current=AccountStats.from_data(data.get("statsCurrent")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class FolderResponse:
    """Result of ``POST /contents/createFolder``."""

    status: str
    id: str
    owner: str
    type: str
    name: str
    parent_folder: str
    create_time: int
    mod_time: int
    code: str
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "FolderResponse":
        data = _section(document)
        return cls(
            status=str(document.get("status", "")),
            id=str(data.get("id", "")),
            owner=str(data.get("owner", "")),
            type=str(data.get("type", "folder")),
            name=str(data.get("name", "")),
            parent_folder=str(data.get("parentFolder", "")),
            create_time=_int(data.get("createTime")),
            mod_time=_int(data.get("modTime")),
            code=str(data.get("code", "")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class UploadFileResponse:
    """Result of an upload to ``https://{server}.gofile.io/contents/uploadfile``."""

    status: str
    id: str
    name: str
    download_page: str
    parent_folder: str
    parent_folder_code: str
    md5: str
    mimetype: str
    size: int
    servers: List[str]
    create_time: int
    mod_time: int
    type: str
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "UploadFileResponse":
        data = _section(document)
        servers = data.get("servers")
        return cls(
            status=str(document.get("status", "")),
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            download_page=str(data.get("downloadPage", "")),
            parent_folder=str(data.get("parentFolder", "")),
            parent_folder_code=str(data.get("parentFolderCode", "")),
            md5=str(data.get("md5", "")),
            mimetype=str(data.get("mimetype", "")),
            size=_int(data.get("size")),
            servers=[str(name) for name in servers] if isinstance(servers, list) else [],
            create_time=_int(data.get("createTime")),
            mod_time=_int(data.get("modTime")),
            type=str(data.get("type", "file")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class UpdateContentResponse:
    """Result of ``PUT /contents/{id}/update``.

    ``mimetype``, ``md5`` and ``size`` are only present for files.
    """

    status: str
    id: str
    type: str
    name: str
    parent_folder: str
    create_time: int
    mod_time: int
    mimetype: Optional[str]
    md5: Optional[str]
    size: Optional[int]
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "UpdateContentResponse":
        data = _section(document)
        return cls(
            status=str(document.get("status", "")),
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            name=str(data.get("name", "")),
            parent_folder=str(data.get("parentFolder", "")),
            create_time=_int(data.get("createTime")),
            mod_time=_int(data.get("modTime")),
            mimetype=_optional_str(data.get("mimetype")),
            md5=_optional_str(data.get("md5")),
            size=_optional_int(data.get("size")),
            raw=document,
        )


@dataclass(frozen=True, slots=True)
class DeleteContentResponse:
    """Result of ``DELETE /contents``: a status per deleted content ID."""

    status: str
    results: Dict[str, str]
    raw: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_data(cls, document: Dict[str, Any]) -> "DeleteContentResponse":
        results = {
            str(content_id): str(entry.get("status", ""))
            for content_id, entry in _section(document).items()
            if isinstance(entry, dict)
        }
        return cls(
            status=str(document.get("status", "")),
            results=results,
            raw=document,
        )
