"""Shared test helpers for gofilepy tests."""

from __future__ import annotations

import re
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
from requests_toolbelt.multipart.decoder import MultipartDecoder

Responder = Union[Dict[str, Any], Callable[[httpx.Request], httpx.Response]]


class MockGofile:
    """Fake Gofile API for ``httpx.MockTransport``, routed by method and path."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Tuple[Responder, int]] = {}
        self._lock = threading.Lock()

    def route(
        self, method: str, path: str, responder: Responder, *, status_code: int = 200
    ) -> None:
        self.routes[(method, path)] = (responder, status_code)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        entry = self.routes.get((request.method, request.url.path))
        if entry is None:
            return httpx.Response(404, json={"status": "error-notFound", "data": {}})
        responder, status_code = entry
        if callable(responder):
            return responder(request)
        return httpx.Response(status_code, json=responder)


class MultipartPart:
    def __init__(self, name: str, filename: Optional[str], content: bytes) -> None:
        self.name = name
        self.filename = filename
        self.content = content


def parse_multipart(body: bytes, content_type: str) -> List[MultipartPart]:
    """Decode a multipart body into parts, in wire order."""

    parts = []
    for part in MultipartDecoder(body, content_type).parts:
        disposition = part.headers[b"Content-Disposition"].decode()
        name = re.search(r'; name="([^"]*)"', disposition)
        filename = re.search(r'; filename="([^"]*)"', disposition)
        parts.append(
            MultipartPart(
                name=name.group(1) if name else "",
                filename=filename.group(1) if filename else None,
                content=part.content,
            )
        )
    return parts


def parse_request_parts(request: httpx.Request) -> List[MultipartPart]:
    return parse_multipart(request.content, request.headers["Content-Type"])


def upload_echo(request: httpx.Request) -> httpx.Response:
    """Answer an upload like Gofile does, describing the file part received."""

    parts = {part.name: part for part in parse_request_parts(request)}
    file_part = parts["file"]
    folder = parts.get("folderId")
    return httpx.Response(
        200,
        json={
            "status": "ok",
            "data": {
                "id": f"id-{file_part.filename}",
                "name": file_part.filename,
                "size": len(file_part.content),
                "parentFolder": folder.content.decode() if folder else "",
                "downloadPage": f"https://gofile.io/d/{file_part.filename}",
                "servers": [request.url.host.split(".")[0]],
                "type": "file",
            },
        },
    )
