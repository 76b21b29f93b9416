"""Request payloads for the Gofile content endpoints."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Dict, Optional, Sequence, Type, Union

from .errors import TypeMismatchError, UnsupportedAttributeError, ValidationError


def folder_payload(parent_folder_id: str, folder_name: Optional[str] = None) -> Dict[str, str]:
    """Body for ``POST /contents/createFolder``; Gofile names the folder if no name is given."""

    if not parent_folder_id:
        raise ValidationError("parent_folder_id is required")
    payload = {"parentFolderId": parent_folder_id}
    if folder_name:
        payload["folderName"] = folder_name
    return payload


def delete_payload(content_ids: Sequence[str]) -> Dict[str, str]:
    """Body for ``DELETE /contents``."""

    ids = [content_id for content_id in content_ids if content_id]
    if not ids:
        raise ValidationError("At least one content ID must be provided")
    if len(ids) != len(content_ids):
        raise ValidationError("Content IDs cannot be empty", context={"ids": list(content_ids)})
    return {"contentsId": ",".join(ids)}


def _require_str(attribute: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(attribute, "string", value)
    return value


_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC3339 timestamp into an aware datetime.

    Any number of fractional second digits is accepted; digits beyond
    microseconds are dropped. Raises :class:`ValueError` for anything else.
    """

    match = _RFC3339.fullmatch(text.strip())
    if not match:
        raise ValueError(f"not an RFC3339 timestamp: {text!r}")
    year, month, day, hour, minute, second = (int(part) for part in match.group(1, 2, 3, 4, 5, 6))
    fraction = match.group(7) or ""
    microsecond = int(fraction[:6].ljust(6, "0"))
    if match.group(8):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(match.group(10)), minutes=int(match.group(11)))
        tz = timezone(-offset if match.group(9) == "-" else offset)
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)


@dataclass(frozen=True)
class AttributeUpdate(ABC):
    """A new value for one content attribute."""

    attribute: ClassVar[str]
    value: Any

    @abstractmethod
    def encode(self) -> Any:
        """Return the JSON value sent as ``attributeValue``."""


@dataclass(frozen=True)
class NameUpdate(AttributeUpdate):
    attribute: ClassVar[str] = "name"
    value: str

    def encode(self) -> str:
        return _require_str(self.attribute, self.value)


@dataclass(frozen=True)
class DescriptionUpdate(AttributeUpdate):
    attribute: ClassVar[str] = "description"
    value: str

    def encode(self) -> str:
        return _require_str(self.attribute, self.value)


@dataclass(frozen=True)
class TagsUpdate(AttributeUpdate):
    """Tags are sent as a single comma separated string."""

    attribute: ClassVar[str] = "tags"
    value: Sequence[str]

    def encode(self) -> str:
        if isinstance(self.value, (str, bytes)) or not isinstance(self.value, (list, tuple)):
            raise TypeMismatchError(self.attribute, "sequence of strings", self.value)
        for tag in self.value:
            if not isinstance(tag, str):
                raise TypeMismatchError(self.attribute, "sequence of strings", tag)
        return ",".join(self.value)


@dataclass(frozen=True)
class PublicUpdate(AttributeUpdate):
    attribute: ClassVar[str] = "public"
    value: bool

    def encode(self) -> bool:
        if not isinstance(self.value, bool):
            raise TypeMismatchError(self.attribute, "boolean", self.value)
        return self.value


@dataclass(frozen=True)
class ExpiryUpdate(AttributeUpdate):
    """Expiry accepts an RFC3339 timestamp or an aware datetime; Gofile wants epoch seconds."""

    attribute: ClassVar[str] = "expiry"
    value: Union[str, datetime]

    def encode(self) -> int:
        expected = "string in RFC3339 format"
        moment = self.value
        if isinstance(moment, str):
            try:
                moment = parse_rfc3339(moment)
            except ValueError as exc:
                raise TypeMismatchError(self.attribute, expected, self.value) from exc
        if not isinstance(moment, datetime) or moment.tzinfo is None:
            raise TypeMismatchError(self.attribute, expected, self.value)
        return int(moment.timestamp())


@dataclass(frozen=True)
class PasswordUpdate(AttributeUpdate):
    attribute: ClassVar[str] = "password"
    value: str

    def encode(self) -> str:
        return _require_str(self.attribute, self.value)


ATTRIBUTE_UPDATES: Dict[str, Type[AttributeUpdate]] = {
    cls.attribute: cls
    for cls in (
        NameUpdate,
        DescriptionUpdate,
        TagsUpdate,
        PublicUpdate,
        ExpiryUpdate,
        PasswordUpdate,
    )
}


def attribute_update(attribute: str, value: Any) -> AttributeUpdate:
    """Build the update for ``attribute`` and check the value's type."""

    try:
        update_cls = ATTRIBUTE_UPDATES[attribute]
    except KeyError:
        raise UnsupportedAttributeError(attribute) from None
    update = update_cls(value)
    update.encode()
    return update


def update_payload(update: AttributeUpdate) -> Dict[str, Any]:
    """Body for ``PUT /contents/{id}/update``."""

    return {"attribute": update.attribute, "attributeValue": update.encode()}
