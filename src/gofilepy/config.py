"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError

DEFAULT_BASE_URL = "https://api.gofile.io"
TOKEN_ENV_VAR = "GOFILE_TOKEN"
DEFAULT_RETRY_COUNT = 3
DEFAULT_TIMEOUT = 60.0
DEFAULT_RETRY_BACKOFF = 1.0


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settings shared by every request a client issues.

    ``timeout`` applies to regular API calls. Uploads use ``upload_timeout``
    instead (``None`` means no limit) since large files legitimately take
    longer than a metadata call.
    """

    token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    retry_count: int = DEFAULT_RETRY_COUNT
    timeout: float = DEFAULT_TIMEOUT
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    upload_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.retry_count < 0:
            raise ValidationError(
                "retry_count cannot be negative", context={"retry_count": self.retry_count}
            )
        if self.timeout <= 0:
            raise ValidationError(
                "timeout must be positive", context={"timeout": self.timeout}
            )
        if self.upload_timeout is not None and self.upload_timeout <= 0:
            raise ValidationError(
                "upload_timeout must be positive or None",
                context={"upload_timeout": self.upload_timeout},
            )

    @classmethod
    def from_env(
        cls,
        token: Optional[str] = None,
        *,
        retry_count: Optional[int] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ) -> "ClientConfig":
        """Build a config, falling back to ``GOFILE_TOKEN`` for the token."""

        return cls(
            token=token or os.environ.get(TOKEN_ENV_VAR) or None,
            base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
            retry_count=DEFAULT_RETRY_COUNT if retry_count is None else retry_count,
            timeout=DEFAULT_TIMEOUT if timeout is None else float(timeout),
        )

    @property
    def masked_token(self) -> str:
        """Return the token in a form that is safe to log."""

        if not self.token:
            return "<none>"
        return f"{self.token[:4]}***"
