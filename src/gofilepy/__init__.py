# __init__.py
# Author: Garnajee
# License: MIT

from .client import GofileClient
from .config import ClientConfig
from .errors import (
	DecodeError,
	FileOpenError,
	GofileError,
	NetworkError,
	TypeMismatchError,
	UnsupportedAttributeError,
	ValidationError,
)
from .models import (
	AccountIdResponse,
	AccountInfoResponse,
	AccountStats,
	DeleteContentResponse,
	FolderResponse,
	ServerInfo,
	ServersResponse,
	UpdateContentResponse,
	UploadFileResponse,
)
from .payloads import (
	AttributeUpdate,
	DescriptionUpdate,
	ExpiryUpdate,
	NameUpdate,
	PasswordUpdate,
	PublicUpdate,
	TagsUpdate,
)
from .streamer import UploadStream

__version__ = "2.0.0"
__all__ = [
	"GofileClient",
	"ClientConfig",
	"UploadStream",
	"GofileError",
	"FileOpenError",
	"NetworkError",
	"DecodeError",
	"ValidationError",
	"TypeMismatchError",
	"UnsupportedAttributeError",
	"AccountIdResponse",
	"AccountInfoResponse",
	"AccountStats",
	"DeleteContentResponse",
	"FolderResponse",
	"ServerInfo",
	"ServersResponse",
	"UpdateContentResponse",
	"UploadFileResponse",
	"AttributeUpdate",
	"NameUpdate",
	"DescriptionUpdate",
	"TagsUpdate",
	"PublicUpdate",
	"ExpiryUpdate",
	"PasswordUpdate",
]
