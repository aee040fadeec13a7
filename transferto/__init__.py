from .client import TransfertoClient, create
from .errors import ResponseParseError, TransfertoClientError, TransfertoError, TransportError
from .parser import txt_to_dict

__all__ = [
    "TransfertoClient",
    "create",
    "TransfertoClientError",
    "TransfertoError",
    "TransportError",
    "ResponseParseError",
    "txt_to_dict",
]
