"""Virtual file system emulated over the ledger store."""

from .directory import Directory, decode_content, encode_content
from .registry import DEFAULT_ROOT, DirectoryRegistry

__all__ = [
    "Directory",
    "DirectoryRegistry",
    "DEFAULT_ROOT",
    "encode_content",
    "decode_content",
]
