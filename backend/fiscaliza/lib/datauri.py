from __future__ import annotations

import base64
import binascii
import mimetypes
import re

from ..errors import InvalidDataError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w-]+=[^;,]*)*)(?P<b64>;base64)?,(?P<data>.*)$", re.S)


def is_data_uri(value: str) -> bool:
    return bool(value) and value.startswith("data:")


def guess_mime(name: str, default: str = "application/octet-stream") -> str:
    mt, _ = mimetypes.guess_type(name)
    return mt or default


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(value: str) -> tuple[str, bytes]:
    """
    Split a self-describing data URI into (mime, payload bytes).
    Only base64 payloads are accepted; that is how photos and attachments travel.
    """
    m = _DATA_URI_RE.match(value or "")
    if not m or not m.group("b64"):
        raise InvalidDataError("Expected a base64 data URI")
    mime = m.group("mime") or "application/octet-stream"
    try:
        payload = base64.b64decode(m.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidDataError("Malformed base64 payload in data URI")
    return mime, payload
