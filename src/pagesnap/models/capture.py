"""Result model for a single screenshot capture."""

from __future__ import annotations

import base64
import html
from dataclasses import dataclass

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class CapturedImage:
    """A full-page screenshot, base64 encoded.

    Attributes:
        data: Base64 text of the image bytes.
        url: The URL the screenshot was taken of.
        media_type: MIME type of the decoded image.
        encoding: Transfer encoding of ``data``.
    """

    data: str
    url: str = ""
    media_type: str = "image/png"
    encoding: str = "base64"

    @classmethod
    def from_png(cls, png_bytes: bytes, url: str = "") -> "CapturedImage":
        return cls(data=base64.b64encode(png_bytes).decode("ascii"), url=url)

    def to_bytes(self) -> bytes:
        """Decode ``data`` back into raw image bytes."""
        return base64.b64decode(self.data)

    @property
    def is_png(self) -> bool:
        return self.to_bytes().startswith(PNG_SIGNATURE)

    @property
    def data_uri(self) -> str:
        return f"data:{self.media_type};{self.encoding},{self.data}"

    def to_html(self) -> str:
        """Render as the ``<img>`` fragment served by ``GET /screenshot``."""
        return f'<img src="{html.escape(self.data_uri, quote=True)}">'
