from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Literal
from urllib.parse import urlparse

from ..utils.http import get_bytes
from ..utils.url import is_http_url
from .encode import DEFAULT_MIME, encode_media_bytes
from .normalize import normalize_mime
from .schema import EncodedMedia

MediaSourceKind = Literal["file", "http_url"]


def _ensure_max_bytes(data: bytes, max_bytes: int | None) -> None:
    if max_bytes is None:
        return
    if max_bytes <= 0:
        raise ValueError("max_bytes must be > 0.")
    if len(data) > max_bytes:
        raise ValueError(f"media data exceeds max_bytes: {len(data)} > {max_bytes}.")


@dataclass(slots=True)
class MediaSource:
    """待编码的媒体来源：本地文件或 http(s) URL。"""

    kind: MediaSourceKind
    raw: str
    mime: str = ""
    """声明的 MIME，可为空；为空时按文件名与字节内容推断。"""

    def __post_init__(self) -> None:
        if not isinstance(self.raw, str):
            raise TypeError("raw must be str.")
        normalized_raw = self.raw.strip()
        if not normalized_raw:
            raise ValueError("raw media source must not be empty.")

        if self.kind == "http_url":
            if not is_http_url(normalized_raw):
                raise ValueError("http_url source must be a valid http(s) URL.")
        elif self.kind == "file":
            if not Path(normalized_raw).is_file():
                raise ValueError(f"file source does not exist: {normalized_raw}")
        else:
            raise ValueError(f"unsupported media source kind: {self.kind}")

        self.raw = normalized_raw
        self.mime = normalize_mime(self.mime)

    @classmethod
    def from_file(cls, path: str | Path, *, mime: str = "") -> MediaSource:
        return cls(kind="file", raw=str(path), mime=mime)

    @classmethod
    def from_http_url(cls, url: str, *, mime: str = "") -> MediaSource:
        return cls(kind="http_url", raw=url, mime=mime)

    @classmethod
    def from_raw(cls, raw: str, *, mime: str = "") -> MediaSource:
        """自动识别 http_url / file。"""
        if is_http_url(raw.strip()):
            return cls.from_http_url(raw, mime=mime)
        return cls.from_file(raw, mime=mime)

    @property
    def filename(self) -> str:
        if self.kind == "http_url":
            return PurePosixPath(urlparse(self.raw).path).name
        return Path(self.raw).name

    async def load_bytes(
        self,
        *,
        max_bytes: int | None = None,
        timeout_sec: int = 60,
    ) -> tuple[bytes, str]:
        """读取原始字节，返回 `(data, declared_mime)`。"""
        if self.kind == "http_url":
            res = await get_bytes(url=self.raw, timeout_sec=timeout_sec)
            data = res["data"]
            loaded_mime = res["mime"]
            # 通用二进制类型不携带信息，交给文件名与字节嗅探
            if loaded_mime == DEFAULT_MIME:
                loaded_mime = ""
            declared_mime = self.mime or loaded_mime
        else:
            data = Path(self.raw).read_bytes()
            declared_mime = self.mime

        _ensure_max_bytes(data, max_bytes)
        return data, declared_mime

    async def to_encoded_media(
        self,
        *,
        max_bytes: int | None = None,
        timeout_sec: int = 60,
    ) -> EncodedMedia:
        data, declared_mime = await self.load_bytes(
            max_bytes=max_bytes,
            timeout_sec=timeout_sec,
        )
        return encode_media_bytes(
            data,
            filename=self.filename,
            declared_mime=declared_mime,
        )
