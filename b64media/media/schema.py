from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MediaCategory = Literal["image", "video", "audio"]


@dataclass(frozen=True, slots=True)
class MediaDescriptor:
    src: str
    """完整 data URL：`data:<mime>;base64,<payload>`。"""
    extension: str
    """小写短扩展名（不带点），如 `jpg`、`mp3`。"""
    mime: str
    """识别出的 MIME。"""
    media_category: MediaCategory
    """粗分类，用于决定展示方式与可用的元数据字段。"""


@dataclass(frozen=True, slots=True)
class DecodedMedia:
    descriptor: MediaDescriptor
    size_bytes: int
    """按 base64 长度估算的原始字节数"""
    size_text: str
    """可读的体积文本，如 `1.5 KB`"""


@dataclass(frozen=True, slots=True)
class EncodedMedia:
    data_url: str
    extension: str
    mime: str
    media_category: MediaCategory
    size_bytes: int
    size_text: str

    def to_metadata_dict(self) -> dict[str, object]:
        """转换为可安全写入 JSON 的摘要信息。"""
        return {
            "extension": self.extension,
            "mime": self.mime,
            "media_category": self.media_category,
            "size_bytes": self.size_bytes,
            "size_text": self.size_text,
        }


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    width: int
    height: int
    ratio: str
    """约分后的宽高比，如 `16:9`"""
