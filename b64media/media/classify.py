from __future__ import annotations

import logging
import re

from ..utils.log import StructuredLogEmitter
from .codec import build_data_url, decode_probe_header
from .normalize import compact_whitespace, normalize_extension
from .schema import MediaCategory, MediaDescriptor
from .signatures import KNOWN_MIME_EXTENSIONS, match_signature

structured_log = StructuredLogEmitter(logger=logging.getLogger(__name__))

_DATA_URL_PATTERN = re.compile(r"^data:([a-zA-Z0-9]+/[a-zA-Z0-9.+-]+);base64,")


def _category_from_mime(mime: str) -> MediaCategory:
    """仅 video/audio 单独归类，其余（含未知类型）一律按 image 处理。"""
    if mime.startswith("video/"):
        return "video"
    if mime.startswith("audio/"):
        return "audio"
    return "image"


def _extension_for_declared_mime(mime: str) -> str:
    known = KNOWN_MIME_EXTENSIONS.get(mime.lower())
    if known:
        return known
    return normalize_extension(mime.split("/", 1)[1])


def _classify_declared(cleaned: str, mime: str) -> MediaDescriptor:
    return MediaDescriptor(
        src=cleaned,
        extension=_extension_for_declared_mime(mime),
        mime=mime,
        media_category=_category_from_mime(mime),
    )


def classify(raw: str) -> MediaDescriptor:
    """
    识别 base64 媒体的类型、扩展名与 MIME。

    规则：
    - 先移除所有空白字符；
    - 带 `data:<mime>;base64,` 头部时直接信任声明的 MIME，不做字节嗅探；
    - 否则解码前 32 个字符，按签名表顺序匹配，未命中（或头部非法）回退 image/png。

    不会抛出异常；返回的 `src` 总是合法 data URL。
    """
    cleaned = compact_whitespace(raw)

    match = _DATA_URL_PATTERN.match(cleaned)
    if match:
        descriptor = _classify_declared(cleaned, match.group(1))
        structured_log.debug(
            "media.classify",
            {"source": "data_url", "mime": descriptor.mime},
        )
        return descriptor

    try:
        header = decode_probe_header(cleaned)
    except ValueError as exc:
        structured_log.debug("media.probe_invalid", {"reason": str(exc)})
        header = b""

    rule = match_signature(header, cleaned)
    structured_log.debug(
        "media.classify",
        {"source": "signature", "rule": rule.name, "mime": rule.mime},
    )
    return MediaDescriptor(
        src=build_data_url(rule.mime, cleaned),
        extension=rule.extension,
        mime=rule.mime,
        media_category=rule.media_category,
    )
