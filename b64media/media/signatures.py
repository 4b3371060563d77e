from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .schema import MediaCategory

# 匹配函数签名：(decoded_header, cleaned_payload) -> 是否命中
SignatureMatcher = Callable[[bytes, str], bool]


@dataclass(frozen=True, slots=True)
class SignatureRule:
    name: str
    matches: SignatureMatcher
    mime: str
    extension: str
    media_category: MediaCategory


def _starts_with(prefix: bytes) -> SignatureMatcher:
    return lambda header, _: header.startswith(prefix)


def _at_offset(offset: int, tag: bytes) -> SignatureMatcher:
    return lambda header, _: header[offset : offset + len(tag)] == tag


def _riff(form_type: bytes) -> SignatureMatcher:
    return lambda header, _: header.startswith(b"RIFF") and header[8:12] == form_type


def _is_generic_ftyp(header: bytes, _: str) -> bool:
    return b"ftyp" in header and b"M4A" not in header


def _is_svg(header: bytes, cleaned: str) -> bool:
    # `<?xml` 分支检查的是未解码的 base64 文本
    return b"<svg" in header or (b"<?xml" in header and "svg" in cleaned)


# 顺序即优先级，先命中者胜出：ftypM4A 必须排在通用 ftyp 之前。
SIGNATURE_RULES: tuple[SignatureRule, ...] = (
    SignatureRule("mp3_id3", _starts_with(b"ID3"), "audio/mpeg", "mp3", "audio"),
    SignatureRule("mp3_frame", _starts_with(b"\xff\xfb"), "audio/mpeg", "mp3", "audio"),
    SignatureRule("flac", _starts_with(b"fLaC"), "audio/flac", "flac", "audio"),
    SignatureRule("ogg", _starts_with(b"OggS"), "audio/ogg", "ogg", "audio"),
    SignatureRule("m4a", _at_offset(4, b"ftypM4A"), "audio/mp4", "m4a", "audio"),
    SignatureRule(
        "wma",
        _starts_with(b"\x30\x26\xb2\x75\x8e\x66\xcf\x11"),
        "audio/x-ms-wma",
        "wma",
        "audio",
    ),
    SignatureRule("wav", _riff(b"WAVE"), "audio/wav", "wav", "audio"),
    SignatureRule("avi", _riff(b"AVI "), "video/x-msvideo", "avi", "video"),
    SignatureRule("webp", _riff(b"WEBP"), "image/webp", "webp", "image"),
    SignatureRule("mp4", _is_generic_ftyp, "video/mp4", "mp4", "video"),
    SignatureRule("webm", _starts_with(b"\x1a\x45\xdf\xa3"), "video/webm", "webm", "video"),
    # 只比对第 1~3 字节，不校验首字节 0x89
    SignatureRule("png", _at_offset(1, b"PNG"), "image/png", "png", "image"),
    SignatureRule("jpeg", _starts_with(b"\xff\xd8\xff"), "image/jpeg", "jpg", "image"),
    SignatureRule("gif", _starts_with(b"GIF8"), "image/gif", "gif", "image"),
    SignatureRule("bmp", _starts_with(b"BM"), "image/bmp", "bmp", "image"),
    SignatureRule("ico", _starts_with(b"\x00\x00\x01\x00"), "image/x-icon", "ico", "image"),
    SignatureRule("svg", _is_svg, "image/svg+xml", "svg", "image"),
)

FALLBACK_RULE = SignatureRule(
    "fallback", lambda header, _: True, "image/png", "png", "image"
)


def match_signature(header: bytes, cleaned: str) -> SignatureRule:
    """按固定顺序匹配签名表，全部未命中时返回 PNG 兜底规则。"""
    for rule in SIGNATURE_RULES:
        if rule.matches(header, cleaned):
            return rule
    return FALLBACK_RULE


# 已知 MIME => 扩展名，供 data URL 分支复用，保证 classify 对自身输出的 src 幂等。
KNOWN_MIME_EXTENSIONS: dict[str, str] = {
    rule.mime: rule.extension for rule in SIGNATURE_RULES
}
