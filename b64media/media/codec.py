from __future__ import annotations

import base64
import binascii
import re
from typing import NamedTuple
from urllib.parse import unquote_to_bytes

from .normalize import compact_whitespace, normalize_mime

PROBE_WINDOW = 32
"""签名探测窗口：解码前 32 个 base64 字符（约 24 字节）。"""

_BASE64_ALPHABET = re.compile(r"^[A-Za-z0-9+/]*$")


def decode_probe_header(cleaned: str) -> bytes:
    """
    宽松解码 base64 头部用于签名嗅探。

    行为与浏览器 `atob` 一致：允许省略末尾 `=`；长度模 4 余 1 或出现字母表外字符视为失败。
    失败时抛出 ValueError，由调用方决定如何降级。
    """
    chunk = cleaned[:PROBE_WINDOW]
    if len(chunk) % 4 == 0:
        if chunk.endswith("=="):
            chunk = chunk[:-2]
        elif chunk.endswith("="):
            chunk = chunk[:-1]
    if len(chunk) % 4 == 1 or not _BASE64_ALPHABET.match(chunk):
        raise ValueError("base64 probe header is invalid.")
    padded = chunk + "=" * (-len(chunk) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ValueError("base64 probe header is invalid.") from exc


def decode_base64_payload(value: str) -> bytes:
    """base64 => bytes 同时校验 value 是否有效"""
    normalized = compact_whitespace(value)
    if not normalized:
        raise ValueError("base64 payload is empty.")
    try:
        return base64.b64decode(normalized, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ValueError("base64 payload is invalid.") from exc


def encode_base64_payload(data: bytes) -> str:
    """bytes => base64"""
    return base64.b64encode(data).decode("ascii")


class DataUrlHeader(NamedTuple):
    mime: str
    is_base64: bool
    payload: str


def parse_data_url_header(data_url: str) -> DataUrlHeader:
    """解析 data url 头部"""
    normalized_data_url = data_url.strip()
    if not normalized_data_url.startswith("data:"):
        raise ValueError("data_url must start with 'data:'.")

    # data:[meta],[payload]，meta 形如 image/png;charset=utf-8;base64
    header_and_data = normalized_data_url.removeprefix("data:")
    try:
        meta, payload = header_and_data.split(",", 1)
    except ValueError as exc:
        raise ValueError("data_url is invalid.") from exc

    tokens = [segment.strip() for segment in meta.split(";") if segment.strip()]
    is_base64 = any(token.lower() == "base64" for token in tokens)

    mime = ""
    if tokens:
        first = tokens[0]
        if "/" in first and "=" not in first and first.lower() != "base64":
            mime = normalize_mime(first)

    return DataUrlHeader(mime=mime, is_base64=is_base64, payload=payload)


def data_url_to_bytes(data_url: str) -> bytes:
    """将 data URL 转换为原始字节，兼容 base64 与百分号编码两种负载。"""
    header = parse_data_url_header(data_url)
    if header.is_base64:
        return decode_base64_payload(header.payload)
    return unquote_to_bytes(header.payload)


def build_data_url(mime: str, base64_payload: str) -> str:
    """根据 MIME 与 base64 负载组装 data URL。"""
    normalized_mime = normalize_mime(mime)
    if not normalized_mime:
        raise ValueError("mime is required to build data URL.")
    return f"data:{normalized_mime};base64,{base64_payload}"
