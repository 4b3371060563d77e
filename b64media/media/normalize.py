from __future__ import annotations

import re

# 与 JS 的 `\s` 对齐：Python 的 str.split 不把 BOM 视为空白
_WHITESPACE_PATTERN = re.compile(r"[\s\ufeff]+")

EXTENSION_ALIASES: dict[str, str] = {
    "jpeg": "jpg",
    "svg+xml": "svg",
    "x-icon": "ico",
    "mpeg": "mp3",
    "x-m4a": "m4a",
}


def compact_whitespace(value: str) -> str:
    """移除字符串中的所有空白字符（含 BOM）。"""
    return _WHITESPACE_PATTERN.sub("", value)


def normalize_mime(value: str) -> str:
    """规范化 MIME：去除首尾空白并转小写。"""
    return value.strip().lower()


def normalize_extension(value: str) -> str:
    """规范化扩展名：去掉前导点、转小写，并按别名表映射为常用短名。"""
    normalized = value.strip().lower().removeprefix(".")
    return EXTENSION_ALIASES.get(normalized, normalized)


def extension_from_mime(mime: str, default_extension: str = "") -> str:
    """取 MIME 子类型作为扩展名（经别名表归一化）。"""
    normalized = normalize_mime(mime)
    if "/" not in normalized:
        return default_extension
    subtype = normalized.split("/", 1)[1].split(";", 1)[0]
    return normalize_extension(subtype) or default_extension
