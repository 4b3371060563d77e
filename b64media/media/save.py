from __future__ import annotations

import logging
import time
from pathlib import Path

from ..utils.log import StructuredLogEmitter
from .codec import data_url_to_bytes
from .schema import MediaDescriptor

structured_log = StructuredLogEmitter(logger=logging.getLogger(__name__))


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def save_file(path: Path, content: bytes | str, encoding: str = "utf-8") -> Path:
    """将内容保存到指定路径，自动创建父目录并返回目标路径。"""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding=encoding)
    return path


def save_media(
    descriptor: MediaDescriptor,
    target_dir: Path,
    *,
    filename_stem: str | None = None,
    prefix: str = "file",
) -> Path:
    """
    解码 descriptor 的负载并写入 `<prefix>-<毫秒时间戳>.<ext>`。

    负载不是合法 base64 时抛出 ValueError。
    """
    content = data_url_to_bytes(descriptor.src)
    stem = filename_stem or f"{prefix}-{_epoch_ms()}"
    output_path = save_file(target_dir / f"{stem}.{descriptor.extension}", content)
    structured_log.info(
        "media.save",
        {"path": str(output_path), "mime": descriptor.mime, "size": len(content)},
    )
    return output_path


def save_base64_text(
    text: str,
    target_dir: Path,
    *,
    extension: str = "",
) -> Path:
    """保存 base64 文本，文件名形如 `PNG_Base64-<毫秒时间戳>.txt`。"""
    name = f"{extension.upper()}_Base64" if extension else "Base64_Output"
    output_path = save_file(target_dir / f"{name}-{_epoch_ms()}.txt", text)
    structured_log.info(
        "media.save",
        {"path": str(output_path), "mime": "text/plain", "size": len(text)},
    )
    return output_path
