from __future__ import annotations

import logging
import mimetypes
from pathlib import Path, PurePosixPath

import filetype

from ..utils.errors import MediaErrorCode, MediaException
from ..utils.formatting import estimate_base64_size, format_bytes
from ..utils.log import StructuredLogEmitter
from .codec import build_data_url, encode_base64_payload
from .normalize import extension_from_mime, normalize_mime
from .schema import EncodedMedia, MediaCategory

structured_log = StructuredLogEmitter(logger=logging.getLogger(__name__))

DEFAULT_MIME = "application/octet-stream"
DEFAULT_EXTENSION = "dat"

# 部分音频文件在系统中缺少 MIME 登记，按扩展名放行。
AUDIO_FALLBACK_EXTENSIONS = frozenset({"mp3", "wav", "flac", "aac", "ogg", "wma", "m4a"})
_MEDIA_MIME_PREFIXES = ("image/", "video/", "audio/")


def _filename_extension(filename: str) -> str:
    return PurePosixPath(filename).suffix.removeprefix(".")


def resolve_upload_mime(data: bytes, *, filename: str = "", declared_mime: str = "") -> str:
    """
    解析上传内容的 MIME。

    优先级：显式声明 > 文件名推断 > 字节嗅探 > application/octet-stream。
    """
    mime = normalize_mime(declared_mime)
    if mime:
        return mime
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return normalize_mime(guessed)
    kind = filetype.guess(data)
    if kind is not None and kind.mime:
        return normalize_mime(kind.mime)
    return DEFAULT_MIME


def _ensure_media_upload(mime: str, filename: str) -> None:
    if mime.startswith(_MEDIA_MIME_PREFIXES):
        return
    extension = _filename_extension(filename).lower()
    if extension and extension in AUDIO_FALLBACK_EXTENSIONS:
        return
    raise MediaException(
        code=MediaErrorCode.UNSUPPORTED_MEDIA,
        message="Please upload a valid image, video, or audio file.",
        detail={"filename": filename, "mime": mime},
    )


def _upload_category(mime: str, filename: str) -> MediaCategory:
    category: MediaCategory = "image"
    if mime.startswith("video/"):
        category = "video"
    if mime.startswith("audio/"):
        category = "audio"
    # MIME 缺失但扩展名明确是音频
    if category == "image" and filename.endswith((".mp3", ".wav")):
        category = "audio"
    return category


def encode_media_bytes(
    data: bytes,
    *,
    filename: str = "",
    declared_mime: str = "",
) -> EncodedMedia:
    """将媒体字节编码为 data URL，并附带扩展名、MIME、分类与体积信息。"""
    mime = resolve_upload_mime(data, filename=filename, declared_mime=declared_mime)
    _ensure_media_upload(mime, filename)

    data_url = build_data_url(mime, encode_base64_payload(data))
    size_bytes = estimate_base64_size(data_url)
    encoded = EncodedMedia(
        data_url=data_url,
        extension=_filename_extension(filename)
        or extension_from_mime(mime, DEFAULT_EXTENSION),
        mime=mime,
        media_category=_upload_category(mime, filename),
        size_bytes=size_bytes,
        size_text=format_bytes(size_bytes),
    )
    structured_log.debug("media.encode", encoded.to_metadata_dict())
    return encoded


def encode_media_file(path: str | Path, *, declared_mime: str = "") -> EncodedMedia:
    """读取本地文件并编码为 data URL。"""
    file_path = Path(path)
    return encode_media_bytes(
        file_path.read_bytes(),
        filename=file_path.name,
        declared_mime=declared_mime,
    )
