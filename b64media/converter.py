from __future__ import annotations

import logging
from pathlib import Path

from .config import ConverterConfig
from .media.classify import classify
from .media.dimensions import inspect_descriptor_dimensions
from .media.encode import encode_media_file
from .media.normalize import compact_whitespace
from .media.save import save_base64_text, save_media
from .media.schema import DecodedMedia, EncodedMedia, ImageDimensions
from .media.source import MediaSource
from .utils.errors import MediaErrorCode, MediaException
from .utils.formatting import estimate_base64_size, format_bytes
from .utils.log import StructuredLogEmitter

structured_log = StructuredLogEmitter(logger=logging.getLogger(__name__))


class MediaConverter:
    """base64 与媒体文件之间的双向转换入口，负责输入校验与面向用户的错误信息。"""

    def __init__(self, config: ConverterConfig) -> None:
        self.config = config

    def decode(self, raw: str) -> DecodedMedia:
        """识别 base64 文本对应的媒体，并估算体积。"""
        if not compact_whitespace(raw):
            raise MediaException(
                code=MediaErrorCode.EMPTY_INPUT,
                message="Please enter a Base64 string first.",
            )
        descriptor = classify(raw)
        size_bytes = estimate_base64_size(descriptor.src)
        decoded = DecodedMedia(
            descriptor=descriptor,
            size_bytes=size_bytes,
            size_text=format_bytes(size_bytes),
        )
        structured_log.info(
            "converter.decode",
            {
                "mime": descriptor.mime,
                "extension": descriptor.extension,
                "media_category": descriptor.media_category,
                "size_bytes": size_bytes,
            },
        )
        return decoded

    def dimensions(self, decoded: DecodedMedia) -> ImageDimensions | None:
        return inspect_descriptor_dimensions(decoded.descriptor)

    def save(self, decoded: DecodedMedia) -> Path:
        """将解码结果写入输出目录。"""
        try:
            return save_media(
                decoded.descriptor,
                self.config.output_dir,
                prefix=self.config.media_filename_prefix,
            )
        except ValueError as exc:
            raise MediaException(
                code=MediaErrorCode.INVALID_BASE64,
                message="Failed to process Base64 string.",
                detail={"mime": decoded.descriptor.mime, "reason": str(exc)},
            ) from exc

    def save_text(self, text: str, extension: str = "") -> Path:
        if not text:
            raise MediaException(
                code=MediaErrorCode.EMPTY_INPUT,
                message="There is no Base64 text to save.",
            )
        return save_base64_text(text, self.config.output_dir, extension=extension)

    def decode_text_file(self, path: str | Path) -> DecodedMedia:
        """读取保存的 base64 文本文件（可带 BOM）并识别。"""
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise MediaException(
                code=MediaErrorCode.INVALID_BASE64,
                message="Failed to read text file.",
                detail={"path": str(path), "reason": str(exc)},
            ) from exc
        return self.decode(text)

    def encode_file(self, path: str | Path) -> EncodedMedia:
        try:
            source = MediaSource.from_file(path)
            data_size = Path(source.raw).stat().st_size
        except (ValueError, OSError) as exc:
            raise MediaException(
                code=MediaErrorCode.READ_ERROR,
                message="Failed to read file.",
                detail={"path": str(path), "reason": str(exc)},
            ) from exc
        if self.config.max_bytes is not None and data_size > self.config.max_bytes:
            raise MediaException(
                code=MediaErrorCode.UNSUPPORTED_MEDIA,
                message="File is too large to encode.",
                detail={"size": data_size, "max_bytes": self.config.max_bytes},
            )
        try:
            return encode_media_file(source.raw)
        except OSError as exc:
            raise MediaException(
                code=MediaErrorCode.READ_ERROR,
                message="Failed to read file.",
                detail={"path": str(path), "reason": str(exc)},
            ) from exc

    async def encode_source(self, source: MediaSource) -> EncodedMedia:
        try:
            return await source.to_encoded_media(
                max_bytes=self.config.max_bytes,
                timeout_sec=self.config.http_timeout_sec,
            )
        except ValueError as exc:
            raise MediaException(
                code=MediaErrorCode.UNSUPPORTED_MEDIA,
                message="File is too large to encode.",
                detail={"source": source.raw, "reason": str(exc)},
            ) from exc
