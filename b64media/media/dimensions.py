from __future__ import annotations

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..utils.formatting import aspect_ratio
from .codec import data_url_to_bytes
from .schema import ImageDimensions, MediaDescriptor


def probe_image_dimensions(image_bytes: bytes) -> ImageDimensions | None:
    """
    用 Pillow 读取图片宽高并计算宽高比。

    Pillow 无法识别的格式（例如 SVG）返回 None，不会抛出异常。
    """
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    return ImageDimensions(
        width=width,
        height=height,
        ratio=aspect_ratio(width, height),
    )


def inspect_descriptor_dimensions(descriptor: MediaDescriptor) -> ImageDimensions | None:
    """仅对 image 分类解码负载并读取尺寸；负载非法时返回 None。"""
    if descriptor.media_category != "image":
        return None
    try:
        image_bytes = data_url_to_bytes(descriptor.src)
    except ValueError:
        return None
    return probe_image_dimensions(image_bytes)
