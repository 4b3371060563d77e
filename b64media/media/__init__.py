from .classify import classify
from .dimensions import probe_image_dimensions
from .encode import encode_media_bytes, encode_media_file
from .save import save_base64_text, save_media
from .schema import (
    DecodedMedia,
    EncodedMedia,
    ImageDimensions,
    MediaCategory,
    MediaDescriptor,
)
from .source import MediaSource

__all__ = [
    "DecodedMedia",
    "EncodedMedia",
    "ImageDimensions",
    "MediaCategory",
    "MediaDescriptor",
    "MediaSource",
    "classify",
    "encode_media_bytes",
    "encode_media_file",
    "probe_image_dimensions",
    "save_base64_text",
    "save_media",
]
