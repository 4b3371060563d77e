from __future__ import annotations

import base64
from io import BytesIO

import pytest
from b64media.media import MediaDescriptor, classify
from PIL import Image


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _build_png_bytes() -> bytes:
    image = Image.new("RGB", (2, 2), (255, 0, 0))
    output = BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


def _build_jpeg_bytes() -> bytes:
    image = Image.new("RGB", (2, 2), (0, 255, 0))
    output = BytesIO()
    image.save(output, format="JPEG")
    return output.getvalue()


_PADDING = b"\x00" * 24

SIGNATURE_CASES = [
    (b"ID3\x03\x00\x00\x00\x00\x00\x0f" + _PADDING, "mp3", "audio/mpeg", "audio"),
    (b"\xff\xfb\x90\x64" + _PADDING, "mp3", "audio/mpeg", "audio"),
    (b"fLaC\x00\x00\x00\x22" + _PADDING, "flac", "audio/flac", "audio"),
    (b"OggS\x00\x02" + _PADDING, "ogg", "audio/ogg", "audio"),
    (b"\x00\x00\x00\x20ftypM4A \x00\x00\x00\x00" + _PADDING, "m4a", "audio/mp4", "audio"),
    (
        b"\x30\x26\xb2\x75\x8e\x66\xcf\x11\xa6\xd9" + _PADDING,
        "wma",
        "audio/x-ms-wma",
        "audio",
    ),
    (b"RIFF\x24\x08\x00\x00WAVEfmt " + _PADDING, "wav", "audio/wav", "audio"),
    (b"RIFF\x24\x08\x00\x00AVI LIST" + _PADDING, "avi", "video/x-msvideo", "video"),
    (b"RIFF\x24\x08\x00\x00WEBPVP8 " + _PADDING, "webp", "image/webp", "image"),
    (b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00" + _PADDING, "mp4", "video/mp4", "video"),
    (b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81" + _PADDING, "webm", "video/webm", "video"),
    (b"\x89PNG\r\n\x1a\n" + _PADDING, "png", "image/png", "image"),
    (b"\xff\xd8\xff\xe0\x00\x10JFIF" + _PADDING, "jpg", "image/jpeg", "image"),
    (b"GIF89a\x01\x00\x01\x00" + _PADDING, "gif", "image/gif", "image"),
    (b"BM\x3a\x00\x00\x00" + _PADDING, "bmp", "image/bmp", "image"),
    (b"\x00\x00\x01\x00\x01\x00\x10\x10" + _PADDING, "ico", "image/x-icon", "image"),
    (
        b'<svg xmlns="http://www.w3.org/2000/svg" width="1" height="1"></svg>',
        "svg",
        "image/svg+xml",
        "image",
    ),
]


@pytest.mark.parametrize(("data", "extension", "mime", "category"), SIGNATURE_CASES)
def test_classify_detects_signature(
    data: bytes, extension: str, mime: str, category: str
) -> None:
    """验证：按魔数识别出正确的扩展名、MIME 与分类，并重新包装为 data URL。"""
    payload = _b64(data)

    descriptor = classify(payload)

    assert descriptor.extension == extension
    assert descriptor.mime == mime
    assert descriptor.media_category == category
    assert descriptor.src == f"data:{mime};base64,{payload}"


def test_classify_real_png_and_jpeg() -> None:
    """验证：Pillow 生成的真实 PNG / JPEG 能被识别。"""
    assert classify(_b64(_build_png_bytes())).extension == "png"
    assert classify(_b64(_build_jpeg_bytes())).mime == "image/jpeg"


@pytest.mark.parametrize("raw", ["", "   \n\t", "!!!not-base64!!!", "abcde"])
def test_classify_falls_back_to_png(raw: str) -> None:
    """验证：空串、非法 base64 与未识别内容都回退为 image/png，且不抛异常。"""
    descriptor = classify(raw)

    assert descriptor.extension == "png"
    assert descriptor.mime == "image/png"
    assert descriptor.media_category == "image"
    assert descriptor.src.startswith("data:image/png;base64,")


def test_classify_empty_input_builds_empty_data_url() -> None:
    """验证：空输入仍返回合法的空负载 data URL。"""
    assert classify("").src == "data:image/png;base64,"


def test_classify_strips_all_whitespace() -> None:
    """验证：任意位置的空白字符都会在识别前被移除。"""
    assert classify("YQ==\n") == classify("YQ==")

    payload = _b64(b"ID3\x04\x00" + _PADDING)
    spaced = "\n".join(payload[i : i + 4] for i in range(0, len(payload), 4))
    descriptor = classify(f"  {spaced}\t\r\n")

    assert descriptor.extension == "mp3"
    assert descriptor.src == f"data:audio/mpeg;base64,{payload}"


def test_classify_strips_byte_order_mark() -> None:
    """验证：从 UTF-8 BOM 文件粘贴的文本，BOM 与普通空白一样被移除。"""
    assert classify("\ufeffYQ==") == classify("YQ==")

    payload = _b64(b"ID3\x04\x00" + _PADDING)
    descriptor = classify(f"\ufeff{payload}")

    assert descriptor.extension == "mp3"
    assert descriptor.src == f"data:audio/mpeg;base64,{payload}"


def test_classify_trusts_declared_data_url_mime() -> None:
    """验证：data URL 声明的 MIME 优先于字节签名。"""
    raw = f"data:audio/ogg;base64,{_b64(_build_png_bytes())}"

    descriptor = classify(raw)

    assert descriptor == MediaDescriptor(
        src=raw,
        extension="ogg",
        mime="audio/ogg",
        media_category="audio",
    )


@pytest.mark.parametrize(
    ("mime", "extension", "category"),
    [
        ("image/jpeg", "jpg", "image"),
        ("image/svg+xml", "svg", "image"),
        ("image/x-icon", "ico", "image"),
        ("audio/mpeg", "mp3", "audio"),
        ("audio/x-m4a", "m4a", "audio"),
        ("video/quicktime", "quicktime", "video"),
        ("application/pdf", "pdf", "image"),
    ],
)
def test_classify_normalizes_declared_extension(
    mime: str, extension: str, category: str
) -> None:
    """验证：data URL 分支会归一化扩展名，未知主类型按 image 处理。"""
    descriptor = classify(f"data:{mime};base64,Zm9v")

    assert descriptor.extension == extension
    assert descriptor.mime == mime
    assert descriptor.media_category == category


def test_classify_declared_data_url_keeps_cleaned_src() -> None:
    """验证：data URL 分支返回去空白后的原始输入作为 src。"""
    descriptor = classify("data:image/gif;base64,\nR0lG\nODlh")

    assert descriptor.src == "data:image/gif;base64,R0lGODlh"


def test_classify_without_base64_marker_is_sniffed() -> None:
    """验证：缺少 `;base64` 的 data URL 不走声明分支，按默认规则回退。"""
    descriptor = classify("data:image/gif,hello")

    assert descriptor.mime == "image/png"
    assert descriptor.src == "data:image/png;base64,data:image/gif,hello"


@pytest.mark.parametrize(("data", "extension", "mime", "category"), SIGNATURE_CASES)
def test_classify_is_idempotent_on_own_src(
    data: bytes, extension: str, mime: str, category: str
) -> None:
    """验证：对 classify 输出的 src 再次识别，结果完全一致。"""
    first = classify(_b64(data))

    assert classify(first.src) == first


def test_classify_prefers_m4a_over_generic_ftyp() -> None:
    """验证：同时包含 ftyp 与 M4A 的头部识别为 m4a 音频而非 mp4 视频。"""
    data = b"\x00\x00\x00\x1cftypM4A \x00\x00\x02\x00isomM4A " + _PADDING

    descriptor = classify(_b64(data))

    assert descriptor.extension == "m4a"
    assert descriptor.media_category == "audio"


def test_classify_only_probes_leading_window() -> None:
    """验证：只检查前 32 个 base64 字符，之后出现的签名不会被识别。"""
    data = b"\x00" * 30 + b"ID3"

    descriptor = classify(_b64(data))

    assert descriptor.mime == "image/png"
