from __future__ import annotations

import asyncio
import logging
import time
from typing import TypedDict

import aiohttp

from .errors import MediaErrorCode, MediaException
from .log import StructuredLogEmitter

logger = logging.getLogger(__name__)
structured_log = StructuredLogEmitter(logger=logger)


class GetBytesSuccessResponse(TypedDict):
    data: bytes
    mime: str
    elapsed_ms: int


async def get_bytes(
    *,
    url: str,
    timeout_sec: int = 60,
    source: str = "Media",
) -> GetBytesSuccessResponse:
    """下载 HTTP 资源并返回原始字节。

    约定：
    - 传输层错误映射为 `NETWORK_ERROR/TIMEOUT`
    - 非 2xx HTTP 响应映射为 `UPSTREAM_ERROR`
    - 成功返回结构：`{"data": <bytes>, "mime": <content-type>, "elapsed_ms": <int>}`
    """
    if timeout_sec <= 0:
        raise MediaException(
            code=MediaErrorCode.UPSTREAM_ERROR,
            message="timeout_sec must be > 0.",
            retryable=False,
            detail={"source": source, "url": url, "timeout_sec": timeout_sec},
        )

    started_at = time.perf_counter()
    request_detail = {"source": source, "url": url, "timeout_sec": timeout_sec}
    structured_log.debug("http.request", request_detail)

    # total timeout 覆盖连接、读取与等待响应的总耗时。
    timeout = aiohttp.ClientTimeout(total=timeout_sec)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                data = await response.read()
                content_type = response.headers.get("Content-Type", "")
                elapsed_ms = int((time.perf_counter() - started_at) * 1000)
                structured_log.debug(
                    "http.response",
                    {
                        "elapsed_ms": elapsed_ms,
                        "status_code": response.status,
                        "content_type": content_type,
                        "size": len(data),
                    },
                )
                if response.status >= 400:
                    raise MediaException(
                        code=MediaErrorCode.UPSTREAM_ERROR,
                        message=f"{source} HTTP {response.status}",
                        retryable=(response.status >= 500 or response.status == 429),
                        detail={
                            **request_detail,
                            "elapsed_ms": elapsed_ms,
                            "status_code": response.status,
                        },
                    )
    except asyncio.TimeoutError as exc:
        raise MediaException(
            code=MediaErrorCode.TIMEOUT,
            message=f"{source} request timed out.",
            retryable=True,
            detail={
                **request_detail,
                "elapsed_ms": int((time.perf_counter() - started_at) * 1000),
            },
        ) from exc
    except aiohttp.ClientError as exc:
        raise MediaException(
            code=MediaErrorCode.NETWORK_ERROR,
            message=f"{source} request failed.",
            retryable=True,
            detail={
                **request_detail,
                "elapsed_ms": int((time.perf_counter() - started_at) * 1000),
                "client_error": str(exc),
                "client_error_type": type(exc).__name__,
            },
        ) from exc

    return {
        "data": data,
        "mime": content_type.split(";", 1)[0].strip().lower(),
        "elapsed_ms": elapsed_ms,
    }
