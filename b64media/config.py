from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, fields
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from .keys import (
    CONFIG_HTTP_TIMEOUT_SEC_KEY,
    CONFIG_MAX_BYTES_KEY,
    CONFIG_MEDIA_FILENAME_PREFIX_KEY,
    CONFIG_OUTPUT_DIR_KEY,
    ENV_PREFIX,
)


@dataclass(slots=True)
class ConverterConfig:
    output_dir: Path
    """解码后媒体与 base64 文本的保存目录"""
    media_filename_prefix: str = "file"
    """保存媒体文件时的文件名前缀"""
    http_timeout_sec: int = 60
    """下载 http(s) 媒体的超时时间（秒）"""
    max_bytes: int | None = None
    """编码输入的最大字节数，None 表示不限制"""


def _require_mapping(raw_config: Any) -> Mapping[str, Any]:
    """确保原始配置是键值映射。"""
    if not isinstance(raw_config, Mapping):
        raise TypeError("Converter config must be a mapping object.")
    return raw_config


def _require_keys(cfg: Mapping[str, Any], required: tuple[str, ...]) -> None:
    """仅校验必填字段是否存在。"""
    missing = [key for key in required if key not in cfg]
    if missing:
        raise KeyError(f"Missing required converter config keys: {', '.join(missing)}")


def _positive_int(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer.") from exc
    if number <= 0:
        raise ValueError(f"{key} must be > 0.")
    return number


def read_converter_config(raw_config: Any) -> ConverterConfig:
    """读取并校验转换器配置；未知字段会被忽略。"""
    cfg = _require_mapping(raw_config)
    required = tuple(
        f.name
        for f in fields(ConverterConfig)
        if f.default is MISSING and f.default_factory is MISSING
    )
    _require_keys(cfg, required)

    output_dir = str(cfg[CONFIG_OUTPUT_DIR_KEY]).strip()
    if not output_dir:
        raise ValueError(f"{CONFIG_OUTPUT_DIR_KEY} must not be empty.")

    config = ConverterConfig(output_dir=Path(output_dir))
    prefix = cfg.get(CONFIG_MEDIA_FILENAME_PREFIX_KEY)
    if prefix is not None and str(prefix).strip():
        config.media_filename_prefix = str(prefix).strip()
    if cfg.get(CONFIG_HTTP_TIMEOUT_SEC_KEY) not in (None, ""):
        config.http_timeout_sec = _positive_int(
            CONFIG_HTTP_TIMEOUT_SEC_KEY, cfg[CONFIG_HTTP_TIMEOUT_SEC_KEY]
        )
    if cfg.get(CONFIG_MAX_BYTES_KEY) not in (None, ""):
        config.max_bytes = _positive_int(CONFIG_MAX_BYTES_KEY, cfg[CONFIG_MAX_BYTES_KEY])
    return config


def load_converter_config_from_env(
    env_file: str | Path | None = ".env",
    *,
    environ: Mapping[str, str] | None = None,
) -> ConverterConfig:
    """
    从环境变量读取配置，变量名为 `B64MEDIA_` 加大写字段名，例如 `B64MEDIA_OUTPUT_DIR`。

    `.env` 中的值优先级低于真实环境变量。
    """
    merged: dict[str, str | None] = {}
    if env_file is not None and Path(env_file).is_file():
        merged.update(dotenv_values(env_file))
    merged.update(os.environ if environ is None else environ)

    raw_config = {
        key.removeprefix(ENV_PREFIX).lower(): value
        for key, value in merged.items()
        if key.startswith(ENV_PREFIX)
    }
    return read_converter_config(raw_config)
