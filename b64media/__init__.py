from .config import ConverterConfig, load_converter_config_from_env, read_converter_config
from .converter import MediaConverter
from .media import MediaDescriptor, MediaSource, classify
from .utils.errors import MediaErrorCode, MediaException

__all__ = [
    "ConverterConfig",
    "MediaConverter",
    "MediaDescriptor",
    "MediaErrorCode",
    "MediaException",
    "MediaSource",
    "classify",
    "load_converter_config_from_env",
    "read_converter_config",
]
