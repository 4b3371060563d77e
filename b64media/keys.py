# config
CONFIG_OUTPUT_DIR_KEY = "output_dir"
CONFIG_MEDIA_FILENAME_PREFIX_KEY = "media_filename_prefix"
CONFIG_HTTP_TIMEOUT_SEC_KEY = "http_timeout_sec"
CONFIG_MAX_BYTES_KEY = "max_bytes"

# env
ENV_PREFIX = "B64MEDIA_"
