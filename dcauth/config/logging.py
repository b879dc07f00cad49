from starlette.config import Config

from dcauth.util import cast_path



config = Config(".env")


DCAUTH_LOGGING_CONFIG_PATH = config(
    "DCAUTH_LOGGING_CONFIG_PATH",
    cast=cast_path,
    default=""
)
