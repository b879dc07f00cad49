import pathlib

from starlette.config import Config

from dcauth.util import cast_path



config = Config(".env")


DCAUTH_ENVIRONMENT = config(
    "DCAUTH_ENVIRONMENT",
    default="production"
)
DCAUTH_DEBUG_MODE = config(
    "DCAUTH_DEBUG_MODE",
    cast=bool,
    default=False
)
DCAUTH_SETTINGS_PATH = config(
    "DCAUTH_SETTINGS_PATH",
    cast=cast_path,
    default=pathlib.Path("settings.yml")
)
DCAUTH_HOST = config(
    "DCAUTH_HOST",
    default="127.0.0.1"
)
DCAUTH_PORT = config(
    "DCAUTH_PORT",
    cast=int,
    default=8000
)
