import logging

from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings

from dcauth.config import DCAUTH_ENVIRONMENT
from dcauth.util import cast_logging_level



config = Config(".env")


DCAUTH_SENTRY_ENABLED = config(
    "DCAUTH_SENTRY_ENABLED",
    cast=bool,
    default=False
)
DCAUTH_SENTRY_DSN = config(
    "DCAUTH_SENTRY_DSN",
    default=""
)
DCAUTH_SENTRY_ENVIRONMENT = config(
    "DCAUTH_SENTRY_ENVIRONMENT",
    default=DCAUTH_ENVIRONMENT
)
DCAUTH_SENTRY_SAMPLE_RATE = config(
    "DCAUTH_SENTRY_SAMPLE_RATE",
    cast=float,
    default=1.0
)
DCAUTH_SENTRY_TRACES_SAMPLE_RATE = config(
    "DCAUTH_SENTRY_TRACES_SAMPLE_RATE",
    cast=float,
    default=0.0
)
# Directory failures log at ERROR, rejected credentials at INFO
DCAUTH_SENTRY_EVENT_LEVEL = config(
    "DCAUTH_SENTRY_EVENT_LEVEL",
    cast=cast_logging_level,
    default=logging.ERROR
)
DCAUTH_SENTRY_IGNORE_LOGGERS = config(
    "DCAUTH_SENTRY_IGNORE_LOGGERS",
    cast=CommaSeparatedStrings,
    default="uvicorn.access"
)
