import logging
import logging.config
import pathlib

import yaml

from dcauth.config import DCAUTH_DEBUG_MODE
from dcauth.config.logging import DCAUTH_LOGGING_CONFIG_PATH
from dcauth.config.sentry import (
    DCAUTH_SENTRY_DSN,
    DCAUTH_SENTRY_ENABLED,
    DCAUTH_SENTRY_ENVIRONMENT,
    DCAUTH_SENTRY_EVENT_LEVEL,
    DCAUTH_SENTRY_IGNORE_LOGGERS,
    DCAUTH_SENTRY_SAMPLE_RATE,
    DCAUTH_SENTRY_TRACES_SAMPLE_RATE
)


_LOGGER = logging.getLogger("dcauth.setup")

# Used when `DCAUTH_LOGGING_CONFIG_PATH` is unset or does not exist
DEFAULT_LOGGING_SETTINGS_PATH = pathlib.Path(__file__).parent / "logging.yml"


def setup_logging() -> None:
    """Sets up logging for this runtime."""
    # If the user has specified a logging path and it exists we will ignore the
    # default entirely rather than dealing with complex merging
    path = (
        DCAUTH_LOGGING_CONFIG_PATH
        if DCAUTH_LOGGING_CONFIG_PATH and DCAUTH_LOGGING_CONFIG_PATH.exists()
        else DEFAULT_LOGGING_SETTINGS_PATH
    )
    config = yaml.safe_load(path.read_text())
    logging.config.dictConfig(config)

    if DCAUTH_DEBUG_MODE:
        loggers = [logging.getLogger(name) for name in logging.root.manager.loggerDict]
        for logger in loggers:
            logger.setLevel(level=logging.DEBUG)
        logging.getLogger().setLevel(level=logging.DEBUG)


def setup_sentry() -> None:
    """Sets up sentry SDK for application if it is installed and enabled.
    
    Request bodies are never attached to events, they carry passwords.
    """
    try:
        import sentry_sdk
    except ImportError:
        return
    if not DCAUTH_SENTRY_ENABLED or not DCAUTH_SENTRY_DSN:
        return
    
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration, ignore_logger
    from sentry_sdk.integrations.starlette import StarletteIntegration
    
    sentry_sdk.init(
        dsn=DCAUTH_SENTRY_DSN,
        environment=DCAUTH_SENTRY_ENVIRONMENT,
        sample_rate=DCAUTH_SENTRY_SAMPLE_RATE,
        traces_sample_rate=DCAUTH_SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=DCAUTH_SENTRY_EVENT_LEVEL
            )
        ],
        send_default_pii=False,
        max_request_body_size="never"
    )
    for logger in DCAUTH_SENTRY_IGNORE_LOGGERS:
        ignore_logger(logger)
    _LOGGER.debug("Sentry error reporting enabled")
