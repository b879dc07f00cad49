import contextlib
import logging
from typing import AsyncIterator

import anyio
from fastapi import FastAPI

from dcauth.config.auth import DCAUTH_AUTH_MAX_WORKERS
from dcauth.setup.auth import setup_gateway, setup_settings



_LOGGER = logging.getLogger("dcauth.setup.application")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Size the worker thread pool used for directory binds and clear the
    cached gateway on shutdown.
    """
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = DCAUTH_AUTH_MAX_WORKERS
    _LOGGER.debug("Directory bind worker capacity set to %i", DCAUTH_AUTH_MAX_WORKERS)
    try:
        yield
    finally:
        setup_gateway.cache_clear()
        setup_settings.cache_clear()
