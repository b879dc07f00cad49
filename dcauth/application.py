import logging
from collections.abc import Coroutine, Sequence
from typing import (
    Any,
    Callable,
    Dict,
    Optional,
    Type,
    Union,
)

from fastapi import Depends, FastAPI, Request, Response
from starlette.middleware import Middleware

from dcauth.config import DCAUTH_DEBUG_MODE, DCAUTH_ENVIRONMENT
from dcauth.exception_handlers import EXCEPTION_HANDLERS
from dcauth.routes import auth_
from dcauth.settings import is_development
from dcauth.setup.application import lifespan
from dcauth.setup.logging import setup_logging, setup_sentry
from dcauth.setup.middleware import configure_middleware



_LOGGER = logging.getLogger("dcauth.application")


def setup_application(
    title: str,
    description: str,
    version: str,
    dependencies: Optional[Sequence[Depends]] = None,
    middleware: Optional[Sequence[Middleware]] = None,
    exception_handlers: Optional[
        Dict[
            Union[int, Type[Exception]],
            Callable[[Request, Any], Coroutine[Any, Any, Response]],
        ]
    ] = None,
    root_path: str = "",
    environment: str = DCAUTH_ENVIRONMENT
) -> FastAPI:
    """Create the FastAPI application with the `/checkAuth` route, the default
    middleware stack and the error contract handlers.
    
    Additional middleware is placed ahead of the defaults, additional
    exception handlers override the defaults.

    The OpenAPI document and interactive docs are only served in the
    development environment.
    """
    middleware = list(middleware or [])
    middleware.extend(configure_middleware())

    handlers = dict(EXCEPTION_HANDLERS)
    handlers.update(exception_handlers or {})

    app = FastAPI(
        debug=DCAUTH_DEBUG_MODE,
        title=title,
        description=description,
        version=version,
        dependencies=dependencies,
        middleware=middleware,
        exception_handlers=handlers,
        lifespan=lifespan,
        root_path=root_path,
        openapi_url="/openapi.json" if is_development(environment) else None
    )
    app.include_router(auth_)

    setup_logging()
    setup_sentry()
    _LOGGER.debug("Application %s %s configured", title, version)

    return app
