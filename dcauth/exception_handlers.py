import logging
from http import HTTPStatus

from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from dcauth.exceptions import ClientError, ConfigurationError, InfrastructureFailure



_LOGGER = logging.getLogger("dcauth.exception_handlers")


def problem(status_code: int, detail: str) -> JSONResponse:
    """Build an `application/problem+json` response."""
    return JSONResponse(
        {
            "type": "about:blank",
            "title": HTTPStatus(status_code).phrase,
            "status": status_code,
            "detail": detail
        },
        status_code=status_code,
        media_type="application/problem+json"
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete credentials are reported without field detail."""
    _LOGGER.debug("Invalid request body at %s", [error["loc"] for error in exc.errors()])
    return JSONResponse({"error": "missing_credentials"}, status_code=400)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse({"error": exc.error}, status_code=400)


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    _LOGGER.error("Configuration error: %s", exc)
    return problem(500, str(exc))


async def infrastructure_failure_handler(request: Request, exc: InfrastructureFailure) -> JSONResponse:
    _LOGGER.error("Directory failure: %s", exc)
    return problem(500, str(exc))


EXCEPTION_HANDLERS = {
    RequestValidationError: request_validation_handler,
    ClientError: client_error_handler,
    ConfigurationError: configuration_error_handler,
    InfrastructureFailure: infrastructure_failure_handler,
}
