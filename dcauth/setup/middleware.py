from typing import List

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from dcauth.config.middleware import (
    DCAUTH_MIDDLEWARE_CORS_ORIGINS,
    DCAUTH_MIDDLEWARE_ENABLE_CONTEXT,
    DCAUTH_MIDDLEWARE_ENABLE_CORS
)
from dcauth.middleware import IPAddressMiddleware



def configure_middleware() -> List[Middleware]:
    """Return the default middleware stack.

    `/checkAuth` carries credentials in the body and returns the token in the
    body so CORS never allows cookies, only JSON POSTs.
    """
    stack = []
    if DCAUTH_MIDDLEWARE_ENABLE_CORS:
        stack.append(
            Middleware(
                CORSMiddleware,
                allow_origins=list(DCAUTH_MIDDLEWARE_CORS_ORIGINS),
                allow_credentials=False,
                allow_methods=["POST"],
                allow_headers=["Content-Type"]
            )
        )
    if DCAUTH_MIDDLEWARE_ENABLE_CONTEXT:
        stack.append(Middleware(IPAddressMiddleware))
    return stack
