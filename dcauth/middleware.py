from starlette.types import ASGIApp, Receive, Scope, Send

from dcauth.util import ip_address_context



class IPAddressMiddleware:
    """Sets the client address context variable so log records emitted while
    handling a request carry it.

    Behind a proxy, run uvicorn with `--proxy-headers` so `scope["client"]`
    holds the forwarded address.
    """
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        client = scope.get("client")
        if scope["type"] != "http" or not client:
            await self.app(scope, receive, send)
            return
        token = ip_address_context.set(client[0])
        try:
            await self.app(scope, receive, send)
        finally:
            ip_address_context.reset(token)
