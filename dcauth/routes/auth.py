from fastapi import APIRouter, Body, Depends

from dcauth.auth import AuthenticationGateway, AuthRequest, AuthResponse
from dcauth.dependencies import get_gateway



router = APIRouter(tags=["Authentication"])


@router.post(
    "/checkAuth",
    response_model=AuthResponse,
    response_model_exclude_none=True
)
async def check_auth(
    credentials: AuthRequest | None = Body(None),
    gateway: AuthenticationGateway = Depends(get_gateway)
) -> AuthResponse:
    """Authenticate a username and password against the directory and issue
    an access token.
    
    Rejected credentials return `{"authenticated": false}`. Configuration and
    directory failures return a 500 problem detail.
    """
    return await gateway.handle(credentials)
