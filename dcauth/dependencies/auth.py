from dcauth.auth import AuthenticationGateway
from dcauth.setup.auth import setup_gateway



async def get_gateway() -> AuthenticationGateway:
    """Dependency for retrieving the authentication gateway."""
    return setup_gateway()
