from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings



config = Config(".env")


DCAUTH_MIDDLEWARE_ENABLE_CONTEXT = config(
    "DCAUTH_MIDDLEWARE_ENABLE_CONTEXT",
    cast=bool,
    default=True
)
DCAUTH_MIDDLEWARE_ENABLE_CORS = config(
    "DCAUTH_MIDDLEWARE_ENABLE_CORS",
    cast=bool,
    default=False
)
# Exact origins, e.g. "https://portal.example.com,https://admin.example.com"
DCAUTH_MIDDLEWARE_CORS_ORIGINS = config(
    "DCAUTH_MIDDLEWARE_CORS_ORIGINS",
    cast=CommaSeparatedStrings,
    default=""
)
