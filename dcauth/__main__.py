import uvicorn

from dcauth.config import DCAUTH_HOST, DCAUTH_PORT



if __name__ == "__main__":
    uvicorn.run(
        "dcauth.main:app",
        host=DCAUTH_HOST,
        port=DCAUTH_PORT,
        proxy_headers=True,
        log_config=None
    )
