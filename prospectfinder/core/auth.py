from fastapi import Header, HTTPException

from .config import settings


async def require_api_key(x_api_key: str = Header(default="", alias="X-API-Key")):
    # An unset key leaves the API open.
    expected = settings.api_key
    if expected and x_api_key != expected:
        raise HTTPException(status_code=401, detail="unauthorized")
