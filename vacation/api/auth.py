from fastapi import Security
from fastapi.security import APIKeyHeader

from vacation.config import get_settings
from vacation.exceptions import AuthenticationError

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str = Security(API_KEY_HEADER)):
    """Check the X-API-Key header. An empty settings.api_key disables the check (development)."""
    settings = get_settings()
    if not settings.api_key:
        return
    if api_key != settings.api_key:
        raise AuthenticationError("Invalid API key")
