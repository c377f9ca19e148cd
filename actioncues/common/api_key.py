import secrets
from fastapi import Depends, HTTPException, Security, status
from fastapi.security.api_key import APIKeyHeader

from actioncues.config import Settings, get_settings


api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


def get_api_key(
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the configured key. Open when no key is set."""
    expected_key = settings.ACTIONCUES_API_KEY
    if not expected_key:
        return

    if not api_key:
        detail = "API key is missing"
    elif not secrets.compare_digest(api_key, expected_key):
        detail = "API key is invalid"
    else:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
