from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer


bearer_scheme = HTTPBearer(auto_error=False)


def extract_optional_bearer_token(
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """Return the Bearer token forwarded to GitHub, or None when absent.

    Raises:
        HTTPException: If credentials are present but malformed or empty.
    """

    if credentials is None:
        return None

    if credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Authorization header must be a non-empty Bearer token",
        )

    return credentials.credentials.strip()
