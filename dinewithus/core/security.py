from typing import Optional
from fastapi import HTTPException, Header

async def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Extract the bearer token from the Authorization header.
    The token is forwarded to the booking backend as-is; the backend
    decides whether it is valid, we only check that one was sent.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Authentication required")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Authentication required")

    return token.strip()
