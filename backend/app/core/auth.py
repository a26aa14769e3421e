import jwt
from app.core.config import settings
from fastapi import Header, HTTPException, status


def _decode_token(token: str) -> dict:
    # Supabase signs access tokens with the project JWT secret (HS256).
    # Without a configured secret the token is only decoded.
    if settings.JWT_SECRET:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    return jwt.decode(
        token,
        options={"verify_signature": False},
        algorithms=["HS256"],
    )


def get_current_user_id(authorization: str = Header(None)) -> str:
    """
    Extract and verify the administrator's user ID from a Supabase JWT token.
    The admin frontend sends the access token in the Authorization header.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>" format
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        payload = _decode_token(parts[1])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: no user ID",
        )

    return user_id
