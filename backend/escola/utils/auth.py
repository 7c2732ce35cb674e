from escola.config import JWT_SECRET_KEY
from escola.models.user import UserContext
import jwt
import time

SESSION_TTL_SECONDS = 60 * 60 * 24 * 7


def generate_session_token(user: UserContext, secret: str | None = None) -> str:
  """Generate a JWT carrying the caller's board context.

    Args:
        user: The user whose id, name and role go into the claims.
        secret: Signing key; defaults to JWT_SECRET_KEY.

    Returns:
        A signed HS256 token valid for 7 days.
    """
  now = int(time.time())
  payload = {
    "iat": now,
    "exp": now + SESSION_TTL_SECONDS,
    "sub": user.id,
    "name": user.name,
    "role": user.role.value,
  }
  return jwt.encode(payload, secret or JWT_SECRET_KEY, algorithm="HS256")


def validate_session_token(token: str, secret: str | None = None) -> dict:
  """Validate and decode a JWT session token.

    Args:
        token: The JWT token string to validate.
        secret: Verification key; defaults to JWT_SECRET_KEY.

    Returns:
        The decoded payload containing iat, exp, sub, name and role.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is malformed or signature is invalid.
    """
  return jwt.decode(token, key=secret or JWT_SECRET_KEY, algorithms=["HS256"])
