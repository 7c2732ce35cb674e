import logging

from fastapi import HTTPException, Request, WebSocket
from escola.errors import AuthMissing
from escola.models.enums import Role
from escola.models.user import UserContext
from escola.utils.auth import validate_session_token

logger = logging.getLogger(__name__)


def _token_from(cookies, headers) -> str | None:
  token = cookies.get("session_token")
  if token:
    return token
  authorization = headers.get("authorization", "")
  if authorization.lower().startswith("bearer "):
    return authorization[7:].strip()
  return None


def resolve_user_context(token: str | None) -> UserContext | None:
  """Decode the caller's context from a session token.

  Missing, invalid or expired tokens and unknown roles all mean "no user".
  """
  if not token:
    return None
  try:
    payload = validate_session_token(token)
  except Exception:
    return None
  try:
    return UserContext(id=payload["sub"], name=payload.get("name", ""), role=Role(payload.get("role")))
  except (KeyError, ValueError):
    logger.warning(f"⚠️  Session for {payload.get('sub')} has unknown role: {payload.get('role')}")
    return None


async def get_user_context(request: Request) -> UserContext | None:
  """Optional caller context. Read endpoints render a placeholder without it."""
  return resolve_user_context(_token_from(request.cookies, request.headers))


async def get_current_user(request: Request) -> UserContext:
  """Required caller context for writes."""
  user = await get_user_context(request)
  if user is None:
    error = AuthMissing("Utilizador não autenticado")
    raise HTTPException(status_code=error.status_code, detail=error.message)
  return user


async def get_websocket_user(websocket: WebSocket) -> UserContext | None:
  return resolve_user_context(_token_from(websocket.cookies, websocket.headers))
