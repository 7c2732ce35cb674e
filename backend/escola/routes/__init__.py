from fastapi import HTTPException
from escola.errors import BoardError


def http_error(error: BoardError) -> HTTPException:
  """Translate a board error into the HTTP error the client sees."""
  return HTTPException(status_code=error.status_code, detail=error.message)
