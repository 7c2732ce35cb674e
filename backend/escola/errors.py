"""
Error taxonomy for the task board.

Every error is terminal for the action that raised it: nothing here is
retried. Routes turn these into HTTP errors, board sessions into notices.
"""
from fastapi import status


class BoardError(Exception):
  status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

  def __init__(self, message, status_code=None):
    self.message = message
    if status_code is not None:
      self.status_code = status_code
    super().__init__(self.message)


class AuthMissing(BoardError):
  """No user context. The board shows a placeholder and nothing is logged."""
  status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(BoardError):
  status_code = status.HTTP_403_FORBIDDEN


class BoardValidationError(BoardError):
  """Rejected before any store call."""
  status_code = status.HTTP_400_BAD_REQUEST


class TaskNotFound(BoardError):
  status_code = status.HTTP_404_NOT_FOUND


class OperationError(BoardError):
  """A single add/update/delete/batch-delete failed at the store."""
  status_code = status.HTTP_502_BAD_GATEWAY


class SubscriptionError(BoardError):
  """The realtime feed failed. Recovery is a manual reload."""
  status_code = status.HTTP_503_SERVICE_UNAVAILABLE
