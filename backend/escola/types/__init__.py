from typing import Any, TypeAlias

TaskId: TypeAlias = str
"""Firestore document id of a task."""

UserId: TypeAlias = str
"""Id of a user in the school's user directory."""

ClassId: TypeAlias = str
"""Firestore document id of a class."""

Document: TypeAlias = dict[str, Any]
"""Raw document data with its id merged in under "id"."""

Snapshot: TypeAlias = list[Document]
"""Every document of a collection at one point in time, in store order."""
