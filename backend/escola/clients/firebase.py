# backend/escola/clients/firebase.py
"""
Firestore-backed document store.

Reads, writes and batch commits go through the async client. Realtime
feeds use the sync client's on_snapshot watch, whose callbacks run on a
client thread and are handed to the event loop.
"""
import asyncio
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials
from google.cloud import firestore
from google.oauth2 import service_account

from escola.clients.base import DocumentStore, StoreError, Subscription
from escola.config import FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID, WATCH_CHECK_INTERVAL
from escola.types import Document, Snapshot

logger = logging.getLogger(__name__)

_db: Optional[firestore.AsyncClient] = None
_sync_db: Optional[firestore.Client] = None


def _check_credentials() -> str:
    if not FIREBASE_CREDENTIALS_PATH or not os.path.exists(FIREBASE_CREDENTIALS_PATH):
        raise StoreError(f"Firebase credentials not found at: {FIREBASE_CREDENTIALS_PATH}")
    return FIREBASE_CREDENTIALS_PATH


def get_db() -> firestore.AsyncClient:
    """Firestore AsyncClient, created on first use."""
    global _db
    if _db is None:
        path = _check_credentials()
        logger.info("🔥 Initializing Firestore AsyncClient...")
        logger.info(f"   Project ID: {FIREBASE_PROJECT_ID}")
        firestore_credentials = service_account.Credentials.from_service_account_file(path)
        _db = firestore.AsyncClient(
            project=FIREBASE_PROJECT_ID,
            credentials=firestore_credentials
        )
        logger.info("✓ Firestore AsyncClient created")
    return _db


def get_sync_db() -> firestore.Client:
    """Sync Firestore client from the Firebase Admin app, used for watches."""
    global _sync_db
    if _sync_db is None:
        path = _check_credentials()
        try:
            firebase_admin.get_app()
        except ValueError:
            firebase_admin.initialize_app(
                credentials.Certificate(path),
                {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
            )
            logger.info("✓ Firebase Admin initialized")
        from firebase_admin import firestore as admin_firestore
        _sync_db = admin_firestore.client()
    return _sync_db


def _to_document(snapshot) -> Document:
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


class WatchSubscription(Subscription):
    """Subscription fed by a Firestore watch running on its own thread."""

    def __init__(self):
        super().__init__(on_close=self._unsubscribe)
        self.watch = None

    def _unsubscribe(self):
        if self.watch is not None:
            self.watch.unsubscribe()
            logger.info("🔌 Firestore listener released")

    async def _next_item(self):
        while True:
            try:
                return await asyncio.wait_for(self._queue.get(), timeout=WATCH_CHECK_INTERVAL)
            except asyncio.TimeoutError:
                if self.watch is not None and not self.watch.is_active and not self.closed:
                    return StoreError("Firestore listener stopped", operation="subscribe")


class FirestoreStore(DocumentStore):
    """One Firestore collection."""

    def __init__(self, collection: str, db=None, sync_db=None):
        self.collection = collection
        self._db = db
        self._sync_db = sync_db

    def _collection(self):
        return (self._db or get_db()).collection(self.collection)

    async def list_documents(self) -> Snapshot:
        try:
            return [_to_document(doc) async for doc in self._collection().stream()]
        except Exception as e:
            raise StoreError(f"list {self.collection} failed: {e}", operation="list") from e

    async def get(self, doc_id: str) -> Optional[Document]:
        try:
            snapshot = await self._collection().document(doc_id).get()
        except Exception as e:
            raise StoreError(f"get {self.collection}/{doc_id} failed: {e}", operation="get") from e
        return _to_document(snapshot) if snapshot.exists else None

    async def add(self, data: dict) -> str:
        try:
            _, doc_ref = await self._collection().add(data)
        except Exception as e:
            raise StoreError(f"add to {self.collection} failed: {e}", operation="add") from e
        return doc_ref.id

    async def update(self, doc_id: str, data: dict) -> None:
        try:
            await self._collection().document(doc_id).update(data)
        except Exception as e:
            raise StoreError(f"update {self.collection}/{doc_id} failed: {e}", operation="update") from e

    async def delete(self, doc_id: str) -> None:
        try:
            await self._collection().document(doc_id).delete()
        except Exception as e:
            raise StoreError(f"delete {self.collection}/{doc_id} failed: {e}", operation="delete") from e

    async def delete_many(self, doc_ids: list[str]) -> None:
        db = self._db or get_db()
        batch = db.batch()
        for doc_id in doc_ids:
            batch.delete(db.collection(self.collection).document(doc_id))
        try:
            await batch.commit()
        except Exception as e:
            raise StoreError(f"batch delete in {self.collection} failed: {e}", operation="delete_many") from e

    async def subscribe(self) -> Subscription:
        loop = asyncio.get_running_loop()
        subscription = WatchSubscription()

        def on_snapshot(docs, changes, read_time):
            if subscription.closed:
                return
            try:
                snapshot = [_to_document(doc) for doc in docs]
            except Exception as e:
                loop.call_soon_threadsafe(subscription.push_error, e)
                return
            loop.call_soon_threadsafe(subscription.push, snapshot)

        try:
            sync_db = self._sync_db or get_sync_db()
            subscription.watch = sync_db.collection(self.collection).on_snapshot(on_snapshot)
        except Exception as e:
            logger.error(f"❌ Could not listen to {self.collection}: {e}")
            subscription.push_error(e)
        else:
            logger.info(f"✓ Listening to {self.collection}")
        return subscription
