"""Escola backend: classes and the Kanban task board over Firestore."""

__version__ = "1.0.0"
