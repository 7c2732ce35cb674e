# backend/escola/main.py
"""
Escola Backend Service
Classes and the Kanban task board over Firestore
"""
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from escola import __version__
from escola.config import FRONTEND_URL, HOST, LOG_LEVEL, PORT, STORE_BACKEND
from escola.routes.classes import router as classes_router
from escola.routes.tasks import router as tasks_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(levelname)s %(asctime)s %(name)s %(message)s",
)

app = FastAPI(
    title="Escola Backend Service",
    description="Classes and the Kanban task board",
    version=__version__
)

# CORS Configuration - IMPORTANT for frontend connection
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,  # Required for cookies
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(tasks_router)
app.include_router(classes_router)


# Health check for Cloud Run
@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {
        "status": "healthy",
        "service": "escola-backend",
        "version": __version__,
        "store": STORE_BACKEND
    }


@app.get("/")
async def root():
    """Root endpoint - service info."""
    return {
        "service": "Escola Backend",
        "status": "running",
        "endpoints": {
            "tasks": "/tasks",
            "board": "/tasks/board",
            "board_ws": "/tasks/board/ws",
            "classes": "/classes",
            "classes_ws": "/classes/ws",
            "health": "/health"
        }
    }


if __name__ == "__main__":
    uvicorn.run("escola.main:app", host=HOST, port=PORT)
