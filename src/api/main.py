"""
FastAPI application for the practice engine.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.practice.config import load_config

from .practice_routes import router as practice_router
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load config on startup; drop in-flight sessions on shutdown."""
    app.state.config = load_config()
    app.state.sessions = {}
    yield
    app.state.sessions.clear()


app = FastAPI(
    title="Practice Engine API",
    description="Spaced-repetition scheduling, answer grading and practice sessions",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(router)
app.include_router(practice_router)
