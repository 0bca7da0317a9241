"""
MindCare API
============
FastAPI application entry point. Mount routers here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.routers import auth, messages, moods, resources, sessions, tracker, users
from app.services.gateway import PersistenceFailure

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="MindCare API",
    description="Mental health chat companion — API Backend",
    version="1.0.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(messages.router)
app.include_router(sessions.router)
app.include_router(moods.router)
app.include_router(tracker.router)
app.include_router(users.router)
app.include_router(resources.router)


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    # Already logged with traceback by the gateway.
    return JSONResponse(
        status_code=500,
        content={"detail": {"message": str(exc), "code": "persistence_failure"}},
    )


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "mindcare-api"}
