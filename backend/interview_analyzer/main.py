"""
AI Interview Analyzer - FastAPI Application

This is the entry point for the backend. It:
1. Creates the FastAPI app instance
2. Configures CORS (so the React frontend can talk to us)
3. Registers route handlers
4. Sets up logging on startup

The service is stateless: there is no database, and every request
carries everything it needs.

Run with:
    uvicorn interview_analyzer.main:app --reload --port 5000
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interview_analyzer.config import configure_logging, settings
from interview_analyzer.routers import interviews

logger = logging.getLogger(__name__)

ENDPOINTS = ["/transcribe-audio", "/extract-qa", "/evaluate-interview", "/reports/pdf"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic.

    Code before 'yield' runs on startup, code after it on shutdown.
    """
    configure_logging()
    logger.info("Starting AI Interview Analyzer API (%s)", settings.APP_ENV)

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="AI Interview Analyzer API",
    description="Transcribes interview recordings, scores the answers, "
                "and renders evaluation reports",
    version="1.0.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
# Without this, the React app (localhost:5173) can't call the API
# because browsers block requests between different origins by default.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    expose_headers=["Content-Length", "Content-Type", "Content-Disposition"],
)

app.include_router(interviews.router)


# --- Health Check Endpoints ---

@app.get("/", tags=["health"])
async def root():
    """Root endpoint - confirms the API is alive and lists what it serves."""
    return {
        "status": "ok",
        "message": "AI Interview Analysis API is running",
        "endpoints": ENDPOINTS,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Liveness check for load balancers and monitoring."""
    return {
        "status": "healthy",
        "environment": settings.APP_ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
