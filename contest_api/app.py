"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contest_api.database import init_db
from contest_api.errors import register_error_handlers
from contest_api.logging_setup import setup_console_logging
from contest_api.routes import auth, contests, leaderboard, users

setup_console_logging()

app = FastAPI(title="Contest Platform API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database on startup."""
    init_db()


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(contests.router)
app.include_router(leaderboard.router)
