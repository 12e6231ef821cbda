"""
Main FastAPI application for the Church League Basketball site backend.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from league.api import routes
from league.core.config import CORS_ORIGINS
from league.core.logging_config import setup_logging
from league.models import DataAccessError

setup_logging()

app = FastAPI(
    title="Church League Basketball API",
    description="Standings, statistics and schedule for the church basketball league",
    version="1.0.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request: Request, exc: DataAccessError):
    # Raised while building the Supabase client inside a dependency
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Church League Basketball API",
        "version": "1.0.0",
        "endpoints": {
            "standings": "/api/standings",
            "bracket": "/api/bracket",
            "leaders": "/api/leaders",
            "calendar": "/api/calendar",
            "teams": "/api/teams",
            "health": "/api/health"
        }
    }
