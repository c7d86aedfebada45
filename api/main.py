"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from api.routes import health, players, stats
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import PlayerNotFoundError
from core.logging import setup_logging
from schemas.api import ErrorResponse
import logging

# Configure logging
setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="FIDE Ratings Backend API",
    description="Lookup service for the federation player rating list",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)


# Include routers
app.include_router(health.router)
app.include_router(players.router)
app.include_router(stats.router)


@app.exception_handler(PlayerNotFoundError)
async def player_not_found_handler(request: Request, exc: PlayerNotFoundError):
    """Unknown and malformed player ids both map to 404"""
    request_id = getattr(request.state, "request_id", "-")
    logger.info(f"[{request_id}] Player not found: {exc.player_id}")
    body = ErrorResponse(
        error=exc.message,
        detail=f"No player with FIDE ID {exc.player_id}"
    )
    return JSONResponse(status_code=404, content=jsonable_encoder(body))


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting FIDE Ratings Backend API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down FIDE Ratings Backend API")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "FIDE Ratings Backend API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "players": "/players/{fideid}",
            "stats": "/stats"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
