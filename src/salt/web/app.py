"""
Salt Web API - FastAPI application.

Recipe import preview/confirm and the explore catalog. Authenticated
routes validate Supabase JWTs.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salt import __version__
from salt.web.explore_routes import router as explore_router
from salt.web.recipe_import_routes import router as recipe_import_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Salt", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    from salt.config import settings

    logger.info("Salt starting up...")
    logger.info(f"  Environment: {settings.salt_env}")
    logger.info(f"  Social import API: {settings.social_import_api_url}")


# CORS middleware for local frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipe_import_router, prefix="/api")
app.include_router(explore_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
