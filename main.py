# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS
from database import create_indexes, close_mongo_connection, ping
from routers import auth, courses, dashboard, profile, tutoring
from utils.logger import configure_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    logger.info("🚀 Starting Minerva learning platform API...")
    await create_indexes()
    yield
    # Shutdown
    await close_mongo_connection()

def create_app() -> FastAPI:
    app = FastAPI(
        title="Minerva",
        version="1.0.0",
        description="Course catalog, enrollments, tutoring sessions and profiles",
        lifespan=lifespan,
    )

    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(courses.router)
    app.include_router(tutoring.router)
    app.include_router(dashboard.router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["health"])
    async def health():
        connected = await ping()
        return {"status": "ok" if connected else "degraded", "database": connected}

    return app

app = create_app()
