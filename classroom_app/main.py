from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.database import close_db_connections, create_tables
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging
from .routers import health, users, classrooms, assignments, announcements, comments

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Classroom API")

    # Local SQLite databases are created on the fly; PostgreSQL goes through Alembic
    if settings.database_url.startswith("sqlite"):
        await create_tables()

    yield

    logger.info("Shutting down Classroom API")
    await close_db_connections()
    logger.info("Shutdown complete")

app = FastAPI(
    title="Classroom API",
    description="Classrooms, join codes, assignments, submissions, grading and threaded comments",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(classrooms.router)
app.include_router(assignments.router)
app.include_router(announcements.router)
app.include_router(comments.router)

@app.get("/")
async def root():
    return {
        "message": "Classroom API",
        "version": settings.app_version,
        "status": "active"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
