import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logger import get_logger
from web.backend.routers import preferences, progress, tasks

logger = get_logger("api")


def create_app() -> FastAPI:
    app = FastAPI(title="Arise API", version="1.0")

    raw_origins = os.getenv("ARISE_ALLOWED_ORIGINS", "*")
    allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_credentials = "*" not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "Arise"}

    user_prefix = "/api/v1/users/{user_id}"
    app.include_router(tasks.router, prefix=f"{user_prefix}/tasks", tags=["tasks"])
    app.include_router(progress.router, prefix=f"{user_prefix}/progress", tags=["progress"])
    app.include_router(preferences.router, prefix=f"{user_prefix}/preferences", tags=["preferences"])

    logger.info("Arise API ready (origins: %s)", ", ".join(allow_origins))
    return app


app = create_app()
