from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.handlers import register_exception_handlers
from app.core.logging import logger
from app.api.v1.router import api_router
from app.services.notification.notifier import NotificationSink
from app.services.student.roster import RosterEngine


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its own roster and notification sink.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG
    )

    app.state.roster = RosterEngine()
    app.state.notifier = NotificationSink(timeout=settings.NOTIFICATION_TIMEOUT_SECONDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root():
        """
        Health check endpoint
        """
        return {
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "docs": "/docs",
            "version": settings.APP_VERSION
        }

    logger.info(f"{settings.PROJECT_NAME} initialised with {app.state.roster.count()} students")
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=default_settings.HOST, port=default_settings.PORT)
