from fastapi import FastAPI

from activity3d.api.routes.activity import router
from activity3d.core.observability import configure_logging
from activity3d.core.observability import init_sentry
from activity3d.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the HTTP application serving contribution matrices."""

    app_settings = settings or Settings()
    configure_logging(app_settings.log_level)
    init_sentry(app_settings)

    app = FastAPI(title="activity3d")
    app.state.settings = app_settings
    app.include_router(router)
    return app
