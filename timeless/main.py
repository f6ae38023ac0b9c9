"""Application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from timeless.api.v1.router import get_api_router
from timeless.core.config import get_config
from timeless.core.exceptions import TimelessException
from timeless.core.startup import bootstrap
from timeless.realtime.notifier import Notifier, build_notifier
from timeless.schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)


async def _handle_domain_error(request: Request, exc: TimelessException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api.error", extra={"event": "api.error", "context": {"path": request.url.path}}, exc_info=exc)
    envelope = ErrorEnvelope(error_code=exc.error_code, detail=str(exc) or exc.error_code)
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def create_app(notifier: Notifier | None = None, run_bootstrap: bool = True) -> FastAPI:
    """Create the FastAPI application.

    The notifier is created here and its lifecycle bound to the app lifespan;
    tests may pass their own.
    """
    cfg = get_config()
    active_notifier = notifier or build_notifier(cfg.NOTIFIER_BACKEND)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_bootstrap:
            bootstrap()
        await active_notifier.init()
        app.state.notifier = active_notifier
        try:
            yield
        finally:
            await active_notifier.teardown()

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.state.notifier = active_notifier
    app.add_exception_handler(TimelessException, _handle_domain_error)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    cfg = get_config()
    uvicorn.run("timeless.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
