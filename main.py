# main.py

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import load_settings
from dependencies import ServerContext, build_context
from logging_config import setup_logging

# Routers
from routers.home import router as home_router
from routers.preflight import router as preflight_router
from routers.webhook import CORS_HEADERS, router as webhook_router

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """
    Every unrouted request (unknown path or method) is a plain-text 404.
    """
    if request.method == "OPTIONS":
        # Asterisk-form targets like "OPTIONS *" never match a path route
        return Response(status_code=200, headers=CORS_HEADERS)
    if exc.status_code not in (404, 405):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code,
                                 headers={"Access-Control-Allow-Origin": "*"})
    logger.debug(f"No route for {request.method} {request.url.path}")
    return PlainTextResponse("Not Found", status_code=404, headers={"Access-Control-Allow-Origin": "*"})


def create_app(context: Optional[ServerContext] = None) -> FastAPI:
    if context is None:
        setup_logging()
        settings = load_settings()
        setup_logging(settings.debug_mode)
        context = build_context(settings)

    app = FastAPI(
        title="Webhook Deploy",
        description="GitHub push webhook listener that pulls and restarts the deployed service",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.context = context

    app.include_router(webhook_router)
    app.include_router(home_router)
    app.include_router(preflight_router)

    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    return app


def run():
    settings = app.state.context.settings
    logger.info("Starting the webhook deploy listener...")
    logger.info(f"Server is running on http://{settings.host}:{settings.port}/")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        backlog=settings.backlog,
        limit_concurrency=settings.limit_concurrency,
        log_config=None
    )


# For "uvicorn main:app"; run() serves this same instance
app = create_app()


if __name__ == "__main__":
    run()
