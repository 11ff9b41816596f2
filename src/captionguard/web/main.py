# src/captionguard/web/main.py
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.requests import Request

from captionguard import __version__
from captionguard.core.env import get_settings
from captionguard.core.errors import CaptionGuardError, DifyApiError
from captionguard.core.logging import get_logger, init_logging
from captionguard.web.routes import router

logger = get_logger(__name__)


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers
    )


async def _dify_error(request: Request, exc: DifyApiError) -> JSONResponse:
    logger.error("Caption generation failed [%s]: %s", exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status, content={"error": exc.message, "code": exc.code}
    )


async def _captionguard_error(request: Request, exc: CaptionGuardError) -> JSONResponse:
    logger.error("%s: %s", type(exc).__name__, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="CaptionGuard API",
        description="Caption drafting with 薬機法 review and hashtag selection",
        version=__version__,
    )
    app.add_exception_handler(HTTPException, _http_error)
    app.add_exception_handler(DifyApiError, _dify_error)
    app.add_exception_handler(CaptionGuardError, _captionguard_error)
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    init_logging()
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.system.port, log_config=None)


if __name__ == "__main__":
    run()
