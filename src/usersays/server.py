"""FastAPI application serving the upload page and upload endpoint."""

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from loguru import logger
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from usersays import __version__
from usersays.config.models import Config
from usersays.page import INDEX_HTML
from usersays.services.orchestrator import UploadOrchestrator
from usersays.utils.logging import get_logger

UPLOAD_PATH = "/api/uploadFile"

access_log = get_logger("usersays.access")

_FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config | None = None,
    orchestrator_factory: Callable[[], UploadOrchestrator] | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Root configuration (defaults to Config()).
        orchestrator_factory: Builds the orchestrator used for a request.
            Defaults to one UploadOrchestrator shared by all requests.
    """
    cfg = config or Config()
    if orchestrator_factory is None:
        shared = UploadOrchestrator(cfg.upload)

        def orchestrator_factory() -> UploadOrchestrator:
            return shared

    factory = orchestrator_factory
    app = FastAPI(title="usersays", version=__version__, docs_url=None, redoc_url=None)
    app.state.config = cfg

    async def get_orchestrator() -> UploadOrchestrator:
        return factory()

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        http_version = request.scope.get("http_version", "1.1")
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        try:
            response = await call_next(request)
        except Exception:
            access_log.info(
                '"{} {} HTTP/{}" {}', request.method, target, http_version, 500
            )
            raise
        access_log.info(
            '"{} {} HTTP/{}" {}',
            request.method,
            target,
            http_version,
            response.status_code,
        )
        return response

    @app.post(UPLOAD_PATH, response_class=PlainTextResponse)
    async def upload_file(
        request: Request,
        orchestrator: UploadOrchestrator = Depends(get_orchestrator),
    ) -> PlainTextResponse:
        form = await request.form()
        try:
            upload = _pick_upload(form, cfg.upload.form_field)
            if upload is None:
                logger.warning("Upload form has no file field")
                return PlainTextResponse("No file found in upload form")

            logger.info("Received upload {} ({})", upload.filename, upload.content_type)
            data = await upload.read()
        finally:
            await form.close()

        return PlainTextResponse(await orchestrator.handle_upload(data))

    @app.api_route("/", methods=_FALLBACK_METHODS, response_class=HTMLResponse)
    @app.api_route("/{path:path}", methods=_FALLBACK_METHODS, response_class=HTMLResponse)
    async def index(path: str = "") -> HTMLResponse:
        return HTMLResponse(INDEX_HTML)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Any, exc: StarletteHTTPException) -> PlainTextResponse:
        if exc.status_code == 400:
            return PlainTextResponse("Bad Request", status_code=400)
        if exc.status_code == 404:
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(UnicodeDecodeError)
    async def malformed_request_handler(_: Any, exc: UnicodeDecodeError) -> PlainTextResponse:
        logger.error("Malformed request: {}", exc)
        return PlainTextResponse("Bad Request", status_code=400)

    @app.exception_handler(FileNotFoundError)
    async def not_found_handler(_: Any, exc: FileNotFoundError) -> PlainTextResponse:
        logger.error("Not found: {}", exc)
        return PlainTextResponse("Not Found", status_code=404)

    @app.exception_handler(Exception)
    async def internal_error_handler(_: Any, exc: Exception) -> PlainTextResponse:
        logger.opt(exception=exc).error("Unhandled error while serving request")
        return PlainTextResponse("Internal server error", status_code=500)

    return app


def _pick_upload(form: Any, field: str) -> UploadFile | None:
    """Return the configured file field, else the first file in the form."""
    preferred = form.get(field)
    if isinstance(preferred, UploadFile):
        return preferred
    for value in form.values():
        if isinstance(value, UploadFile):
            return value
    return None


def run_service(config: Config) -> None:  # pragma: no cover - integration path
    """Serve the application with uvicorn until interrupted."""
    import uvicorn

    app = create_app(config)
    logger.info(
        "HTTP server listening on http://{}:{}/", config.server.host, config.server.port
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)
