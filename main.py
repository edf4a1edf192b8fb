import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings
from confirmation import ConfirmationSender, build_confirmation_sender
from handler import InquiryHandler
from notifier import TelegramNotifier
from schemas import ErrorResponse, HealthStatus

log = logging.getLogger("kumagaya_kids")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Any:
    """Decode a JSON or HTML form body. Undecodable bodies come back as an empty dict."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    try:
        return await request.json()
    except ValueError:
        return {}


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[TelegramNotifier] = None,
    confirmation_sender: Optional[ConfirmationSender] = None,
) -> FastAPI:
    settings = settings or Settings()
    handler = InquiryHandler(
        notifier or TelegramNotifier(settings),
        confirmation_sender or build_confirmation_sender(settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Kumagaya Kids English API is ready on port %s", settings.port)
        for warning in settings.warnings():
            log.warning(warning)
        yield

    app = FastAPI(title="Kumagaya Kids English Inquiry API", lifespan=lifespan)
    app.state.settings = settings
    app.state.inquiry_handler = handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        body = ErrorResponse(error="An unexpected error occurred")
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/")
    def read_root():
        return {"message": "Kumagaya Kids English API is running"}

    @app.get("/api/health", response_model=HealthStatus)
    def health():
        now = datetime.now(timezone.utc)
        return HealthStatus(timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"))

    @app.post("/api/inquiry")
    async def create_inquiry(request: Request):
        """Validate, relay and acknowledge one inquiry form submission."""
        payload = await read_payload(request)
        result = await request.app.state.inquiry_handler.handle(payload)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
