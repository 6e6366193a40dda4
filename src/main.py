import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .logging_config import configure_logging
from .exceptions import BFHLError, ConfigError, UpstreamError
from .middleware import MaxBodySizeMiddleware, RequestLoggingMiddleware
from src.bfhl import router as bfhl_router
from src.bfhl.schemas import ErrorEnvelope, HealthEnvelope

settings = get_settings()
configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = structlog.get_logger("app")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # timeouts=None removes global default timeout, allowing per-request timeouts
    app.state.http_client = httpx.AsyncClient(timeout=None)
    logger.info("startup", app=settings.APP_NAME)
    
    yield
    
    await app.state.http_client.aclose()

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Added last runs first: CORS wraps logging, which wraps the size cap
app.add_middleware(
    MaxBodySizeMiddleware,
    max_body_size=settings.MAX_BODY_BYTES,
    identity=settings.OFFICIAL_EMAIL,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope.build(get_settings().OFFICIAL_EMAIL, message).model_dump()
    )

# Every handled failure is reported as 400
@app.exception_handler(BFHLError)
async def bfhl_exception_handler(request: Request, exc: BFHLError):
    log = logger.error if isinstance(exc, (ConfigError, UpstreamError)) else logger.warning
    log("request_failed", path=request.url.path, code=exc.code, message=exc.message)
    return error_response(400, exc.message)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, "Route not found")
    if exc.status_code == 405:
        return error_response(405, "Method not allowed")
    return error_response(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return error_response(500, "Internal server error")

@app.get("/health", response_model=HealthEnvelope)
async def health_check():
    return HealthEnvelope(official_email=get_settings().OFFICIAL_EMAIL)

# Include routers
app.include_router(bfhl_router)


def run() -> None:
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
