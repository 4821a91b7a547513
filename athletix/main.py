from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from athletix.api.athletes import router as athletes_router
from athletix.api.auth.auth import router as auth_router
from athletix.api.auth.password import router as password_router
from athletix.api.settings.settings import router as settings_router
from athletix.api.sports import router as sports_router
from athletix.config.settings import settings
from athletix.core.errors import AthletixError
from athletix.core.logger import setup_logger
from athletix.db.bootstrap import init_db
from athletix.db.session import check_database_connection

setup_logger(level=settings.log_level, log_file=settings.log_file)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create tables and seed reference data before serving requests."""
    check_database_connection()
    init_db()
    yield
    logger.info("Athletix API shutting down")


app = FastAPI(title="Athletix API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(password_router)
app.include_router(sports_router)
app.include_router(athletes_router)
app.include_router(settings_router)


@app.exception_handler(AthletixError)
async def athletix_error_handler(request: Request, exc: AthletixError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=400, content={"message": message})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response


@app.get("/health")
def health():
    return {"status": "ok"}


logger.info("FastAPI application initialized")
