# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from config import settings
from database import init_db
from utils.responses import error_response

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Router imports
from routes.products import router as products_router
from routes.orders import router as orders_router
from routes.logs import router as logs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create missing tables; schema changes go through alembic
    init_db()
    logger.info("Starting %s", settings.APP_NAME)
    yield
    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers: every error leaves the API as a failure envelope
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "Operation failed", [str(exc.detail)])


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    detail = str(exc) if settings.DEBUG else "Invalid argument provided."
    return error_response(status.HTTP_400_BAD_REQUEST, "Bad request", [detail])


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    detail = str(exc) if settings.DEBUG else "An error occurred while processing your request."
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", [detail])


# Router registration
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(logs_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


@app.get("/")
def read_root():
    return {"message": f"{settings.APP_NAME} is running"}
