"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import database
from app.exceptions import GoalWizardError, http_status
from app.logging_config import setup_logging
from app.routers import actions, generation, goals, targets

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await database.connect()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Goal Wizard API",
    description="Backend API for the SMART goal wizard",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as ``{"error": message}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and wrongly typed fields are client errors (400)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid" or tuple(first.get("loc", ())) == ("body",):
        message = "Invalid JSON body."
    else:
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"{field} is invalid."
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(GoalWizardError)
async def goal_wizard_exception_handler(request: Request, exc: GoalWizardError):
    """Domain errors raised outside a route body (e.g. in dependencies)."""
    return JSONResponse(status_code=http_status(exc), content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal error"})


# Include routers
app.include_router(generation.router)
app.include_router(goals.router)
app.include_router(targets.router)
app.include_router(actions.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Goal Wizard API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
