import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from fuelai.core.config import settings
from fuelai.core.database import engine
from fuelai.core.exceptions import FuelAIError
from fuelai.core.startup import startup_event
from fuelai.models import Base
from fuelai.api.auth import auth_router
from fuelai.api.meal_plans import meal_plans_router
from fuelai.api.meals import meals_router
from fuelai.api.tasks import tasks_router
from fuelai.api.calendar import calendar_router
from fuelai.middleware.security import SecurityHeadersMiddleware
from fuelai.middleware.rate_limit import limiter, rate_limit_exceeded_handler, create_rate_limit_middleware
from fuelai.middleware.request_limits import create_request_limit_middleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event()
    yield

app = FastAPI(
    title="FuelAI API",
    description="Backend API for meal planning, calendar and task tracking",
    version="1.0.0",
    lifespan=lifespan
)

async def fuelai_error_handler(request: Request, exc: FuelAIError) -> JSONResponse:
    """Translate domain errors into their HTTP status with a plain detail message."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

app.add_exception_handler(FuelAIError, fuelai_error_handler)

# Configure rate limiting
if settings.RATE_LIMIT_ENABLED:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add security headers middleware (should be added before CORS)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(create_request_limit_middleware())

rate_limit_middleware = create_rate_limit_middleware()
if rate_limit_middleware:
    app.add_middleware(rate_limit_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Requested-With"],
)

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(meal_plans_router, prefix="/api/meal-plans", tags=["meal-plans"])
app.include_router(meals_router, prefix="/api/meals", tags=["meals"])
app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
app.include_router(calendar_router, prefix="/api/calendar", tags=["calendar"])

@app.get("/")
async def root():
    return {"message": "FuelAI API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
