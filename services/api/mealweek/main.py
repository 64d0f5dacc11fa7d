# Meal planner API main entry point
import logging
import sys
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .errors import MealPlannerError, meal_planner_error_handler, request_validation_handler
from .settings import settings
from .routers.ready import router as ready_router
from .routers.generate import limiter, router as generate_router
from .routers.plans import router as plans_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("mealweek")

app = FastAPI(title="Meal Week API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(MealPlannerError, meal_planner_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(generate_router, prefix="/api", tags=["generate"])
app.include_router(plans_router, prefix="/api", tags=["plans"])
