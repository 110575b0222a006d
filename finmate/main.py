import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from finmate.config import settings
from finmate.core import clock
from finmate.core.database import init_db, AsyncSessionLocal
from finmate.core.errors import FinmateError
from finmate.api.router import api_router
from finmate.services.scheduler import RecurringScheduler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "Users",
        "description": "Registration, login and profile.",
    },
    {
        "name": "Transactions",
        "description": "Income and expense entries.",
    },
    {
        "name": "Recurring",
        "description": "Monthly templates posted automatically by the daily job.",
    },
    {
        "name": "Reports",
        "description": "Summaries, category breakdowns and calendar views.",
    },
    {
        "name": "System",
        "description": "Service health.",
    },
]

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
### FinMate API

Personal finance tracking: categories, transactions, recurring transactions,
savings goals, reports, receipt scanning and the Finpet assistant.
    """,
    version=settings.VERSION,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

scheduler = RecurringScheduler(AsyncSessionLocal, run_hour=settings.RECURRING_RUN_HOUR)


@app.exception_handler(FinmateError)
async def finmate_error_handler(request: Request, exc: FinmateError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path", "header"))
        errors.append({"field": field, "message": err["msg"]})
    return JSONResponse(status_code=400, content={"errors": errors})


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


@app.on_event("startup")
async def startup():
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    settings.MEDIA_DIR.mkdir(parents=True, exist_ok=True)
    await init_db()
    if settings.RECURRING_SCHEDULER_ENABLED:
        scheduler.start()


@app.on_event("shutdown")
async def shutdown():
    await scheduler.stop()


app.include_router(api_router, prefix=settings.API_PREFIX)
app.mount("/media", StaticFiles(directory=settings.MEDIA_DIR, check_dir=False), name="media")


@app.get("/health", tags=["System"])
def health():
    return {
        "status": "operational",
        "version": settings.VERSION,
        "today": clock.today()
    }
