from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from storerate import schemas
from storerate.api import deps
from storerate.api.api import api_router
from storerate.core.config import settings
from storerate.core.exceptions import AppError
from storerate.core.logger import setup_logger
from storerate.database.database import engine, init_models

# Parent of every storerate.* module logger
logger = setup_logger("storerate")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_TITLE} {settings.APP_VERSION}...")
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_models()
        logger.info("Database tables created")
    yield
    logger.info("Shutting down application...")
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Reported as 400 so malformed bodies look the same as missing fields
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = "Missing or invalid fields"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": f"{message}."})


app.include_router(api_router, prefix="/api")


@app.get("/api/health", response_model=schemas.HealthStatus)
async def health_check(db: AsyncSession = Depends(deps.get_db)):
    """Checks that the database answers."""
    database_status = "ok"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        database_status = "error"
    return {"status": "ok", "database": database_status}


def run():
    uvicorn.run("storerate.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
