from contextlib import asynccontextmanager
from fastapi import FastAPI
from loguru import logger
from fastapi.exceptions import RequestValidationError
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.security.api.router import router as security_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Verify the database on startup, release the pool on shutdown."""
    driver = DatabaseManager.get_instance().sql
    await driver.connect()
    logger.info(f"{settings.APP_NAME} started ({settings.APP_ENV})")
    yield
    await driver.disconnect()


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Initialize logging configuration
LogConfig.setup_logging(level="DEBUG" if settings.DEBUG else "INFO")

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)

app.include_router(
    security_router,
    prefix=settings.API_V1_SECURITY_PREFIX,
    tags=["Security Management"]
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
