"""
linebasic API - FastAPI Application

Run with: uvicorn api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from linebasic import __version__
from api.routes.execute import router as execute_router
from api.routes.evaluate import router as evaluate_router
from api.routes.validate import router as validate_router
from api.routes.health import router as health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("linebasic API starting...")
    yield
    logger.info("linebasic API shutting down...")


app = FastAPI(
    title="linebasic API",
    description="Run line-numbered BASIC programs and evaluate expressions",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(execute_router, prefix="/api/v1", tags=["Execution"])
app.include_router(evaluate_router, prefix="/api/v1", tags=["Evaluation"])
app.include_router(validate_router, prefix="/api/v1", tags=["Validation"])


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "linebasic API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
