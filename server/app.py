"""FastAPI application for storing and serving templates."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server import template_db
from server.template_routes import router as template_router

from dotenv import load_dotenv
load_dotenv()  # load environment variables from .env file

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database tables on startup."""
    template_db.init_db()
    yield


app = FastAPI(
    title="Template Composer API",
    description="API server for multi-service deployment templates",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routes
app.include_router(template_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "template_db": str(template_db.TEMPLATE_DB_PATH),
        "endpoints": {
            "templates": "/api/templates",
            "graph": "/api/templates/{template_id}/graph",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
