"""FastAPI application exposing normalization, validation and code generation."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graphbuilder.config import configure_logging
from server.catalog_routes import router as catalog_router
from server.graph_routes import router as graph_router

from dotenv import load_dotenv
load_dotenv()  # load environment variables from .env file

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

API_VERSION = "0.1.0"

configure_logging()

app = FastAPI(
    title="GraphBuilder API",
    description="Normalize agent workflow graphs, validate them and generate LangGraph skeletons",
    version=API_VERSION,
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
app.include_router(catalog_router, prefix="/api")
app.include_router(graph_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": API_VERSION,
        "endpoints": {
            "tools": "/api/tools",
            "templates": "/api/templates",
            "normalize": "/api/graphs/normalize",
            "validate": "/api/graphs/validate",
            "generate": "/api/graphs/generate?target=python",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
