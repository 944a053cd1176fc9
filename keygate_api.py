#!/usr/bin/env python3
"""
Keygate FastAPI Service

Issues time-limited access keys with an 18 hour per-user cooldown,
validates keys, and reports registry statistics.
"""

from fastapi import FastAPI, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field
from contextlib import asynccontextmanager
from typing import Optional
import logging
from datetime import datetime, timezone
import os

from keygate.config.settings import settings, get_static_dir
from keygate.services.key_registry import KeyRegistry
from keygate.services.registry_storage import JsonFileRegistryStorage
from keygate.utils.errors import ValidationError, CooldownActiveError

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Global KeyRegistry instance
registry_instance: Optional[KeyRegistry] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the key registry on startup"""
    global registry_instance
    storage = JsonFileRegistryStorage(settings.db_file)
    registry_instance = KeyRegistry(storage=storage)
    logger.info(f"Keygate API started on http://{settings.host}:{settings.port}")
    logger.info(f"Key registry database: {storage.path}")
    yield
    registry_instance = None
    logger.info("Keygate API shut down")


# Initialize FastAPI app
app = FastAPI(
    title="Keygate API",
    description="Time-limited access key issuance and validation",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# Pydantic models for request validation
class UserRequest(BaseModel):
    user_id: Optional[str] = Field(None, alias="userId", description="ID of the user the key is for")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "userId": "user_12345"
            }
        }
    )


class ValidateKeyRequest(BaseModel):
    key: Optional[str] = Field(None, description="Access key to validate")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "key": "aB3dE5fG7hJ9kL1mN3pQ5rS7tV9wX1yZ"
            }
        }
    )


def get_registry() -> KeyRegistry:
    """Dependency returning the active KeyRegistry"""
    if registry_instance is None:
        raise HTTPException(status_code=503, detail="Key registry is not initialized")
    return registry_instance


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# Key endpoints
@app.post("/api/generate", tags=["Keys"])
async def generate_key(
    request: Optional[UserRequest] = None,
    registry: KeyRegistry = Depends(get_registry)
):
    """
    Generate a new access key for a user

    - **userId**: User requesting the key; one key per 18 hours
    """
    try:
        generated = await registry.generate(request.user_id if request else None)
        return {"success": True, **generated.to_dict()}

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CooldownActiveError as e:
        return JSONResponse(status_code=429, content=e.to_dict())


@app.post("/api/validate", tags=["Keys"])
async def validate_key(
    request: Optional[ValidateKeyRequest] = None,
    registry: KeyRegistry = Depends(get_registry)
):
    """
    Check whether an access key exists and is still active

    - **key**: The key to check
    """
    try:
        result = await registry.validate(request.key if request else None)
        return {"success": True, **result.to_dict()}

    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"success": False, "valid": False, "error": str(e)}
        )


@app.get("/api/keys", tags=["Keys"])
async def list_keys(registry: KeyRegistry = Depends(get_registry)):
    """List every issued key with current statistics"""
    listing = await registry.list_keys()
    return {"success": True, **listing.to_dict()}


@app.get("/api/stats", tags=["Keys"])
async def get_stats(registry: KeyRegistry = Depends(get_registry)):
    """Get key registry statistics"""
    stats = await registry.get_stats()
    return {"success": True, "stats": stats.to_dict()}


@app.post("/api/cooldown", tags=["Keys"])
async def check_cooldown(
    request: Optional[UserRequest] = None,
    registry: KeyRegistry = Depends(get_registry)
):
    """
    Check whether a user may generate a key now

    - **userId**: User to check
    """
    try:
        status = await registry.check_cooldown(request.user_id if request else None)
        return {"success": True, **status.to_dict()}

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc):
    """Malformed request bodies are client errors, reported as 400"""
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """General exception handler"""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )


# Static frontend, mounted last so the API routes take precedence
static_dir = get_static_dir()
if os.path.isdir(static_dir):
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")


def main() -> None:
    import uvicorn

    uvicorn.run(
        "keygate_api:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
