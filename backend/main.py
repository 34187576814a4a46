"""
Swing Kinematics Backend API

FastAPI application for real-time golf swing kinematics from 2D pose landmarks.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
import math
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router as api_router, API_VERSION
from api.websocket import websocket_endpoint
from config import config

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup code before app starts accepting requests,
    and cleanup code when app shuts down.
    """
    # Startup
    logger.info("Swing Kinematics API starting up...")
    logger.info(f"API docs: http://{config.host}:{config.port}/docs")
    logger.info(f"WebSocket: ws://{config.host}:{config.port}/ws/kinematics")

    # MediaPipe is only needed for image input; landmark input works without it
    try:
        from core.services.pose_detector import PoseDetector
        with PoseDetector(model_complexity=config.detector.model_complexity):
            logger.info("MediaPipe initialized successfully")
    except Exception as e:
        logger.warning(f"MediaPipe initialization warning: {e}")

    yield  # App runs here

    # Shutdown
    logger.info("Swing Kinematics API shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="Swing Kinematics API",
    description="""
    **Real-time Golf Swing Kinematics**

    Joint angles, segment lengths, arm IK, club estimate and swing phase
    from a stream of 2D body landmarks.

    ## Endpoints

    - `GET /api/health` - Health check
    - `POST /api/pose/detect` - Single image pose detection
    - `POST /api/kinematics/sequence` - Kinematics for a pose sequence
    - `POST /api/kinematics/export` - Joint angle history as CSV
    - `WS /ws/kinematics` - Real-time kinematics stream

    ## WebSocket Protocol

    Connect to `/ws/kinematics` and send landmarks as JSON:
```json
    {
        "type": "pose",
        "data": {"landmarks": [{"x": 310, "y": 220, "confidence": 0.9, "name": "left_wrist"}]},
        "timestamp": 1533.3
    }
```
    """,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Validation Errors
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    422 with the usual error list.

    Rejected NaN/inf inputs are echoed as strings, since they cannot be
    written as JSON.
    """
    errors = []
    for error in exc.errors():
        value = error.get("input")
        if isinstance(value, float) and not math.isfinite(value):
            error = {**error, "input": str(value)}
        errors.append(error)

    logger.warning(f"Rejected request to {request.url.path}: {len(errors)} validation error(s)")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# =============================================================================
# Routes
# =============================================================================

# Include REST API routes
app.include_router(api_router, prefix="/api")

# WebSocket endpoint
app.websocket("/ws/kinematics")(websocket_endpoint)


# =============================================================================
# Root endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": "Swing Kinematics API",
        "version": API_VERSION,
        "description": "Real-time golf swing kinematics",
        "docs": "/docs",
        "health": "/api/health",
        "websocket": "/ws/kinematics"
    }


# =============================================================================
# Run directly (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=True,
        log_level=config.log_level.lower()
    )
