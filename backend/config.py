"""
Server Configuration

Settings for the API process, read from SWINGKIN_* environment variables.
Kinematics tuning constants are not configured here; they live on the
classes that use them.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

ENV_PREFIX = "SWINGKIN_"


@dataclass(frozen=True)
class DetectorConfig:
    # MediaPipe Pose model: 0 (lite), 1 (full), 2 (heavy)
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass(frozen=True)
class AppConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = (
        "http://localhost:3000",      # React dev server
        "http://localhost:5173",      # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    )
    detector: DetectorConfig = field(default_factory=DetectorConfig)


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build AppConfig from the environment.

    Recognised variables: SWINGKIN_HOST, SWINGKIN_PORT, SWINGKIN_LOG_LEVEL,
    SWINGKIN_CORS_ORIGINS (comma separated), SWINGKIN_MODEL_COMPLEXITY.
    Unset variables keep their defaults.
    """
    env = os.environ if environ is None else environ
    defaults = AppConfig()

    def get(name: str) -> Optional[str]:
        value = env.get(ENV_PREFIX + name)
        return value.strip() if value and value.strip() else None

    origins = get("CORS_ORIGINS")
    complexity = get("MODEL_COMPLEXITY")

    return AppConfig(
        host=get("HOST") or defaults.host,
        port=int(get("PORT") or defaults.port),
        log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        cors_origins=(
            tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins else defaults.cors_origins
        ),
        detector=DetectorConfig(
            model_complexity=int(complexity) if complexity else defaults.detector.model_complexity,
        ),
    )


config = load_config()
