"""
Configuration for the engine.

Defaults cover library use. `load_config()` is an explicit opt-in that reads
HKT_* environment variables (and a .env file); nothing in the engine calls
it implicitly.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class EngineConfig:
    """Engine configuration"""
    # Seal the instance registry the first time it is read
    seal_on_first_read: bool = True
    # Seconds to block when a future's representative element is needed; None waits forever
    future_timeout: Optional[float] = 30.0
    # Seconds a law sampler waits for a future before calling it pending
    sampler_timeout: float = 0.01
    law_samples: int = 25
    law_seed: int = 20160901
    # Directory for hypothesis to keep failing law examples in; None keeps nothing
    law_database: Optional[str] = None


def load_config() -> EngineConfig:
    """Load configuration from environment."""
    load_dotenv()

    timeout = os.getenv("HKT_FUTURE_TIMEOUT", "30")

    return EngineConfig(
        seal_on_first_read=_flag(os.getenv("HKT_SEAL_ON_FIRST_READ", "true")),
        future_timeout=None if timeout.lower() in ("", "none") else float(timeout),
        sampler_timeout=float(os.getenv("HKT_SAMPLER_TIMEOUT", "0.01")),
        law_samples=int(os.getenv("HKT_LAW_SAMPLES", "25")),
        law_seed=int(os.getenv("HKT_LAW_SEED", "20160901")),
        law_database=os.getenv("HKT_LAW_DATABASE") or None,
    )


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
