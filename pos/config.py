# pos/config.py
import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field

# Runtime settings. Every field can be overridden with a POS_<FIELD> env var.

class Settings(BaseModel):
    products_latency: float = Field(0.8, ge=0)
    categories_latency: float = Field(0.3, ge=0)
    order_latency: float = Field(1.2, ge=0)
    order_success_rate: float = Field(0.85, ge=0, le=1)
    service_timeout: Optional[float] = Field(None, gt=0)
    log_level: str = "INFO"
    api_base_url: str = "http://127.0.0.1:8085"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"POS_{name.upper()}")
            if raw not in (None, ""):
                values[name] = raw
        return cls(**values)

@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
