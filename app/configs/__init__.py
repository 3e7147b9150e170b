from app.configs.settings import (
    CONFIG_MAP,
    DEFAULT_ERROR_MESSAGE,
    SLUG_CONFLICT_MESSAGE,
    HashingConfig,
    LimiterConfig,
    pool_kwargs,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_ERROR_MESSAGE",
    "SLUG_CONFLICT_MESSAGE",
    "HashingConfig",
    "LimiterConfig",
    "pool_kwargs",
    "settings",
]
