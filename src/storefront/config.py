"""Storefront client settings, read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:12000/api"
DEFAULT_DELIVERY_FEE = 5.0
DEFAULT_CART_KEY = "cart"
STORAGE_BACKENDS = ("file", "memory")
ORDER_API_BACKENDS = ("http", "fake")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_token: str | None = None
    api_timeout: float = 10.0
    order_api_backend: str = "http"
    storage_backend: str = "file"
    data_dir: Path = Path("~/.storefront")
    cart_key: str = DEFAULT_CART_KEY
    delivery_fee: float = DEFAULT_DELIVERY_FEE
    log_dir: Path = Path("logs")

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(f"Unsupported storage backend: {self.storage_backend!r}")
        if self.order_api_backend not in ORDER_API_BACKENDS:
            raise ValueError(f"Unsupported Order API backend: {self.order_api_backend!r}")
        if self.delivery_fee < 0:
            raise ValueError("Delivery fee cannot be negative")
        if self.api_timeout <= 0:
            raise ValueError("API timeout must be positive")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_url=(_get_env("STOREFRONT_API_URL", default=DEFAULT_API_URL) or DEFAULT_API_URL).rstrip("/"),
            api_token=_get_env("STOREFRONT_API_TOKEN"),
            api_timeout=_get_float("STOREFRONT_API_TIMEOUT", 10.0),
            order_api_backend=(_get_env("STOREFRONT_ORDER_API", default="http") or "http").lower(),
            storage_backend=(_get_env("STOREFRONT_STORAGE", default="file") or "file").lower(),
            data_dir=Path(_get_env("STOREFRONT_DATA_DIR", default="~/.storefront") or "~/.storefront").expanduser(),
            cart_key=_get_env("STOREFRONT_CART_KEY", default=DEFAULT_CART_KEY) or DEFAULT_CART_KEY,
            delivery_fee=_get_float("STOREFRONT_DELIVERY_FEE", DEFAULT_DELIVERY_FEE),
            log_dir=Path(_get_env("STOREFRONT_LOG_DIR", default="logs") or "logs"),
        )
