"""Explicit configuration for the Gemini and Shopify clients."""

import os
from dataclasses import dataclass, field


GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_SHOPIFY_API_VERSION = "2025-10"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class GeminiSettings:
    """Settings for the generative text endpoint.

    An empty ``api_key`` puts the client in degraded mode: it never touches the
    network and hands back placeholder content flagged as ``degraded``.
    ``allow_placeholder`` lets the pipelines write that placeholder content to
    the store, which is only useful against a development store.
    """
    api_key: str | None = None
    model: str = DEFAULT_GEMINI_MODEL
    base_url: str = GEMINI_BASE_URL
    timeout: float = 60.0
    allow_placeholder: bool = False

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @classmethod
    def from_env(cls) -> "GeminiSettings":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            timeout=_env_float("GEMINI_TIMEOUT", 60.0),
            allow_placeholder=_env_flag("SHOP_AUDIT_ALLOW_PLACEHOLDER"),
        )


@dataclass(frozen=True)
class ShopifySettings:
    """Settings for the Shopify Admin GraphQL API."""
    api_version: str = DEFAULT_SHOPIFY_API_VERSION
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "ShopifySettings":
        return cls(
            api_version=os.getenv("SHOPIFY_API_VERSION", DEFAULT_SHOPIFY_API_VERSION),
            timeout=_env_float("SHOPIFY_TIMEOUT", 30.0),
        )


@dataclass(frozen=True)
class Settings:
    """Top-level configuration handed to the CLI host."""
    gemini: GeminiSettings = field(default_factory=GeminiSettings)
    shopify: ShopifySettings = field(default_factory=ShopifySettings)
    shop: str | None = None
    access_token: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini=GeminiSettings.from_env(),
            shopify=ShopifySettings.from_env(),
            shop=os.getenv("SHOPIFY_SHOP"),
            access_token=os.getenv("SHOPIFY_ACCESS_TOKEN"),
        )
