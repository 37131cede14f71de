from __future__ import annotations
import logging, os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

APP_DIR = Path(__file__).parent
DATA_DIR = APP_DIR / "data"
DEFAULT_CATALOG = DATA_DIR / "products_list.csv"


class ConfigError(RuntimeError):
    """Raised at startup when a required setting is missing or invalid."""


def _require(env: Mapping[str, str], key: str) -> str:
    val = (env.get(key) or "").strip()
    if not val:
        raise ConfigError(f"{key} missing. Set it in .env or environment.")
    return val


def _number(env: Mapping[str, str], key: str, default, cast=float):
    raw = env.get(key)
    if raw in (None, ""):
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    exchange_api_key: str
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 30.0
    exchange_api_url: str = "https://api.fastforex.io"
    exchange_timeout: float = 10.0
    catalog_path: Path = DEFAULT_CATALOG
    max_function_steps: int = 5
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment (after loading backend/.env).
        Fails fast with ConfigError so a misconfigured server never starts.
        """
        if env is None:
            load_dotenv(dotenv_path=APP_DIR / ".env", override=False)
            env = os.environ

        steps = _number(env, "MAX_FUNCTION_STEPS", 5, cast=int)
        if steps < 1:
            raise ConfigError("MAX_FUNCTION_STEPS must be at least 1")

        level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"LOG_LEVEL must be a logging level name, got {level!r}")

        return cls(
            openai_api_key=_require(env, "OPENAI_API_KEY"),
            exchange_api_key=_require(env, "OPEN_EXCHANGE_RATES_API_KEY"),
            openai_model=env.get("OPENAI_MODEL") or "gpt-4o-mini",
            openai_timeout=_number(env, "OPENAI_TIMEOUT", 30.0),
            exchange_api_url=(env.get("EXCHANGE_API_URL") or "https://api.fastforex.io").rstrip("/"),
            exchange_timeout=_number(env, "EXCHANGE_TIMEOUT", 10.0),
            catalog_path=Path(env.get("CATALOG_PATH") or DEFAULT_CATALOG),
            max_function_steps=steps,
            log_level=level,
        )
