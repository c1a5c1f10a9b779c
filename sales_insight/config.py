"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_OUTPUT_DIR = "output"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    model: str
    output_dir: Path
    rule_catch_all: bool

    def with_output_dir(self, output_dir: str | Path) -> "Settings":
        return replace(self, output_dir=Path(output_dir))


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name}: {raw} (expected one of {sorted(_TRUE_VALUES | _FALSE_VALUES)})")


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None
    model = os.getenv("SALES_INSIGHT_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL
    output_dir = os.getenv("SALES_INSIGHT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR).strip() or DEFAULT_OUTPUT_DIR
    return Settings(
        api_key=api_key,
        model=model,
        output_dir=Path(output_dir),
        rule_catch_all=_parse_bool("SALES_INSIGHT_RULE_CATCH_ALL", default=True),
    )
