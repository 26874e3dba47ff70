"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from receipts.domain.exceptions import ValidationError
from receipts.domain.service.escpos_encoder import MIN_LINE_WIDTH
from receipts.infrastructure.logs import LOG_FORMATS, LOG_LEVELS

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_CATALOG = Path(__file__).resolve().parents[3] / "data" / "catalog.json"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    business_name: str = "ONEFAITH"
    line_width: int = 32
    catalog_path: Path = _DEFAULT_CATALOG
    printer_device: Path = Path("/dev/usb/lp0")
    rawbt_enabled: bool = True
    carwash_discounts: bool = False
    html_dir: Path = Path(tempfile.gettempdir())
    log_level: str = "INFO"
    log_format: str = "json"

    @staticmethod
    def from_env(load_env_file: bool = True) -> Settings:
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ
        defaults = Settings()
        line_width = _int(env, "RECEIPTS_LINE_WIDTH", defaults.line_width)
        if line_width < MIN_LINE_WIDTH:
            raise ValidationError(
                f"RECEIPTS_LINE_WIDTH must be at least {MIN_LINE_WIDTH}, got {line_width}",
                field="RECEIPTS_LINE_WIDTH",
            )
        return Settings(
            business_name=env.get("RECEIPTS_BUSINESS_NAME", defaults.business_name),
            line_width=line_width,
            catalog_path=Path(env.get("RECEIPTS_CATALOG_PATH", str(defaults.catalog_path))),
            printer_device=Path(env.get("RECEIPTS_PRINTER_DEVICE", str(defaults.printer_device))),
            rawbt_enabled=_bool(env, "RECEIPTS_RAWBT_ENABLED", defaults.rawbt_enabled),
            carwash_discounts=_bool(env, "RECEIPTS_CARWASH_DISCOUNTS", defaults.carwash_discounts),
            html_dir=Path(env.get("RECEIPTS_HTML_DIR", str(defaults.html_dir))),
            log_level=_choice(env, "RECEIPTS_LOG_LEVEL", defaults.log_level, LOG_LEVELS).upper(),
            log_format=_choice(
                env, "RECEIPTS_LOG_FORMAT", defaults.log_format, LOG_FORMATS
            ).lower(),
        )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{key} must be an integer, got {raw!r}", field=key) from None


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValidationError(f"{key} must be true or false, got {raw!r}", field=key)


def _choice(env: Mapping[str, str], key: str, default: str, choices: Iterable[str]) -> str:
    raw = env.get(key)
    if raw is None:
        return default
    allowed = {c.lower() for c in choices}
    if raw.strip().lower() not in allowed:
        raise ValidationError(
            f"{key} must be one of {', '.join(sorted(allowed))}, got {raw!r}", field=key
        )
    return raw.strip()
