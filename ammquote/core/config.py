"""Settings read from the environment (and ``.env`` if present).

Variables:
* ``AMMQUOTE_DEBOUNCE_MS``: debounce window for live quotes (default 300)
* ``AMMQUOTE_ORACLE_TIMEOUT_S``: oracle call timeout in seconds, unset = wait forever
* ``AMMQUOTE_FEE_PRECISION``: decimals kept from the market fee (default 4)
* ``AMMQUOTE_LOG_LEVEL``: log level for the demo runner (default INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv  # type: ignore


@dataclass(frozen=True)
class Settings:
    debounce_s: float = 0.3
    oracle_timeout_s: Optional[float] = None
    fee_precision: int = 4
    log_level: str = "INFO"


def _get_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    defaults = Settings()
    debounce_ms = _get_float("AMMQUOTE_DEBOUNCE_MS")
    timeout_s = _get_float("AMMQUOTE_ORACLE_TIMEOUT_S")
    precision = _get_float("AMMQUOTE_FEE_PRECISION")
    return Settings(
        debounce_s=(
            max(0.0, debounce_ms) / 1000.0 if debounce_ms is not None else defaults.debounce_s
        ),
        oracle_timeout_s=timeout_s if timeout_s and timeout_s > 0 else None,
        fee_precision=int(precision) if precision is not None else defaults.fee_precision,
        log_level=(os.getenv("AMMQUOTE_LOG_LEVEL") or defaults.log_level).upper(),
    )
