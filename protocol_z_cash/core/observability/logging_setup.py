from __future__ import annotations

import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

LOG_ENV_VAR = "PROTOCOL_LOG"

# Used when PROTOCOL_LOG is not set.
DEFAULT_FILTER = "protocol_z_cash=info,uvicorn=info,uvicorn.access=info,fastapi=info"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Levels above CRITICAL silence a logger entirely.
_OFF = logging.CRITICAL + 10

_LEVELS: Dict[str, int] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": _OFF,
}


def _level(name: str) -> Optional[int]:
    return _LEVELS.get(name.strip().lower())


def parse_filter(spec: str) -> Tuple[Optional[int], Dict[str, int], List[str]]:
    """
    Parse a comma-separated filter such as "protocol_z_cash=debug,uvicorn=warn".

    A directive is either `logger=level` or a bare `level`, which applies to the
    root logger. Returns (root_level, per-logger levels, invalid directives).
    """
    root: Optional[int] = None
    targets: Dict[str, int] = {}
    invalid: List[str] = []

    for raw in (spec or "").split(","):
        directive = raw.strip()
        if not directive:
            continue

        if "=" not in directive:
            lvl = _level(directive)
            if lvl is None:
                invalid.append(directive)
            else:
                root = lvl
            continue

        name, _, level_name = directive.partition("=")
        name = name.strip()
        lvl = _level(level_name)
        if not name or lvl is None:
            invalid.append(directive)
            continue
        targets[name] = lvl

    return root, targets, invalid


def configure_logging(spec: Optional[str] = None) -> None:
    """
    Install a single stream handler and apply the filter directives.

    `spec` defaults to $PROTOCOL_LOG, or DEFAULT_FILTER when that is unset.
    """
    if spec is None:
        spec = os.getenv(LOG_ENV_VAR) or DEFAULT_FILTER

    root_level, targets, invalid = parse_filter(spec)

    logging.basicConfig(
        level=root_level if root_level is not None else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    for name, lvl in targets.items():
        logging.getLogger(name).setLevel(lvl)

    if invalid:
        logging.getLogger("protocol_z_cash").warning(
            "ignoring invalid %s directives: %s", LOG_ENV_VAR, ", ".join(invalid)
        )
