from __future__ import annotations

import os as _os
from typing import Optional

_FALSY = frozenset({"", "0", "false", "no", "off"})


def env_value(name: str) -> Optional[str]:
    """Get the current value of an env var by name, or None if missing."""
    return _os.environ.get(name)


def env_flag(name: str) -> bool:
    """True when the env var is set to anything but an empty/false-like value."""
    value = env_value(name)
    if value is None:
        return False
    return value.strip().lower() not in _FALSY


def debug_py_trace() -> bool:
    return env_flag("ORION_DEBUG_PY_TRACE")
