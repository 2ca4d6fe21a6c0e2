import os
from typing import Optional

DEBUG_ENV_VAR = "PYTIMSORT_DEBUG"
_TRUTHY = {"1", "true", "yes", "on"}


def debug_checks_enabled(debug: Optional[bool] = None) -> bool:
    """
    Whether |sort| should check the predicate and its own invariants.

    An explicit ``debug`` argument wins; otherwise this is controlled by the
    ``PYTIMSORT_DEBUG`` environment variable.
    """
    if debug is not None:
        return debug
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY
