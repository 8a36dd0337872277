"""tokenhost.version — semantic version of the reference host.

Resolution order: TOKENHOST_VERSION env → installed package metadata → BASE_VERSION.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata

# Bump on changes that affect stored layout or signed digests.
BASE_VERSION = "0.1.0"


@lru_cache(maxsize=1)
def compute_version() -> str:
    env = os.getenv("TOKENHOST_VERSION")
    if env:
        return env.strip()
    try:
        return importlib_metadata.version("tokencore")
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["BASE_VERSION", "compute_version", "__version__"]
