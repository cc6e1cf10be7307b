"""
Version helpers for the Klaytn faucet.

- ``__version__`` is the semantic version for packaging.
- ``version()`` appends a short git commit (PEP 440 local part) when the
  build environment exposes one.
"""

from __future__ import annotations

import os
from typing import Optional

# Bump this when making a release; use semver (MAJOR.MINOR.PATCH)
__version__ = "0.1.0"


def _commit_short() -> Optional[str]:
    sha = os.getenv("GIT_COMMIT") or os.getenv("BUILD_SHA")
    if not sha:
        return None
    return sha.strip()[:7] or None


def version(base: str = __version__) -> str:
    """
    Return the composed version string.

    Examples
    --------
    - "0.1.0"            (no commit info)
    - "0.1.0+gabc1234"   (GIT_COMMIT / BUILD_SHA set)
    """
    commit = _commit_short()
    if not commit:
        return base
    return f"{base}+g{commit}"


__all__ = ["__version__", "version"]
