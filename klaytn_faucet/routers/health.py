from __future__ import annotations

import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from .. import version as svc_version

router = APIRouter(tags=["health"])

_PROCESS_START = time.time()


def _version_blob() -> Dict[str, Any]:
    return {
        "service": "klaytn-faucet",
        "version": svc_version.version(),
        "python": "{}.{}.{}".format(*sys.version_info[:3]),
        "started_at": datetime.fromtimestamp(_PROCESS_START, tz=timezone.utc).isoformat(),
        "uptime_seconds": round(max(0.0, time.time() - _PROCESS_START), 3),
    }


@router.get("/healthz", summary="Liveness probe", response_model=None)
def healthz() -> Dict[str, Any]:
    """Always 200 while the process is serving requests."""
    return {"status": "ok", **_version_blob()}


@router.get("/version", summary="Service version", response_model=None)
def version(request: Request) -> Dict[str, Any]:
    """
    Version metadata plus the chain id and faucet address being served.
    """
    meta = _version_blob()
    issuer = getattr(request.app.state, "issuer", None)
    if issuer is not None:
        meta["chainId"] = issuer.chain_id
        meta["faucetAddress"] = issuer.signer.address
    return meta
