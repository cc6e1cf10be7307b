"""
Klaytn Faucet
=============

Single-account faucet: signs and broadcasts a fixed KLAY grant from one
controlled account to any requested address.

This package exposes:

- ``__version__``: semantic version string
- ``build_app(settings)``: convenience creator for a configured FastAPI app

Prefer importing submodules directly for specific concerns:
``klaytn_faucet.services.issuer``, ``klaytn_faucet.adapters.node_rpc``,
``klaytn_faucet.config``, etc.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__", "build_app"]


def build_app(settings):
    """
    Create and return a FastAPI application for the given settings.

    Importing lazily keeps ``import klaytn_faucet`` free of FastAPI and
    eth-account when only version metadata is needed.
    """
    from .app import create_app

    return create_app(settings)
