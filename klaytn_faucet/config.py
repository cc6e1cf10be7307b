from __future__ import annotations

"""
Configuration for the Klaytn faucet.

The three values that define a faucet instance come from the positional CLI
arguments and are passed to :class:`Settings` directly:

    chain_id      (int, > 0)       : EIP-155 chain id used when signing
    rpc_url       (str)            : Klaytn node JSON-RPC endpoint
    faucet_key    (SecretStr)      : faucet private key, hex

Optional operational knobs may be supplied through the environment
(pydantic-settings, prefix ``FAUCET_``):

    FAUCET_HOST            (str, default "0.0.0.0")
    FAUCET_PORT            (int, default 80)
    FAUCET_RPC_TIMEOUT     (float, default 10.0)  : per node call, seconds
    FAUCET_RPC_NAMESPACE   (str, default "klay")  : "eth" for Kaia eth-compat

The grant amount and gas parameters are fixed policy constants
(see ``services.tx_builder``) and are not configurable.
"""

from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .adapters.node_rpc import NodeRpcConfig


class Settings(BaseSettings):
    chain_id: int = Field(..., gt=0, description="EIP-155 chain id")
    rpc_url: str = Field(..., description="Klaytn node JSON-RPC endpoint")
    faucet_key: SecretStr = Field(..., description="Faucet private key (hex)")

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(80, ge=0, le=65535, description="Bind port")
    rpc_timeout: float = Field(10.0, gt=0, description="Timeout per node call (seconds)")
    rpc_namespace: str = Field("klay", description="JSON-RPC method namespace")

    model_config = SettingsConfigDict(
        env_prefix="FAUCET_", case_sensitive=False, extra="ignore"
    )

    @field_validator("rpc_namespace")
    @classmethod
    def _check_namespace(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("klay", "kaia", "eth"):
            raise ValueError("rpc_namespace must be one of klay, kaia, eth")
        return v

    def to_node_rpc_config(self) -> NodeRpcConfig:
        return NodeRpcConfig(
            url=self.rpc_url,
            timeout_s=self.rpc_timeout,
            namespace=self.rpc_namespace,
        )


def load_settings(
    chain_id: int,
    rpc_url: str,
    faucet_key: str,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> Settings:
    """
    Build settings from the CLI values; explicit host/port override the env.
    """
    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    return Settings(chain_id=chain_id, rpc_url=rpc_url, faucet_key=faucet_key, **overrides)


__all__ = ["Settings", "load_settings"]
