"""
Load config from config.yaml with optional env overrides.
Merged settings for RPC endpoints, timeouts, backend priority, batch pool size and server bind.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .feeds.aggregator.hermes import HERMES_BASE_URL, HTTP_TIMEOUT_S
from .feeds.onchain.fallback import DEFAULT_ATTEMPT_TIMEOUT_S, DEFAULT_CANDIDATE_ACCOUNTS, SOLANA_RPC_URL
from .feeds.onchain.primary import SONIC_RPC_URL
from .feeds.rpc import DEFAULT_TIMEOUT_S

# "fallback" is registered but only used when listed in backends.priority.
DEFAULT_BACKEND_PRIORITY = ("primary", "aggregator")

# Defaults if no YAML or env; endpoints come from the backend modules.
_DEFAULTS = {
    "rpc": {
        "primary_url": SONIC_RPC_URL,
        "fallback_url": SOLANA_RPC_URL,
        "timeout_s": DEFAULT_TIMEOUT_S,
    },
    "aggregator": {
        "base_url": HERMES_BASE_URL,
        "timeout_s": HTTP_TIMEOUT_S,
    },
    "fallback": {
        "candidate_accounts": list(DEFAULT_CANDIDATE_ACCOUNTS),
        "attempt_timeout_s": DEFAULT_ATTEMPT_TIMEOUT_S,
    },
    "backends": {"priority": list(DEFAULT_BACKEND_PRIORITY)},
    "batch": {"max_workers": 1},
    "server": {"host": "0.0.0.0", "port": 3000},
}


def _config_yaml_path() -> Path:
    """Config.yaml lives at repo root (parent of package dir)."""
    override = os.environ.get("GDP_CONFIG_PATH")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    config_path = _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    primary = os.environ.get("GDP_PRIMARY_RPC_URL")
    if primary:
        overrides.setdefault("rpc", {})["primary_url"] = primary
    fallback = os.environ.get("GDP_FALLBACK_RPC_URL")
    if fallback:
        overrides.setdefault("rpc", {})["fallback_url"] = fallback
    rpc_timeout = os.environ.get("GDP_RPC_TIMEOUT_S")
    if rpc_timeout:
        overrides.setdefault("rpc", {})["timeout_s"] = float(rpc_timeout)
    aggregator = os.environ.get("GDP_AGGREGATOR_URL")
    if aggregator:
        overrides.setdefault("aggregator", {})["base_url"] = aggregator
    backends = os.environ.get("GDP_BACKENDS")
    if backends:
        names = [b.strip() for b in backends.split(",") if b.strip()]
        overrides.setdefault("backends", {})["priority"] = names
    workers = os.environ.get("GDP_BATCH_WORKERS")
    if workers:
        overrides.setdefault("batch", {})["max_workers"] = int(workers)
    host = os.environ.get("GDP_HOST")
    if host:
        overrides.setdefault("server", {})["host"] = host
    port = os.environ.get("GDP_PORT")
    if port:
        overrides.setdefault("server", {})["port"] = int(port)
    return overrides


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def primary_rpc_url(cfg: Optional[dict] = None) -> str:
    return (cfg or get_config())["rpc"]["primary_url"]


def fallback_rpc_url(cfg: Optional[dict] = None) -> str:
    return (cfg or get_config())["rpc"]["fallback_url"]


def rpc_timeout_s(cfg: Optional[dict] = None) -> float:
    return float((cfg or get_config())["rpc"]["timeout_s"])


def aggregator_base_url(cfg: Optional[dict] = None) -> str:
    return (cfg or get_config())["aggregator"]["base_url"].rstrip("/")


def aggregator_timeout_s(cfg: Optional[dict] = None) -> float:
    return float((cfg or get_config())["aggregator"]["timeout_s"])


def fallback_candidate_accounts(cfg: Optional[dict] = None) -> List[str]:
    return list((cfg or get_config())["fallback"]["candidate_accounts"])


def fallback_attempt_timeout_s(cfg: Optional[dict] = None) -> float:
    return float((cfg or get_config())["fallback"]["attempt_timeout_s"])


def backend_priority(cfg: Optional[dict] = None) -> List[str]:
    return list((cfg or get_config())["backends"]["priority"])


def batch_max_workers(cfg: Optional[dict] = None) -> int:
    return max(1, int((cfg or get_config())["batch"]["max_workers"]))


def server_host(cfg: Optional[dict] = None) -> str:
    return (cfg or get_config())["server"]["host"]


def server_port(cfg: Optional[dict] = None) -> int:
    return int((cfg or get_config())["server"]["port"])


def catalog_entries(cfg: Optional[dict] = None) -> Optional[List[Any]]:
    """Catalog override from config.yaml, or None to use the built-in table."""
    entries = (cfg or get_config()).get("catalog")
    return list(entries) if entries else None
