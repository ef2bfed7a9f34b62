from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
import tomllib
from typing import Any

from .backends import Backend, backend_named

CONFIG_ENV = "QPLOT_CONFIG"
DEBUG_ENV = "QPLOT_DEBUG"
DEFAULT_CONFIG_NAME = "qplot.toml"
DEBUG_CMD = "cat"
DEBUG_BACKENDS = frozenset({"python", "gnuplot"})

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled(env: Mapping[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    return env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY


def load_config(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read the TOML config named by ``path``, ``$QPLOT_CONFIG`` or ``./qplot.toml``.

    A missing default file yields an empty config; a missing explicit file is an error.
    """
    env = os.environ if env is None else env
    explicit = path is not None or bool(env.get(CONFIG_ENV))
    if path is None:
        path = env.get(CONFIG_ENV) or DEFAULT_CONFIG_NAME
    config_path = Path(path)
    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"qplot config not found: {config_path}")
        return {}
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    backends = raw.get("backends", {})
    if not isinstance(backends, dict):
        raise ValueError("config field `backends` must be a table")
    for name, table in backends.items():
        if not isinstance(table, dict):
            raise ValueError(f"config field `backends.{name}` must be a table")
        cmd = table.get("cmd")
        if cmd is not None and (not isinstance(cmd, str) or not cmd.strip()):
            raise ValueError(f"config field `backends.{name}.cmd` must be a non-empty string")
    return raw


def resolve_command(
    backend: Backend,
    *,
    env: Mapping[str, str] | None = None,
    config: Mapping[str, Any] | None = None,
) -> str:
    env = os.environ if env is None else env
    if debug_enabled(env) and backend.name in DEBUG_BACKENDS:
        return DEBUG_CMD
    override = env.get(f"QPLOT_{backend.name.upper()}_CMD", "").strip()
    if override:
        return override
    if config is None:
        config = load_config(env=env)
    table = config.get("backends", {}).get(backend.name, {})
    cmd = table.get("cmd")
    if cmd:
        return str(cmd)
    return backend.cmd


def resolve_backend(
    backend: Backend | str,
    *,
    env: Mapping[str, str] | None = None,
    config: Mapping[str, Any] | None = None,
) -> Backend:
    """Apply env and config overrides to ``backend``, given as a value or a built-in name."""
    if isinstance(backend, str):
        backend = backend_named(backend)
    cmd = resolve_command(backend, env=env, config=config)
    if cmd == backend.cmd:
        return backend
    return backend.with_cmd(cmd)
