"""
Environment snapshots.
A snapshot is the read-only name -> value table one load works from.
"""

import logging
import os
from types import MappingProxyType
from typing import Mapping

from dotenv import dotenv_values, find_dotenv

logger = logging.getLogger(__name__)


def mapping_snapshot(env: Mapping[str, str]) -> Mapping[str, str]:
    """Freeze a copy of ``env``. Pass a dict for tests."""
    return MappingProxyType(dict(env))


def environ_snapshot() -> Mapping[str, str]:
    """Freeze a copy of the process environment."""
    return mapping_snapshot(os.environ)


def dotenv_snapshot(dotenv_path: str | os.PathLike | None = None, override: bool = False) -> Mapping[str, str]:
    """
    Merge a .env file with the process environment without touching os.environ.

    - dotenv_path: file to read (default: the nearest .env found by find_dotenv)
    - override: let .env values win over variables already set in the process
    """
    if dotenv_path is None:
        dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        logger.debug("no .env file found; using process environment only")
        return environ_snapshot()

    # a bare `KEY` line in .env parses to None: treat it as unset
    file_values = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
    logger.debug("read %d variables from %s", len(file_values), dotenv_path)

    if override:
        merged = {**os.environ, **file_values}
    else:
        merged = {**file_values, **os.environ}
    return mapping_snapshot(merged)
