"""Utility helpers shared across the project."""

from __future__ import annotations

import os
import time
from importlib import metadata
from pathlib import Path
from typing import Union

PathLike = Union[str, os.PathLike[str]]

DISTRIBUTION_NAME = "hookbridge"


def path_from_root(*parts: PathLike) -> str:
    """Join ``parts`` to the current working directory and return the path as ``str``.

    Absolute arguments replace the accumulated result, the same way
    :meth:`pathlib.Path.joinpath` behaves.
    """

    cwd = Path.cwd()
    if not parts:
        return str(cwd)

    joined = cwd.joinpath(*(Path(p) for p in parts))
    return str(joined)


def get_filename(prefix: str, suffix: str, directory: PathLike) -> str:
    """Return an absolute filename constructed from ``prefix`` and ``suffix``.

    The filename is generated under ``directory`` (relative to the current working directory)
    and suffixed with a timestamp so repeated calls do not collide.
    """

    target_dir = Path(path_from_root(directory))
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = time.strftime("%Y%m%d_%H%M%S")
    return str(target_dir / f"{prefix}{timestamp}{suffix}")


def get_version() -> str:
    """
    Return the installed version of the package.

    Returns:
        str: The project version, or "0.0.0-dev" when running from a source checkout
        that was never installed.
    """
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


def is_windows() -> bool:
    """Return True when running on a Windows-family host."""
    return os.name == "nt"


def file_extension(path: PathLike) -> str:
    """Return the lower-case extension of ``path`` without the leading dot."""
    return Path(path).suffix[1:].lower()
