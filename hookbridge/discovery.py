"""Locate the hook files of a repository."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

import git

from hookbridge.log_manager import log

HOOKS_DIR_NAME = ".hooks"
SAMPLE_SUFFIX = ".sample"

_HOOK_NAME_RE = re.compile(r"^(?P<phase>pre|post)_(?P<operation>[A-Za-z0-9_-]+?)(?:\.[^.]+)?$")


class HookPhase(Enum):
    """When a hook runs relative to its operation."""

    PRE = "pre"
    POST = "post"


@dataclass(frozen=True)
class HookDescriptor:
    """One hook file and the operation phase it is wired to."""

    path: Path
    phase: HookPhase
    operation: Optional[str] = None

    @property
    def is_pre(self) -> bool:
        return self.phase is HookPhase.PRE


def hooks_dir_for(repository: git.Repo | str | os.PathLike[str]) -> Optional[Path]:
    """Return the ``.hooks`` directory of a repository's working tree, or None for a bare one."""

    if not isinstance(repository, git.Repo):
        repository = git.Repo(os.fspath(repository), search_parent_directories=True)
    working_dir = repository.working_tree_dir
    if working_dir is None:
        return None
    return Path(working_dir) / HOOKS_DIR_NAME


def parse_hook_name(path: str | os.PathLike[str]) -> Optional[HookDescriptor]:
    """Return the descriptor encoded in a ``<phase>_<operation>[.<ext>]`` file name."""

    hook_path = Path(path)
    match = _HOOK_NAME_RE.match(hook_path.name)
    if not match:
        return None
    return HookDescriptor(
        path=hook_path,
        phase=HookPhase(match.group("phase")),
        operation=match.group("operation").lower(),
    )


def find_hooks(
    hooks_dir: Optional[str | os.PathLike[str]], operation_name: Optional[str] = None
) -> List[HookDescriptor]:
    """
    List the hooks found in ``hooks_dir``.

    Args:
        hooks_dir: The repository's hook directory
        operation_name: Only return hooks for this operation type

    Returns:
        List of hook descriptors sorted by file name
    """
    if hooks_dir is None:
        return []
    directory = Path(hooks_dir)
    if not directory.is_dir():
        log.debug("No hook directory at '%s'", directory)
        return []

    wanted = operation_name.lower() if operation_name else None
    descriptors: List[HookDescriptor] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not entry.is_file() or entry.name.endswith(SAMPLE_SUFFIX):
            continue
        descriptor = parse_hook_name(entry)
        if descriptor is None:
            continue
        if wanted and descriptor.operation != wanted:
            continue
        descriptors.append(descriptor)

    log.debug("Found %d hooks in '%s' for '%s'", len(descriptors), directory, wanted or "*")
    return descriptors
