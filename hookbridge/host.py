"""Repository handle bound as ``host`` into embedded hook scripts."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, NoReturn, Optional

import git

from hookbridge.exceptions import AbortRequested


class HostAPI:
    """
    Read access to the repository an operation runs against.

    Scripts call :meth:`abort` to stop the triggering operation; everything else
    only reads repository state.
    """

    def __init__(self, repo: git.Repo):
        self._repo = repo

    @classmethod
    def for_operation(cls, operation: object) -> "HostAPI":
        """
        Resolve the handle from ``operation.repository``.

        The attribute may hold a :class:`git.Repo` or a path inside a working tree.

        Raises:
            git.InvalidGitRepositoryError: if the path is not inside a repository
            git.NoSuchPathError: if the path does not exist
            ValueError: if the operation has no repository
        """
        repository = getattr(operation, "repository", None)
        if repository is None:
            raise ValueError(f"{type(operation).__name__} has no repository")
        if isinstance(repository, git.Repo):
            return cls(repository)
        return cls(git.Repo(os.fspath(repository), search_parent_directories=True))

    @property
    def repo(self) -> git.Repo:
        return self._repo

    @property
    def working_dir(self) -> Optional[Path]:
        working_dir = self._repo.working_tree_dir
        return Path(working_dir) if working_dir else None

    def head_commit(self) -> Optional[str]:
        """Return the hexsha of HEAD, or None on an unborn branch."""
        try:
            return self._repo.head.commit.hexsha
        except ValueError:
            return None

    def active_branch(self) -> Optional[str]:
        """Return the checked out branch name, or None when HEAD is detached."""
        if self._repo.head.is_detached:
            return None
        return self._repo.active_branch.name

    def staged_files(self) -> List[str]:
        """Return the paths staged for the next commit."""
        if self.head_commit() is None:
            return sorted({path for path, _stage in self._repo.index.entries})
        return sorted({diff.b_path or diff.a_path for diff in self._repo.index.diff("HEAD")})

    def is_dirty(self) -> bool:
        return self._repo.is_dirty(untracked_files=True)

    def read_file(self, path: str, rev: str = "HEAD") -> str:
        """Return the content of ``path`` at revision ``rev``."""
        return self._repo.git.show(f"{rev}:{path}")

    def abort(self, message: str) -> NoReturn:
        """Stop the triggering operation with ``message``."""
        raise AbortRequested(message)
