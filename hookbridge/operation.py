"""Base class for host commands that run repository hooks around their work."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Mapping, Optional

import git


class Operation(ABC):
    """
    A host command whose configuration hooks may read and rewrite.

    Subclasses are usually dataclasses: their fields are what hooks see as
    ``params``. The ``repository`` attribute locates the repository whose
    ``.hooks`` directory is searched; it can be a :class:`git.Repo` or a path.
    """

    hook_name: ClassVar[Optional[str]] = None
    repository: Any = None

    def call(self) -> Any:
        """Run the operation, wrapped by the repository's pre and post hooks."""
        # pylint: disable=import-outside-toplevel
        from hookbridge.executor import run_with_hooks

        return run_with_hooks(self, self._call)

    @abstractmethod
    def _call(self) -> Any:
        """Perform the operation itself."""


def hook_name_of(operation: object) -> str:
    """Return the operation-type name hook files are matched against."""
    name = getattr(operation, "hook_name", None) or type(operation).__name__
    return name.lower()


def resolve_repository(operation: object) -> Optional[git.Repo]:
    """Return the repository of ``operation`` as a :class:`git.Repo`, or None."""
    repository = getattr(operation, "repository", None)
    if repository is None or isinstance(repository, git.Repo):
        return repository
    return git.Repo(str(repository), search_parent_directories=True)


def parameter_operation(name: str, values: Mapping[str, Any], repository: Any = None) -> Operation:
    """
    Build an operation whose fields are exactly ``values``.

    The CLI uses it to run a single hook without a real host command behind it;
    calling it returns the final field values.
    """

    def _call(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    fields = [
        (key, Any, dataclasses.field(default_factory=lambda value=value: value))
        for key, value in values.items()
    ]
    cls = dataclasses.make_dataclass(
        "ParameterOperation",
        fields,
        bases=(Operation,),
        namespace={"hook_name": name, "_call": _call},
    )
    operation = cls()
    operation.repository = repository
    return operation
