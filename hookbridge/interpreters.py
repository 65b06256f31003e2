"""Registry of in-process interpreters, keyed by hook file extension."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Any, Dict, Iterable, List, MutableMapping, Optional, Protocol, Tuple

from hookbridge.log_manager import log
from hookbridge.utils import PathLike, file_extension

ENTRY_POINT_GROUP = "hookbridge.interpreters"


class ScriptInterpreter(Protocol):
    """Something able to evaluate a hook file inside the host process."""

    name: str
    extensions: Tuple[str, ...]

    def evaluate(self, script_path: Path, namespace: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Run the script with ``namespace`` as its globals and return the final namespace."""


class PythonInterpreter:
    """Evaluates ``.py`` hooks with the host's own interpreter."""

    name = "python"
    extensions: Tuple[str, ...] = ("py",)

    def evaluate(self, script_path: Path, namespace: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        source = script_path.read_text(encoding="utf-8")
        code = compile(source, str(script_path), "exec")
        namespace.setdefault("__name__", "__hook__")
        namespace.setdefault("__file__", str(script_path))
        exec(code, namespace)  # pylint: disable=exec-used
        return namespace


def _normalise(extension: str) -> str:
    return extension.lstrip(".").lower()


class InterpreterRegistry:
    """
    Maps file extensions to interpreters.

    A registry is filled during start-up and then frozen; after that it only
    answers lookups.
    """

    def __init__(self, interpreters: Iterable[ScriptInterpreter] = ()):
        self._by_extension: Dict[str, ScriptInterpreter] = {}
        self._frozen = False
        for interpreter in interpreters:
            self.register(interpreter)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "InterpreterRegistry":
        self._frozen = True
        return self

    def register(self, interpreter: ScriptInterpreter) -> None:
        """
        Register ``interpreter`` for every extension it declares.

        Args:
            interpreter: Interpreter to register

        Raises:
            RuntimeError: if the registry is frozen
        """
        if self._frozen:
            raise RuntimeError("Interpreter registry is frozen")
        for extension in interpreter.extensions:
            key = _normalise(extension)
            existing = self._by_extension.get(key)
            if existing is not None:
                log.warning(
                    "Interpreter '%s' already registered for '.%s', overwriting with '%s'",
                    existing.name,
                    key,
                    interpreter.name,
                )
            self._by_extension[key] = interpreter
            log.debug("Registered interpreter '%s' for '.%s'", interpreter.name, key)

    def get(self, extension: str) -> Optional[ScriptInterpreter]:
        """Return the interpreter for ``extension``, or None."""
        return self._by_extension.get(_normalise(extension))

    def for_file(self, script_path: PathLike) -> Optional[ScriptInterpreter]:
        """Return the interpreter matching the extension of ``script_path``, or None."""
        extension = file_extension(script_path)
        if not extension:
            return None
        return self.get(extension)

    def extensions(self) -> List[str]:
        return sorted(self._by_extension)


def _load_entry_point_interpreters() -> List[ScriptInterpreter]:
    """Instantiate interpreters published by installed distributions."""

    interpreters: List[ScriptInterpreter] = []
    for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            factory = entry_point.load()
            interpreters.append(factory())
        except (ImportError, AttributeError, TypeError) as exc:
            log.error("Failed to load interpreter plugin '%s': %s", entry_point.name, exc)
    return interpreters


_registry: Optional[InterpreterRegistry] = None


def get_registry() -> InterpreterRegistry:
    """Return the process-wide registry, building and freezing it on first use."""

    global _registry  # pylint: disable=global-statement
    if _registry is None:
        registry = InterpreterRegistry([PythonInterpreter()])
        for interpreter in _load_entry_point_interpreters():
            registry.register(interpreter)
        _registry = registry.freeze()
        log.debug("Embedded interpreters: %s", ", ".join(_registry.extensions()))
    return _registry
