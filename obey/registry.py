"""Function registry: action name -> callable, resolved at dispatch time."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Iterator, Mapping, Optional


class RegistryImportError(Exception):
    """Raised when a registry cannot be imported from a ``module:attribute`` path."""


class FunctionRegistry(Mapping[str, Any]):
    """Read-only view over the caller's name -> callable mapping.

    The engine only ever reads from it. Callers that want to build one
    incrementally can use :meth:`register` as a decorator.
    """

    def __init__(self, functions: Optional[Mapping[str, Any]] = None) -> None:
        self._functions: Mapping[str, Any] = functions if functions is not None else {}

    def __getitem__(self, name: str) -> Any:
        return self._functions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def resolve(self, name: str) -> Optional[Callable[..., Any]]:
        """Return the callable registered as ``name``, or None."""
        func = self._functions.get(name)
        if func is None or not callable(func):
            return None
        return func

    def register(self, name: Optional[str] = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator to register a function under ``name`` (default: its __name__)."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            if not isinstance(self._functions, dict):
                self._functions = dict(self._functions)
            self._functions[name or func.__name__] = func
            return func

        return decorator


def as_registry(functions: Any) -> FunctionRegistry:
    """Wrap a mapping in a FunctionRegistry (registries are returned unchanged)."""
    if isinstance(functions, FunctionRegistry):
        return functions
    if not isinstance(functions, Mapping):
        raise TypeError(f"functions must be a mapping of name -> callable, got {type(functions).__name__}")
    return FunctionRegistry(functions)


def import_registry(path: str) -> FunctionRegistry:
    """Import a registry from ``package.module:attribute``.

    The attribute may be a mapping, a FunctionRegistry, or a zero-argument
    callable returning either.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise RegistryImportError(f"Expected 'module:attribute', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RegistryImportError(f"Cannot import module {module_name!r}: {exc}") from exc
    try:
        target = getattr(module, attr)
    except AttributeError:
        raise RegistryImportError(f"Module {module_name!r} has no attribute {attr!r}") from None

    if callable(target) and not isinstance(target, Mapping):
        target = target()
    try:
        return as_registry(target)
    except TypeError as exc:
        raise RegistryImportError(str(exc)) from exc
