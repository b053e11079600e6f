"""Decorator for defining phases with minimal boilerplate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, overload

T = TypeVar("T")


@overload
def phase(cls: type[T], *, name: str | None = None, **dataclass_kwargs: Any) -> type[T]: ...


@overload
def phase(
    cls: None = None, *, name: str | None = None, **dataclass_kwargs: Any
) -> Callable[[type[T]], type[T]]: ...


def phase(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """Decorator to define a Phase with automatic inheritance and dataclass.

    1. Makes the class inherit from Phase (if not already)
    2. Applies @dataclass(slots=True)
    3. Registration happens through Phase.__init_subclass__

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom name. If None, uses the class name in snake_case.
    **dataclass_kwargs : Any
        Additional keyword arguments passed to @dataclass.

    Examples
    --------
    Simplest usage:
        @phase
        class Harvest:
            def execute(self, sim: Simulation) -> None:
                ...

    With custom name:
        @phase(name="harvest_resources")
        class Harvest:
            def execute(self, sim: Simulation) -> None:
                ...
    """
    from turnengine.core.phase import Phase

    dataclass_kwargs.setdefault("slots", True)

    def decorator(cls: type[T]) -> type[T]:
        if not issubclass(cls, Phase):
            # Rebuild on Phase alone so slots work (no multiple inheritance)
            namespace: dict[str, Any] = {
                "__module__": cls.__module__,
                "__qualname__": cls.__qualname__,
                "__annotations__": getattr(cls, "__annotations__", {}),
            }
            for attr_name, value in vars(cls).items():
                if not attr_name.startswith("__"):
                    namespace[attr_name] = value
            if name is not None:
                namespace["name"] = name
            if cls.__doc__:
                namespace["__doc__"] = cls.__doc__

            cls = type(cls.__name__, (Phase,), namespace)  # type: ignore[assignment]
        elif name is not None:
            cls.name = name  # type: ignore[attr-defined]

        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)
