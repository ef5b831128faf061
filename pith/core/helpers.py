"""Helper registry — named callables exposed to templates.

A Project owns exactly one ``HelperRegistry`` for its whole lifetime.
The control script re-registers its helpers on every sync, so
registration under an existing name overwrites the previous callable in
place.  Anything holding a reference to the registry (a renderer, a
template context) sees the update without being rewired.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

logger = logging.getLogger(__name__)

Helper = Callable[..., Any]


class HelperRegistry:
    """Mutable mapping of helper names to callables.

    Examples
    --------
    >>> registry = HelperRegistry()
    >>> registry.register("shout", str.upper)
    >>> registry["shout"]("hi")
    'HI'
    >>> registry.register("shout", str.lower)
    >>> len(registry)
    1
    """

    def __init__(self) -> None:
        self._helpers: dict[str, Helper] = {}

    # -- Registration -------------------------------------------------------

    def register(self, name: str, fn: Helper) -> None:
        """Register ``fn`` under ``name``, replacing any previous helper.

        Raises
        ------
        ValueError
            If ``name`` is not a valid Python identifier (templates refer
            to helpers by bare name).
        TypeError
            If ``fn`` is not callable.
        """
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"Helper name must be an identifier, got {name!r}")
        if not callable(fn):
            raise TypeError(f"Helper {name!r} must be callable, got {type(fn).__name__}")
        replaced = name in self._helpers
        self._helpers[name] = fn
        logger.debug("%s helper %s", "Replaced" if replaced else "Registered", name)

    def helper(self, name: str | None = None) -> Callable[[Helper], Helper]:
        """Decorator form of :meth:`register`; defaults to the function name."""

        def decorator(fn: Helper) -> Helper:
            self.register(name or fn.__name__, fn)
            return fn

        return decorator

    def unregister(self, name: str) -> bool:
        """Remove a helper.  Returns ``True`` if it was registered."""
        return self._helpers.pop(name, None) is not None

    # -- Lookup -------------------------------------------------------------

    def get(self, name: str) -> Helper | None:
        return self._helpers.get(name)

    def names(self) -> list[str]:
        return sorted(self._helpers)

    def as_dict(self) -> dict[str, Helper]:
        """Snapshot copy, suitable for a template context."""
        return dict(self._helpers)

    def __getitem__(self, name: str) -> Helper:
        return self._helpers[name]

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._helpers)

    def __getattr__(self, name: str) -> Helper:
        # Lets templates write {{ helpers.shout(x) }}
        try:
            return self.__dict__["_helpers"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"HelperRegistry({self.names()!r})"
