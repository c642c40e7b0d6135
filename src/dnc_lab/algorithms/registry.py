from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

FAMILIES = ("closest_pair", "matmul")


@dataclass(frozen=True)
class Algorithm:
    name: str
    family: str
    fn: Callable[..., Any]

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.fn(*args, **kwargs)


_REGISTRY: Dict[str, Algorithm] = {}


def register_algorithm(name: str, fn: Callable[..., Any], *, family: str) -> None:
    """
    Register an algorithm callable under a human-readable name.
    """
    if not callable(fn):
        raise TypeError("fn must be callable")
    if family not in FAMILIES:
        raise ValueError(f"family must be one of {FAMILIES}, got {family!r}.")
    _REGISTRY[name] = Algorithm(name=name, family=family, fn=fn)


def available_algorithms(family: Optional[str] = None) -> Tuple[str, ...]:
    """
    Return the names of registered algorithms, optionally for one family.
    """
    return tuple(
        sorted(name for name, algo in _REGISTRY.items() if family is None or algo.family == family)
    )


def get_algorithm(name: str) -> Algorithm:
    """
    Resolve an algorithm name to its registry entry.
    """
    try:
        return _REGISTRY[name]
    except KeyError as exc:
        available = ", ".join(sorted(_REGISTRY)) or "<empty>"
        raise KeyError(f"Unknown algorithm '{name}'. Registered algorithms: {available}") from exc
