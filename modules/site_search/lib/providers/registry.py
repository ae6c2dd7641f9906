from __future__ import annotations

from .base import SearchProvider

# kind -> provider class, filled by @register as the backends are imported
_REGISTRY: dict[str, type[SearchProvider]] = {}


def register(cls: type[SearchProvider]) -> type[SearchProvider]:
    """
    Class decorator for SearchProvider backends.

    The class must carry a non-empty `kind` (the value users pass as
    --provider / SITE_SEARCH_PROVIDER). `label` is what outcome messages
    print ("No results found on <label>"); it falls back to the class name.
    """
    kind = getattr(cls, "kind", "") or ""
    if not isinstance(kind, str) or not kind.strip():
        raise ValueError(f"Cannot register provider {cls!r}: missing/empty 'kind'.")
    key = kind.strip().lower()
    if key in _REGISTRY and _REGISTRY[key] is not cls:
        raise ValueError(f"Provider kind {key!r} already registered to {_REGISTRY[key]!r}.")
    if not cls.label:
        cls.label = cls.__name__
    _REGISTRY[key] = cls
    return cls


def get(kind: str) -> type[SearchProvider]:
    """
    Resolve a provider kind (case-insensitive, surrounding blanks ignored).
    Raises KeyError naming the known kinds, which the CLI shows as-is.
    """
    key = (kind or "").strip().lower()
    if key not in _REGISTRY:
        known = ", ".join(sorted(_REGISTRY)) or "none"
        raise KeyError(f"No provider registered for kind {kind!r} (known: {known}).")
    return _REGISTRY[key]


def all_kinds() -> dict[str, type[SearchProvider]]:
    return dict(_REGISTRY)


def describe(default: str | None = None) -> list[tuple[str, str, bool]]:
    """
    (kind, label, is_default) for every registered provider, sorted by kind.
    `default` is the kind a run would use when none is given.
    """
    default_key = (default or "").strip().lower()
    return [(kind, cls.label, kind == default_key) for kind, cls in sorted(_REGISTRY.items())]
