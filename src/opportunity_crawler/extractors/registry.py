from __future__ import annotations

from typing import Callable

from .base import Extractor, ExtractorKind

_REGISTRY: dict[ExtractorKind, Extractor] = {}


class ExtractorRegistrationError(ValueError):
    """Raised when no extractor is registered for a layout."""


def register_extractor(kind: ExtractorKind) -> Callable[[Extractor], Extractor]:
    def decorator(extractor: Extractor) -> Extractor:
        _REGISTRY[kind] = extractor
        return extractor

    return decorator


def get_extractor(kind: ExtractorKind) -> Extractor:
    extractor = _REGISTRY.get(kind)
    if extractor is None:
        available = ", ".join(sorted(item.value for item in _REGISTRY)) or "none"
        raise ExtractorRegistrationError(
            f"No extractor registered for '{kind.value}'. Registered extractors: {available}"
        )
    return extractor


def registered_extractor_kinds() -> list[ExtractorKind]:
    return sorted(_REGISTRY, key=lambda item: item.value)
