"""Public pipeline API."""

from .ffetch import FFetch, FFetchStream, Predicate, Producer, Transform, ffetch

__all__ = [
    "FFetch",
    "FFetchStream",
    "Predicate",
    "Producer",
    "Transform",
    "ffetch",
]
