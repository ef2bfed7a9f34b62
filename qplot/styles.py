from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import logging
from typing import Any, ClassVar, TypeVar

from qplot.core.backends import Backend
from qplot.errors import StyleLookupError

LOGGER = logging.getLogger(__name__)

K = TypeVar("K", bound=type)


class Style:
    """Optional base for styles.

    A style is anything with ``draw_canvas(channel)`` and/or
    ``draw_object(channel, obj)``. The backend sets below restrict which
    backends each role applies to; ``None`` means every backend.
    """

    backends: ClassVar[frozenset[str] | None] = None
    canvas_backends: ClassVar[frozenset[str] | None] = None
    object_backends: ClassVar[frozenset[str] | None] = None


def _role_applies(value: Any, attr: str, backend: Backend) -> bool:
    allowed = getattr(value, attr, None)
    if allowed is None:
        allowed = getattr(value, "backends", None)
    return allowed is None or backend.name in allowed


def is_canvas_style(value: Any, backend: Backend) -> bool:
    if isinstance(value, type):
        return False
    return callable(getattr(value, "draw_canvas", None)) and _role_applies(value, "canvas_backends", backend)


def is_object_style(value: Any, backend: Backend) -> bool:
    if isinstance(value, type):
        return False
    return callable(getattr(value, "draw_object", None)) and _role_applies(value, "object_backends", backend)


@dataclass(frozen=True)
class StyleVariant:
    """Closed set of style alternatives admissible for one plottable kind."""

    kind: type
    alternatives: tuple[type, ...]
    default: Any = None

    def accepts(self, style: Any) -> bool:
        return type(style) in self.alternatives

    def make_default(self) -> Any:
        if self.default is not None:
            return self.default
        return self.alternatives[0]()


class StyleRegistry:
    """Capability table mapping each plottable kind to its style alternatives."""

    def __init__(self) -> None:
        self._variants: dict[type, StyleVariant] = {}

    def register(self, kind: type, *alternatives: type, default: Any = None) -> StyleVariant:
        if not isinstance(kind, type):
            raise TypeError(f"kind must be a class, got {kind!r}")
        if not alternatives:
            raise StyleLookupError(f"{kind.__name__} must declare at least one style alternative")
        for alt in alternatives:
            if not isinstance(alt, type):
                raise TypeError(f"style alternatives must be classes, got {alt!r}")
        if len(set(alternatives)) != len(alternatives):
            raise StyleLookupError(f"{kind.__name__} declares a style alternative twice")
        if default is not None and type(default) not in alternatives:
            raise StyleLookupError(
                f"default style {type(default).__name__} is not an alternative for {kind.__name__}"
            )
        variant = StyleVariant(kind=kind, alternatives=tuple(alternatives), default=default)
        if kind in self._variants:
            LOGGER.debug("replacing style alternatives for %s", kind.__name__)
        self._variants[kind] = variant
        return variant

    def has_styles(self, *alternatives: type, default: Any = None) -> Callable[[K], K]:
        def decorate(kind: K) -> K:
            self.register(kind, *alternatives, default=default)
            return kind

        return decorate

    def variant_for(self, kind: type) -> StyleVariant:
        try:
            return self._variants[kind]
        except KeyError:
            raise StyleLookupError(f"no styles registered for {kind.__name__}") from None

    def kinds(self) -> tuple[type, ...]:
        return tuple(self._variants)

    def __contains__(self, kind: object) -> bool:
        return kind in self._variants

    def build_table(self, kinds: Iterable[type]) -> "StyleTable":
        seen: list[type] = []
        for kind in kinds:
            if kind not in seen:
                seen.append(kind)
        if not seen:
            raise StyleLookupError("at least one plottable kind is required")
        return StyleTable([self.variant_for(kind) for kind in seen])


DEFAULT_REGISTRY = StyleRegistry()


def has_styles(
    *alternatives: type,
    default: Any = None,
    registry: StyleRegistry | None = None,
) -> Callable[[K], K]:
    """Class decorator declaring the style alternatives of a plottable kind."""
    return (registry or DEFAULT_REGISTRY).has_styles(*alternatives, default=default)


class StyleTable:
    """Currently selected style per plottable kind, one slot per kind."""

    def __init__(self, variants: Sequence[StyleVariant], active: Sequence[Any] | None = None) -> None:
        self._variants = tuple(variants)
        self._index = {variant.kind: i for i, variant in enumerate(self._variants)}
        if active is None:
            self._active = [variant.make_default() for variant in self._variants]
        else:
            if len(active) != len(self._variants):
                raise ValueError("active styles must match the number of slots")
            self._active = list(active)

    @property
    def kinds(self) -> tuple[type, ...]:
        return tuple(variant.kind for variant in self._variants)

    def copy(self) -> "StyleTable":
        return StyleTable(self._variants, self._active)

    def update(self, style: Any) -> int:
        """Select ``style`` in every slot that admits its type; returns the number of slots changed."""
        changed = 0
        for i, variant in enumerate(self._variants):
            if variant.accepts(style):
                self._active[i] = style
                changed += 1
        return changed

    def slot_for(self, kind: type) -> int:
        for base in kind.__mro__:
            index = self._index.get(base)
            if index is not None:
                return index
        raise StyleLookupError(f"no style slot for {kind.__name__}; kinds: {[k.__name__ for k in self.kinds]}")

    def has_slot(self, kind: type) -> bool:
        return any(base in self._index for base in kind.__mro__)

    def active_for(self, kind: type) -> Any:
        return self._active[self.slot_for(kind)]

    def variant_for(self, kind: type) -> StyleVariant:
        return self._variants[self.slot_for(kind)]

    def snapshot(self) -> tuple[Any, ...]:
        return tuple(self._active)

    def __len__(self) -> int:
        return len(self._variants)

    def __iter__(self) -> Iterator[tuple[type, Any]]:
        for variant, style in zip(self._variants, self._active):
            yield variant.kind, style

    def __repr__(self) -> str:
        slots = ", ".join(f"{kind.__name__}={style!r}" for kind, style in self)
        return f"StyleTable({slots})"
