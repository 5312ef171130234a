"""Total order over media types.

Sorts media types in accordance with an accept preference, falling back to a
built-in priority table and finally to lexical order so that no two distinct
media types ever compare equal.
"""

from collections.abc import Callable, Iterable, Mapping
import functools
import types
from typing import TYPE_CHECKING, Any

from conneg.models import MediaType
from conneg.utils.http import count_wildcards


if TYPE_CHECKING:
    from conneg.preference import MediaTypePreference


# Consulted when media types tie on quality and specificity.
FALLBACK_PRIORITIES: Mapping[str, float] = types.MappingProxyType(
    {
        'application/xhtml+xml': 1.0,
        'text/html': 0.9,
        'application/rdf+xml': 0.8,
    }
)


def _sign(x: Any) -> int:
    return int(x > 0) - int(x < 0)


def fallback_priority(media_type: MediaType) -> float:
    return FALLBACK_PRIORITIES.get(media_type.essence, 0.0)


def compare_by_wildcard_count(a: MediaType, b: MediaType) -> int:
    """Negative if ``a`` has fewer wildcards than ``b``."""
    return _sign(count_wildcards(a) - count_wildcards(b))


def compare_by_quality_param(a: MediaType, b: MediaType) -> int:
    return _sign(b.quality - a.quality)


def compare_by_fallback_priority(a: MediaType, b: MediaType) -> int:
    return _sign(fallback_priority(b) - fallback_priority(a))


def compare_lexically(a: MediaType, b: MediaType) -> int:
    return int(a.canonical > b.canonical) - int(a.canonical < b.canonical)


def inconsistent_compare(a: MediaType | None, b: MediaType | None) -> int:
    """Compare by wildcard count, own ``q`` parameter and fallback priority.

    This is not consistent with equality: distinct media types may compare as 0.
    ``None`` sorts after everything else.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    return compare_by_wildcard_count(a, b) or compare_by_quality_param(a, b) or compare_by_fallback_priority(a, b)


class MediaTypeOrdering:
    """Comparator returning a negative number when the first media type is preferred.

    When bound to a :class:`MediaTypePreference`, the quality each type is accepted with
    takes precedence over everything but equality. The embedded ``q`` parameter of the
    compared types is only consulted by the unbound ordering.
    """

    def __init__(self, preference: 'MediaTypePreference | None' = None) -> None:
        self.preference = preference

    def __call__(self, a: MediaType, b: MediaType) -> int:
        return self.compare(a, b)

    def compare(self, a: MediaType, b: MediaType) -> int:
        if a == b:
            return 0
        if self.preference is not None:
            ret = _sign(self.preference.accepted_quality(b) - self.preference.accepted_quality(a))
            if ret:
                return ret
            ret = compare_by_wildcard_count(a, b) or compare_by_fallback_priority(a, b)
        else:
            ret = inconsistent_compare(a, b)
        return ret or compare_lexically(a, b)

    def key(self) -> Callable[[MediaType], Any]:
        return functools.cmp_to_key(self.compare)

    def sort(self, media_types: Iterable[MediaType]) -> list[MediaType]:
        return sorted(media_types, key=self.key())


DEFAULT_ORDERING = MediaTypeOrdering()
