from collections.abc import Iterable, Iterator, Set
import contextlib
import dataclasses
import logging
import math
from typing import Self

from conneg.errors import InvalidArgumentError, ParseError
from conneg.models import QUALITY_PARAM, WILDCARD_TYPE, MediaType
from conneg.ordering import DEFAULT_ORDERING, MediaTypeOrdering
from conneg.utils import DuplicateValueError, insert_sorted_nodup
from conneg.utils.http import is_same_or_subtype, split_header


logger = logging.getLogger(__name__)

RFC7231_HEADER = 'accept'

DEFAULT_ACCEPT = '*/*'

MAX_QUALITY = 1000


def _media_type(value: MediaType | str) -> MediaType:
    return value if isinstance(value, MediaType) else MediaType.from_str(value)


@dataclasses.dataclass(frozen=True)
class PreferenceEntry:
    media_type: MediaType
    quality: int = MAX_QUALITY

    def __str__(self) -> str:
        return f'{self.media_type} with q={self.quality}'

    def _compare(self, other: 'PreferenceEntry') -> int:
        if self == other:
            return 0
        if self.quality != other.quality:
            return other.quality - self.quality
        return DEFAULT_ORDERING.compare(self.media_type, other.media_type)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._compare(other) >= 0

    @classmethod
    def from_media_type(cls, media_type: MediaType) -> Self:
        q = media_type.quality_param
        if q is None:
            return cls(media_type, MAX_QUALITY)
        try:
            q_value = float(q)
        except ValueError as e:
            raise ParseError(f'Invalid quality value {q!r} in {str(media_type)!r}') from e
        if not math.isfinite(q_value):
            raise ParseError(f'Invalid quality value {q!r} in {str(media_type)!r}')
        quality = min(max(round(q_value * MAX_QUALITY), 0), MAX_QUALITY)
        return cls(media_type.without_params(QUALITY_PARAM), quality)

    @classmethod
    def from_str(cls, s: str) -> Self:
        return cls.from_media_type(MediaType.from_str(s))


DEFAULT_ENTRY = PreferenceEntry(WILDCARD_TYPE, MAX_QUALITY)


def _sorted_entries(entries: Iterable[PreferenceEntry]) -> tuple[PreferenceEntry, ...]:
    ret: list[PreferenceEntry] = []
    for entry in entries:
        with contextlib.suppress(DuplicateValueError):
            insert_sorted_nodup(ret, entry)
    return tuple(ret) or (DEFAULT_ENTRY,)


class MediaTypePreference:
    """The media-type acceptance preference expressed by the values of HTTP Accept headers.

    Entries are kept sorted from most to least preferred: by quality, then by specificity,
    then by the fallback priority table and finally lexically. There is always at least one
    entry; a preference built from nothing usable is equivalent to ``*/*``.

    Instances are immutable and can be shared freely.
    """

    _entries: tuple[PreferenceEntry, ...]

    def __init__(self, entry_strings: Iterable[str] | None = None) -> None:
        self._entries = _sorted_entries(self._parse_entries(entry_strings or ()))

    @staticmethod
    def _parse_entries(entry_strings: Iterable[str]) -> Iterator[PreferenceEntry]:
        for s in entry_strings:
            try:
                yield PreferenceEntry.from_str(s)
            except ParseError:
                logger.warning('The string %r is not a valid media type', s, exc_info=True)

    @classmethod
    def _from_entries(cls, entries: Iterable[PreferenceEntry]) -> Self:
        ret = cls.__new__(cls)
        ret._entries = _sorted_entries(entries)
        return ret

    @classmethod
    def from_string(cls, header: str) -> Self:
        """Parse one header value, e.g. ``"image/png;q=1.0,image/*;q=0.7,text/plain;q=0.5"``."""
        if header is None:
            raise InvalidArgumentError("Header string can't be None")
        if not isinstance(header, str):
            raise InvalidArgumentError(f'Header must be a string, got {type(header).__name__}')
        return cls(split_header(header))

    @classmethod
    def from_headers(cls, headers: Iterable['MediaTypePreference | str']) -> Self:
        """Merge the headers of a single request into one preference holding the union of their entries."""
        if isinstance(headers, str):
            raise InvalidArgumentError('Expected a collection of headers, got a single string')
        prefs = [h if isinstance(h, MediaTypePreference) else cls.from_string(h) for h in headers]
        if not prefs:
            raise InvalidArgumentError('Header list must contain at least one element')
        logger.debug('Merging %d accept headers', len(prefs))
        return cls._from_entries(entry for pref in prefs for entry in pref._entries)

    @classmethod
    def from_request_headers(cls, values: Iterable[str] | None) -> Self:
        """Build the preference of a request from all of its raw Accept header values.

        A request without any Accept header behaves as if the client sent ``*/*``.
        """
        if isinstance(values, str):
            raise InvalidArgumentError('Expected a collection of header values, got a single string')
        headers = list(values or ())
        if not headers:
            return cls.from_string(DEFAULT_ACCEPT)
        return cls.from_headers(headers)

    @property
    def entries(self) -> tuple[PreferenceEntry, ...]:
        return self._entries

    def preferred_type(self) -> MediaType:
        return self._entries[0].media_type

    def preferred_from_supported(self, supported: Iterable[MediaType | str]) -> MediaType | None:
        """Return the supported media type that best satisfies this preference, or None if none is acceptable.

        Unordered collections are scanned in the default media-type order; sequences are scanned as given.
        """
        supported_types = [_media_type(t) for t in supported]
        if isinstance(supported, Set):
            supported_types = DEFAULT_ORDERING.sort(supported_types)
        for entry in self._entries:
            for server_type in supported_types:
                if is_same_or_subtype(server_type, entry.media_type):
                    return server_type
        return None

    def accepted_quality(self, media_type: MediaType | str) -> int:
        """Return a value from 0 to 1000 for the quality ``media_type`` is accepted with."""
        media_type = _media_type(media_type)
        for entry in self._entries:
            if is_same_or_subtype(media_type, entry.media_type):
                return entry.quality
        for entry in reversed(self._entries):
            if is_same_or_subtype(entry.media_type, media_type):
                return entry.quality
        return 0

    def rank_supported(self, supported: Iterable[MediaType | str]) -> list[MediaType]:
        """Sort server-supported media types from best to worst according to this preference."""
        return MediaTypeOrdering(self).sort(_media_type(t) for t in supported)

    def __iter__(self) -> Iterator[PreferenceEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaTypePreference):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self._entries) + ']'

    def __repr__(self) -> str:
        return f'{type(self).__name__}({[str(e) for e in self._entries]!r})'


def accepted_types(accept_hdr: str) -> list[str]:
    return [str(entry.media_type) for entry in MediaTypePreference.from_string(accept_hdr)]
