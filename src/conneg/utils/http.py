from conneg.models import WILDCARD, MediaType


LIST_SEPARATOR = ','


def parse_media_type(s: str) -> MediaType:
    return MediaType.from_str(s)


def split_header(accept_hdr: str) -> list[str]:
    return [i.strip() for i in accept_hdr.split(LIST_SEPARATOR) if i.strip()]


def is_same_or_subtype(candidate: MediaType, pattern: MediaType) -> bool:
    """True if ``candidate`` is acceptable under ``pattern``, e.g. text/plain under text/*."""
    if pattern.type == WILDCARD and pattern.subtype == WILDCARD:
        return True
    if candidate.type != pattern.type:
        return False
    return pattern.subtype == WILDCARD or candidate.subtype == pattern.subtype


def count_wildcards(media_type: MediaType) -> int:
    if media_type.type == WILDCARD:
        return 2
    if media_type.subtype == WILDCARD:
        return 1
    return 0
