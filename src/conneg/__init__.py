from conneg.errors import ConnegError, InvalidArgumentError, ParseError
from conneg.models import WILDCARD_TYPE, MediaType
from conneg.ordering import FALLBACK_PRIORITIES, MediaTypeOrdering
from conneg.preference import MediaTypePreference, PreferenceEntry
from conneg.utils.http import count_wildcards, is_same_or_subtype, parse_media_type


__all__ = [
    'FALLBACK_PRIORITIES',
    'WILDCARD_TYPE',
    'ConnegError',
    'InvalidArgumentError',
    'MediaType',
    'MediaTypeOrdering',
    'MediaTypePreference',
    'ParseError',
    'PreferenceEntry',
    'count_wildcards',
    'is_same_or_subtype',
    'parse_media_type',
]
