from collections.abc import Mapping
import dataclasses
import math
import types
from typing import Self

from conneg.errors import ParseError


WILDCARD = '*'

QUALITY_PARAM = 'q'

_QUOTE_CHARS = frozenset(' \t;,=')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _param_str(key: str, value: str) -> str:
    if any(c in _QUOTE_CHARS for c in value):
        value = f'"{value}"'
    return f';{key}={value}'


@dataclasses.dataclass(frozen=True, eq=False)
class MediaType:
    """A parsed ``type/subtype[;param=value]*`` descriptor.

    Type and subtype compare case-insensitively and are stored lower-cased.
    Parameter names and values keep their case; their order does not take part in equality.
    """

    type: str
    subtype: str
    params: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'type', self.type.strip().lower())
        object.__setattr__(self, 'subtype', self.subtype.strip().lower())
        object.__setattr__(self, 'params', types.MappingProxyType(dict(self.params)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return (self.type, self.subtype, dict(self.params)) == (other.type, other.subtype, dict(other.params))

    def __hash__(self) -> int:
        return hash((self.type, self.subtype, frozenset(self.params.items())))

    def __str__(self) -> str:
        return self.essence + ''.join(_param_str(k, v) for k, v in self.params.items())

    @property
    def essence(self) -> str:
        return f'{self.type}/{self.subtype}'

    @property
    def canonical(self) -> str:
        return self.essence + ''.join(_param_str(k, v) for k, v in sorted(self.params.items()))

    @property
    def quality_param(self) -> str | None:
        for k, v in self.params.items():
            if k.lower() == QUALITY_PARAM:
                return v
        return None

    @property
    def quality(self) -> float:
        q = self.quality_param
        if q is None:
            return 1.0
        try:
            value = float(q)
        except ValueError:
            return 1.0
        return value if math.isfinite(value) else 1.0

    def without_params(self, *names: str) -> Self:
        drop = {n.lower() for n in names}
        return type(self)(self.type, self.subtype, {k: v for k, v in self.params.items() if k.lower() not in drop})

    @classmethod
    def from_str(cls, s: str) -> Self:
        if not isinstance(s, str):
            raise ParseError(f'Media type must be a string, got {type(s).__name__}')
        media, *raw_params = s.split(';')
        typ, sep, subtype = media.partition('/')
        typ, subtype = typ.strip(), subtype.strip()
        if not sep or not typ or not subtype:
            raise ParseError(f'Invalid media type {s!r}: expected "type/subtype"')
        if '/' in subtype or any(c.isspace() for c in typ + subtype):
            raise ParseError(f'Invalid media type {s!r}')
        if typ == WILDCARD and subtype != WILDCARD:
            raise ParseError(f'Invalid media range {s!r}: wildcard type requires wildcard subtype')
        params: dict[str, str] = {}
        for p in raw_params:
            key, _, value = p.strip().partition('=')
            key = key.strip()
            if key:
                params[key] = _unquote(value.strip())
        return cls(typ, subtype, params)

    parse = from_str


WILDCARD_TYPE = MediaType(WILDCARD, WILDCARD)
