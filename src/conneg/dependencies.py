from collections.abc import Callable, Iterable
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_406_NOT_ACCEPTABLE

from conneg.models import MediaType
from conneg.preference import RFC7231_HEADER, MediaTypePreference


def from_request(request: Request) -> MediaTypePreference:
    return MediaTypePreference.from_request_headers(request.headers.getlist(RFC7231_HEADER))


AcceptPreference = Annotated[MediaTypePreference, Depends(from_request)]


def negotiate(supported: Iterable[MediaType | str], default: MediaType | str | None = None) -> Callable[[MediaTypePreference], MediaType]:
    supported_types = [t if isinstance(t, MediaType) else MediaType.from_str(t) for t in supported]
    default_type = MediaType.from_str(default) if isinstance(default, str) else default

    def negotiated_type(preference: Annotated[MediaTypePreference, Depends(from_request)]) -> MediaType:
        media_type = preference.preferred_from_supported(supported_types)
        if media_type is not None:
            return media_type
        if default_type is None:
            raise HTTPException(HTTP_406_NOT_ACCEPTABLE, f'None of {", ".join(map(str, supported_types))} is acceptable')
        return default_type

    return negotiated_type
