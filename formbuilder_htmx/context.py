"""
Request Context - per-request inputs shared by the render call and the interceptor
"""
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from loguru import logger as log
from starlette.requests import Request

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

STATE_KEY = "formbuilder_htmx"

HeaderItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass
class RequestContext:
    """
    Everything FormBuilder HTMX reads from one request

    Built once per request and passed explicitly, so nothing is held between
    requests. Header names are normalized to lower case on first lookup.
    """
    method: str = "GET"
    form: Dict[str, str] = field(default_factory=dict)
    raw_headers: HeaderItems = field(default_factory=list)
    # Forms rendered during this request
    rendered: List[Any] = field(default_factory=list, compare=False)

    @cached_property
    def headers(self) -> Dict[str, str]:
        items = self.raw_headers.items() if isinstance(self.raw_headers, Mapping) else self.raw_headers
        return {name.lower(): value for name, value in items}

    def header(self, name: str, default: Any = None) -> Any:
        """Get a header by name, case insensitive"""
        return self.headers.get(name.lower(), default)

    def posted(self, name: str) -> Optional[str]:
        """Get a posted field value, None when absent or empty"""
        return self.form.get(name) or None

    @property
    def is_post(self) -> bool:
        return self.method.upper() == "POST"

    @classmethod
    def from_headers(cls, request: Request) -> "RequestContext":
        """Context without posted fields, enough for rendering"""
        return cls(method=request.method, raw_headers=list(request.headers.items()))

    @classmethod
    async def from_request(cls, request: Request) -> "RequestContext":
        """Context with posted fields, read without consuming the body for the endpoint"""
        ctx = cls.from_headers(request)

        content_type = request.headers.get("content-type", "")
        if not ctx.is_post or not content_type.startswith(FORM_CONTENT_TYPES):
            return ctx

        try:
            # Cache the raw body first so the endpoint can parse it again
            await request.body()
            async with request.form() as data:
                ctx.form = {name: value for name, value in data.items() if isinstance(value, str)}
        except Exception as err:
            log.warning(f"Could not read posted fields: {err}")

        return ctx


def request_context(request: Request) -> RequestContext:
    """The context stored by the middleware, or a headers only one"""
    ctx = getattr(request.state, STATE_KEY, None)
    return ctx if ctx is not None else RequestContext.from_headers(request)
