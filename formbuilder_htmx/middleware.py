"""
Post Render Middleware - hands every full page render to HtmxForms.intercept
"""
from typing import TYPE_CHECKING

from fastapi import Request
from loguru import logger as log
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .context import STATE_KEY, RequestContext, request_context
from .signature import is_background_submission

if TYPE_CHECKING:
    from .core import HtmxForms


class FormBuilderHtmxMiddleware(BaseHTTPMiddleware):
    """
    Replaces the full page with the submitted form's fragment for HTMX submissions

    Each request gets its own RequestContext on request.state, shared with
    HtmxForms.render. Nothing else is kept, so concurrent requests don't interfere.
    """

    def __init__(self, app, forms: "HtmxForms"):
        super().__init__(app)
        self.forms = forms
        self.verbose = forms.verbose

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ctx = await RequestContext.from_request(request)
        setattr(request.state, STATE_KEY, ctx)

        response = await call_next(request)

        if not is_background_submission(ctx, self.forms.config):
            return response

        if "text/html" not in response.headers.get("content-type", ""):
            if self.verbose: log.debug(f"Not intercepting {request.url.path}: {response.headers.get('content-type')}")
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        content = body

        try:
            charset = _charset(response.headers.get("content-type", ""))
            html = body.decode(charset)
            page = self.forms.intercept(html, ctx)
            # Unchanged pages keep their original bytes
            if page is not html:
                content = page.encode(charset)
        except (LookupError, UnicodeError) as err:
            log.warning(f"Serving {request.url.path} unchanged, body could not be decoded: {err}")

        intercepted = Response(content=content, status_code=response.status_code)
        intercepted.raw_headers = [
            (name, value) for name, value in response.raw_headers if name.lower() != b"content-length"
        ] + [(b"content-length", str(len(content)).encode("latin-1"))]

        return intercepted


def _charset(content_type: str) -> str:
    for part in content_type.split(";")[1:]:
        name, _, value = part.strip().partition("=")
        if name.lower() == "charset" and value:
            return value.strip('"')
    return "utf-8"


async def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency for the current request's context"""
    return request_context(request)
