"""
Identifiers - correlation IDs, indicator selectors and the hx-headers payload
"""
import html
import json
import re
import secrets
import string
from typing import Callable, Optional

from .config import FormBuilderHtmxConfig
from .context import RequestContext

ID_ALPHABET = string.ascii_letters + string.digits

IdFactory = Callable[[FormBuilderHtmxConfig], str]


def generate_id(config: FormBuilderHtmxConfig) -> str:
    """Fresh correlation ID, e.g. fb-htmx-a1B2c3D4e5"""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(config.id_length))
    return f"{config.id_prefix}{suffix}"


def correlation_id(ctx: RequestContext, config: FormBuilderHtmxConfig, id_factory: Optional[IdFactory] = None) -> str:
    """Gets an existing ID from request headers, or creates a new one for rendering"""
    header_id = ctx.header(config.id_header)
    if is_valid_id(header_id, config):
        return header_id
    return (id_factory or generate_id)(config)


def is_valid_id(value: Optional[str], config: FormBuilderHtmxConfig) -> bool:
    """Whether value has the shape of a generated ID, so it is safe to put in markup"""
    if not value:
        return False
    return re.fullmatch(rf"{re.escape(config.id_prefix)}[A-Za-z0-9]+", value) is not None


def indicator_selector(ctx: RequestContext, config: FormBuilderHtmxConfig, indicator: Optional[str] = None) -> Optional[str]:
    """Indicator passed to render, falling back to the one echoed back in request headers"""
    return indicator or ctx.header(config.indicator_header) or None


def htmx_headers(correlation_id: str, indicator: Optional[str], config: FormBuilderHtmxConfig) -> str:
    """
    JSON for the hx-headers attribute, escaped for a single quoted attribute

    HTMX sends these back as request headers on submission, which is how the
    ID and indicator survive the render -> submit -> response loop.
    """
    payload = json.dumps(
        {config.id_header: correlation_id, config.indicator_header: indicator},
        separators=(",", ":"),
    )
    return escape_attribute(payload)


def escape_attribute(value: str) -> str:
    """Escape a value for a single quoted HTML attribute"""
    return html.escape(value, quote=True)
