"""
Markup Decorator - turns rendered form engine markup into an HTMX powered form
"""
import re
from typing import Iterable, List, Optional

from loguru import logger as log

from .config import FormBuilderHtmxConfig
from .errors import MalformedMarkupError
from .identifiers import escape_attribute, htmx_headers
from .scanner import SENTINEL_ATTRIBUTE, WRAPPER_ATTRIBUTE, block_end, sentinel_end, wrapper_start_re

METHOD_POST_RE = re.compile(r"""\bmethod=["']post["']""", re.IGNORECASE)


def htmx_attributes(
    correlation_id: str,
    indicator: Optional[str] = None,
    form_attributes: Iterable[str] = (),
    config: Optional[FormBuilderHtmxConfig] = None,
) -> List[str]:
    """HTMX attributes for the <form> element, in order and without duplicates"""
    config = config or FormBuilderHtmxConfig()
    headers = htmx_headers(correlation_id, indicator, config)

    attributes = [
        "hx-post",
        f"hx-headers='{headers}'",
        f"hx-disabled-elt='{config.disabled_elt}'",
        f"hx-target='#{correlation_id}'",
        f"hx-swap='{config.swap}'",
        f"hx-indicator='{escape_attribute(indicator)}'" if indicator else None,
        *form_attributes,
    ]

    return list(dict.fromkeys(attribute for attribute in attributes if attribute))


def wrap(markup: str, correlation_id: str, config: Optional[FormBuilderHtmxConfig] = None) -> str:
    """Adds the wrapper HTMX swaps into, and the sentinel end marker if comments get stripped"""
    config = config or FormBuilderHtmxConfig()
    wrapped = f"<div id='{correlation_id}' {WRAPPER_ATTRIBUTE}>{markup}</div>"

    if config.markup_regions:
        wrapped += f"<div {SENTINEL_ATTRIBUTE}='{correlation_id}' hidden></div>"

    return wrapped


def unwrap(fragment: str) -> str:
    """Inner markup of a decoration wrapper, or the fragment itself if it isn't one"""
    stripped = fragment.strip()
    start = wrapper_start_re().match(stripped)
    if not start:
        return fragment

    try:
        end = block_end(stripped, 0)
    except MalformedMarkupError:
        return fragment

    rest = stripped[end:]
    if rest and sentinel_end(stripped, end, start.group(1)) != len(stripped):
        return fragment

    return stripped[start.end():stripped.rfind("<", 0, end)]


def decorate(
    markup: str,
    correlation_id: str,
    indicator: Optional[str] = None,
    form_attributes: Iterable[str] = (),
    config: Optional[FormBuilderHtmxConfig] = None,
) -> str:
    """
    Handles modifying the form markup when rendered
    - Adds HTMX attributes to the form in place of method="post"
    - Adds wrapper with the correlation ID for the HTMX response swap
    - Adds hx-headers to persist data between rendering/processing/response

    Already decorated markup is unwrapped first, so decorating twice doesn't nest.
    """
    config = config or FormBuilderHtmxConfig()
    markup = unwrap(markup)

    attributes = " ".join(htmx_attributes(correlation_id, indicator, form_attributes, config))
    markup, replaced = METHOD_POST_RE.subn(attributes, markup)

    if not replaced and config.verbose:
        log.debug(f"No method=\"post\" in markup for {correlation_id}, wrapping only")

    return wrap(markup, correlation_id, config)
