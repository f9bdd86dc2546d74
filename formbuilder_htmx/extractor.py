"""
Fragment Extractor - finds a submitted form's markup in the full page render
"""
import re
from typing import List, Optional

from loguru import logger as log

from .config import FormBuilderHtmxConfig
from .errors import MalformedMarkupError
from .scanner import (
    block_end,
    close_open_divs,
    engine_block_start_re,
    has_end_marker,
    nearest_boundary,
    sentinel_end,
    sentinel_re,
    wrapper_start_re,
)


def _candidate(html: str, start: "re.Match[str]", correlation_id: Optional[str]) -> Optional[str]:
    """Fragment from start to its end boundary, None if the markup doesn't hold one"""
    begin = start.start()
    followed = False

    try:
        end = block_end(html, begin)
    except MalformedMarkupError:
        # Unbalanced markup, fall back to the nearest end marker
        end = nearest_boundary(html, start.end(), correlation_id)
        if end is None:
            return None
        end = close_open_divs(html, begin, end)
        followed = bool(correlation_id) and sentinel_re(correlation_id).search(html, begin, end) is not None

    if correlation_id and not followed:
        after = sentinel_end(html, end, correlation_id)
        if after is not None:
            end, followed = after, True

    fragment = html[begin:end]
    if not followed and not has_end_marker(fragment):
        return None

    return fragment


def _collect(html: str, pattern: "re.Pattern[str]", correlation_id: Optional[str]) -> List[str]:
    found = []
    for start in pattern.finditer(html):
        fragment = _candidate(html, start, correlation_id)
        if fragment is not None:
            found.append(fragment)
    return found


def candidates(
    html: str,
    correlation_id: str,
    form_name: Optional[str] = None,
) -> List[str]:
    """
    Every block on the page that could be the submitted form

    Decoration wrappers with the correlation ID come first. Only when there
    are none are the form engine's own blocks for form_name considered.
    """
    found = _collect(html, wrapper_start_re(correlation_id), correlation_id)
    if found or not form_name:
        return found

    return _collect(html, engine_block_start_re(form_name), None)


def extract(
    html: str,
    correlation_id: str,
    submit_key: Optional[str] = None,
    form_name: Optional[str] = None,
    config: Optional[FormBuilderHtmxConfig] = None,
) -> Optional[str]:
    """
    Returns the fragment for the form identified by correlation_id, or None

    Every instance of a form rendered during a submission shares the
    correlation ID from the request headers, so duplicates are expected. The
    longest fragment containing the submit key wins, then the longest overall.
    """
    config = config or FormBuilderHtmxConfig()

    if not html or not correlation_id:
        return None

    found = candidates(html, correlation_id, form_name)
    if not found:
        return None

    if config.verbose and len(found) > 1:
        log.debug(f"{len(found)} candidate fragments for {correlation_id}")

    if submit_key:
        keyed = [fragment for fragment in found if submit_key in fragment]
        if keyed:
            return max(keyed, key=len)

    return max(found, key=len)
