"""
FormBuilder HTMX - HTMX powered form engine forms, submitted via AJAX
"""

from .core import htmx_forms, HtmxForms, FormEngine, RenderedForm
from .config import FormBuilderHtmxConfig
from .context import RequestContext, request_context
from .signature import RequestSignature, classify, is_background_submission
from .decorator import decorate, htmx_attributes, unwrap, wrap
from .extractor import extract
from .middleware import FormBuilderHtmxMiddleware, get_request_context
from .errors import FormBuilderHtmxError, MalformedMarkupError

__version__ = "1.0.1"
__description__ = "Render HTMX ready form engine forms submitted via AJAX"

# Main API exports
__all__ = [
    # Main API
    "htmx_forms",
    "HtmxForms",
    "FormEngine",
    "RenderedForm",
    "FormBuilderHtmxConfig",

    # Components (for advanced usage)
    "RequestContext",
    "request_context",
    "RequestSignature",
    "classify",
    "is_background_submission",
    "decorate",
    "htmx_attributes",
    "unwrap",
    "wrap",
    "extract",
    "FormBuilderHtmxMiddleware",
    "get_request_context",

    # Errors
    "FormBuilderHtmxError",
    "MalformedMarkupError",
]
