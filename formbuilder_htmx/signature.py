"""
Request Signature - classifies a request against the FormBuilder HTMX submission signature
"""
from enum import Enum
from typing import Optional

from .config import FormBuilderHtmxConfig
from .context import RequestContext


class RequestSignature(Enum):
    INITIAL = "initial"
    BACKGROUND_SUBMISSION = "background_submission"
    OTHER = "other"


def classify(ctx: RequestContext, config: Optional[FormBuilderHtmxConfig] = None) -> RequestSignature:
    """
    Looks for form engine request signatures to determine if the current request
    is both a form submission and an HTMX request
    """
    config = config or FormBuilderHtmxConfig()

    submitted = bool(ctx.posted(config.submit_key_field) or ctx.posted(config.form_name_field))

    if (
        ctx.is_post
        and ctx.posted(config.submit_key_field)
        and ctx.posted(config.form_name_field)
        and ctx.header(config.hx_request_header) == "true"
        and ctx.header(config.id_header)
    ):
        return RequestSignature.BACKGROUND_SUBMISSION

    if not submitted:
        return RequestSignature.INITIAL

    return RequestSignature.OTHER


def is_background_submission(ctx: RequestContext, config: Optional[FormBuilderHtmxConfig] = None) -> bool:
    return classify(ctx, config) is RequestSignature.BACKGROUND_SUBMISSION
