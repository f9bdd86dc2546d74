"""
FormBuilder HTMX configuration - literals of the header and markup contract
"""
from dataclasses import dataclass


@dataclass
class FormBuilderHtmxConfig:
    """Configuration for FormBuilder HTMX forms"""
    # Request headers persisting data between render -> submission -> response
    id_header: str = "Fb-Htmx-Id"
    indicator_header: str = "Fb-Htmx-Indicator"
    hx_request_header: str = "Hx-Request"

    # POST fields owned by the form engine
    submit_key_field: str = "_submitKey"
    form_name_field: str = "_InputfieldForm"

    id_prefix: str = "fb-htmx-"
    id_length: int = 10

    swap: str = "innerHTML"
    disabled_elt: str = "button[type=submit]"

    # Markup regions strip HTML comments, so an explicit end marker is needed
    markup_regions: bool = False

    verbose: bool = False
