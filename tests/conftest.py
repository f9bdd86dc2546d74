"""
Pytest configuration and fixtures
"""
import pytest

from formbuilder_htmx import FormBuilderHtmxConfig, RequestContext
from formbuilder_htmx.demo import DemoFormEngine
from helpers import FIXED_ID


@pytest.fixture
def config():
    return FormBuilderHtmxConfig()


@pytest.fixture
def engine():
    return DemoFormEngine()


@pytest.fixture
def submission():
    """Context factory for an HTMX submission of the contact form"""
    def make(correlation_id=FIXED_ID, submit_key="contact:bottom", headers=None, **fields):
        form = {"_submitKey": submit_key, "_InputfieldForm": "contact"}
        form.update(fields)
        raw_headers = {"HX-Request": "true", "Fb-Htmx-Id": correlation_id}
        raw_headers.update(headers or {})
        return RequestContext(method="POST", form=form, raw_headers=raw_headers)

    return make
