import pytest
from fastapi import FastAPI

from formbuilder_htmx import FormBuilderHtmxConfig, FormBuilderHtmxMiddleware, HtmxForms, RequestContext, htmx_forms
from helpers import FIXED_ID, page


@pytest.fixture
def forms(engine):
    return HtmxForms(engine, id_factory=lambda config: FIXED_ID)


def _render_page(forms, ctx):
    top = forms.render(ctx, "contact", {"instance": "top", "input": ctx.form}, indicator="#spinner")
    bottom = forms.render(ctx, "contact", {"instance": "bottom", "input": ctx.form})
    return page(str(top), str(bottom))


@pytest.mark.unit
def test_render_decorates_with_generated_id(forms):
    ctx = RequestContext()

    rendered = forms.render(ctx, "contact", indicator="#spinner")

    assert rendered.correlation_id == FIXED_ID
    assert rendered.indicator == "#spinner"
    assert rendered.markup.startswith(f"<div id='{FIXED_ID}' data-formbuilder-htmx>")
    assert 'method="post"' not in rendered.markup
    assert str(rendered) == rendered.__html__() == rendered.markup
    assert ctx.rendered == [rendered]


@pytest.mark.unit
def test_render_reuses_id_and_indicator_from_headers(forms):
    ctx = RequestContext(raw_headers={"fb-htmx-id": "fb-htmx-echo", "fb-htmx-indicator": "#loading"})

    rendered = forms.render(ctx, "contact", form_attributes=["data-extra"])

    assert rendered.correlation_id == "fb-htmx-echo"
    assert rendered.indicator == "#loading"
    assert rendered.form_attributes == ("data-extra",)
    assert "hx-target='#fb-htmx-echo'" in rendered.markup
    assert "data-extra" in rendered.markup


@pytest.mark.unit
def test_factory_builds_instance(engine):
    forms = htmx_forms(engine, FormBuilderHtmxConfig(swap="outerHTML"))

    assert isinstance(forms, HtmxForms)
    assert forms.config.swap == "outerHTML"


@pytest.mark.unit
def test_intercept_leaves_ordinary_pages_alone(forms):
    ctx = RequestContext(method="GET")
    html = _render_page(forms, ctx)

    assert forms.intercept(html, ctx) == html


@pytest.mark.unit
def test_intercept_returns_submitted_instance_with_errors(forms, submission):
    ctx = submission("fb-htmx-echo", "contact:bottom", name="", email="", message="")
    html = _render_page(forms, ctx)

    result = forms.intercept(html, ctx)

    assert result.startswith('<div class="FormBuilder FormBuilder-contact')
    assert "contact:bottom" in result
    assert "contact:top" not in result
    assert "Please correct the errors below" in result
    assert "<html>" not in result


@pytest.mark.unit
def test_intercept_returns_confirmation(forms, submission):
    ctx = submission("fb-htmx-echo", "contact:top", name="Ada", email="ada@example.com", message="Hi")
    html = _render_page(forms, ctx)

    result = forms.intercept(html, ctx)

    assert "Thank you, Ada!" in result
    assert "<form" not in result


@pytest.mark.unit
def test_intercept_serves_full_page_on_miss(forms, submission):
    ctx = submission()
    html = page("<p>This page has no forms</p>")

    assert forms.intercept(html, ctx) == html


@pytest.mark.unit
def test_intercept_outer_html_swap_keeps_wrapper(engine, submission):
    config = FormBuilderHtmxConfig(swap="outerHTML", markup_regions=True)
    forms = HtmxForms(engine, config)
    ctx = submission("fb-htmx-echo", "contact:bottom", name="", email="", message="")

    result = forms.intercept(_render_page(forms, ctx), ctx)

    assert result.startswith("<div id='fb-htmx-echo' data-formbuilder-htmx>")
    assert result.endswith("<!--/FormBuilder--></div></div>")
    assert "data-formbuilder-htmx-end" not in result


@pytest.mark.unit
def test_intercept_redecorates_undecorated_engine_markup(forms, engine, submission):
    ctx = submission("fb-htmx-echo", "contact:bottom", headers={"Fb-Htmx-Indicator": "#spinner"}, name="")
    html = page(engine.render("contact", {"instance": "bottom", "input": ctx.form}))

    result = forms.intercept(html, ctx)

    assert 'method="post"' not in result
    assert "hx-target='#fb-htmx-echo'" in result
    assert "hx-indicator='#spinner'" in result


@pytest.mark.unit
def test_intercept_never_raises(forms, submission, monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("broken markup")

    monkeypatch.setattr("formbuilder_htmx.core.extract", boom)
    ctx = submission()
    html = _render_page(forms, ctx)

    assert forms.intercept(html, ctx) == html


@pytest.mark.unit
def test_install_is_idempotent(forms):
    app = FastAPI()

    assert forms.install(app) is True
    assert forms.install(app) is False
    assert len([m for m in app.user_middleware if m.cls is FormBuilderHtmxMiddleware]) == 1
    assert app.state.htmx_forms is forms


@pytest.mark.unit
def test_render_ignores_injected_header_id(forms):
    ctx = RequestContext(raw_headers={"Fb-Htmx-Id": "x' onmouseover='alert(1)"})

    rendered = forms.render(ctx, "contact")

    assert rendered.correlation_id == FIXED_ID
    assert "onmouseover" not in rendered.markup
    assert rendered.markup.startswith(f"<div id='{FIXED_ID}' data-formbuilder-htmx>")


@pytest.mark.unit
def test_intercept_ignores_injected_header_id(forms, engine, submission):
    ctx = submission("x' onmouseover='alert(1)", "contact:bottom", name="")
    html = page(engine.render("contact", {"instance": "bottom", "input": ctx.form}))

    assert forms.intercept(html, ctx) == html
