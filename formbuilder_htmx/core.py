"""
FormBuilder HTMX Core - renders HTMX powered forms and swaps in the submitted one
"""
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Protocol, Tuple, Union

from loguru import logger as log
from starlette.requests import Request

from .config import FormBuilderHtmxConfig
from .context import RequestContext, request_context
from .decorator import decorate, unwrap, wrap
from .extractor import extract
from .identifiers import IdFactory, correlation_id, generate_id, indicator_selector, is_valid_id
from .signature import RequestSignature, classify


class FormEngine(Protocol):
    """Renders a form by name, including its post-submission state"""

    def render(self, form_name: str, vars: Mapping[str, Any]) -> str:
        ...


@dataclass
class RenderedForm:
    """Decorated form markup and the values it was decorated with"""
    markup: str
    form_name: str
    correlation_id: str
    indicator: Optional[str] = None
    form_attributes: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.markup

    def __html__(self) -> str:
        return self.markup


class HtmxForms:
    """
    Drop-in replacement for the form engine's render where an HTMX powered form is desired

    render() decorates forms as they are rendered. intercept() runs on every
    full page render and, for HTMX submissions, replaces the page with the
    submitted form's fragment.
    """

    def __init__(
        self,
        engine: FormEngine,
        config: Optional[FormBuilderHtmxConfig] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self.engine = engine
        self.config = config or FormBuilderHtmxConfig()
        self.id_factory = id_factory or generate_id
        self.verbose = self.config.verbose

    def __repr__(self):
        return f"HtmxForms.{type(self.engine).__name__}"

    def context(self, request: Union[Request, RequestContext]) -> RequestContext:
        if isinstance(request, RequestContext):
            return request
        return request_context(request)

    def render(
        self,
        request: Union[Request, RequestContext],
        form_name: str,
        vars: Optional[Mapping[str, Any]] = None,
        indicator: Optional[str] = None,
        form_attributes: Iterable[str] = (),
    ) -> RenderedForm:
        """
        Render a form with HTMX attributes and a swap wrapper
        @param form_name       Name of form to render
        @param vars            Values passed to the form engine's render
        @param indicator       Optional CSS selector for the activity indicator shown
                               when the form is submitted
        @param form_attributes Strings added to the <form> element on render
        """
        ctx = self.context(request)
        form_attributes = tuple(form_attributes)

        form_id = correlation_id(ctx, self.config, self.id_factory)
        indicator = indicator_selector(ctx, self.config, indicator)

        markup = self.engine.render(form_name, vars or {})
        rendered = RenderedForm(
            markup=decorate(markup, form_id, indicator, form_attributes, self.config),
            form_name=form_name,
            correlation_id=form_id,
            indicator=indicator,
            form_attributes=form_attributes,
        )
        ctx.rendered.append(rendered)

        if self.verbose: log.debug(f"{self}: Rendered {form_name} as #{form_id}")
        return rendered

    def intercept(self, html: str, ctx: RequestContext) -> str:
        """
        Post render hook: the submitted form's fragment for HTMX submissions,
        the full page for everything else or when no fragment can be found
        """
        if classify(ctx, self.config) is not RequestSignature.BACKGROUND_SUBMISSION:
            return html

        try:
            fragment = self.submitted_fragment(html, ctx)
        except Exception:
            log.exception(f"{self}: Failed to extract submitted form, serving full page")
            return html

        if fragment is None:
            log.warning(f"{self}: No fragment for #{ctx.header(self.config.id_header)}, serving full page")
            return html

        if self.verbose: log.success(f"{self}: Swapped full page for #{ctx.header(self.config.id_header)}")
        return fragment

    def submitted_fragment(self, html: str, ctx: RequestContext) -> Optional[str]:
        """Extracts and re-decorates the submitted form, shaped for the swap mode"""
        form_id = ctx.header(self.config.id_header)
        form_name = ctx.posted(self.config.form_name_field)

        if not is_valid_id(form_id, self.config):
            log.warning(f"{self}: Ignoring malformed {self.config.id_header} header")
            return None

        fragment = extract(
            html,
            form_id,
            submit_key=ctx.posted(self.config.submit_key_field),
            form_name=form_name,
            config=self.config,
        )
        if fragment is None:
            return None

        rendered = self._rendered_for(ctx, fragment, form_name)
        indicator = indicator_selector(ctx, self.config, rendered.indicator if rendered else None)
        form_attributes = rendered.form_attributes if rendered else ()

        decorated = decorate(fragment, form_id, indicator, form_attributes, self.config)

        if self.config.swap == "innerHTML":
            return unwrap(decorated)

        return wrap(unwrap(decorated), form_id, replace(self.config, markup_regions=False))

    def _rendered_for(self, ctx: RequestContext, fragment: str, form_name: Optional[str]) -> Optional[RenderedForm]:
        """The render call that produced fragment, or the first render of the same form"""
        same_form = [rendered for rendered in ctx.rendered if rendered.form_name == form_name]
        for rendered in same_form:
            if rendered.markup == fragment:
                return rendered
        return same_form[0] if same_form else None

    def install(self, app) -> bool:
        """Registers the post render middleware on an app, once"""
        from .middleware import FormBuilderHtmxMiddleware

        if any(middleware.cls is FormBuilderHtmxMiddleware for middleware in app.user_middleware):
            if self.verbose: log.debug(f"{self}: Middleware already installed")
            return False

        app.add_middleware(FormBuilderHtmxMiddleware, forms=self)
        app.state.htmx_forms = self
        return True


# Factory function - main API entry point
def htmx_forms(
    engine: FormEngine,
    config: Optional[FormBuilderHtmxConfig] = None,
    id_factory: Optional[IdFactory] = None,
) -> HtmxForms:
    """
    Create HtmxForms instance

    Usage:
        forms = htmx_forms(engine)
        forms.install(app)
    """
    return HtmxForms(engine, config, id_factory)
