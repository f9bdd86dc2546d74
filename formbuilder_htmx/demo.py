"""
FormBuilder HTMX Demo - a contact form rendered twice on one page

Run with: python -m formbuilder_htmx.demo
"""
import html
from typing import Any, Dict, List, Mapping, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger as log

from .config import FormBuilderHtmxConfig
from .core import htmx_forms

PAGE = """<!DOCTYPE html>
<html>
<head>
<title>FormBuilder HTMX Demo</title>
<script src="https://unpkg.com/htmx.org@1.9.12"></script>
</head>
<body>
<main>
<h1>Contact us</h1>
{top}
</main>
<aside>
<h2>Or drop us a line here</h2>
{bottom}
</aside>
<div id="spinner" class="htmx-indicator">Sending...</div>
</body>
</html>
"""


class DemoFormEngine:
    """
    In-memory stand-in for a form engine

    Forms are lists of required field names. An instance processes posted
    input only when the posted submit key is its own, so several instances of
    one form can share a page.
    """

    def __init__(self, forms: Optional[Dict[str, List[str]]] = None):
        self.forms = forms or {"contact": ["name", "email", "message"]}

    def render(self, form_name: str, vars: Mapping[str, Any]) -> str:
        fields = self.forms[form_name]
        submit_key = f"{form_name}:{vars.get('instance', 'default')}"
        posted = vars.get("input") or {}

        errors: Dict[str, str] = {}
        if posted.get("_submitKey") == submit_key:
            errors = {name: "Missing required value" for name in fields if not posted.get(name, "").strip()}
            if not errors:
                return self._submitted(form_name, submit_key, posted)
        else:
            posted = {}

        return self._form(form_name, fields, submit_key, posted, errors)

    def _form(self, form_name: str, fields: List[str], submit_key: str, values: Mapping[str, str], errors: Mapping[str, str]) -> str:
        inputs = []
        for name in fields:
            value = html.escape(values.get(name, ""), quote=True)
            error = f"<p class='input-error'>{errors[name]}</p>" if name in errors else ""
            inputs.append(
                f"<div class='Inputfield Inputfield_{name}'>"
                f"<label for='{form_name}_{name}'>{name.title()}</label>"
                f"<input id='{form_name}_{name}' name='{name}' type='text' value='{value}'>{error}</div>"
            )

        alert = "<p class='FormBuilderErrors'>Please correct the errors below</p>" if errors else ""

        return (
            f'<div class="FormBuilder FormBuilder-{form_name} InputfieldForm" id="FormBuilder_{form_name}">'
            f'<form id="FormBuilder_{form_name}_form" class="FormBuilder" method="post" action="./">'
            f"{alert}{''.join(inputs)}"
            f'<input type="hidden" name="_submitKey" value="{submit_key}">'
            f'<input type="hidden" name="_InputfieldForm" value="{form_name}">'
            f'<button type="submit" name="{form_name}_submit" value="Submit">Submit</button>'
            f"</form><!--/FormBuilder--></div>"
        )

    def _submitted(self, form_name: str, submit_key: str, values: Mapping[str, str]) -> str:
        name = html.escape(values.get("name", ""))
        return (
            f'<div class="FormBuilder FormBuilder-{form_name} InputfieldForm" id="FormBuilder_{form_name}">'
            f'<div id="FormBuilderSubmitted" data-name="{form_name}" data-submit-key="{submit_key}">'
            f"<h3>Thank you, {name}!</h3><p>Your message has been received.</p></div>"
            f"<!--/FormBuilder--></div>"
        )


def create_demo_app(config: Optional[FormBuilderHtmxConfig] = None, engine: Optional[DemoFormEngine] = None) -> FastAPI:
    """Build the demo FastAPI app with FormBuilder HTMX installed"""
    app = FastAPI(title="FormBuilder HTMX Demo")
    forms = htmx_forms(engine or DemoFormEngine(), config)
    forms.install(app)

    @app.get("/health")
    def health():
        return JSONResponse({"status": "ok"})

    @app.api_route("/", methods=["GET", "POST"], response_class=HTMLResponse)
    async def contact_page(request: Request):
        posted = {}
        if request.method == "POST":
            form = await request.form()
            posted = {name: value for name, value in form.items() if isinstance(value, str)}

        top = forms.render(request, "contact", {"instance": "top", "input": posted}, indicator="#spinner")
        bottom = forms.render(request, "contact", {"instance": "bottom", "input": posted})

        return HTMLResponse(PAGE.format(top=top, bottom=bottom))

    return app


def main():
    log.info("Starting FormBuilder HTMX demo on http://127.0.0.1:8000")
    uvicorn.run(create_demo_app(FormBuilderHtmxConfig(verbose=True)), host="127.0.0.1", port=8000, log_level="info")


if __name__ == "__main__":
    main()
