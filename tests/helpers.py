"""
Markup helpers shared by the tests
"""

FIXED_ID = "fb-htmx-FIXED00001"


def engine_form(submit_key="contact:default", extra=""):
    """Form engine shaped markup for the contact form"""
    return (
        '<div class="FormBuilder FormBuilder-contact InputfieldForm" id="FormBuilder_contact">'
        '<form id="FormBuilder_contact_form" class="FormBuilder" method="post" action="./">'
        f"{extra}"
        f'<input type="hidden" name="_submitKey" value="{submit_key}">'
        '<input type="hidden" name="_InputfieldForm" value="contact">'
        '<button type="submit" name="contact_submit" value="Submit">Submit</button>'
        "</form><!--/FormBuilder--></div>"
    )


def page(*blocks):
    return "<!DOCTYPE html><html><body><main>" + "<hr>".join(blocks) + "</main></body></html>"
