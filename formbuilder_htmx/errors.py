"""
FormBuilder HTMX errors
"""


class FormBuilderHtmxError(Exception):
    """Base error for FormBuilder HTMX"""


class MalformedMarkupError(FormBuilderHtmxError):
    """Form engine markup does not follow the expected contract"""

    def __init__(self, message: str, position: int = -1):
        super().__init__(message)
        self.position = position
