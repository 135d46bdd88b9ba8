"""Forms for the compression page."""

from django import forms
from django.utils.translation import gettext_lazy as _

from src.api.compress_pdf.actions import COMPRESSION_LEVELS, DEFAULT_COMPRESSION_LEVEL

from .workflow import FILE_SOURCES

COMPRESSION_OPTIONS = [
    {
        "value": "extreme",
        "label": _("EXTREME COMPRESSION"),
        "description": _("Less quality, high compression"),
    },
    {
        "value": "recommended",
        "label": _("RECOMMENDED COMPRESSION"),
        "description": _("Good quality, good compression"),
    },
    {
        "value": "less",
        "label": _("LESS COMPRESSION"),
        "description": _("High quality, less compression"),
    },
]


class SelectPDFForm(forms.Form):
    """Single-file selection, from the drop zone or the hidden file input."""

    pdf_file = forms.FileField(
        required=True,
        label=_("PDF file"),
        widget=forms.ClearableFileInput(attrs={"accept": "application/pdf"}),
    )
    source = forms.ChoiceField(
        choices=[(s, s) for s in FILE_SOURCES],
        required=False,
    )

    def clean_source(self):
        return self.cleaned_data.get("source") or "picker"


class CompressionLevelForm(forms.Form):
    compression_level = forms.ChoiceField(
        choices=[(level, level) for level in COMPRESSION_LEVELS],
        required=False,
        initial=DEFAULT_COMPRESSION_LEVEL,
    )
