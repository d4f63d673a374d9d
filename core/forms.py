"""Forms for the admin dashboard."""

from __future__ import annotations

from django import forms

from core.chart_settings import ChartConfig
from core.models import GalleryCategory
from core.parsers.chart_data import parse_chart_data


class ChartSettingsForm(forms.Form):
    """Edit the target chart's raw data and descriptive metadata."""

    target_data = forms.CharField(
        label="Target data",
        widget=forms.Textarea(attrs={"rows": 12, "cols": 80, "spellcheck": "false"}),
        help_text="One program per line as NAME=VALUE, e.g. `Hipertensi=150`. Paste straight from a spreadsheet.",
        strip=False,
    )
    program_service = forms.CharField(required=False, max_length=200, label="Program service")
    person_in_charge = forms.CharField(required=False, max_length=200, label="Person in charge")
    period = forms.CharField(required=False, max_length=100, label="Period")

    def clean_target_data(self) -> str:
        """Require at least one parseable `NAME=VALUE` line.

        Returns:
            The raw text exactly as entered.
        """

        raw_text = self.cleaned_data.get("target_data") or ""
        if not parse_chart_data(raw_text).records:
            raise forms.ValidationError("Enter at least one line in the form NAME=VALUE with a numeric value.")
        return raw_text

    @classmethod
    def initial_from_config(cls, config: ChartConfig) -> dict[str, str]:
        """Return form initial data for a stored configuration."""

        return {
            "target_data": config.target_data,
            "program_service": config.program_service or "",
            "person_in_charge": config.person_in_charge or "",
            "period": config.period or "",
        }

    def to_config(self) -> ChartConfig:
        """Build a ChartConfig from validated data.

        Blank optional fields are written as empty strings so clearing a field
        in the form clears it in the stored document.
        """

        data = self.cleaned_data
        return ChartConfig(
            target_data=data["target_data"],
            program_service=(data.get("program_service") or "").strip(),
            person_in_charge=(data.get("person_in_charge") or "").strip(),
            period=(data.get("period") or "").strip(),
        )


class GalleryUploadForm(forms.Form):
    """Upload an image to the gallery through the image host."""

    ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
    MAX_FILE_SIZE = 5 * 1024 * 1024

    image = forms.FileField(label="Image")
    category = forms.ChoiceField(choices=GalleryCategory.choices, initial=GalleryCategory.OTHER)

    def clean_image(self):  # type: ignore[no-untyped-def]
        """Validate the uploaded file type and size."""

        uploaded = self.cleaned_data["image"]
        content_type = getattr(uploaded, "content_type", "") or ""
        if content_type not in self.ALLOWED_CONTENT_TYPES:
            raise forms.ValidationError("Upload a JPEG, PNG, GIF or WebP image.")
        if uploaded.size > self.MAX_FILE_SIZE:
            raise forms.ValidationError("Images must be 5 MB or smaller.")
        return uploaded
