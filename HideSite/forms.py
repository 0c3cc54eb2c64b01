from __future__ import annotations

from django import forms

from .gating.adapter import sanitize_options
from .gating.exceptions import ConfigurationError
from .models import HideSiteOptions


class HideSiteOptionsForm(forms.ModelForm):
    class Meta:
        model = HideSiteOptions
        fields = ["hide_scope", "materials_mapping", "mode", "redirect_page", "roles"]
        widgets = {
            "materials_mapping": forms.Textarea(attrs={"rows": 5, "cols": 50, "style": "font-family: monospace;"}),
            "roles": forms.TextInput(attrs={"size": 60}),
        }

    def clean(self):
        cleaned_data = super().clean()
        try:
            sanitized = sanitize_options(cleaned_data, strict=True)
        except ConfigurationError as exc:
            self.add_error("materials_mapping", str(exc))
            return cleaned_data
        cleaned_data.update({key: value for key, value in sanitized.items() if key in cleaned_data})
        return cleaned_data
