from django import forms

from dal import autocomplete

from .models import DataOutput


class DataOutputAdminForm(forms.ModelForm):
    """Custom form for DataOutput admin with source autocomplete."""

    class Meta:
        model = DataOutput
        fields = [
            "name",
            "user",
            "sources",
            "options",
        ]
        widgets = {
            "sources": autocomplete.ModelSelect2Multiple(
                url="source-autocomplete",
                attrs={
                    "data-placeholder": "Select sources...",
                    "data-minimum-input-length": 0,
                },
            ),
        }

    def __init__(self, *args, **kwargs):
        # The ModelAdmin passes 'request' to the form, but ModelForm doesn't expect it.
        # Remove it before calling super().__init__
        self.request = kwargs.pop("request", None)
        super().__init__(*args, **kwargs)
        self.fields["options"].help_text = (
            "JSON with secrets (list), expected_receive_period_in_days, "
            "optional events_to_show and a template whose item maps output "
            "fields to <$.payload_key> placeholders."
        )
