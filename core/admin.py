"""Admin configuration for the application."""

from django.contrib import admin, messages
from django.urls import reverse
from django.utils.html import format_html

from djangoql.admin import DjangoQLSearchMixin
from import_export.admin import ImportExportModelAdmin

from .forms import DataOutputAdminForm
from .models import DataOutput, Record, Source
from .services import OutputService

# Customize Admin Site
admin.site.site_header = "Herald"
admin.site.site_title = "Herald Admin"
admin.site.index_title = "Welcome to Herald"


@admin.register(Source)
class SourceAdmin(admin.ModelAdmin):
    """Admin configuration for Source model."""

    list_display = ["name", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["created_at"]


@admin.register(Record)
class RecordAdmin(ImportExportModelAdmin, DjangoQLSearchMixin):
    """Admin configuration for Record model."""

    list_display = ["id", "source", "created_at"]
    list_filter = ["source", "created_at"]
    list_select_related = ["source"]
    readonly_fields = ["source", "payload", "created_at"]

    def has_change_permission(self, request, obj=None):
        # Records belong to their producers
        return False


@admin.register(DataOutput)
class DataOutputAdmin(ImportExportModelAdmin, DjangoQLSearchMixin):
    """Admin configuration for DataOutput model."""

    form = DataOutputAdminForm

    list_display = ["name", "user", "working", "last_receive_at", "feed_links", "created_at"]
    list_filter = ["user", "created_at"]
    search_fields = ["name", "user__username"]
    readonly_fields = ["last_receive_at", "created_at", "updated_at"]
    actions = ["check_working_status"]
    save_as = True
    list_select_related = ["user"]

    fieldsets = (
        (None, {"fields": ("name", "user")}),
        ("Configuration", {"fields": ("sources", "options")}),
        (
            "Timestamps",
            {"fields": ("last_receive_at", "created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )

    def get_form(self, request, obj=None, **kwargs):
        """Pass the request to the form."""
        form_class = super().get_form(request, obj, **kwargs)

        class RequestForm(form_class):
            def __init__(self_form, *args, **form_kwargs):
                form_kwargs["request"] = request
                super().__init__(*args, **form_kwargs)

        return RequestForm

    @admin.display(boolean=True, description="Working")
    def working(self, obj):
        return obj.is_working()

    @admin.display(description="Feeds")
    def feed_links(self, obj):
        """Links to the RSS and JSON renderings (the secret must be appended)."""
        if not obj.pk:
            return "-"
        return format_html(
            '<a href="{}">RSS</a> / <a href="{}">JSON</a>',
            reverse("data_output_feed_format", args=(obj.pk, "xml")),
            reverse("data_output_feed_format", args=(obj.pk, "json")),
        )

    @admin.action(description="Check working status of selected outputs")
    def check_working_status(self, request, queryset):
        """Admin action reporting whether each output received records recently."""
        for data_output in queryset:
            status = OutputService.get_status(data_output)
            if status["working"]:
                self.message_user(
                    request, f"✓ '{status['name']}' is working", messages.SUCCESS
                )
            else:
                self.message_user(
                    request,
                    f"✗ '{status['name']}' has not received records in the last "
                    f"{status['expected_receive_period_in_days']} days",
                    messages.WARNING,
                )
