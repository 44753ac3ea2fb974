"""
URL configuration for core app.
"""

from django.urls import path

from core import views
from core.autocomplete import SourceAutocomplete

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    # Data output endpoints
    path("outputs/<int:output_id>/feed", views.data_output_feed, name="data_output_feed"),
    path(
        "outputs/<int:output_id>/feed.<str:suffix>",
        views.data_output_feed,
        name="data_output_feed_format",
    ),
    path(
        "outputs/<int:output_id>/status/",
        views.data_output_status,
        name="data_output_status",
    ),
    # Autocomplete endpoints
    path(
        "autocomplete/source/",
        SourceAutocomplete.as_view(),
        name="source-autocomplete",
    ),
]
