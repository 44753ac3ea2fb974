"""
Autocomplete views for django-autocomplete-light integration.
"""

from dal import autocomplete

from .models import Source


class SourceAutocomplete(autocomplete.Select2QuerySetView):
    """
    Autocomplete view for the DataOutput sources field.

    Only staff users get results, since the view is used from the admin.
    """

    def get_queryset(self):
        """
        Get sources matching the typed query.

        Returns:
            Source queryset filtered by name
        """
        if not self.request.user.is_authenticated or not self.request.user.is_staff:
            return Source.objects.none()

        qs = Source.objects.all()
        if self.q:
            qs = qs.filter(name__icontains=self.q)
        return qs
