from django.contrib.auth.models import User
from django.test import Client, TestCase
from django.urls import reverse

from core.models import Source


class TestSourceAutocomplete(TestCase):
    def setUp(self):
        self.client = Client()
        Source.objects.create(name="XKCD Website")
        Source.objects.create(name="Weather Station")

    def test_staff_gets_matching_sources(self):
        staff = User.objects.create_user(username="staff", password="password", is_staff=True)
        self.client.force_login(staff)

        response = self.client.get(reverse("source-autocomplete"), {"q": "xkcd"})

        self.assertEqual(response.status_code, 200)
        results = response.json()["results"]
        self.assertEqual([result["text"] for result in results], ["XKCD Website"])

    def test_anonymous_gets_nothing(self):
        response = self.client.get(reverse("source-autocomplete"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["results"], [])
