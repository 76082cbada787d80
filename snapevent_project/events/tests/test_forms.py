import pytest

from events.forms import EventForm
from events.models import Event

VALID = {
    "title": "Ana's Party",
    "description": "Birthday at the beach",
    "date": "2025-06-01",
    "location": "Lisbon",
    "event_type": "Birthday Party",
}


@pytest.mark.django_db
class TestEventForm:
    def test_regular_type_has_no_custom_type(self, user):
        form = EventForm(VALID)
        assert form.is_valid(), form.errors
        event = form.save(owner=user)

        stored = Event.objects.get(id=event.id)
        assert stored.event_type == "Birthday Party"
        assert stored.custom_event_type is None
        assert stored.owner == user

    def test_other_uses_custom_value(self, user):
        form = EventForm({**VALID, "event_type": "Other", "custom_event_type": "Hackathon"})
        assert form.is_valid(), form.errors
        event = form.save(owner=user)
        assert Event.objects.get(id=event.id).event_type == "Hackathon"

    def test_other_without_custom_value_is_invalid(self):
        form = EventForm({**VALID, "event_type": "Other"})
        assert not form.is_valid()
        assert "custom_event_type" in form.errors

    def test_custom_value_ignored_for_regular_type(self, user):
        form = EventForm({**VALID, "custom_event_type": "Hackathon"})
        assert form.is_valid()
        assert form.save(owner=user).custom_event_type is None

    @pytest.mark.parametrize("field", ["title", "description", "date", "location"])
    def test_required_fields(self, field):
        form = EventForm({**VALID, field: ""})
        assert not form.is_valid()
        assert field in form.errors

    def test_unknown_event_type_is_invalid(self):
        form = EventForm({**VALID, "event_type": "Rave"})
        assert not form.is_valid()
        assert "event_type" in form.errors

    def test_default_type_is_social_gathering(self):
        assert EventForm().fields["event_type"].initial == "Social Gathering"
