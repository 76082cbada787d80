from django import forms

from .models import EVENT_TYPES, OTHER_EVENT_TYPE, Event


class EventForm(forms.ModelForm):
    event_type = forms.ChoiceField(
        choices=[(t, t) for t in EVENT_TYPES], initial="Social Gathering"
    )
    custom_event_type = forms.CharField(max_length=100, required=False)

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "date",
            "location",
            "event_type",
            "custom_event_type",
        ]
        widgets = {
            "date": forms.DateInput(attrs={"type": "date"}),
        }
        error_messages = {
            "title": {"required": "Title is required"},
            "description": {"required": "Description is required"},
            "date": {"required": "Date is required"},
            "location": {"required": "Location is required"},
        }

    def clean(self):
        cleaned = super().clean()
        event_type = cleaned.get("event_type")
        custom = (cleaned.get("custom_event_type") or "").strip()
        if event_type == OTHER_EVENT_TYPE:
            if not custom:
                self.add_error("custom_event_type", "Please enter a custom event type")
            else:
                cleaned["event_type"] = custom
                cleaned["custom_event_type"] = custom
        else:
            cleaned["custom_event_type"] = None
        return cleaned

    def save(self, commit=True, owner=None):
        event = super().save(commit=False)
        if owner is not None:
            event.owner = owner
        if commit:
            event.save()
        return event
