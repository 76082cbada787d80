ALL_TYPES = "all"


def matches_search(event, search):
    term = (search or "").strip().lower()
    if not term:
        return True
    return any(
        term in (value or "").lower()
        for value in (event.title, event.description, event.location)
    )


def matches_type(event, event_type):
    if not event_type or event_type == ALL_TYPES:
        return True
    return event.event_type == event_type


def filter_events(events, search="", event_type=ALL_TYPES):
    return [e for e in events if matches_search(e, search) and matches_type(e, event_type)]


def event_type_choices(events):
    seen = []
    for event in events:
        if event.event_type not in seen:
            seen.append(event.event_type)
    return seen
