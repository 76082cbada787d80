def session_user(request):
    """Current signed-in user for the navbar."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return {"session_user": None}

    return {
        "session_user": {
            "uid": user.pk,
            "display_name": user.get_full_name() or user.get_username(),
            "email": user.email,
        }
    }
