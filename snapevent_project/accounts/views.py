import logging

from django.contrib.auth import login, logout
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from .forms import RegisterForm, SignInForm, form_error

logger = logging.getLogger(__name__)


def home(request):
    if request.user.is_authenticated:
        return redirect("event_list")

    if request.method == "POST":
        form = SignInForm(request, data=request.POST)
        if form.is_valid():
            login(request, form.get_user())
            return redirect("event_list")
        logger.info("Failed sign-in for %r", request.POST.get("username", ""))
    else:
        form = SignInForm(request)

    error = form_error(form)
    return render(request, "accounts/sign_in.html", {"form": form, "error": error})


def register(request):
    if request.user.is_authenticated:
        return redirect("event_list")

    if request.method == "POST":
        form = RegisterForm(request.POST)
        if form.is_valid():
            user = form.save()
            login(request, user, backend="django.contrib.auth.backends.ModelBackend")
            logger.info("Registered user %s", user.pk)
            return redirect("event_list")
    else:
        form = RegisterForm()

    error = form_error(form)
    return render(request, "accounts/register.html", {"form": form, "error": error})


@require_POST
def sign_out(request):
    logout(request)
    return redirect("home")
