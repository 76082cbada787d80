from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import AuthenticationForm


User = get_user_model()

MIN_PASSWORD_LENGTH = 6


class SignInForm(AuthenticationForm):
    username = forms.EmailField(label="Email", widget=forms.EmailInput(attrs={"autofocus": True}))

    error_messages = {
        **AuthenticationForm.error_messages,
        "invalid_login": "Invalid email or password.",
    }

    def clean_username(self):
        return self.cleaned_data["username"].lower()


class RegisterForm(forms.Form):
    """Sign-up form; every failure is reported as one form-level message."""

    name = forms.CharField(max_length=150)
    email = forms.EmailField()
    password = forms.CharField(widget=forms.PasswordInput)
    confirm_password = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned = super().clean()
        if self.errors:
            return cleaned

        password = cleaned["password"]
        if password != cleaned["confirm_password"]:
            raise forms.ValidationError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise forms.ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if User.objects.filter(username__iexact=cleaned["email"]).exists():
            raise forms.ValidationError("An account with this email already exists")
        return cleaned

    def save(self):
        email = self.cleaned_data["email"].lower()
        return User.objects.create_user(
            username=email,
            email=email,
            password=self.cleaned_data["password"],
            first_name=self.cleaned_data["name"],
        )


def form_error(form):
    """The single message shown above an auth form."""
    if not form.is_bound or not form.errors:
        return ""
    errors = form.non_field_errors()
    if errors:
        return errors[0]
    for field_errors in form.errors.values():
        return field_errors[0]
    return ""
