import re

from django import forms

from .models import MemberProfile
from .sessions import normalize_email

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")


def validate_email_value(email: str) -> str:
    email = normalize_email(email)
    if not email:
        raise forms.ValidationError("Email is required")
    if not EMAIL_RE.search(email):
        raise forms.ValidationError("Please enter a valid email address")
    return email


def validate_phone(phone: str) -> str:
    raw = (phone or "").strip()
    if not raw:
        raise forms.ValidationError("Phone number is required")
    if not PHONE_RE.match(re.sub(r"\s", "", raw)):
        raise forms.ValidationError("Please enter a valid phone number")
    return raw


def email_conflicts(email: str) -> bool:
    if not email:
        return False
    return MemberProfile.objects.filter(email__iexact=email).exists()


class LoginForm(forms.Form):
    email = forms.CharField(
        label="Email",
        required=False,
        max_length=254,
        widget=forms.EmailInput(attrs={"autocomplete": "email", "placeholder": "you@example.com"}),
    )
    password = forms.CharField(
        label="Password",
        required=False,
        widget=forms.PasswordInput(attrs={"autocomplete": "current-password"}),
    )

    def clean_email(self):
        return validate_email_value(self.cleaned_data.get("email"))

    def clean_password(self):
        password = self.cleaned_data.get("password") or ""
        if not password:
            raise forms.ValidationError("Password is required")
        if len(password) < 6:
            raise forms.ValidationError("Password must be at least 6 characters")
        return password


class SignUpForm(forms.Form):
    email = forms.CharField(label="Email", required=False, max_length=254, widget=forms.EmailInput())
    password = forms.CharField(label="Password", required=False, widget=forms.PasswordInput())
    confirm_password = forms.CharField(label="Confirm password", required=False, widget=forms.PasswordInput())
    full_name = forms.CharField(label="Full name", required=False, max_length=255)
    age = forms.CharField(label="Age", required=False, max_length=3)
    gender = forms.ChoiceField(
        label="Gender",
        required=False,
        choices=[("", "Select gender")] + list(MemberProfile.Gender.choices),
    )
    occupation = forms.CharField(label="Occupation", required=False, max_length=120)
    phone = forms.CharField(
        label="Phone",
        required=False,
        max_length=32,
        widget=forms.TextInput(attrs={"inputmode": "tel", "autocomplete": "tel", "placeholder": "(555) 123-4567"}),
    )
    membership_type = forms.ChoiceField(
        label="Membership",
        required=False,
        choices=[
            ("", "Select membership"),
            (MemberProfile.Plan.BASIC, "Basic Membership - $29.99/month (Downstairs gym access)"),
            (MemberProfile.Plan.PREMIUM, "Premium Membership - $49.99/month (All features + classes)"),
        ],
    )
    waiver_accepted = forms.BooleanField(label="I accept the liability waiver", required=False)

    def clean_email(self):
        email = validate_email_value(self.cleaned_data.get("email"))
        if email_conflicts(email):
            raise forms.ValidationError("An account with this email already exists")
        return email

    def clean_password(self):
        password = self.cleaned_data.get("password") or ""
        if not password:
            raise forms.ValidationError("Password is required")
        if len(password) < 8:
            raise forms.ValidationError("Password must be at least 8 characters")
        if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
            raise forms.ValidationError("Password must contain uppercase, lowercase, and number")
        return password

    def clean_full_name(self):
        full_name = (self.cleaned_data.get("full_name") or "").strip()
        if not full_name:
            raise forms.ValidationError("Full name is required")
        if len(full_name) < 2:
            raise forms.ValidationError("Full name must be at least 2 characters")
        return full_name

    def clean_age(self):
        raw = (self.cleaned_data.get("age") or "").strip()
        if not raw:
            raise forms.ValidationError("Age is required")
        try:
            age = int(raw)
        except ValueError:
            age = None
        if age is None or age < 16 or age > 100:
            raise forms.ValidationError("Age must be between 16 and 100")
        return age

    def clean_gender(self):
        gender = self.cleaned_data.get("gender")
        if not gender:
            raise forms.ValidationError("Gender selection is required")
        return gender

    def clean_occupation(self):
        return (self.cleaned_data.get("occupation") or "").strip()

    def clean_phone(self):
        return validate_phone(self.cleaned_data.get("phone"))

    def clean_membership_type(self):
        plan = self.cleaned_data.get("membership_type")
        if not plan:
            raise forms.ValidationError("Please select a membership type")
        return plan

    def clean_waiver_accepted(self):
        if not self.cleaned_data.get("waiver_accepted"):
            raise forms.ValidationError("You must accept the waiver to continue")
        return True

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get("password")
        confirm = cleaned.get("confirm_password") or ""
        if not confirm:
            self.add_error("confirm_password", "Please confirm your password")
        elif password and password != confirm:
            self.add_error("confirm_password", "Passwords do not match")
        return cleaned

    def profile_data(self) -> dict:
        c = self.cleaned_data
        return {
            "full_name": c["full_name"],
            "age": c["age"],
            "gender": c["gender"],
            "occupation": c["occupation"],
            "phone": c["phone"],
            "membership_type": c["membership_type"],
            "waiver_signed": True,
        }


class PasswordResetForm(forms.Form):
    email = forms.CharField(label="Email", required=False, max_length=254, widget=forms.EmailInput())

    def clean_email(self):
        return validate_email_value(self.cleaned_data.get("email"))
