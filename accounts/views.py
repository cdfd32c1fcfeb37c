
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .forms import LoginForm, PasswordResetForm, SignUpForm
from .gateway import AuthError
from .services import register_member
from .sessions import get_gateway, is_admin


def _safe_next(request) -> str:
    target = request.POST.get("next") or request.GET.get("next") or ""
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        return target
    return ""


def login_view(request):
    gateway = get_gateway(request)
    next_url = _safe_next(request)

    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                session = gateway.sign_in(form.cleaned_data["email"], form.cleaned_data["password"])
            except AuthError as exc:
                form.add_error(None, exc.message or "Login failed. Please check your credentials.")
            else:
                if next_url:
                    return redirect(next_url)
                if is_admin(session.user.email):
                    return redirect("console:overview")
                return redirect("dashboard:index")
    else:
        form = LoginForm()

    return render(request, "accounts/login.html", {
        "form": form,
        "next": next_url,
        "demo_mode": gateway.config.demo_mode,
    })


def signup(request):
    gateway = get_gateway(request)

    if request.method == "POST":
        form = SignUpForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data["email"]
            profile_data = form.profile_data()
            try:
                gateway.sign_up(email, form.cleaned_data["password"], profile_data)
            except AuthError as exc:
                form.add_error(None, exc.message or "Signup failed. Please try again.")
            else:
                register_member(email, profile_data)
                if gateway.config.demo_mode:
                    messages.success(request, "Account created successfully! (Demo Mode)")
                else:
                    messages.success(
                        request,
                        "Account created successfully! Please check your email to verify your account.",
                    )
                return redirect("accounts:login")
    else:
        form = SignUpForm()

    return render(request, "accounts/signup.html", {
        "form": form,
        "demo_mode": gateway.config.demo_mode,
    })


@require_POST
def logout_view(request):
    get_gateway(request).sign_out()
    return redirect("core:home")


def password_reset(request):
    if request.method == "POST":
        form = PasswordResetForm(request.POST)
        if form.is_valid():
            try:
                get_gateway(request).reset_password(form.cleaned_data["email"])
            except AuthError as exc:
                form.add_error(None, exc.message)
            else:
                messages.info(request, "If an account exists for that address, a reset link is on its way.")
                return redirect("accounts:login")
    else:
        form = PasswordResetForm()
    return render(request, "accounts/password_reset.html", {"form": form})
