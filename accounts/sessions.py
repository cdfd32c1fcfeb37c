from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect, render
from django.urls import reverse

from .gateway import AuthGateway, AuthSession, ProviderConfig
from .models import MemberProfile


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_gateway(request, config: ProviderConfig | None = None) -> AuthGateway:
    gateway = getattr(request, "_auth_gateway", None)
    if gateway is None:
        gateway = AuthGateway(config=config or ProviderConfig.from_settings(), store=request.session)
        request._auth_gateway = gateway
    return gateway


def current_session(request) -> AuthSession | None:
    return get_gateway(request).get_session()


def is_admin(email: str) -> bool:
    email = normalize_email(email)
    if not email:
        return False
    return email in {normalize_email(x) for x in getattr(settings, "GYM_ADMIN_EMAILS", [])}


def member_for_session(session: AuthSession | None) -> MemberProfile | None:
    if session is None:
        return None
    return MemberProfile.objects.filter(email__iexact=session.user.email).first()


def _login_redirect(request):
    return redirect(f"{reverse('accounts:login')}?{urlencode({'next': request.get_full_path()})}")


def session_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        session = current_session(request)
        if session is None:
            return _login_redirect(request)
        request.auth_session = session
        return view(request, *args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        session = current_session(request)
        if session is None:
            return _login_redirect(request)
        if not is_admin(session.user.email):
            return render(request, "console/access_denied.html", status=403)
        request.auth_session = session
        return view(request, *args, **kwargs)

    return wrapper
