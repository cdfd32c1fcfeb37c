from .sessions import current_session, is_admin


def auth_session(request):
    if not hasattr(request, "session"):
        return {}
    session = current_session(request)
    return {
        "auth_session": session,
        "auth_user": session.user if session else None,
        "auth_is_admin": bool(session and is_admin(session.user.email)),
    }
