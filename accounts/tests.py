from datetime import date
from unittest import mock

import requests
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from accounts.forms import LoginForm, SignUpForm
from accounts.gateway import (
    PLACEHOLDER_KEY,
    PLACEHOLDER_URL,
    SESSION_KEY,
    SIGNED_IN,
    SIGNED_OUT,
    AuthError,
    AuthGateway,
    AuthSession,
    ProviderConfig,
)
from accounts.models import MemberProfile
from accounts.services import cancel_membership, filter_members, register_member
from accounts.sessions import is_admin

DEMO = override_settings(SUPABASE_URL=PLACEHOLDER_URL, SUPABASE_KEY=PLACEHOLDER_KEY)
LIVE = ProviderConfig(url="https://abc.supabase.co", key="anon-key", timeout=3)


def _response(status: int, payload=None):
    r = mock.Mock()
    r.status_code = status
    r.content = b"{}" if payload is not None else b""
    r.json.return_value = payload
    return r


def _signup_data(**overrides):
    data = {
        "email": "new.member@example.com",
        "password": "Secret123",
        "confirm_password": "Secret123",
        "full_name": "New Member",
        "age": "30",
        "gender": "female",
        "occupation": "Designer",
        "phone": "(555) 123-4567",
        "membership_type": "premium",
        "waiver_accepted": "on",
    }
    data.update(overrides)
    return data


class ProviderConfigTests(SimpleTestCase):
    def test_placeholders_mean_demo_mode(self):
        self.assertFalse(ProviderConfig().is_configured())
        self.assertTrue(ProviderConfig().demo_mode)
        self.assertFalse(ProviderConfig(url="https://abc.supabase.co").is_configured())
        self.assertFalse(ProviderConfig(key="real-key").is_configured())
        self.assertTrue(LIVE.is_configured())

    @override_settings(SUPABASE_URL="https://abc.supabase.co/", SUPABASE_KEY="k", SUPABASE_TIMEOUT=4)
    def test_from_settings(self):
        config = ProviderConfig.from_settings()
        self.assertEqual(config.url, "https://abc.supabase.co")
        self.assertEqual(config.timeout, 4.0)
        self.assertTrue(config.is_configured())


class DemoGatewayTests(SimpleTestCase):
    def test_sign_in_creates_demo_session_and_notifies(self):
        gateway = AuthGateway(config=ProviderConfig())
        events = []
        unsubscribe = gateway.on_session_change(lambda event, session: events.append(event))

        session = gateway.sign_in("User@Example.com", "whatever")
        self.assertTrue(session.demo)
        self.assertEqual(session.user.id, "demo-user")
        self.assertEqual(session.user.email, "user@example.com")
        self.assertEqual(gateway.get_session(), session)

        # same session again is not a change
        gateway.sign_in("user@example.com", "whatever")
        gateway.sign_out()
        self.assertIsNone(gateway.get_session())
        self.assertEqual(events, [SIGNED_IN, SIGNED_OUT])

        unsubscribe()
        gateway.sign_in("user@example.com", "whatever")
        self.assertEqual(events, [SIGNED_IN, SIGNED_OUT])

    def test_switching_demo_user_is_a_change(self):
        gateway = AuthGateway(config=ProviderConfig())
        seen = []
        gateway.on_session_change(lambda event, session: seen.append((event, session.user.email)))

        gateway.sign_in("a@example.com", "whatever")
        gateway.sign_in("b@example.com", "whatever")

        self.assertEqual(seen, [(SIGNED_IN, "a@example.com"), (SIGNED_IN, "b@example.com")])
        self.assertEqual(gateway.get_session().user.email, "b@example.com")

    def test_stored_session_with_bad_expiry(self):
        session = AuthSession.from_dict({
            "user": {"id": "u-1", "email": "jane@example.com"},
            "access_token": "tok",
            "expires_at": "tomorrow",
        })
        self.assertIsNone(session.expires_at)
        restored = AuthSession.from_dict({"user": {"id": "u-1", "email": "jane@example.com"}, "expires_at": 1720000000.0})
        self.assertEqual(restored.expires_at, 1720000000)

    @mock.patch("accounts.gateway.requests.post")
    def test_demo_mode_never_calls_provider(self, post):
        gateway = AuthGateway(config=ProviderConfig())
        gateway.sign_up("a@example.com", "Secret123", {"full_name": "A"})
        gateway.reset_password("a@example.com")
        post.assert_not_called()


class ProviderGatewayTests(SimpleTestCase):
    token_payload = {
        "access_token": "tok-1",
        "refresh_token": "ref-1",
        "expires_at": 1720000000,
        "user": {"id": "u-1", "email": "Jane@Example.com", "user_metadata": {"full_name": "Jane Roe"}},
    }

    @mock.patch("accounts.gateway.requests.post")
    def test_sign_in_maps_provider_payload(self, post):
        post.return_value = _response(200, self.token_payload)
        store = {}
        gateway = AuthGateway(config=LIVE, store=store)

        session = gateway.sign_in("jane@example.com", "Secret123")

        self.assertEqual(session.access_token, "tok-1")
        self.assertEqual(session.user.email, "jane@example.com")
        self.assertEqual(session.user.full_name, "Jane Roe")
        self.assertEqual(AuthSession.from_dict(store[SESSION_KEY]), session)

        args, kwargs = post.call_args
        self.assertEqual(args[0], "https://abc.supabase.co/auth/v1/token")
        self.assertEqual(kwargs["params"], {"grant_type": "password"})
        self.assertEqual(kwargs["timeout"], 3)
        self.assertEqual(kwargs["headers"]["apikey"], "anon-key")

    @mock.patch("accounts.gateway.requests.post")
    def test_error_payload_raises_auth_error(self, post):
        post.return_value = _response(400, {"error_description": "Invalid login credentials"})
        gateway = AuthGateway(config=LIVE)
        with self.assertRaises(AuthError) as ctx:
            gateway.sign_in("jane@example.com", "wrong-pass")
        self.assertEqual(ctx.exception.message, "Invalid login credentials")
        self.assertIsNone(gateway.get_session())

    @mock.patch("accounts.gateway.requests.post")
    def test_malformed_payload_raises_auth_error(self, post):
        post.return_value = _response(200, {"access_token": "tok", "user": {"email": "x@example.com"}})
        with self.assertRaises(AuthError):
            AuthGateway(config=LIVE).sign_in("x@example.com", "Secret123")

    @mock.patch("accounts.gateway.requests.post")
    def test_network_failure_raises_auth_error(self, post):
        post.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(AuthError):
            AuthGateway(config=LIVE).sign_up("x@example.com", "Secret123")

    @mock.patch("accounts.gateway.requests.post")
    def test_sign_out_clears_session_even_when_provider_fails(self, post):
        post.return_value = _response(200, self.token_payload)
        gateway = AuthGateway(config=LIVE)
        gateway.sign_in("jane@example.com", "Secret123")

        post.return_value = _response(500, {"msg": "down"})
        gateway.sign_out()
        self.assertIsNone(gateway.get_session())
        self.assertEqual(post.call_args[1]["headers"]["Authorization"], "Bearer tok-1")

    @mock.patch("accounts.gateway.requests.post")
    def test_reset_password_passes_redirect(self, post):
        post.return_value = _response(200)
        config = ProviderConfig(url=LIVE.url, key=LIVE.key, reset_redirect_url="https://gym.example/reset")
        AuthGateway(config=config).reset_password("jane@example.com")
        args, kwargs = post.call_args
        self.assertTrue(args[0].endswith("/auth/v1/recover"))
        self.assertEqual(kwargs["params"], {"redirect_to": "https://gym.example/reset"})


class FormTests(TestCase):
    def test_login_form_rules(self):
        form = LoginForm(data={"email": "nope", "password": "123"})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["email"], ["Please enter a valid email address"])
        self.assertEqual(form.errors["password"], ["Password must be at least 6 characters"])

        self.assertTrue(LoginForm(data={"email": "a@b.co", "password": "123456"}).is_valid())

    def test_signup_form_accepts_valid_data(self):
        form = SignUpForm(data=_signup_data())
        self.assertTrue(form.is_valid(), form.errors)
        profile = form.profile_data()
        self.assertEqual(profile["age"], 30)
        self.assertTrue(profile["waiver_signed"])

    def test_signup_form_reports_each_field(self):
        cases = {
            "email": ({"email": "bad"}, "Please enter a valid email address"),
            "password": ({"password": "alllower1", "confirm_password": "alllower1"},
                         "Password must contain uppercase, lowercase, and number"),
            "confirm_password": ({"confirm_password": "Other1234"}, "Passwords do not match"),
            "full_name": ({"full_name": "J"}, "Full name must be at least 2 characters"),
            "age": ({"age": "15"}, "Age must be between 16 and 100"),
            "gender": ({"gender": ""}, "Gender selection is required"),
            "phone": ({"phone": "12345"}, "Please enter a valid phone number"),
            "membership_type": ({"membership_type": ""}, "Please select a membership type"),
            "waiver_accepted": ({"waiver_accepted": ""}, "You must accept the waiver to continue"),
        }
        for field, (overrides, message) in cases.items():
            with self.subTest(field=field):
                form = SignUpForm(data=_signup_data(**overrides))
                self.assertFalse(form.is_valid())
                self.assertEqual(list(form.errors), [field])
                self.assertIn(message, form.errors[field])

    def test_signup_rejects_existing_email(self):
        MemberProfile.objects.create(email="taken@example.com", full_name="Taken")
        form = SignUpForm(data=_signup_data(email="Taken@example.com"))
        self.assertFalse(form.is_valid())
        self.assertIn("An account with this email already exists", form.errors["email"])


class MemberServiceTests(TestCase):
    def test_register_member_is_idempotent(self):
        data = {"full_name": "Jane Roe", "age": 30, "gender": "female", "phone": "(555) 111-2222",
                "membership_type": "premium", "waiver_signed": True}
        first = register_member("jane@example.com", data, today=date(2024, 1, 31))
        second = register_member("jane@example.com", data)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.next_billing_date, date(2024, 2, 29))
        self.assertEqual(first.membership_status, MemberProfile.Status.ACTIVE)

    def test_cancel_membership_clears_billing(self):
        member = MemberProfile.objects.create(
            email="c@example.com", full_name="C", next_billing_date=date(2030, 1, 1),
        )
        member = cancel_membership(member.pk)
        self.assertEqual(member.membership_status, MemberProfile.Status.CANCELLED)
        self.assertIsNone(member.next_billing_date)

    def test_filter_members(self):
        rows = [
            MemberProfile(email="sarah@email.com", full_name="Sarah Johnson", gender="female",
                          membership_type="premium", membership_status="active"),
            MemberProfile(email="mike@email.com", full_name="Mike Chen", gender="male",
                          membership_type="basic", membership_status="active"),
            MemberProfile(email="james@email.com", full_name="James Brown", gender="male",
                          membership_type="basic", membership_status="cancelled"),
        ]
        self.assertEqual(len(filter_members(rows)), 3)
        self.assertEqual([m.full_name for m in filter_members(rows, query="JOHN")], ["Sarah Johnson"])
        self.assertEqual(
            [m.full_name for m in filter_members(rows, plan="basic", status="active")],
            ["Mike Chen"],
        )
        self.assertEqual(len(filter_members(rows, gender="male", query="email.com")), 2)

    @override_settings(GYM_ADMIN_EMAILS=["admin@topdoggym.com"])
    def test_is_admin(self):
        self.assertTrue(is_admin(" Admin@TopDogGym.com "))
        self.assertFalse(is_admin("member@example.com"))
        self.assertFalse(is_admin(""))


@DEMO
class AuthViewTests(TestCase):
    def test_login_signs_in_and_redirects_to_dashboard(self):
        r = self.client.post(reverse("accounts:login"), {"email": "jane@example.com", "password": "secret1"})
        self.assertRedirects(r, reverse("dashboard:index"), fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_KEY]["user"]["email"], "jane@example.com")

    def test_login_honours_next(self):
        r = self.client.post(
            reverse("accounts:login"),
            {"email": "jane@example.com", "password": "secret1", "next": "/classes/"},
        )
        self.assertRedirects(r, "/classes/", fetch_redirect_response=False)

    def test_login_ignores_offsite_next(self):
        r = self.client.post(
            reverse("accounts:login"),
            {"email": "jane@example.com", "password": "secret1", "next": "https://evil.example/"},
        )
        self.assertRedirects(r, reverse("dashboard:index"), fetch_redirect_response=False)

    def test_invalid_login_does_not_create_session(self):
        r = self.client.post(reverse("accounts:login"), {"email": "jane", "password": "1"})
        self.assertEqual(r.status_code, 200)
        self.assertNotIn(SESSION_KEY, self.client.session)

    @override_settings(GYM_ADMIN_EMAILS=["admin@topdoggym.com"])
    def test_admin_login_goes_to_console(self):
        r = self.client.post(reverse("accounts:login"), {"email": "admin@topdoggym.com", "password": "secret1"})
        self.assertRedirects(r, reverse("console:overview"), fetch_redirect_response=False)

    @mock.patch("accounts.views.get_gateway")
    def test_provider_error_is_shown_as_general_message(self, get_gateway):
        get_gateway.return_value.sign_in.side_effect = AuthError("Invalid login credentials")
        get_gateway.return_value.config = ProviderConfig()
        r = self.client.post(reverse("accounts:login"), {"email": "jane@example.com", "password": "secret1"})
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Invalid login credentials")

    def test_signup_creates_member_profile(self):
        r = self.client.post(reverse("accounts:signup"), _signup_data())
        self.assertRedirects(r, reverse("accounts:login"), fetch_redirect_response=False)
        member = MemberProfile.objects.get(email="new.member@example.com")
        self.assertEqual(member.membership_type, "premium")
        self.assertTrue(member.waiver_signed)
        self.assertIsNotNone(member.next_billing_date)

    def test_signup_with_errors_creates_nothing(self):
        r = self.client.post(reverse("accounts:signup"), _signup_data(age="12"))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Age must be between 16 and 100")
        self.assertFalse(MemberProfile.objects.exists())

    def test_logout_clears_session(self):
        self.client.post(reverse("accounts:login"), {"email": "jane@example.com", "password": "secret1"})
        r = self.client.post(reverse("accounts:logout"))
        self.assertRedirects(r, reverse("core:home"), fetch_redirect_response=False)
        self.assertNotIn(SESSION_KEY, self.client.session)

    def test_password_reset_in_demo_mode(self):
        r = self.client.post(reverse("accounts:password_reset"), {"email": "jane@example.com"})
        self.assertRedirects(r, reverse("accounts:login"), fetch_redirect_response=False)
