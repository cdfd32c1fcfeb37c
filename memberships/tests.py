from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from accounts.models import MemberProfile
from memberships.plans import PLANS, get_plan, next_billing_after
from memberships.services import member_stats, membership_stats


def _member(plan="basic", status="active", joined=date(2024, 1, 15)):
    return MemberProfile(
        email=f"{plan}-{status}-{joined}@example.com",
        full_name="Member",
        membership_type=plan,
        membership_status=status,
        join_date=joined,
    )


class PlanTests(SimpleTestCase):
    def test_catalogue(self):
        self.assertEqual([p.id for p in PLANS], ["basic", "premium"])
        self.assertEqual(get_plan("basic").price, Decimal("29.99"))
        self.assertEqual(get_plan("premium").price, Decimal("49.99"))
        self.assertIn("Priority booking", get_plan("premium").features)
        self.assertIsNone(get_plan("gold"))

    def test_next_billing_after(self):
        self.assertEqual(next_billing_after(date(2024, 7, 15)), date(2024, 8, 15))
        self.assertEqual(next_billing_after(date(2024, 1, 31)), date(2024, 2, 29))
        self.assertEqual(next_billing_after(date(2023, 12, 10)), date(2024, 1, 10))


class MembershipStatsTests(SimpleTestCase):
    def test_empty_set(self):
        stats = membership_stats([])
        self.assertEqual(stats["total"], 0)
        self.assertEqual(stats["retention"], 0)

    def test_counts(self):
        members = [
            _member("premium", "active"),
            _member("basic", "active"),
            _member("premium", "active"),
            _member("basic", "inactive"),
            _member("premium", "active"),
            _member("basic", "cancelled"),
            _member("premium", "active"),
            _member("basic", "active"),
        ]
        stats = membership_stats(members)
        self.assertEqual(stats["total"], 8)
        self.assertEqual(stats["active"], 6)
        self.assertEqual(stats["active"] + stats["inactive"], stats["total"])
        self.assertEqual(stats["premium"] + stats["basic"], stats["total"])
        self.assertEqual(stats["retention"], 75)

    def test_retention_rounds_half_up(self):
        members = [_member(status="active")] + [_member(status="inactive")] * 7
        self.assertEqual(membership_stats(members)["retention"], 13)

    def test_member_stats_counts_joins_this_month(self):
        members = [
            _member(joined=date(2024, 7, 2)),
            _member(joined=date(2024, 7, 20), status="inactive"),
            _member(joined=date(2024, 6, 30), plan="premium"),
        ]
        stats = member_stats(members, today=date(2024, 7, 21))
        self.assertEqual(stats["this_month"], 2)
        self.assertEqual(stats["active"], 2)
        self.assertEqual(stats["premium"], 1)
