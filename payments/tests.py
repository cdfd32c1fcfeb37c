from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from payments.models import PaymentRecord
from payments.services import (
    filter_payments,
    financial_stats,
    monthly_revenue,
    plan_revenue,
    revenue_growth,
    revenue_stats,
)

Status = PaymentRecord.Status


def _pay(day, amount="49.99", status=Status.COMPLETED, method="card", plan="premium", invoice="", description=""):
    return PaymentRecord(
        date=day,
        amount=Decimal(amount),
        status=status,
        method=method,
        plan_type=plan,
        invoice=invoice,
        description=description or f"{plan.title()} Membership",
    )


class RevenueTests(SimpleTestCase):
    def test_growth(self):
        self.assertEqual(revenue_growth(6895, 6750), Decimal("2.15"))
        self.assertEqual(revenue_growth(Decimal("50"), Decimal("100")), Decimal("-50.00"))
        self.assertIsNone(revenue_growth(100, 0))

    def test_monthly_buckets_count_completed_only(self):
        payments = [
            _pay(date(2024, 6, 1)),
            _pay(date(2024, 6, 15), "29.99", plan="basic"),
            _pay(date(2024, 6, 20), status=Status.FAILED),
            _pay(date(2024, 7, 1)),
        ]
        buckets = monthly_revenue(payments)
        self.assertEqual(list(buckets), [(2024, 6), (2024, 7)])
        self.assertEqual(buckets[(2024, 6)], Decimal("79.98"))
        self.assertEqual(monthly_revenue(payments, statuses=None)[(2024, 6)], Decimal("129.97"))

    def test_revenue_stats(self):
        payments = [_pay(date(2024, 6, 1), "100.00"), _pay(date(2024, 7, 1), "150.00")]
        stats = revenue_stats(payments, today=date(2024, 7, 21))
        self.assertEqual(stats["current_month"], Decimal("150.00"))
        self.assertEqual(stats["previous_month"], Decimal("100.00"))
        self.assertEqual(stats["growth"], Decimal("50.00"))
        self.assertEqual(stats["total_revenue"], Decimal("250.00"))
        self.assertEqual([row["label"] for row in stats["by_month"]], ["Jun 2024", "Jul 2024"])

    def test_revenue_stats_without_payments(self):
        stats = revenue_stats([], today=date(2024, 1, 5))
        self.assertEqual(stats["current_month"], Decimal("0"))
        self.assertIsNone(stats["growth"])
        self.assertEqual(stats["by_month"], [])


class PaymentFilterTests(SimpleTestCase):
    def setUp(self):
        self.payments = [
            _pay(date(2024, 7, 20), invoice="INV-2024-001", method="card"),
            _pay(date(2024, 7, 1), "29.99", plan="basic", invoice="INV-2024-002", method="cash",
                 status=Status.PENDING),
            _pay(date(2024, 5, 1), invoice="INV-2024-003", method="bank", status=Status.FAILED),
        ]

    def test_all_filters_default_to_everything(self):
        self.assertEqual(filter_payments(self.payments, today=date(2024, 7, 21)), self.payments)

    def test_query_status_method_and_period(self):
        today = date(2024, 7, 21)
        self.assertEqual(len(filter_payments(self.payments, query="inv-2024-00", today=today)), 3)
        self.assertEqual(len(filter_payments(self.payments, query="basic", today=today)), 1)
        self.assertEqual(len(filter_payments(self.payments, status="pending", today=today)), 1)
        self.assertEqual(len(filter_payments(self.payments, method="bank", today=today)), 1)
        self.assertEqual(len(filter_payments(self.payments, days="30", today=today)), 2)
        self.assertEqual(len(filter_payments(self.payments, days=7, today=today)), 1)

    def test_financial_and_plan_totals(self):
        stats = financial_stats(self.payments, today=date(2024, 7, 21))
        self.assertEqual(stats["total_revenue"], Decimal("129.97"))
        self.assertEqual(stats["completed_revenue"], Decimal("49.99"))
        self.assertEqual(stats["pending_revenue"], Decimal("29.99"))
        self.assertEqual(stats["monthly_revenue"], Decimal("79.98"))
        self.assertEqual(stats["failed_count"], 1)
        self.assertEqual(stats["total_transactions"], 3)

        plans = plan_revenue(self.payments)
        self.assertEqual(plans["premium"], Decimal("99.98"))
        self.assertEqual(plans["basic"], Decimal("29.99"))
        self.assertEqual(plans["premium_percentage"], 77)
        self.assertEqual(plans["basic_percentage"], 23)

    def test_negative_period_is_clamped(self):
        today = date(2024, 7, 21)
        self.assertEqual(filter_payments(self.payments, days="-5", today=today), [])
        self.assertEqual(filter_payments(self.payments, days="0", today=today), [])
        self.payments.append(_pay(today, invoice="INV-2024-004"))
        self.assertEqual([p.invoice for p in filter_payments(self.payments, days="-5", today=today)], ["INV-2024-004"])

    def test_plan_revenue_empty(self):
        plans = plan_revenue([])
        self.assertEqual(plans["premium_percentage"], 0)
        self.assertEqual(plans["basic_percentage"], 0)
