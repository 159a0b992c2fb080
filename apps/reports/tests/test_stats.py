from datetime import date, datetime
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import UserProfile
from core.exceptions import ValidationFailed
from loans.models import Loan, Payment
from loans.tests.factories import make_collector, make_loan, make_user
from loans.utils import AGING_BUCKETS, PERIOD_LABELS
from reports.stats import (
    get_aging_report,
    get_collection_summary,
    get_collector_performance,
    get_masterlist,
    get_monthly_report,
)


def aware(*args):
    return timezone.make_aware(datetime(*args))


class AgingReportTests(TestCase):
    def setUp(self):
        self.ana = make_collector('Ana')
        self.ben = make_collector('Ben')

    def rows_for(self, report, name):
        return [row for row in report if row['collector_name'] == name]

    def test_each_collector_gets_six_rows(self):
        make_loan('LN-001', self.ana, due_date=date(2025, 1, 1))
        make_loan('LN-002', self.ben, due_date=date(2025, 3, 1))

        report = get_aging_report(as_of=date(2025, 2, 5))

        self.assertEqual(len(report), 12)
        self.assertEqual([row['bucket'] for row in self.rows_for(report, 'Ana')], list(AGING_BUCKETS))
        # Ben's only loan is not yet due: rows exist but are all zero
        self.assertTrue(all(row['accounts'] == 0 for row in self.rows_for(report, 'Ben')))

    def test_thirty_five_days_lands_in_31_45(self):
        make_loan(
            'LN-001', self.ana,
            due_date=date(2025, 1, 1),
            outstanding_balance=Decimal('8000.00'),
            amount_collected=Decimal('3000.00'),
        )
        report = get_aging_report(as_of=date(2025, 2, 5))

        row = next(r for r in report if r['bucket'] == '31-45 Days')
        self.assertEqual(row['accounts'], 1)
        self.assertEqual(row['reported_amount'], Decimal('8000.00'))
        self.assertEqual(row['collected_amount'], Decimal('3000.00'))
        self.assertEqual(row['ending_balance'], Decimal('5000.00'))

    def test_paid_loans_are_excluded(self):
        make_loan('LN-001', self.ana, due_date=date(2025, 1, 1), moving_status=Loan.PAID)
        self.assertEqual(get_aging_report(as_of=date(2025, 2, 5)), [])

    def test_collector_with_only_paid_loans_has_no_rows(self):
        make_loan('LN-001', self.ana, due_date=date(2025, 1, 1), moving_status=Loan.PAID)
        make_loan('LN-002', self.ben, due_date=date(2025, 1, 1))

        report = get_aging_report(as_of=date(2025, 2, 5))
        self.assertEqual({row['collector_name'] for row in report}, {'Ben'})
        self.assertEqual(len(report), 6)

    def test_unassigned_sorts_last(self):
        make_loan('LN-001', None, due_date=date(2025, 1, 1))
        make_loan('LN-002', self.ben, due_date=date(2025, 1, 1))
        make_loan('LN-003', self.ana, due_date=date(2025, 1, 1))

        report = get_aging_report(as_of=date(2025, 2, 5))
        names = []
        for row in report:
            if row['collector_name'] not in names:
                names.append(row['collector_name'])
        self.assertEqual(names, ['Ana', 'Ben', 'Unassigned'])


class CollectorPerformanceTests(TestCase):
    def test_metrics_and_ordering(self):
        ana = make_collector('Ana')
        ben = make_collector('Ben')
        make_loan('LN-001', ana, outstanding_balance=Decimal('100.00'), amount_collected=Decimal('25.00'))
        make_loan(
            'LN-002', ana,
            outstanding_balance=Decimal('300.00'),
            amount_collected=Decimal('300.00'),
            moving_status=Loan.PAID,
        )
        make_loan('LN-003', ben, outstanding_balance=Decimal('1000.00'), amount_collected=Decimal('10.00'))

        report = get_collector_performance()

        self.assertEqual([row['collector_name'] for row in report], ['Ana', 'Ben'])
        ana_row = report[0]
        self.assertEqual(ana_row['total_accounts'], 2)
        self.assertEqual(ana_row['total_outstanding'], Decimal('400.00'))
        self.assertEqual(ana_row['total_collected'], Decimal('325.00'))
        self.assertEqual(ana_row['total_running_balance'], Decimal('75.00'))
        self.assertEqual(ana_row['collection_rate'], Decimal('81.25'))
        self.assertEqual(ana_row['paid_accounts'], 1)
        self.assertEqual(report[1]['collection_rate'], Decimal('1.00'))

    def test_zero_outstanding_has_no_rate(self):
        make_loan('LN-001', make_collector('Ana'), outstanding_balance=Decimal('0.00'))
        self.assertIsNone(get_collector_performance()[0]['collection_rate'])


class MonthlyReportTests(TestCase):
    def setUp(self):
        self.admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        self.ana = make_collector('Ana')
        self.ben = make_collector('Ben')

    def test_reported_months_are_zero_filled(self):
        make_loan('LN-001', self.ana, month_reported='01-25', outstanding_balance=Decimal('1000.00'))
        make_loan('LN-002', self.ana, month_reported='01-25', outstanding_balance=Decimal('500.00'))
        make_loan('LN-003', self.ben, month_reported='03-25', outstanding_balance=Decimal('700.00'))
        make_loan('LN-004', self.ben, month_reported='03-24', outstanding_balance=Decimal('900.00'))

        report = get_monthly_report(2025, 'reported')

        self.assertEqual(report['year'], 2025)
        self.assertEqual([row['collector'] for row in report['rows']], ['Ana', 'Ben'])
        ana = report['rows'][0]
        self.assertEqual(len(ana['months']), 12)
        self.assertEqual(ana['months']['01'], Decimal('1500.00'))
        self.assertEqual(ana['months']['02'], 0)
        self.assertEqual(ana['total'], Decimal('1500.00'))

    def test_grand_total_sums_rows(self):
        make_loan('LN-001', self.ana, month_reported='02-25', outstanding_balance=Decimal('1000.00'))
        make_loan('LN-002', self.ben, month_reported='02-25', outstanding_balance=Decimal('250.00'))
        make_loan('LN-003', None, month_reported='11-25', outstanding_balance=Decimal('40.00'))

        report = get_monthly_report(2025, 'reported')
        grand = report['grand_total']

        self.assertEqual(grand['collector'], 'Grand Total')
        self.assertEqual(report['rows'][-1]['collector'], 'Unassigned')
        for month in grand['months']:
            self.assertEqual(
                grand['months'][month],
                sum((row['months'][month] for row in report['rows']), Decimal('0'))
            )
        self.assertEqual(grand['total'], Decimal('1290.00'))

    def test_collection_periods(self):
        loan = make_loan('LN-001', self.ana, outstanding_balance=Decimal('5000.00'))
        for amount, when in (
            ('100.00', aware(2025, 2, 15, 10, 0)),
            ('200.00', aware(2025, 2, 16, 10, 0)),
            ('300.00', aware(2025, 12, 31, 10, 0)),
            ('999.00', aware(2024, 12, 31, 10, 0)),
        ):
            Payment.objects.create(loan=loan, amount=Decimal(amount), payment_date=when, recorded_by=self.admin)

        report = get_monthly_report(2025, 'collection')

        periods = report['rows'][0]['periods']
        self.assertEqual(list(periods), list(PERIOD_LABELS))
        self.assertEqual(periods['Period 1'], Decimal('100.00'))
        self.assertEqual(periods['Period 2'], Decimal('200.00'))
        self.assertEqual(periods['Period 8'], Decimal('300.00'))
        self.assertEqual(report['grand_total']['total'], Decimal('600.00'))

    def test_unknown_type_and_bad_year(self):
        with self.assertRaises(ValidationFailed):
            get_monthly_report(2025, 'weekly')
        with self.assertRaises(ValidationFailed):
            get_monthly_report('20x5')
        with self.assertRaises(ValidationFailed):
            get_monthly_report(1999)


class CollectionSummaryTests(TestCase):
    def setUp(self):
        self.admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        self.ana = make_collector('Ana')
        self.ben = make_collector('Ben')

    def test_dates_are_required(self):
        with self.assertRaises(ValidationFailed) as ctx:
            get_collection_summary(None, '2025-01-31')
        self.assertEqual(ctx.exception.message, 'Start date and End date are required.')

        with self.assertRaises(ValidationFailed):
            get_collection_summary('2025-01-01', 'soon')

    def test_start_after_end(self):
        with self.assertRaises(ValidationFailed):
            get_collection_summary('2025-02-01', '2025-01-01')

    def test_totals_within_inclusive_range(self):
        ana_loan = make_loan('LN-001', self.ana)
        ben_loan = make_loan('LN-002', self.ben)
        for loan, amount, when in (
            (ana_loan, '100.00', aware(2025, 1, 1, 8, 0)),
            (ana_loan, '50.00', aware(2025, 1, 31, 23, 0)),
            (ben_loan, '400.00', aware(2025, 1, 15, 9, 0)),
            (ben_loan, '700.00', aware(2025, 2, 1, 9, 0)),
        ):
            Payment.objects.create(loan=loan, amount=Decimal(amount), payment_date=when, recorded_by=self.admin)

        summary = get_collection_summary('2025-01-01', '2025-01-31')

        self.assertEqual(summary, [
            {'collector_name': 'Ben', 'total_collected': Decimal('400.00')},
            {'collector_name': 'Ana', 'total_collected': Decimal('150.00')},
        ])


class MasterlistTests(TestCase):
    def test_grouping_and_monthly_payments(self):
        admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        ana = make_collector('Ana')
        ben = make_collector('Ben')
        first = make_loan('LN-001', ben, area='North', borrower_name='Abad, Carla')
        make_loan('LN-002', ana, area='North', borrower_name='Zamora, Luis')
        make_loan('LN-003', ana, area=None, borrower_name='Bautista, Rey')
        make_loan('LN-004', ana, area='Central', borrower_name='Cruz, Elena')

        Payment.objects.create(loan=first, amount=Decimal('120.00'), payment_date=aware(2025, 3, 5, 9, 0), recorded_by=admin)
        Payment.objects.create(loan=first, amount=Decimal('80.00'), payment_date=aware(2025, 3, 20, 9, 0), recorded_by=admin)
        Payment.objects.create(loan=first, amount=Decimal('55.00'), payment_date=aware(2024, 3, 20, 9, 0), recorded_by=admin)

        rows = get_masterlist(2025)

        self.assertEqual([row['loan_code'] for row in rows], ['LN-004', 'LN-002', 'LN-001', 'LN-003'])
        first_row = next(row for row in rows if row['loan_code'] == 'LN-001')
        self.assertEqual(first_row['monthly_payments']['03'], Decimal('200.00'))
        self.assertEqual(first_row['monthly_payments']['04'], 0)
        self.assertEqual(first_row['collector_name'], 'Ben')


class ReportViewTests(TestCase):
    def setUp(self):
        self.supervisor = make_user('sup', role=UserProfile.ROLE_SUPERVISOR)
        self.collector_user = make_user('ana')
        make_collector('Ana', user=self.collector_user)

    def test_collectors_are_forbidden(self):
        self.client.force_login(self.collector_user)
        for name in ('aging', 'performance', 'monthly', 'masterlist', 'collection_summary'):
            with self.subTest(report=name):
                response = self.client.get(reverse(f'reports:{name}'))
                self.assertEqual(response.status_code, 403)

    def test_supervisor_reads_monthly_report(self):
        self.client.force_login(self.supervisor)
        response = self.client.get(reverse('reports:monthly'), {'year': '2025'})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['rows'], [])
        self.assertEqual(body['grand_total']['total'], '0.00')

    def test_collection_summary_without_dates(self):
        self.client.force_login(self.supervisor)
        response = self.client.get(reverse('reports:collection_summary'))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Start date and End date are required.')
