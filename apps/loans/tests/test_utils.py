from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from loans.utils import (
    AGING_BUCKETS,
    MonthReported,
    calculate_collection_rate,
    calculate_running_balance,
    classify_aging_bucket,
    collection_period,
    days_past_due,
    empty_month_map,
    filter_by_month_range,
    input_date_key,
    month_reported_key,
    parse_amount,
)


class MonthKeyTests(SimpleTestCase):
    def test_month_reported_key(self):
        self.assertEqual(month_reported_key('03-25'), 202503)
        self.assertEqual(month_reported_key('12-24'), 202412)

    def test_malformed_month_reported_key_is_zero(self):
        for value in ('2025-03', '13-25', '00-25', 'ab-cd', '03', '03-25-01', '', None, 325):
            with self.subTest(value=value):
                self.assertEqual(month_reported_key(value), 0)

    def test_input_date_key(self):
        self.assertEqual(input_date_key('2025-01-15'), 202501)
        self.assertEqual(input_date_key('2025-12'), 202512)
        self.assertEqual(input_date_key(date(2025, 2, 28)), 202502)

    def test_malformed_input_date_key_is_zero(self):
        for value in ('2025', 'abcd-ef-01', '', None):
            with self.subTest(value=value):
                self.assertEqual(input_date_key(value), 0)

    def test_month_reported_orders_chronologically(self):
        # Lexically '12-24' > '01-25'
        self.assertLess(MonthReported.parse('12-24'), MonthReported.parse('01-25'))
        self.assertEqual(MonthReported.parse('01-25').code, '01-25')
        self.assertIsNone(MonthReported.parse('1/25'))


class MonthRangeFilterTests(SimpleTestCase):
    def setUp(self):
        self.loans = [
            {'loan_code': 'A', 'month_reported': '12-24'},
            {'loan_code': 'B', 'month_reported': '03-25'},
            {'loan_code': 'C', 'month_reported': '01-26'},
            {'loan_code': 'D', 'month_reported': 'bad'},
        ]

    def codes(self, loans):
        return [loan['loan_code'] for loan in loans]

    def test_inclusive_range(self):
        result = filter_by_month_range(self.loans, '2025-01-15', '2025-12-31')
        self.assertEqual(self.codes(result), ['B'])

    def test_end_before_month_excludes(self):
        result = filter_by_month_range(self.loans, '2025-01-15', '2025-02-28')
        self.assertEqual(self.codes(result), [])

    def test_bounds_compare_at_month_granularity(self):
        result = filter_by_month_range(self.loans, '2025-03-31', '2025-03-01')
        self.assertEqual(self.codes(result), ['B'])

    def test_unparseable_bound_is_ignored(self):
        result = filter_by_month_range(self.loans, 'garbage', None)
        self.assertEqual(self.codes(result), ['A', 'B', 'C', 'D'])

    def test_malformed_month_fails_lower_bound_and_passes_upper_bound(self):
        self.assertNotIn('D', self.codes(filter_by_month_range(self.loans, '2024-01-01', None)))
        self.assertIn('D', self.codes(filter_by_month_range(self.loans, None, '2030-01-01')))

    def test_no_bounds_keeps_order(self):
        self.assertEqual(self.codes(filter_by_month_range(self.loans)), ['A', 'B', 'C', 'D'])


class AgingTests(SimpleTestCase):
    def test_bucket_boundaries(self):
        cases = {
            -5: None,
            0: None,
            1: '1-30 Days',
            30: '1-30 Days',
            31: '31-45 Days',
            45: '31-45 Days',
            46: '46-60 Days',
            60: '46-60 Days',
            61: '61-90 Days',
            90: '61-90 Days',
            91: '91-120 Days',
            120: '91-120 Days',
            121: '120+ Days',
            400: '120+ Days',
        }
        for days, bucket in cases.items():
            with self.subTest(days=days):
                self.assertEqual(classify_aging_bucket(days), bucket)

    def test_thirty_five_days_past_due(self):
        days = days_past_due(date(2025, 1, 1), date(2025, 2, 5))
        self.assertEqual(days, 35)
        self.assertEqual(classify_aging_bucket(days), '31-45 Days')

    def test_bucket_order(self):
        self.assertEqual(len(AGING_BUCKETS), 6)
        self.assertEqual(AGING_BUCKETS[0], '1-30 Days')
        self.assertEqual(AGING_BUCKETS[-1], '120+ Days')


class CollectionPeriodTests(SimpleTestCase):
    def test_period_boundaries(self):
        cases = {
            date(2025, 1, 1): 'Period 1',
            date(2025, 2, 15): 'Period 1',
            date(2025, 2, 16): 'Period 2',
            date(2025, 3, 31): 'Period 2',
            date(2025, 4, 1): 'Period 3',
            date(2025, 5, 15): 'Period 3',
            date(2025, 5, 16): 'Period 4',
            date(2025, 6, 30): 'Period 4',
            date(2025, 7, 1): 'Period 5',
            date(2025, 8, 16): 'Period 6',
            date(2025, 10, 1): 'Period 7',
            date(2025, 11, 16): 'Period 8',
            date(2025, 12, 31): 'Period 8',
            date(2024, 2, 29): 'Period 2',
        }
        for value, period in cases.items():
            with self.subTest(value=value):
                self.assertEqual(collection_period(value), period)


class AmountTests(SimpleTestCase):
    def test_running_balance(self):
        self.assertEqual(
            calculate_running_balance(Decimal('50000'), Decimal('20000')),
            Decimal('30000.00')
        )

    def test_collection_rate(self):
        self.assertEqual(calculate_collection_rate(Decimal('25'), Decimal('100')), Decimal('25.00'))
        self.assertEqual(calculate_collection_rate(Decimal('1'), Decimal('3')), Decimal('33.33'))

    def test_collection_rate_undefined_for_zero_outstanding(self):
        self.assertIsNone(calculate_collection_rate(Decimal('0'), Decimal('0')))

    def test_parse_amount(self):
        self.assertEqual(parse_amount('1500.50'), Decimal('1500.50'))
        self.assertEqual(parse_amount(200), Decimal('200'))
        self.assertIsNone(parse_amount('abc'))
        self.assertIsNone(parse_amount(''))
        self.assertIsNone(parse_amount('NaN'))

    def test_parse_amount_rejects_fractions_of_a_cent(self):
        self.assertIsNone(parse_amount('0.001'))
        self.assertIsNone(parse_amount('12.345'))
        self.assertEqual(parse_amount('12.340'), Decimal('12.34'))

    def test_empty_month_map(self):
        months = empty_month_map()
        self.assertEqual(list(months), [f"{m:02d}" for m in range(1, 13)])
        self.assertTrue(all(value == 0 for value in months.values()))
