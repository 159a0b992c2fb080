from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounts.models import UserProfile
from loans.filters import build_loan_filters, scoped_loans
from loans.models import Loan
from loans.serializers import serialize_loan
from loans.services import LoanService

from .factories import actor_for, make_collector, make_loan, make_user


class LoanFilterTests(TestCase):
    def setUp(self):
        self.admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        self.ana_user = make_user('ana')
        self.ben_user = make_user('ben')
        self.ana = make_collector('Ana', user=self.ana_user)
        self.ben = make_collector('Ben', user=self.ben_user)

        make_loan('LN-001', self.ana, borrower_name='Zamora, Luis')
        make_loan('LN-002', self.ana, borrower_name='Abad, Carla', moving_status=Loan.NOT_MOVING)
        make_loan('LN-003', self.ben, borrower_name='Bautista, Rey')
        make_loan('LN-004', None, borrower_name='Cruz, Elena')

    def codes(self, queryset):
        return [loan.loan_code for loan in queryset]

    def test_collector_is_scoped_to_own_loans(self):
        actor = actor_for(self.ana_user)
        loans = scoped_loans({}, actor)
        self.assertEqual(self.codes(loans), ['LN-002', 'LN-001'])

    def test_collector_cannot_widen_scope_with_collector_id(self):
        actor = actor_for(self.ana_user)
        loans = scoped_loans({'collector_id': str(self.ben.pk)}, actor)
        self.assertEqual(self.codes(loans), ['LN-002', 'LN-001'])

    def test_collector_without_profile_sees_nothing(self):
        orphan = make_user('orphan')
        self.assertEqual(self.codes(scoped_loans({}, actor_for(orphan))), [])

    def test_admin_sees_all_ordered_by_borrower(self):
        loans = scoped_loans({}, actor_for(self.admin))
        self.assertEqual(self.codes(loans), ['LN-002', 'LN-003', 'LN-004', 'LN-001'])

    def test_admin_can_narrow_by_collector(self):
        loans = scoped_loans({'collector_id': str(self.ben.pk)}, actor_for(self.admin))
        self.assertEqual(self.codes(loans), ['LN-003'])

    def test_same_borrower_name_is_ordered_by_code(self):
        make_loan('LN-000', self.ben, borrower_name='Abad, Carla')
        loans = scoped_loans({'search': 'Abad'}, actor_for(self.admin))
        self.assertEqual(self.codes(loans), ['LN-000', 'LN-002'])

    def test_filters_combine(self):
        actor = actor_for(self.admin)
        params = {'collector_id': str(self.ana.pk), 'moving_status': Loan.NOT_MOVING}
        self.assertEqual(self.codes(scoped_loans(params, actor)), ['LN-002'])

    def test_search_matches_borrower_or_code_case_insensitively(self):
        actor = actor_for(self.admin)
        self.assertEqual(self.codes(scoped_loans({'search': 'bautista'}, actor)), ['LN-003'])
        self.assertEqual(self.codes(scoped_loans({'search': 'ln-00'}, actor)), ['LN-002', 'LN-003', 'LN-004', 'LN-001'])

    def test_code_is_exact(self):
        actor = actor_for(self.admin)
        self.assertEqual(self.codes(scoped_loans({'code': 'LN-003'}, actor)), ['LN-003'])
        self.assertEqual(self.codes(scoped_loans({'code': 'LN-00'}, actor)), [])

    def test_overdue_requires_past_due_and_balance(self):
        make_loan(
            'LN-005', self.ben,
            borrower_name='Dizon, Mark',
            due_date=date(2025, 1, 1),
            outstanding_balance=Decimal('500.00'),
            amount_collected=Decimal('500.00'),
        )
        make_loan('LN-006', self.ben, borrower_name='Estrada, Joy', due_date=date(2025, 6, 30))

        query = build_loan_filters({'overdue': 'true'}, actor_for(self.admin), today=date(2025, 3, 1))
        loans = query.apply(Loan.objects.all())
        self.assertEqual(self.codes(loans), ['LN-002', 'LN-003', 'LN-004', 'LN-001'])

    def test_overdue_other_values_are_ignored(self):
        query = build_loan_filters({'overdue': 'yes'}, actor_for(self.admin))
        self.assertEqual(len(query.apply(Loan.objects.all())), 4)

    def test_listing_is_repeatable(self):
        actor = actor_for(self.admin)
        params = {'search': 'a', 'start_date': '2025-01-01', 'end_date': None}
        first = [serialize_loan(loan) for loan in LoanService.list_loans(params, actor)]
        second = [serialize_loan(loan) for loan in LoanService.list_loans(params, actor)]
        self.assertEqual(first, second)

    def test_listing_applies_month_range(self):
        make_loan('LN-007', self.ana, borrower_name='Flores, Ivy', month_reported='03-25')
        actor = actor_for(self.ana_user)

        loans = LoanService.list_loans({'start_date': '2025-01-15', 'end_date': '2025-12-31'}, actor)
        self.assertIn('LN-007', self.codes(loans))

        loans = LoanService.list_loans({'start_date': '2025-01-15', 'end_date': '2025-02-28'}, actor)
        self.assertNotIn('LN-007', self.codes(loans))
