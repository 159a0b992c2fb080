# core/management/commands/seed_demo_data.py

"""
Seed a fresh database with demo data.

Creates (or refreshes) an active admin account, a collector profile linked to
it and a handful of sample loans. Loans are only inserted when the loan table
is empty, so the command is safe to run repeatedly.

USAGE EXAMPLES:
===============

# Seed with the default admin password
python manage.py seed_demo_data

# Choose the admin credentials
python manage.py seed_demo_data --admin-username admin --admin-password 'S3cure-pass!'

# Dry run (show what would be created)
python manage.py seed_demo_data --dry-run
"""

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from dateutil.relativedelta import relativedelta
from decimal import Decimal
import logging

from accounts.models import UserProfile
from core.utils import get_office_today
from loans.models import Collector, Loan

logger = logging.getLogger(__name__)


DEFAULT_COLLECTOR_NAME = 'Sir Jhun'


def sample_loans(today):
    """Sample accounts relative to today: one not yet due, one overdue, one paid"""
    month_reported = f"{today.month:02d}-{today.year % 100:02d}"
    return [
        {
            'loan_code': 'LN-001',
            'borrower_name': 'Juan Dela Cruz',
            'month_reported': month_reported,
            'due_date': today + relativedelta(weeks=2),
            'outstanding_balance': Decimal('50000.00'),
            'amount_collected': Decimal('0.00'),
            'moving_status': Loan.MOVING,
            'location_status': Loan.NOT_LOCATED,
        },
        {
            'loan_code': 'LN-002',
            'borrower_name': 'Maria Santos',
            'month_reported': month_reported,
            'due_date': today - relativedelta(days=10),
            'outstanding_balance': Decimal('75000.00'),
            'amount_collected': Decimal('20000.00'),
            'moving_status': Loan.MOVING,
            'location_status': Loan.LOCATED,
        },
        {
            'loan_code': 'LN-003',
            'borrower_name': 'Pedro Reyes',
            'month_reported': month_reported,
            'due_date': today + relativedelta(days=30),
            'outstanding_balance': Decimal('120000.00'),
            'amount_collected': Decimal('120000.00'),
            'moving_status': Loan.PAID,
            'location_status': Loan.LOCATED,
        },
    ]


class Command(BaseCommand):
    help = 'Create an admin account, a collector and sample loans for local use'

    def add_arguments(self, parser):
        parser.add_argument(
            '--admin-username',
            type=str,
            default='admin',
            help='Username of the admin account (default: admin)'
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            default='AdminPass123',
            help='Password set on the admin account'
        )
        parser.add_argument(
            '--collector-name',
            type=str,
            default=DEFAULT_COLLECTOR_NAME,
            help='Name of the demo collector'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be created without actually creating it'
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('=' * 80))
        self.stdout.write(self.style.SUCCESS('DEMO DATA SEED'))
        self.stdout.write(self.style.SUCCESS('=' * 80))

        today = get_office_today()
        loans = sample_loans(today)

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n⚠️  DRY RUN MODE - No data will be created\n'))
            self.stdout.write(f"Admin account: {options['admin_username']}")
            self.stdout.write(f"Collector: {options['collector_name']}")
            if Loan.objects.exists():
                self.stdout.write('Loans already exist, sample loans would be skipped')
            else:
                for loan in loans:
                    self.stdout.write(f"Loan {loan['loan_code']} - {loan['borrower_name']}")
            return

        stats = self._seed(options, loans)

        self.stdout.write(self.style.SUCCESS(f"\n✓ Admin account ready: {options['admin_username']}"))
        self.stdout.write(f"  Collector created: {stats['collector_created']}")
        self.stdout.write(f"  Loans created: {stats['loans_created']}")
        self.stdout.write(self.style.SUCCESS('=' * 80 + '\n'))

    @transaction.atomic
    def _seed(self, options, loans):
        stats = {'collector_created': False, 'loans_created': 0}

        admin, _ = User.objects.get_or_create(username=options['admin_username'])
        admin.set_password(options['admin_password'])
        admin.is_staff = True
        admin.save()

        UserProfile.objects.update_or_create(
            user=admin,
            defaults={
                'full_name': 'System Administrator',
                'role': UserProfile.ROLE_ADMIN,
                'status': UserProfile.STATUS_ACTIVE,
            },
        )

        collector = Collector.objects.filter(name=options['collector_name']).first()
        if collector is None:
            collector = Collector.objects.create(name=options['collector_name'], user=admin)
            stats['collector_created'] = True
            logger.info(f"Created demo collector {collector.name}")

        if Loan.objects.exists():
            self.stdout.write(self.style.WARNING('Loans already exist, skipping sample data insertion.'))
            return stats

        for data in loans:
            loan = Loan.objects.create(collector=collector, **data)
            stats['loans_created'] += 1
            self.stdout.write(f"  ✓ Inserted loan {loan.loan_code}")

        logger.info(f"Seeded {stats['loans_created']} demo loan(s)")
        return stats
