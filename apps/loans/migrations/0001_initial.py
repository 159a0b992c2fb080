import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Collector',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='Updated At')),
                ('name', models.CharField(help_text='Display name used on reports', max_length=150, verbose_name='Collector Name')),
                ('user', models.OneToOneField(blank=True, help_text='Login account linked to this collector (collector-role scoping)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='collector_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Collector',
                'verbose_name_plural': 'Collectors',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Loan',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='Updated At')),
                ('loan_code', models.CharField(help_text='User-facing unique loan code', max_length=50, unique=True, verbose_name='Loan Code')),
                ('borrower_name', models.CharField(db_index=True, max_length=200, verbose_name='Borrower Name')),
                ('month_reported', models.CharField(db_index=True, max_length=5, validators=[django.core.validators.RegexValidator(message='Month reported must use the MM-YY format (e.g. 01-26).', regex='^\\d{2}-\\d{2}$')], verbose_name='Month Reported')),
                ('due_date', models.DateField(verbose_name='Due Date')),
                ('outstanding_balance', models.DecimalField(decimal_places=2, help_text='Principal reported past due', max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Outstanding Balance')),
                ('amount_collected', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Cumulative amount collected so far', max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Amount Collected')),
                ('running_balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), editable=False, help_text='Outstanding balance less amount collected (maintained on save)', max_digits=14, verbose_name='Running Balance')),
                ('moving_status', models.CharField(choices=[('Moving', 'Moving'), ('NM', 'Not Moving'), ('NMSR', 'Not Moving Since Release'), ('Paid', 'Paid')], default='Moving', max_length=10, verbose_name='Moving Status')),
                ('location_status', models.CharField(choices=[('L', 'Located'), ('NL', 'Not Located')], default='NL', max_length=2, verbose_name='Location Status')),
                ('area', models.CharField(blank=True, db_index=True, max_length=100, null=True, verbose_name='Area')),
                ('city', models.CharField(blank=True, db_index=True, max_length=100, null=True, verbose_name='City')),
                ('barangay', models.CharField(blank=True, db_index=True, max_length=100, null=True, verbose_name='Barangay')),
                ('full_address', models.TextField(blank=True, null=True, verbose_name='Full Address')),
                ('collector', models.ForeignKey(blank=True, help_text='Collector assigned to this account', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='loans', to='loans.collector')),
            ],
            options={
                'verbose_name': 'Loan',
                'verbose_name_plural': 'Loans',
                'ordering': ['borrower_name'],
                'indexes': [
                    models.Index(fields=['collector', 'moving_status'], name='loan_collector_status_idx'),
                    models.Index(fields=['due_date'], name='loan_due_date_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount_collected__lte', models.F('outstanding_balance'))), name='loan_collected_within_outstanding'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='Updated At')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Amount')),
                ('payment_date', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Payment Date')),
                ('loan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='loans.loan')),
                ('recorded_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['-payment_date'],
                'indexes': [
                    models.Index(fields=['loan', 'payment_date'], name='payment_loan_date_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='payment_amount_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LoanHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('field_name', models.CharField(max_length=50, verbose_name='Field')),
                ('old_value', models.TextField(blank=True, null=True, verbose_name='Old Value')),
                ('new_value', models.TextField(blank=True, null=True, verbose_name='New Value')),
                ('changed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Changed At')),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='loan_changes', to=settings.AUTH_USER_MODEL)),
                ('loan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='history', to='loans.loan')),
            ],
            options={
                'verbose_name': 'Loan History',
                'verbose_name_plural': 'Loan History',
                'ordering': ['-changed_at'],
            },
        ),
        migrations.CreateModel(
            name='LoanRemark',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, verbose_name='Updated At')),
                ('remark', models.TextField(verbose_name='Remark')),
                ('priority', models.CharField(choices=[('Highest Priority', 'Highest Priority'), ('High Priority', 'High Priority'), ('Medium Priority', 'Medium Priority'), ('Low Priority', 'Low Priority'), ('Lowest Priority', 'Lowest Priority')], default='Lowest Priority', max_length=20, verbose_name='Priority')),
                ('follow_up_date', models.DateField(blank=True, null=True, verbose_name='Follow-up Date')),
                ('is_read', models.BooleanField(default=False, verbose_name='Read')),
                ('loan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='remarks', to='loans.loan')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='loan_remarks', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Loan Remark',
                'verbose_name_plural': 'Loan Remarks',
                'ordering': ['-created_at'],
            },
        ),
    ]
