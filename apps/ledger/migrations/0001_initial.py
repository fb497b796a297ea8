# Generated manually for ledger app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='GroupExpense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('description', models.CharField(max_length=200)),
                ('category', models.CharField(default='Other', max_length=30)),
                ('date', models.DateField(default=django.utils.timezone.localdate)),
                ('split_type', models.CharField(choices=[('equal', 'Equal'), ('exact', 'Exact'), ('percentage', 'Percentage')], default='equal', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='groups.group')),
                ('paid_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='group_expenses_paid', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'group_expenses',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['group', 'date'], name='group_expenses_group_date_idx'),
                    models.Index(fields=['paid_by'], name='group_expenses_paid_by_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Split',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('is_paid', models.BooleanField(default=False)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('expense', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='splits', to='ledger.groupexpense')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='group_splits', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'group_expense_splits',
                'ordering': ['position'],
                'indexes': [
                    models.Index(fields=['user', 'is_paid'], name='splits_user_paid_idx'),
                    models.Index(fields=['expense', 'is_paid'], name='splits_expense_paid_idx'),
                ],
                'unique_together': {('expense', 'user')},
            },
        ),
    ]
