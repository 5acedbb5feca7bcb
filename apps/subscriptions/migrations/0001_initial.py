# Generated manually for the subscriptions app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Subscription',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('service_name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(default='BRL', max_length=3)),
                ('max_members', models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(50)])),
                ('current_members', models.PositiveSmallIntegerField(default=1)),
                ('is_public', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('renewal_date', models.DateTimeField()),
                ('credentials_id', models.CharField(blank=True, max_length=255)),
                ('last_password_change', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='subscriptions', to='groups.group')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='owned_subscriptions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'subscriptions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='subs_owner_created_idx'),
                    models.Index(fields=['is_public', 'is_active'], name='subs_public_active_idx'),
                    models.Index(fields=['renewal_date'], name='subs_renewal_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SubscriptionMember',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('member', 'Member')], default='member', max_length=20)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('last_payment', models.DateTimeField(blank=True, null=True)),
                ('next_payment_due', models.DateTimeField(blank=True, null=True)),
                ('subscription', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='subscriptions.subscription')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='subscription_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'subscription_members',
                'ordering': ['joined_at'],
                'indexes': [
                    models.Index(fields=['user', 'joined_at'], name='sub_members_user_joined_idx'),
                    models.Index(fields=['next_payment_due'], name='sub_members_next_due_idx'),
                ],
                'unique_together': {('subscription', 'user')},
            },
        ),
    ]
