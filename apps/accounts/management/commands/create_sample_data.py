"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear --months 6

This creates:
- 3 users (admin, kasir, kasir2)
- Payments for both cashiers spread over the last months, mixing
  Kopi Bubuk, Kopi Bijian and the occasional uncategorized label
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta
import random

from apps.accounts.models import User
from apps.payments.models import Payment

# Price per kg in rupiah
PRICE_PER_KG = {
    'Kopi Bubuk': 132000,
    'Kopi Bijian': 199000,
    'Kopi Luwak': 750000,
}

WEIGHTS = [Decimal('0.25'), Decimal('0.5'), Decimal('1'), Decimal('1.5'), Decimal('2'), Decimal('5')]


class Command(BaseCommand):
    help = 'Create sample users and payments for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing payments and sample users before creating new sample data',
        )
        parser.add_argument(
            '--months',
            type=int,
            default=12,
            help='How many months back to spread payments over (default: 12)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Random seed for reproducible data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        rng = random.Random(options['seed'])

        self.stdout.write('Creating sample data...')

        users = self.create_users()

        count = 0
        for key in ('kasir', 'kasir2'):
            count += self.create_payments(users[key], options['months'], rng)

        self.stdout.write(self.style.SUCCESS(f'Sample data created successfully! ({count} payments)'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  kasir@example.com / password123')
        self.stdout.write('  kasir2@example.com / password123')

    def clear_data(self):
        """Clear payments and the sample accounts."""
        Payment.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        kasir, _ = User.objects.get_or_create(
            email='kasir@example.com',
            defaults={'display_name': 'Kasir Pagi'}
        )
        kasir.set_password('password123')
        kasir.save()

        kasir2, _ = User.objects.get_or_create(
            email='kasir2@example.com',
            defaults={'display_name': 'Kasir Sore'}
        )
        kasir2.set_password('password123')
        kasir2.save()

        return {
            'admin': admin,
            'kasir': kasir,
            'kasir2': kasir2,
        }

    def create_payments(self, owner, months, rng):
        """Create a few payments per week for ``owner``; returns how many."""
        self.stdout.write(f'  Creating payments for {owner.email}...')

        today = timezone.localdate()
        days = max(months, 1) * 30
        payments = []

        for offset in range(0, days, 2):
            if rng.random() < 0.3:
                continue
            coffee_type = rng.choices(
                list(PRICE_PER_KG),
                weights=[5, 4, 1],
            )[0]
            weight = rng.choice(WEIGHTS)
            payments.append(Payment(
                owner=owner,
                date=today - timedelta(days=offset),
                coffee_type=coffee_type,
                weight_kg=weight,
                total_price=int(weight * PRICE_PER_KG[coffee_type]),
            ))

        Payment.objects.bulk_create(payments)
        return len(payments)
