import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('cars', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('pickup_time', models.CharField(max_length=20)),
                ('dropoff_time', models.CharField(max_length=20)),
                ('total_days', models.PositiveIntegerField()),
                ('price_per_day', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=10)),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('refunded', 'Refunded')], default='pending', max_length=10)),
                ('payment_method', models.CharField(blank=True, choices=[('card', 'Card'), ('upi', 'UPI'), ('netbanking', 'Net Banking'), ('wallet', 'Wallet')], default='', max_length=10)),
                ('transaction_id', models.CharField(blank=True, default='', max_length=100)),
                ('cancellation_reason', models.CharField(blank=True, default='', max_length=500)),
                ('cancelled_by', models.CharField(blank=True, choices=[('user', 'User'), ('host', 'Host'), ('admin', 'Admin')], default='', max_length=5)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('review_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('review_comment', models.TextField(blank=True, default='')),
                ('review_created_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('car', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to='cars.car')),
                ('host', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='host_bookings', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
                    models.Index(fields=['car', 'status'], name='booking_car_status_idx'),
                    models.Index(fields=['host', 'status'], name='booking_host_status_idx'),
                    models.Index(fields=['start_date', 'end_date'], name='booking_dates_idx'),
                ],
            },
        ),
    ]
