from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from cars.models import Car

SAMPLE_CARS = [
    {
        'brand': 'Toyota', 'model': 'Camry', 'year': 2023, 'category': 'Sedan',
        'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5, 'price_per_day': 2500,
        'city': 'Mumbai', 'address': 'Bandra West, Mumbai', 'state': 'Maharashtra',
        'images': ['https://images.pexels.com/photos/116675/pexels-photo-116675.jpeg'],
        'features': ['AC', 'GPS', 'Bluetooth', 'Parking Sensors'],
        'description': 'Well-maintained Toyota Camry with excellent fuel efficiency',
        'license_plate': 'MH01AB1234',
    },
    {
        'brand': 'Honda', 'model': 'City', 'year': 2022, 'category': 'Sedan',
        'transmission': 'Manual', 'fuel_type': 'Diesel', 'seats': 5, 'price_per_day': 2000,
        'city': 'Mumbai', 'address': 'Andheri East, Mumbai', 'state': 'Maharashtra',
        'images': ['https://images.pexels.com/photos/164634/pexels-photo-164634.jpeg'],
        'features': ['AC', 'Music System', 'Power Windows'],
        'description': 'Fuel-efficient Honda City perfect for city drives',
        'license_plate': 'MH02CD5678',
    },
    {
        'brand': 'Mahindra', 'model': 'Thar', 'year': 2023, 'category': 'SUV',
        'transmission': 'Manual', 'fuel_type': 'Diesel', 'seats': 4, 'price_per_day': 3500,
        'city': 'Pune', 'address': 'Koregaon Park, Pune', 'state': 'Maharashtra',
        'images': ['https://images.pexels.com/photos/13861/IMG_3496bfree.jpg'],
        'features': ['4x4', 'AC', 'Convertible Top', 'Off-road Capable'],
        'description': 'Adventure-ready Mahindra Thar for weekend getaways',
        'license_plate': 'MH12EF9012',
    },
    {
        'brand': 'Maruti', 'model': 'Swift', 'year': 2022, 'category': 'Hatchback',
        'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5, 'price_per_day': 1500,
        'city': 'Delhi', 'address': 'Connaught Place, New Delhi', 'state': 'Delhi',
        'images': ['https://images.pexels.com/photos/707046/pexels-photo-707046.jpeg'],
        'features': ['AC', 'Airbags', 'ABS', 'Power Steering'],
        'description': 'Compact and economical Maruti Swift',
        'license_plate': 'DL01GH3456',
    },
    {
        'brand': 'Hyundai', 'model': 'Creta', 'year': 2023, 'category': 'SUV',
        'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5, 'price_per_day': 3000,
        'city': 'Bangalore', 'address': 'Indiranagar, Bangalore', 'state': 'Karnataka',
        'images': ['https://images.pexels.com/photos/3311574/pexels-photo-3311574.jpeg'],
        'features': ['Sunroof', 'Leather Seats', 'Wireless Charging', 'Touchscreen'],
        'description': 'Premium Hyundai Creta with all modern features',
        'license_plate': 'KA03IJ7890',
    },
    {
        'brand': 'Tesla', 'model': 'Model 3', 'year': 2023, 'category': 'Electric',
        'transmission': 'Automatic', 'fuel_type': 'Electric', 'seats': 5, 'price_per_day': 5000,
        'city': 'Mumbai', 'address': 'Worli, Mumbai', 'state': 'Maharashtra',
        'images': ['https://images.pexels.com/photos/2127039/pexels-photo-2127039.jpeg'],
        'features': ['Autopilot', 'Supercharger Access', 'Premium Audio', 'Glass Roof'],
        'description': 'Experience the future with Tesla Model 3',
        'license_plate': 'MH03KL1122',
    },
]


class Command(BaseCommand):
    help = 'Add the sample car listings for a host user'

    def add_arguments(self, parser):
        parser.add_argument('--host-email', help='Email of the user who will own the cars')

    def resolve_host(self, email):
        User = get_user_model()
        if email:
            host = User.objects.filter(email=email.lower()).first()
            if host is None:
                raise CommandError(f"No user found with email {email}")
        else:
            host = User.objects.filter(role=User.HOST).order_by('id').first()
            if host is None:
                host = User.objects.order_by('id').first()
                if host is None:
                    raise CommandError("No users found in database. Please create a user first.")

        if host.role == User.USER:
            host.role = User.HOST
            host.save(update_fields=['role'])
            self.stdout.write(self.style.WARNING(f"Made user {host.email} a host"))
        return host

    def handle(self, *args, **options):
        host = self.resolve_host(options.get('host_email'))
        self.stdout.write(f"Using host: {host.email}")

        created = 0
        with transaction.atomic():
            for data in SAMPLE_CARS:
                if Car.objects.filter(license_plate=data['license_plate']).exists():
                    self.stdout.write(f"Skipping {data['license_plate']}, already listed.")
                    continue
                Car.objects.create(host=host, **data)
                created += 1

        self.stdout.write(self.style.SUCCESS(
            f"Added {created} sample cars. Total cars in database: {Car.objects.count()}"
        ))
