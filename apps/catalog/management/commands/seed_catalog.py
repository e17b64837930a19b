"""Seed demo users, destinations and travel packages.

Each table is only filled when it is empty, so the command can run on every
deploy.
"""

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Destination, TravelPackage

User = get_user_model()

USERS = [
    {
        "username": "admin",
        "email": "admin@travelease.com",
        "password": "admin123",
        "first_name": "Admin",
        "last_name": "User",
        "role": "ADMIN",
        "is_staff": True,
    },
    {
        "username": "john_doe",
        "email": "john@example.com",
        "password": "password123",
        "first_name": "John",
        "last_name": "Doe",
        "phone_number": "+1234567890",
        "role": "USER",
    },
]

DESTINATIONS = [
    {
        "name": "Paris",
        "country": "France",
        "city": "Paris",
        "description": "The City of Light, famous for its art, fashion and cuisine.",
        "price": Decimal("899.00"),
        "best_time_to_visit": "April to June, September to November",
        "climate": "Temperate",
        "popular_attractions": "Eiffel Tower, Louvre Museum, Notre-Dame Cathedral, Arc de Triomphe",
        "is_featured": True,
    },
    {
        "name": "Tokyo",
        "country": "Japan",
        "city": "Tokyo",
        "description": "A metropolis blending traditional culture with cutting-edge technology.",
        "price": Decimal("1299.00"),
        "best_time_to_visit": "March to May, September to November",
        "climate": "Humid subtropical",
        "popular_attractions": "Tokyo Skytree, Senso-ji Temple, Shibuya Crossing, Meiji Shrine",
        "is_featured": True,
    },
    {
        "name": "Bali",
        "country": "Indonesia",
        "city": "Denpasar",
        "description": "Tropical beaches, rice terraces and temples.",
        "price": Decimal("699.00"),
        "best_time_to_visit": "April to October",
        "climate": "Tropical",
        "popular_attractions": "Ubud Rice Terraces, Tanah Lot Temple, Mount Batur, Uluwatu Temple",
        "is_featured": True,
    },
    {
        "name": "New York City",
        "country": "USA",
        "city": "New York",
        "description": "The Big Apple: dining, shopping and entertainment around the clock.",
        "price": Decimal("1199.00"),
        "best_time_to_visit": "April to June, September to November",
        "climate": "Humid subtropical",
        "popular_attractions": "Statue of Liberty, Central Park, Times Square, Broadway",
        "is_featured": True,
    },
    {
        "name": "London",
        "country": "United Kingdom",
        "city": "London",
        "description": "Royal palaces, world-class museums and a vibrant cultural scene.",
        "price": Decimal("1099.00"),
        "best_time_to_visit": "May to September",
        "climate": "Temperate oceanic",
        "popular_attractions": "Big Ben, Tower of London, Buckingham Palace, British Museum",
        "is_featured": False,
    },
]

# (destination name, starts in N days, duration in days, package fields)
PACKAGES = [
    ("Paris", 30, 5, {
        "name": "Paris Romance Package",
        "description": "A romantic 5-day getaway to the City of Light.",
        "price": Decimal("1299.00"),
        "max_participants": 20,
        "package_type": TravelPackage.PackageType.LUXURY,
        "includes": "Hotel accommodation, breakfast, city tour, Seine river cruise, museum passes",
        "excludes": "Airfare, meals not specified, personal expenses",
        "itinerary": "Day 1: Arrival, Day 2: Louvre, Day 3: Eiffel Tower and cruise, Day 4: Montmartre, Day 5: Departure",
        "is_featured": True,
    }),
    ("Paris", 45, 3, {
        "name": "Paris Budget Explorer",
        "description": "An affordable 3-day exploration of Paris.",
        "price": Decimal("599.00"),
        "max_participants": 30,
        "package_type": TravelPackage.PackageType.BUDGET,
        "includes": "Hostel accommodation, breakfast, walking tour",
        "excludes": "Airfare, meals not specified, museum entrance fees",
        "itinerary": "Day 1: Arrival and walking tour, Day 2: Free exploration, Day 3: Departure",
        "is_featured": False,
    }),
    ("Tokyo", 60, 7, {
        "name": "Tokyo Cultural Experience",
        "description": "A 7-day journey through Tokyo's culture and modern innovation.",
        "price": Decimal("1899.00"),
        "max_participants": 15,
        "package_type": TravelPackage.PackageType.PREMIUM,
        "includes": "Hotel accommodation, breakfast, JR Pass, cultural experiences, temple visits",
        "excludes": "Airfare, meals not specified, personal shopping",
        "itinerary": "Day 1-2: Arrival, Day 3-4: Temples, Day 5-6: Modern Tokyo, Day 7: Departure",
        "is_featured": True,
    }),
    ("Bali", 20, 6, {
        "name": "Bali Beach Paradise",
        "description": "A relaxing 6-day beach vacation.",
        "price": Decimal("999.00"),
        "max_participants": 25,
        "package_type": TravelPackage.PackageType.STANDARD,
        "includes": "Resort accommodation, breakfast, airport transfers, temple tour",
        "excludes": "Airfare, meals not specified, spa treatments",
        "itinerary": "Day 1: Beach, Day 2: Ubud, Day 3: Temples, Day 4-5: Beach, Day 6: Departure",
        "is_featured": True,
    }),
    ("New York City", 40, 4, {
        "name": "New York City Explorer",
        "description": "A 4-day adventure in the city that never sleeps.",
        "price": Decimal("1499.00"),
        "max_participants": 20,
        "package_type": TravelPackage.PackageType.STANDARD,
        "includes": "Hotel accommodation, breakfast, subway pass, Broadway show ticket",
        "excludes": "Airfare, meals not specified, shopping",
        "itinerary": "Day 1: Times Square, Day 2: Statue of Liberty, Day 3: Museums, Day 4: Departure",
        "is_featured": False,
    }),
]


class Command(BaseCommand):
    help = "Seed demo users, destinations and travel packages into empty tables"

    @transaction.atomic
    def handle(self, *args, **options):
        if User.objects.exists():
            self.stdout.write("Users already present, skipping")
        else:
            for data in USERS:
                data = dict(data)
                password = data.pop("password")
                User.objects.create_user(password=password, **data)
            self.stdout.write(self.style.SUCCESS(f"Created {len(USERS)} users"))

        if Destination.objects.exists():
            self.stdout.write("Destinations already present, skipping")
        else:
            Destination.objects.bulk_create(Destination(**data) for data in DESTINATIONS)
            self.stdout.write(self.style.SUCCESS(f"Created {len(DESTINATIONS)} destinations"))

        if TravelPackage.objects.exists():
            self.stdout.write("Travel packages already present, skipping")
            return

        today = timezone.localdate()
        created = 0
        for destination_name, starts_in, duration, data in PACKAGES:
            destination = Destination.objects.filter(name=destination_name).first()
            if destination is None:
                self.stdout.write(self.style.WARNING(f"Destination {destination_name} not found, skipping"))
                continue
            start_date = today + timedelta(days=starts_in)
            TravelPackage.objects.create(
                destination=destination,
                start_date=start_date,
                end_date=start_date + timedelta(days=duration),
                currency="USD",
                **data,
            )
            created += 1
        self.stdout.write(self.style.SUCCESS(f"Created {created} travel packages"))
