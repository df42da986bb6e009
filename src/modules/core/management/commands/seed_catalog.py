from __future__ import annotations

import random
from decimal import Decimal

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.exceptions import ProductAlreadyExists
from modules.products.repositories.catalog_repository import ProductRepository
from modules.products.repositories.django_store import ProductDjangoStore
from modules.products.services import ProductService

SEED_PRODUCTS = [
    ("ELEC-LAP-001", "Ultrabook 14 Laptop", "Electronics", "Laptops", "Acme", "1299.00"),
    ("ELEC-LAP-002", "Gaming Laptop 16", "Electronics", "Laptops", "Voltix", "1899.90"),
    ("ELEC-PHN-001", "Smartphone X2", "Electronics", "Phones", "Acme", "799.00"),
    ("ELEC-AUD-001", "Noise Cancelling Headphones", "Electronics", "Audio", "Sonora", "249.99"),
    ("HOME-KIT-001", "Stainless Steel Kettle", "Home", "Kitchen", "Casa", "39.90"),
    ("HOME-KIT-002", "Chef Knife 8in", "Home", "Kitchen", "Casa", "59.00"),
    ("HOME-LGT-001", "Desk Lamp LED", "Home", "Lighting", "Lumen", "29.50"),
    ("SPRT-RUN-001", "Trail Running Shoes", "Sports", "Running", "Stride", "119.00"),
    ("SPRT-CYC-001", "Cycling Helmet", "Sports", "Cycling", "Stride", "89.00"),
    ("BOOK-PRG-001", "Practical Python Patterns", "Books", "Programming", "Inkwell", "44.00"),
]


class Command(BaseCommand):
    help = "Seed the catalog with demo products (idempotent by SKU)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--seed",
            type=int,
            default=42,
            help="Random seed for stock quantities.",
        )

    def handle(self, *args, **options):
        random.seed(options["seed"])
        self.stdout.write("Seeding catalog...")

        service = ProductService(
            repository=ProductRepository(store=ProductDjangoStore())
        )
        created = skipped = 0
        for sku, name, category, subcategory, brand, price in SEED_PRODUCTS:
            dto = CreateProductDTO(
                sku=sku,
                name=name,
                description=f"{name} by {brand}.",
                category=category,
                subcategory=subcategory,
                price=Decimal(price),
                brand=brand,
                image_url=f"https://cdn.example.com/products/{sku.lower()}.jpg",
                features=[f"{subcategory} essential", f"Made by {brand}"],
                specifications={"brand": brand, "category": category},
                stock=random.randint(0, 250),
            )
            try:
                async_to_sync(service.create_product)(dto)
            except ProductAlreadyExists:
                skipped += 1
                continue
            created += 1

        self.stdout.write(
            self.style.SUCCESS(f"Seed completed: created={created}, skipped={skipped}")
        )
