from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.services import CartService
from modules.checkout.dtos import SelectionDTO, StartCheckoutDTO
from modules.checkout.repositories.django_repository import CheckoutDjangoRepository
from modules.checkout.services import CheckoutService
from modules.fulfillment.repositories.django_repository import FulfillmentDjangoRepository
from modules.fulfillment.services import FulfillmentService
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import CreateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService
from modules.profiles.dtos import UpdateProfileDTO
from modules.profiles.repositories.django_repository import ProfileDjangoRepository
from modules.profiles.services import ProfileService

CATALOG = [
    ("Bamboo Toothbrush (4 pack)", "Compostable handles, soft bristles.", Decimal("149.00")),
    ("Reusable Produce Bags", "Set of 6 mesh bags.", Decimal("220.00")),
    ("Stainless Steel Straw Kit", "4 straws, brush and pouch.", Decimal("175.00")),
    ("Beeswax Food Wraps", "Assorted sizes, pack of 3.", Decimal("380.00")),
    ("Coconut Bowl Set", "Two polished coconut shell bowls.", Decimal("450.00")),
    ("Solid Shampoo Bar", "Plastic-free, 80 g.", Decimal("260.00")),
    ("Organic Cotton Tote", "Heavy canvas market tote.", Decimal("310.00")),
    ("Compost Bin (10 L)", "Kitchen countertop bin with filter.", Decimal("890.00")),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        seller, buyer = self._seed_users()
        seller_id, buyer_id = str(seller.pk), str(buyer.pk)
        self._seed_profile(buyer_id)
        products = self._seed_products(seller_id)
        orders_created = self._seed_orders(buyer_id, seller_id, products)
        rebuilt = FulfillmentService(FulfillmentDjangoRepository()).rebuild_all()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"seller_summaries={rebuilt}"
            )
        )

    def _seed_users(self):
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
        seller = User.objects.filter(username="seller").first()
        if seller is None:
            seller = User.objects.create_user("seller", password="seller123")
        buyer = User.objects.filter(username="buyer").first()
        if buyer is None:
            buyer = User.objects.create_user("buyer", password="buyer123")
        return seller, buyer

    def _seed_profile(self, buyer_id: str) -> None:
        ProfileService(ProfileDjangoRepository()).update_profile(
            buyer_id,
            UpdateProfileDTO(
                first_name="Maria",
                last_name="Santos",
                contact="09171234567",
                house_no="12",
                street="Mabini St.",
                barangay="San Isidro",
                city="Quezon City",
                province="Metro Manila",
                zip_code="1100",
            ),
        )

    def _seed_products(self, seller_id: str) -> list[Product]:
        self.stdout.write("Creating products...")
        service = ProductService(ProductDjangoRepository())
        existing = {p.name: p for p in Product.objects.alive().filter(owner_id=seller_id)}
        products: list[Product] = []
        for name, description, price in CATALOG:
            product = existing.get(name)
            if product is None:
                product = service.create_product(
                    seller_id,
                    CreateProductDTO(
                        name=name,
                        description=description,
                        price=price,
                        stock=random.randint(20, 50),
                    ),
                )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, buyer_id: str, seller_id: str, products: list[Product]) -> int:
        """Run real checkouts so stock, cart and rollups stay consistent."""
        self.stdout.write("Creating orders...")
        if Order.objects.filter(buyer_id=buyer_id).exists():
            self.stdout.write(self.style.WARNING("Skipping orders (buyer already has orders)."))
            return 0

        cart_repo = CartDjangoRepository()
        product_repo = ProductDjangoRepository()
        order_service = OrderService(OrderDjangoRepository())
        cart = CartService(cart_repo, product_repo)
        checkout = CheckoutService(
            checkout_repository=CheckoutDjangoRepository(),
            cart_repository=cart_repo,
            product_repository=product_repo,
            order_service=order_service,
            profile_service=ProfileService(ProfileDjangoRepository()),
        )

        payments = [
            {"method": "cod"},
            {"method": "mobile_wallet", "wallet_number": "0917 123 4567"},
            {
                "method": "card",
                "card_number": "4111 1111 1111 1111",
                "card_name": "Maria Santos",
                "expiry": "12/29",
                "cvv": "123",
            },
        ]
        orders = []
        for payment in payments:
            picks = random.sample(products, k=2)
            entries = [cart.add_item(buyer_id, p.id) for p in picks]
            session = checkout.start(
                buyer_id,
                StartCheckoutDTO(
                    selections=[
                        SelectionDTO(entry_id=e.id, quantity=random.randint(1, 3))
                        for e in entries
                    ]
                ),
            )
            checkout.submit_delivery(
                buyer_id,
                str(session.id),
                {
                    "full_name": "Maria Santos",
                    "phone": "09171234567",
                    "address": "12, Mabini St., Brgy. San Isidro",
                    "city": "Quezon City",
                    "postal_code": "1100",
                },
            )
            checkout.submit_payment(buyer_id, str(session.id), payment)
            orders.append(checkout.submit(buyer_id, str(session.id)))

        order_service.mark_shipped(str(orders[0].id), seller_id)
        order_service.mark_completed(str(orders[0].id), buyer_id)
        order_service.mark_shipped(str(orders[1].id), seller_id)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return len(orders)
