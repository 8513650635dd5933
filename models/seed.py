"""
Demo data: 3 categories, 20 products and 3 users.

Each seeder is idempotent: it does nothing when its table already has rows.
"""
from datetime import timedelta

from models.base_model import utcnow
from models.category import Category
from models.product import Product
from models.user import User, Role
from utils.security import hash_password

CATEGORIES = [
    ("Electronics", "Devices and gadgets for work and fun"),
    ("Books", "Fiction, non-fiction, and everything to read"),
    ("Home", "Home improvement, kitchen, and comfort items"),
]

# (name, price, stock, days ago, category)
PRODUCTS = [
    ("Wireless Headphones", 129.99, 45, 2, "Electronics"),
    ("Bluetooth Speaker", 79.99, 60, 5, "Electronics"),
    ("4K Monitor", 349.99, 18, 10, "Electronics"),
    ("USB-C Hub", 39.99, 120, 7, "Electronics"),
    ("Mechanical Keyboard", 119.99, 35, 12, "Electronics"),
    ("Smart Light Bulb", 24.99, 200, 14, "Electronics"),
    ("Stainless Steel Pan", 59.99, 70, 3, "Home"),
    ("Chef Knife", 89.99, 50, 1, "Home"),
    ("Espresso Maker", 199.99, 20, 9, "Home"),
    ("Vacuum Cleaner", 149.99, 25, 6, "Home"),
    ("Throw Blanket", 29.99, 110, 13, "Home"),
    ("Standing Desk", 499.99, 10, 15, "Home"),
    ("Science Fiction Novel", 16.99, 150, 4, "Books"),
    ("Cookbook", 24.99, 90, 8, "Books"),
    ("Productivity Guide", 21.99, 130, 11, "Books"),
    ("History Book", 27.5, 80, 16, "Books"),
    ("Mystery Thriller", 18.5, 140, 17, "Books"),
    ("Graphic Novel", 22.0, 95, 18, "Books"),
    ("Notebook Set", 14.99, 160, 19, "Books"),
    ("Desk Lamp", 34.99, 85, 20, "Home"),
]

USERS = [
    ("eleve@example.com", "password123", Role.USER),
    ("prof@example.com", "password123", Role.USER),
    ("admin@example.com", "admin123", Role.ADMIN),
]


def seed_categories(storage) -> int:
    if storage.count(Category) > 0:
        return 0
    with storage.transaction() as session:
        session.add_all([Category(name=name, description=desc) for name, desc in CATEGORIES])
    return len(CATEGORIES)


def seed_products(storage) -> int:
    if storage.count(Product) > 0:
        return 0
    session = storage.get_session()
    category_ids = {c.name: c.id for c in session.query(Category).all()}
    if len(category_ids) < len(CATEGORIES):
        raise RuntimeError("Seed categories before products")

    today = utcnow()
    with storage.transaction() as session:
        session.add_all([
            Product(
                name=name,
                price=price,
                stock=stock,
                created_at=today - timedelta(days=days_ago),
                category_id=category_ids[category],
            )
            for name, price, stock, days_ago, category in PRODUCTS
        ])
    return len(PRODUCTS)


def seed_users(storage) -> int:
    if storage.count(User) > 0:
        return 0
    with storage.transaction() as session:
        session.add_all([
            User(email=email, password_hash=hash_password(password), role=role)
            for email, password, role in USERS
        ])
    return len(USERS)


def seed_all(storage) -> dict:
    return {
        "categories": seed_categories(storage),
        "products": seed_products(storage),
        "users": seed_users(storage),
    }
