"""
Seed script: starter catalog, only into an empty products table
Run: python -m sherpamomo.scripts.seed_products
"""
import logging
from decimal import Decimal
from sqlmodel import Session, select, func
from sherpamomo.db.session import engine, create_tables
from sherpamomo.models.product import Product, ProductCategory, ProductUnit
from sherpamomo.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

CATALOG = [
    {
        "name": "Chicken Momo",
        "description": "Juicy chicken momos steamed to perfection. A classic Himalayan favorite.",
        "price": Decimal("12.99"),
        "category": ProductCategory.CHICKEN,
        "image": "https://images.unsplash.com/photo-1534422298391-e4f8c172dddb",
        "rating": 4.8,
        "review_count": 124,
        "ingredients": ["Minced Chicken", "Onion", "Ginger", "Garlic", "Flour", "Spices"],
        "amount": 10,
        "unit": ProductUnit.PCS,
    },
    {
        "name": "Paneer Momo",
        "description": "Soft momos stuffed with spiced paneer and fresh vegetables.",
        "price": Decimal("11.49"),
        "category": ProductCategory.VEG,
        "image": "https://images.pexels.com/photos/5409010/pexels-photo-5409010.jpeg",
        "rating": 4.6,
        "review_count": 85,
        "ingredients": ["Paneer (Cottage Cheese)", "Cabbage", "Carrot", "Cheese", "Flour", "Spices"],
        "amount": 10,
        "unit": ProductUnit.PCS,
    },
    {
        "name": "Buff Momo",
        "description": "Flavorful buffalo meat momos, a traditional delicacy.",
        "price": Decimal("13.99"),
        "category": ProductCategory.BUFF,
        "image": "https://images.unsplash.com/photo-1694850184798-320a8e10bb5e",
        "rating": 4.9,
        "review_count": 200,
        "ingredients": ["Minced Buff", "Onion", "Scallions", "Ginger", "Flour", "Secret Masala"],
        "amount": 10,
        "unit": ProductUnit.PCS,
    },
    {
        "name": "Pork Momo",
        "description": "Succulent pork momos with a rich savory filling.",
        "price": Decimal("12.49"),
        "category": ProductCategory.PORK,
        "image": "https://images.pexels.com/photos/33670191/pexels-photo-33670191.jpeg",
        "rating": 4.7,
        "review_count": 156,
        "ingredients": ["Minced Pork", "Onion", "Coriander", "Fat", "Flour", "Spices"],
        "amount": 10,
        "unit": ProductUnit.PCS,
    },
    {
        "name": "Beef Momo",
        "description": "Juicy beef momos steamed to perfection.",
        "price": Decimal("12.99"),
        "category": ProductCategory.BEEF,
        "image": "https://images.pexels.com/photos/3926123/pexels-photo-3926123.jpeg",
        "rating": 4.5,
        "review_count": 92,
        "ingredients": ["Ground Beef", "Onion", "Garlic", "Cilantro", "Flour", "Spices"],
        "amount": 10,
        "unit": ProductUnit.PCS,
    },
    {
        "name": "Momo Sauce (Achar)",
        "description": "Traditional tomato and sesame dipping sauce.",
        "price": Decimal("5.99"),
        "category": ProductCategory.SAUCE,
        "image": "https://images.unsplash.com/photo-1611516081814-55d97d5a7488",
        "rating": 4.8,
        "review_count": 45,
        "ingredients": ["Tomato", "Sesame Seeds", "Timur (Sichuan Pepper)", "Chili", "Coriander"],
        "amount": 1,
        "unit": ProductUnit.JAR,
    },
    {
        "name": "Momo Hot Sauce",
        "description": "Extra spicy chili paste for those who love heat.",
        "price": Decimal("6.99"),
        "category": ProductCategory.SAUCE,
        "image": "https://images.unsplash.com/photo-1472476443507-c7a5948772fc",
        "rating": 4.9,
        "review_count": 60,
        "ingredients": ["Red Dry Chili", "Garlic", "Oil", "Salt", "Lemon"],
        "amount": 1,
        "unit": ProductUnit.JAR,
    },
    {
        "name": "Momo Jhol",
        "description": "Spicy and tangy sesame soup base.",
        "price": Decimal("7.99"),
        "category": ProductCategory.SAUCE,
        "image": "https://images.unsplash.com/photo-1726082788670-c60006875dfd",
        "rating": 4.7,
        "review_count": 34,
        "ingredients": ["Tomato", "Sesame", "Peanuts", "Chili", "Hog Plum"],
        "amount": 1,
        "unit": ProductUnit.CONTAINER,
    },
]

# First few products are featured on the storefront
FEATURED_COUNT = 4
DEFAULT_STOCK = 25


def seed_products(session: Session) -> int:
    existing = session.exec(select(func.count(Product.id))).one()
    if existing:
        logger.info("Catalog already has %s products, skipping", existing)
        return 0

    for index, data in enumerate(CATALOG):
        session.add(Product(**data, stock=DEFAULT_STOCK, featured=index < FEATURED_COUNT))
    session.commit()
    logger.info("Seeded %s products", len(CATALOG))
    return len(CATALOG)


def main():
    setup_logging()
    create_tables()
    with Session(engine) as session:
        seed_products(session)


if __name__ == "__main__":
    main()
