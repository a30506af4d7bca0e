import logging
from decimal import Decimal

from sqlmodel import Session, select

from app.models.product import Product

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Royal Gold Mangalsutra",
        "slug": "royal-gold-mangalsutra",
        "description": "Traditional 22k gold mangalsutra with black beads.",
        "price": Decimal("45000.00"),
        "original_price": Decimal("50000.00"),
        "category": "Mangalsutra",
        "images": ["https://images.unsplash.com/photo-1611591437281-460bfbe1220a"],
        "stock": 10,
        "is_cod_available": True,
    },
    {
        "name": "Diamond Stud Earrings",
        "slug": "diamond-stud-earrings",
        "description": "Elegant solitaire diamond earrings.",
        "price": Decimal("15000.00"),
        "original_price": Decimal("18000.00"),
        "category": "Earrings",
        "images": ["https://images.unsplash.com/photo-1535632066927-ab7c9ab60908"],
        "stock": 15,
        "is_cod_available": True,
    },
    {
        "name": "Antique Temple Necklace",
        "slug": "antique-temple-necklace",
        "description": "Handcrafted temple jewellery necklace.",
        "price": Decimal("75000.00"),
        "original_price": Decimal("85000.00"),
        "category": "Necklaces",
        "images": ["https://images.unsplash.com/photo-1601121141461-9d6647bca1ed"],
        "stock": 5,
        "is_cod_available": False,
    },
    {
        "name": "Gold Plated Bangles Set",
        "slug": "gold-plated-bangles",
        "description": "Set of 4 traditional gold plated bangles.",
        "price": Decimal("2500.00"),
        "original_price": Decimal("3000.00"),
        "category": "Bangles",
        "images": ["https://images.unsplash.com/photo-1596944924616-b0e1215b63aa"],
        "stock": 50,
        "is_cod_available": True,
    },
]


def seed_products(session: Session) -> int:
    """Insert the sample catalog when the product table is empty."""
    if session.exec(select(Product)).first():
        return 0

    logger.info("Seeding database...")
    for data in SAMPLE_PRODUCTS:
        session.add(Product(**data))
    session.commit()

    logger.info(f"Database seeded with {len(SAMPLE_PRODUCTS)} products")
    return len(SAMPLE_PRODUCTS)
