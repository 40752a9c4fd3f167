"""Sample catalog used to warm an empty local store."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from storefront.domain import Product
from storefront.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

# image_ref values are bundled asset names, not URLs
SAMPLE_PRODUCTS: tuple[Product, ...] = (
    Product(
        id=1,
        name="Catan",
        description=(
            "Un clásico juego de estrategia donde los jugadores compiten por colonizar y "
            "expandirse en la isla de Catan. Ideal para 3-4 jugadores."
        ),
        price=Decimal("29990"),
        image_ref="catan",
        category="Juegos de Mesa",
        stock=15,
    ),
    Product(
        id=2,
        name="Carcassonne",
        description=(
            "Un juego de colocación de fichas donde los jugadores construyen el paisaje "
            "alrededor de la fortaleza medieval de Carcassonne. Ideal para 2-5 jugadores."
        ),
        price=Decimal("24990"),
        image_ref="carcassonne",
        category="Juegos de Mesa",
        stock=8,
    ),
    Product(
        id=3,
        name="Controlador Inalámbrico Xbox Series X",
        description="Botones mapeables y respuesta táctil mejorada. Compatible con Xbox y PC.",
        price=Decimal("59990"),
        image_ref="xboxcontrol",
        category="Accesorios",
        stock=12,
    ),
    Product(
        id=4,
        name="Auriculares Gamer HyperX Cloud II",
        description="Sonido envolvente con micrófono desmontable y almohadillas viscoelásticas.",
        price=Decimal("79990"),
        image_ref="audifonos",
        category="Accesorios",
        stock=5,
    ),
    Product(
        id=5,
        name="PlayStation 5",
        description="Consola de última generación con tiempos de carga ultrarrápidos.",
        price=Decimal("549990"),
        image_ref="play5",
        category="Consolas",
        stock=3,
    ),
    Product(
        id=6,
        name="PC Gamer ASUS ROG Strix",
        description="Disco sólido NVMe Gen4 de 1TB, ideal para gaming y creación de contenido.",
        price=Decimal("1299990"),
        image_ref="pcgamer",
        category="Computadores Gamers",
        stock=20,
    ),
    Product(
        id=7,
        name="Silla Gamer Secretlab Titan",
        description="Soporte ergonómico y ajustes personalizables para sesiones prolongadas.",
        price=Decimal("349990"),
        image_ref="sillagamer",
        category="Sillas Gamer",
        stock=6,
    ),
    Product(
        id=8,
        name="Mouse Gamer Logitech G502 HERO",
        description="Sensor de alta precisión y botones personalizables.",
        price=Decimal("49990"),
        image_ref="mouse",
        category="Mouse",
        stock=25,
    ),
    Product(
        id=9,
        name="Mousepad Razer Goliathus Extended Chroma",
        description="Área de juego amplia con iluminación RGB personalizable.",
        price=Decimal("29990"),
        image_ref="mousepad",
        category="Mousepad",
        stock=25,
    ),
    Product(
        id=10,
        name="Polera Gamer Personalizada 'Level-Up'",
        description="Camiseta cómoda, personalizable con tu gamer tag.",
        price=Decimal("14990"),
        image_ref="polera",
        category="Poleras Personalizadas",
        stock=25,
    ),
)


async def seed_catalog(
    catalog: CatalogRepository, products: Sequence[Product] = SAMPLE_PRODUCTS
) -> int:
    """Insert sample products unless the first one is already cached.

    Returns:
        Number of products inserted (0 when already seeded)
    """
    if not products:
        return 0

    existing = await catalog.cached_products([products[0].id])
    if existing:
        logger.debug("Local catalog already seeded")
        return 0

    count = await catalog.save_products(products)
    logger.info("Seeded local catalog with %d sample products", count)
    return count
