"""Product Catalog.

Variant registry, persistence, query engine and service for shop
products of every kind (mushrooms, vegetables, bonsai).
"""

from shopcatalog.catalog.inputs import ProductCreate, ProductUpdate
from shopcatalog.catalog.models import (
    BonsaiModel,
    Inventory,
    MushroomModel,
    Product,
    VegetableModel,
)
from shopcatalog.catalog.query import (
    PaginatedResult,
    PaginationParams,
    ProductListing,
    ProductQuery,
)
from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.catalog.service import CatalogService, ProductDetail, format_description
from shopcatalog.catalog.variants import (
    BonsaiAttributes,
    MushroomAttributes,
    ProductType,
    VegetableAttributes,
    extract_variant,
    extract_variant_patch,
    parse_product_type,
)

__all__ = [
    # Variants
    "BonsaiAttributes",
    "MushroomAttributes",
    "ProductType",
    "VegetableAttributes",
    "extract_variant",
    "extract_variant_patch",
    "parse_product_type",
    # Models
    "BonsaiModel",
    "Inventory",
    "MushroomModel",
    "Product",
    "VegetableModel",
    # Inputs
    "ProductCreate",
    "ProductUpdate",
    # Query
    "PaginatedResult",
    "PaginationParams",
    "ProductListing",
    "ProductQuery",
    # Repository
    "ProductRepository",
    # Service
    "CatalogService",
    "ProductDetail",
    "format_description",
]
