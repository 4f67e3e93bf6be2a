"""Variant registry.

Maps a product-type tag to the typed attribute schema of its variant
and validates attribute bags against it. Every product has exactly one
variant kind, chosen by its product type at creation.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shopcatalog.domain.exceptions import InvalidInputError, InvalidProductTypeError


class ProductType(str, Enum):
    """Closed set of product kinds."""

    MUSHROOM = "Mushroom"
    VEGETABLE = "Vegetable"
    BONSAI = "Bonsai"


class _Attributes(BaseModel):
    """Base for variant attribute schemas.

    Types are strict and unknown keys are rejected, so a typo or a
    string where a number belongs is reported instead of dropped.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    kind: ClassVar[ProductType]


class _ProduceAttributes(_Attributes):
    """Attributes shared by fresh produce (mushrooms and vegetables)."""

    weight: float | None = Field(
        default=None, gt=0, lt=10**8, description="Weight in kilograms"
    )
    origin: str | None = Field(default=None, description="Region of origin")
    freshness: str | None = Field(default=None, description="Freshness grade")
    package_type: str | None = Field(default=None, description="Packaging")

    @field_validator("weight")
    @classmethod
    def check_weight_precision(cls, value: float | None) -> float | None:
        # Stored as NUMERIC(10, 2)
        if value is not None and Decimal(str(value)).as_tuple().exponent < -2:
            raise ValueError("Weight allows at most 2 decimal places")
        return value


class MushroomAttributes(_ProduceAttributes):
    """Mushroom variant."""

    kind: ClassVar[ProductType] = ProductType.MUSHROOM


class VegetableAttributes(_ProduceAttributes):
    """Vegetable variant."""

    kind: ClassVar[ProductType] = ProductType.VEGETABLE


class BonsaiAttributes(_Attributes):
    """Bonsai variant."""

    kind: ClassVar[ProductType] = ProductType.BONSAI

    age: int | None = Field(default=None, ge=0, description="Age in years")
    height: int | None = Field(default=None, gt=0, description="Height in centimetres")
    style: str | None = Field(default=None, description="Training style")
    species: str | None = Field(default=None, description="Tree species")
    pot_type: str | None = Field(default=None, description="Pot material or shape")


VariantAttributes = MushroomAttributes | VegetableAttributes | BonsaiAttributes

VARIANT_SCHEMAS: dict[ProductType, type[_Attributes]] = {
    ProductType.MUSHROOM: MushroomAttributes,
    ProductType.VEGETABLE: VegetableAttributes,
    ProductType.BONSAI: BonsaiAttributes,
}


def parse_product_type(tag: str | ProductType) -> ProductType:
    """Resolve a product-type tag.

    Args:
        tag: Tag as received from the caller.

    Returns:
        Matching product type.

    Raises:
        InvalidProductTypeError: If the tag is not a known kind.
    """
    try:
        return ProductType(tag)
    except ValueError:
        raise InvalidProductTypeError(
            str(tag), allowed=[t.value for t in ProductType]
        ) from None


def _validate(kind: ProductType, bag: dict[str, Any] | None) -> _Attributes:
    schema = VARIANT_SCHEMAS[kind]
    try:
        return schema.model_validate(bag or {})
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise InvalidInputError(
            f"Invalid {kind.value} attributes: {', '.join(fields) or 'attributes'}",
            fields=fields,
        ) from exc


def extract_variant(
    tag: str | ProductType,
    bag: dict[str, Any] | None,
) -> VariantAttributes:
    """Build the variant record for a new product.

    Fields absent from the bag stay unset.

    Args:
        tag: Product-type tag.
        bag: Attribute mapping from the request.

    Returns:
        Validated attributes for the product's kind.

    Raises:
        InvalidProductTypeError: If the tag is unknown.
        InvalidInputError: If an attribute is unknown or mistyped.
    """
    kind = parse_product_type(tag)
    return _validate(kind, bag)  # type: ignore[return-value]


def extract_variant_patch(
    kind: ProductType,
    bag: dict[str, Any] | None,
) -> dict[str, Any]:
    """Validate a partial attribute update.

    Args:
        kind: Stored product type of the product being updated.
        bag: Attribute mapping from the request.

    Returns:
        Only the attributes the caller supplied. An explicit None clears
        the column.

    Raises:
        InvalidInputError: If an attribute is unknown or mistyped.
    """
    if not bag:
        return {}
    attributes = _validate(kind, bag)
    return attributes.model_dump(exclude_unset=True)
