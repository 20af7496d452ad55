"""SQLAlchemy models for the product catalog.

Defines the Product and ProductAttribute tables the layered navigation
filter block is computed from.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from layered_search.infrastructure.database import Base


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier (UUID string).
        reference: Merchant reference (SKU).
        name: Product name.
        description: Product description.
        brand: Manufacturer name, exposed as the manufacturer filter.
        price: Price in cents.
        currency: Currency code (default USD).
        position: Catalog position used for the default sort order.
        active: Whether the product is listed.
        created_at: Creation timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    reference: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)  # in cents
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    attributes: Mapped[list["ProductAttribute"]] = relationship(
        "ProductAttribute",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductAttribute.position",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, reference={self.reference}, name={self.name[:30]})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        attributes: dict[str, list[str]] = {}
        for attribute in self.attributes:
            attributes.setdefault(attribute.group, []).append(attribute.value)

        return {
            "id": self.id,
            "reference": self.reference,
            "name": self.name,
            "description": self.description,
            "brand": self.brand,
            "price": {
                "amount": self.price,
                "currency": self.currency,
            },
            "position": self.position,
            "attributes": attributes,
        }


class ProductAttribute(Base):
    """One attribute value of a product (e.g. Color = Red).

    Attribute groups become facets and their distinct values become
    filters.

    Attributes:
        id: Row identifier.
        product_id: Owning product.
        group: Attribute group name (e.g. "Color").
        value: Attribute value (e.g. "Red").
        color: Optional colour swatch for colour groups.
        position: Display position of the value within its group.
    """

    __tablename__ = "product_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped["Product"] = relationship("Product", back_populates="attributes")

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductAttribute(group={self.group}, value={self.value})>"
