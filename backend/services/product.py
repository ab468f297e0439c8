# backend/services/product.py
import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from models.product import Product
from repositories.base import Visibility
from repositories.product import ProductRepository
from schemas.product import MAX_QUANTITY, DiscountPriceOut, ProductCreate, ProductOut, ProductUpdate, StockUpdate
from schemas.result import Err, Ok, Result
from services.operations import service_operation
from services.validators import normalize_sku, product_rule_errors

logger = logging.getLogger(__name__)

STOCK_OPERATIONS = ("add", "subtract")


def product_to_out(product: Product) -> ProductOut:
    # is_available is a property of the entity, read at mapping time
    return ProductOut.model_validate(product)


def _to_list(products: List[Product]) -> List[ProductOut]:
    return [product_to_out(p) for p in products]


class ProductService:
    """Catalog operations. Every method returns an Ok/Err envelope."""

    def __init__(self, products: ProductRepository):
        self.products = products
        self.db = products.db

    # =========================
    # READ
    # =========================
    @service_operation("retrieving products")
    def get_all(self, *, scope: Visibility) -> Result[List[ProductOut]]:
        return Ok(data=_to_list(self.products.list(scope=scope)))

    @service_operation("retrieving product")
    def get_by_id(self, product_id: UUID) -> Result[ProductOut]:
        product = self.products.get_by_id(product_id, scope=Visibility.ACTIVE)
        if product is None:
            return Err.not_found("Product not found")
        return Ok(data=product_to_out(product))

    @service_operation("retrieving product")
    def get_by_sku(self, sku: str) -> Result[ProductOut]:
        product = self.products.get_by_sku(sku)
        if product is None:
            return Err.not_found("Product not found")
        return Ok(data=product_to_out(product))

    @service_operation("retrieving products by category")
    def get_by_category(self, category: str) -> Result[List[ProductOut]]:
        return Ok(data=_to_list(self.products.get_by_category(category)))

    @service_operation("retrieving available products")
    def get_available(self) -> Result[List[ProductOut]]:
        return Ok(data=_to_list(self.products.get_available()))

    @service_operation("retrieving products by price range")
    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> Result[List[ProductOut]]:
        if min_price < 0 or max_price < 0 or min_price > max_price:
            return Err.invalid("Invalid price range")
        return Ok(data=_to_list(self.products.get_by_price_range(min_price, max_price)))

    @service_operation("retrieving low stock products")
    def get_low_stock_products(self, threshold: int = 10) -> Result[List[ProductOut]]:
        if threshold < 0:
            return Err.invalid("Threshold cannot be negative")
        return Ok(data=_to_list(self.products.get_low_stock(threshold)))

    @service_operation("calculating discount price")
    def get_discount_price(self, product_id: UUID, discount_percentage: Decimal) -> Result[DiscountPriceOut]:
        product = self.products.get_by_id(product_id, scope=Visibility.ACTIVE)
        if product is None:
            return Err.not_found("Product not found")
        discounted = product.calculate_discount_price(discount_percentage)
        return Ok(data=DiscountPriceOut(
            product_id=product.id,
            price=product.price,
            discount_percentage=discount_percentage,
            discounted_price=discounted,
        ))

    # =========================
    # WRITE
    # =========================
    @service_operation("creating product")
    def create(self, dto: ProductCreate) -> Result[ProductOut]:
        if not self.products.is_sku_unique(dto.sku):
            return Err.conflict("A product with this SKU already exists")

        data = dto.model_dump()
        data["sku"] = normalize_sku(dto.sku)
        errors = product_rule_errors(data["sku"], data["price"], data["stock_quantity"])
        if errors:
            return Err.invalid(*errors)

        created = self.products.add(Product(**data))
        logger.info("Product %s created (sku=%s)", created.id, created.sku)
        return Ok(data=product_to_out(created), message="Product created successfully")

    @service_operation("updating product")
    def update(self, product_id: UUID, dto: ProductUpdate) -> Result[ProductOut]:
        product = self.products.get_by_id(product_id, scope=Visibility.ACTIVE)
        if product is None:
            return Err.not_found("Product not found")

        if not self.products.is_sku_unique(dto.sku, exclude_id=product_id):
            return Err.conflict("A product with this SKU already exists")

        data = dto.model_dump()
        data["sku"] = normalize_sku(dto.sku)
        errors = product_rule_errors(data["sku"], data["price"], data["stock_quantity"])
        if errors:
            return Err.invalid(*errors)

        for key, value in data.items():
            setattr(product, key, value)

        updated = self.products.update(product)
        logger.info("Product %s updated", updated.id)
        return Ok(data=product_to_out(updated), message="Product updated successfully")

    @service_operation("updating stock")
    def update_stock(self, product_id: UUID, dto: StockUpdate) -> Result[ProductOut]:
        product = self.products.get_by_id(product_id, scope=Visibility.ACTIVE)
        if product is None:
            return Err.not_found("Product not found")

        operation = (dto.operation or "").strip().lower()
        if operation not in STOCK_OPERATIONS:
            raise ValueError("Invalid operation. Use 'add' or 'subtract'")
        if dto.quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        if operation == "add":
            if product.stock_quantity + dto.quantity > MAX_QUANTITY:
                raise ValueError("Stock quantity would exceed the allowed maximum")
            product.stock_quantity += dto.quantity
        elif not product.try_reduce_stock(dto.quantity):
            return Err.invalid("Insufficient stock for this operation")

        updated = self.products.update(product)
        logger.info("Stock of product %s: %s %d -> %d", updated.id, operation, dto.quantity, updated.stock_quantity)
        return Ok(data=product_to_out(updated), message="Stock updated successfully")

    @service_operation("deleting product")
    def delete(self, product_id: UUID) -> Result[None]:
        if not self.products.exists(product_id):
            return Err.not_found("Product not found")
        self.products.delete(product_id)
        logger.info("Product %s deleted", product_id)
        return Ok(message="Product deleted successfully")
