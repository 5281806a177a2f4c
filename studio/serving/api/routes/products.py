"""
Products API Endpoints

REST API for the product catalogue, stock adjustments and the reorder report.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import Field, model_validator
from sqlalchemy import delete, select, update
import structlog

from studio.database.connection import Database, get_database
from studio.database.models import Product
from studio.database.queries import low_stock_query, product_detail_query, product_list_query
from studio.domain.fields import PRODUCT_FIELDS, map_fields
from studio.domain.listing import ListView
from studio.domain.status import (
    REORDER_THRESHOLD,
    ReorderStatus,
    StockStatus,
    reorder_status,
    stock_status,
)
from studio.domain.updates import build_update
from studio.serving.api.deps import ListQuery
from studio.serving.api.schemas import CamelModel, Money, MutationResponse, OptionalMoney

router = APIRouter()
logger = structlog.get_logger(__name__)

PRODUCT_LIST_VIEW = ListView(
    search_fields=("product_id", "product_name", "supplier"),
    page_size=10,
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class ProductBase(CamelModel):
    """Product fields shared by requests and responses"""
    product_id: str = Field(min_length=1)
    product_name: str
    cost_price: OptionalMoney = None
    sale_price: Money = Decimal("0")
    stock_level: int = 0
    supplier: Optional[str] = None


class ProductCreate(ProductBase):
    """Body of POST /api/products; ``initialStockLevel`` is accepted too"""
    stock_level: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def accept_initial_stock_level(cls, data: Any) -> Any:
        if isinstance(data, dict) and "initialStockLevel" in data and "stockLevel" not in data:
            data = dict(data)
            data["stockLevel"] = data.pop("initialStockLevel")
        return data


class ProductSummary(ProductBase):
    """Product row in the catalogue"""
    total_sold: int = 0
    stock_status: StockStatus


class ProductDetail(ProductBase):
    """Single product with its sales figures"""
    times_sold: int = 0
    units_sold: int = 0
    revenue: Money = Decimal("0")
    stock_status: StockStatus


class LowStockProduct(ProductBase):
    """Product row in the reorder report"""
    reorder_status: ReorderStatus


class StockAdjustment(CamelModel):
    """Body of PUT /api/products/{id}/stock; negative quantities remove stock"""
    quantity: int


class ProductCreated(MutationResponse):
    product_id: str


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[ProductSummary])
async def list_products(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
) -> List[ProductSummary]:
    """List the catalogue with units sold and stock level."""
    async with database.session() as db:
        result = await db.execute(product_list_query())
        rows = [dict(row._mapping) for row in result]

    for row in rows:
        row["stock_status"] = stock_status(row["stock_level"])

    rows = listing.apply(PRODUCT_LIST_VIEW, rows, response)
    return [ProductSummary.model_validate(row) for row in rows]


@router.get("/low-stock", response_model=List[LowStockProduct])
async def list_low_stock(
    response: Response,
    listing: ListQuery = Depends(),
    database: Database = Depends(get_database),
) -> List[LowStockProduct]:
    """Products at or below the reorder threshold, emptiest first."""
    async with database.session() as db:
        result = await db.execute(low_stock_query(REORDER_THRESHOLD))
        rows = [dict(row._mapping) for row in result]

    for row in rows:
        row["reorder_status"] = reorder_status(row["stock_level"])

    rows = listing.apply(PRODUCT_LIST_VIEW, rows, response)
    return [LowStockProduct.model_validate(row) for row in rows]


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(
    product_id: str,
    database: Database = Depends(get_database),
) -> ProductDetail:
    """Get one product. Revenue is units sold at the current sale price."""
    async with database.session() as db:
        row = (await db.execute(product_detail_query(product_id))).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Product not found")

    data = dict(row)
    data["revenue"] = Decimal(data["units_sold"] or 0) * (data["sale_price"] or Decimal("0"))
    data["stock_status"] = stock_status(data["stock_level"])
    return ProductDetail.model_validate(data)


@router.post("", response_model=ProductCreated, status_code=201)
async def create_product(
    payload: ProductCreate,
    database: Database = Depends(get_database),
) -> ProductCreated:
    """Add a product to the catalogue."""
    async with database.session() as db:
        db.add(Product(**payload.model_dump()))

    logger.info("Product created", product_id=payload.product_id)
    return ProductCreated(message="Product created successfully", product_id=payload.product_id)


@router.put("/{product_id}", response_model=MutationResponse)
async def update_product(
    product_id: str,
    updates: Dict[str, Any] = Body(...),
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Partially update a product."""
    statement = build_update(PRODUCT_FIELDS, map_fields(PRODUCT_FIELDS, updates), product_id)

    async with database.session() as db:
        result = await db.execute(statement.to_text())
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Product not found")

    logger.info("Product updated", product_id=product_id, columns=statement.columns)
    return MutationResponse(message="Product updated successfully")


@router.put("/{product_id}/stock", response_model=MutationResponse)
async def adjust_stock(
    product_id: str,
    payload: StockAdjustment,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """
    Adjust stock by a signed quantity.

    The guard sits in the UPDATE itself, so stock never goes negative even
    with concurrent adjustments.
    """
    new_level = Product.stock_level + payload.quantity

    async with database.session() as db:
        result = await db.execute(
            update(Product)
            .where(Product.product_id == product_id, new_level >= 0)
            .values(stock_level=new_level)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            exists = await db.scalar(select(Product.product_id).where(Product.product_id == product_id))
            if exists is None:
                raise HTTPException(status_code=404, detail="Product not found")
            raise HTTPException(status_code=400, detail="Insufficient stock")

    logger.info("Stock adjusted", product_id=product_id, quantity=payload.quantity)
    return MutationResponse(message="Stock updated successfully")


@router.delete("/{product_id}", response_model=MutationResponse)
async def delete_product(
    product_id: str,
    database: Database = Depends(get_database),
) -> MutationResponse:
    """Remove a product. Fails while invoices still list it."""
    async with database.session() as db:
        result = await db.execute(delete(Product).where(Product.product_id == product_id))
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Product not found")

    logger.info("Product deleted", product_id=product_id)
    return MutationResponse(message="Product deleted successfully")
