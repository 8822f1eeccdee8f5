from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    stock: int = 0
    category_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProductDetail(Product):
    category_name: Optional[str] = None


class Category(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CategoryWithCount(Category):
    product_count: int = 0


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    limit: int
    offset: int
    total: int
    count: int
    has_more: bool = Field(alias="hasMore")
    page: int
    total_pages: int = Field(alias="totalPages")
