from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query
from database import Database, get_db
from errors import NotFoundError, ValidationError
from logger import logger
from models import Product, ProductDetail
from query_builder import ListQuery, paginate, parse_limit, parse_offset, parse_price_bound
from responses import success
from update_builder import NOTHING_TO_UPDATE, UpdateBuilder
from validators import (
    MISSING, fits_integer, parse_id, parse_price, parse_stock,
    validate_category_id, validate_description, validate_name, validate_price, validate_stock,
)

router = APIRouter(prefix="/products", tags=["products"])

SORT_FIELDS = ("id", "name", "price", "stock", "category_id", "created_at", "updated_at")
DEFAULT_SORT = "id"
FIELDS = ("name", "description", "price", "stock", "category_id")


def product_query() -> ListQuery:
    return ListQuery("products", SORT_FIELDS, DEFAULT_SORT)


def shape(rows):
    return [Product(**row).model_dump() for row in rows]


def find_product(db: Database, product_id: int) -> Dict[str, Any]:
    if not fits_integer(product_id):
        raise NotFoundError("Product niet gevonden")
    rows = db.query(
        "SELECT p.*, c.name AS category_name FROM products p "
        "LEFT JOIN categories c ON c.id = p.category_id WHERE p.id = ?",
        [product_id],
    )
    if not rows:
        raise NotFoundError("Product niet gevonden")
    return rows[0]


def ensure_category_exists(db: Database, category_id: int):
    if not db.query("SELECT id FROM categories WHERE id = ?", [category_id]):
        raise NotFoundError("Categorie niet gevonden", field="category_id")


def clean_product_payload(payload: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    """Проверяет поля товара и возвращает только переданные, уже приведённые к типам.

    При partial=True отсутствующее поле означает «не менять», а null допустим
    только для description и category_id.
    """
    raw = {field: payload.get(field, MISSING) for field in FIELDS}

    if partial and all(value is MISSING for value in raw.values()):
        raise ValidationError(NOTHING_TO_UPDATE)

    checks = [
        ("name", lambda v: validate_name(v, "product")),
        ("price", validate_price),
        ("stock", validate_stock),
        ("description", validate_description),
        ("category_id", validate_category_id),
    ]
    for field, check in checks:
        if partial and raw[field] is MISSING:
            continue
        reason = check(raw[field])
        if reason:
            raise ValidationError(reason, field=field)

    cleaned = {}
    if raw["name"] is not MISSING:
        cleaned["name"] = raw["name"].strip()
    if raw["description"] is not MISSING:
        cleaned["description"] = raw["description"]
    if raw["price"] is not MISSING:
        cleaned["price"] = parse_price(raw["price"])
    if raw["stock"] is not MISSING:
        cleaned["stock"] = parse_stock(raw["stock"])
    elif not partial:
        cleaned["stock"] = 0
    if raw["category_id"] is not MISSING:
        cleaned["category_id"] = parse_id(raw["category_id"]) if raw["category_id"] is not None else None
    return cleaned


@router.get("")
def list_products(
    name: Optional[str] = Query(None),
    description: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    in_stock: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    """Список товаров с фильтрами, сортировкой и пагинацией"""
    limit, offset = parse_limit(limit), parse_offset(offset)
    logger.info(f"Fetching products offset={offset}, limit={limit}, sort={sort}, order={order}")

    query = (
        product_query()
        .contains("name", name)
        .contains("description", description)
        .at_least("price", parse_price_bound(min_price, "min_price"))
        .at_most("price", parse_price_bound(max_price, "max_price"))
        .stock_presence(in_stock)
        .equals_id("category_id", category_id)
        .order_by(sort, order)
    )
    rows, meta = paginate(db, query, limit, offset)
    return success(shape(rows), meta=meta)


@router.get("/search")
def search_products(
    q: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    """Поиск по названию и описанию с диапазоном цен"""
    term = (q or "").strip()
    if not term:
        raise ValidationError("Zoekterm is verplicht", field="q")

    limit, offset = parse_limit(limit), parse_offset(offset)
    logger.info(f"Searching products for '{term}'")

    query = (
        product_query()
        .contains_any(("name", "description"), term)
        .at_least("price", parse_price_bound(min_price, "min_price"))
        .at_most("price", parse_price_bound(max_price, "max_price"))
        .order_by(sort, order)
    )
    rows, meta = paginate(db, query, limit, offset)
    return success(shape(rows), meta=meta)


@router.get("/in-stock")
def in_stock_products(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    query = product_query().stock_presence("true").order_by("stock", "desc")
    rows, meta = paginate(db, query, parse_limit(limit), parse_offset(offset))
    return success(shape(rows), meta=meta)


@router.get("/out-of-stock")
def out_of_stock_products(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    query = product_query().stock_presence("false").order_by("name", "asc")
    rows, meta = paginate(db, query, parse_limit(limit), parse_offset(offset))
    return success(shape(rows), meta=meta)


@router.get("/{product_id}")
def get_product(product_id: int, db: Database = Depends(get_db)):
    logger.info(f"Fetching product with id: {product_id}")
    return success(ProductDetail(**find_product(db, product_id)).model_dump())


@router.post("", status_code=201)
def create_product(payload: Optional[Dict[str, Any]] = Body(None), db: Database = Depends(get_db)):
    fields = clean_product_payload(payload or {}, partial=False)

    if fields.get("category_id") is not None:
        ensure_category_exists(db, fields["category_id"])

    columns = ", ".join(fields)
    placeholders = ", ".join("?" for _ in fields)
    result = db.run(f"INSERT INTO products ({columns}) VALUES ({placeholders})", list(fields.values()))
    logger.info(f"Product '{fields['name']}' created with id {result.insert_id}")

    product = ProductDetail(**find_product(db, result.insert_id)).model_dump()
    return success(product, message="Product succesvol aangemaakt")


@router.put("/{product_id}")
def update_product(product_id: int, payload: Optional[Dict[str, Any]] = Body(None), db: Database = Depends(get_db)):
    fields = clean_product_payload(payload or {}, partial=True)

    update = UpdateBuilder("products")
    for column, value in fields.items():
        update.set(column, value)
    sql, params = update.statement(product_id)

    find_product(db, product_id)
    if fields.get("category_id") is not None:
        ensure_category_exists(db, fields["category_id"])

    db.run(sql, params)
    logger.info(f"Product {product_id} updated: {', '.join(fields)}")

    product = ProductDetail(**find_product(db, product_id)).model_dump()
    return success(product, message="Product succesvol geüpdatet")


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Database = Depends(get_db)):
    product = ProductDetail(**find_product(db, product_id)).model_dump()

    result = db.run("DELETE FROM products WHERE id = ?", [product_id])
    if result.affected_rows == 0:
        raise NotFoundError("Product niet gevonden")

    logger.info(f"Product {product_id} deleted")
    return success(product, message="Product succesvol verwijderd")
