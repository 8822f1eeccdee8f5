from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query
from database import Database, get_db
from errors import NotFoundError, ValidationError
from logger import logger
from models import Category, CategoryWithCount, Product
from products import SORT_FIELDS as PRODUCT_SORT_FIELDS, DEFAULT_SORT as PRODUCT_DEFAULT_SORT
from query_builder import ListQuery, paginate, parse_limit, parse_offset
from responses import success
from update_builder import NOTHING_TO_UPDATE, UpdateBuilder
from validators import CATEGORY_DESCRIPTION_MAX, MISSING, fits_integer, validate_description, validate_name

router = APIRouter(prefix="/categories", tags=["categories"])

SORT_FIELDS = ("id", "name", "created_at", "updated_at")
DEFAULT_SORT = "name"
FIELDS = ("name", "description")


def find_category(db: Database, category_id: int) -> Dict[str, Any]:
    if not fits_integer(category_id):
        raise NotFoundError("Categorie niet gevonden")
    rows = db.query("SELECT * FROM categories WHERE id = ?", [category_id])
    if not rows:
        raise NotFoundError("Categorie niet gevonden")
    return rows[0]


def ensure_unique_name(db: Database, name: str, exclude_id: Optional[int] = None):
    """Имя категории уникально без учёта регистра; при обновлении сама запись не считается"""
    sql = "SELECT id FROM categories WHERE CASEFOLD(name) = CASEFOLD(?)"
    params = [name]
    if exclude_id is not None:
        sql += " AND id != ?"
        params.append(exclude_id)
    if db.query(sql, params):
        raise ValidationError("Er bestaat al een categorie met deze naam", field="name")


def clean_category_payload(payload: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    raw = {field: payload.get(field, MISSING) for field in FIELDS}

    if partial and all(value is MISSING for value in raw.values()):
        raise ValidationError(NOTHING_TO_UPDATE)

    if not (partial and raw["name"] is MISSING):
        reason = validate_name(raw["name"], "category")
        if reason:
            raise ValidationError(reason, field="name")

    reason = validate_description(raw["description"], CATEGORY_DESCRIPTION_MAX)
    if reason:
        raise ValidationError(reason, field="description")

    cleaned = {}
    if raw["name"] is not MISSING:
        cleaned["name"] = raw["name"].strip()
    if raw["description"] is not MISSING:
        cleaned["description"] = raw["description"]
    return cleaned


@router.get("")
def list_categories(
    name: Optional[str] = Query(None),
    description: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    """Список категорий с фильтрами и пагинацией"""
    limit, offset = parse_limit(limit), parse_offset(offset)
    logger.info(f"Fetching categories offset={offset}, limit={limit}, sort={sort}")

    query = (
        ListQuery("categories", SORT_FIELDS, DEFAULT_SORT)
        .contains("name", name)
        .contains("description", description)
        .order_by(sort, order)
    )
    rows, meta = paginate(db, query, limit, offset)
    return success([Category(**row).model_dump() for row in rows], meta=meta)


@router.get("/search")
def search_categories(
    q: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    term = (q or "").strip()
    if not term:
        raise ValidationError("Zoekterm is verplicht", field="q")

    query = (
        ListQuery("categories", SORT_FIELDS, DEFAULT_SORT)
        .contains_any(("name", "description"), term)
        .order_by(sort, order)
    )
    rows, meta = paginate(db, query, parse_limit(limit), parse_offset(offset))
    return success([Category(**row).model_dump() for row in rows], meta=meta)


@router.get("/with-counts")
def categories_with_counts(db: Database = Depends(get_db)):
    """Все категории с количеством товаров в каждой"""
    logger.info("Fetching categories with product counts...")
    rows = db.query("""
        SELECT c.*, COUNT(p.id) AS product_count
        FROM categories c
        LEFT JOIN products p ON p.category_id = c.id
        GROUP BY c.id
        ORDER BY c.name
    """)
    data = [CategoryWithCount(**row).model_dump() for row in rows]
    logger.info(f"Fetched {len(data)} categories with product counts.")
    return success(data)


@router.get("/{category_id}")
def get_category(category_id: int, db: Database = Depends(get_db)):
    return success(Category(**find_category(db, category_id)).model_dump())


@router.get("/{category_id}/products")
def category_products(
    category_id: int,
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Database = Depends(get_db),
):
    find_category(db, category_id)

    query = (
        ListQuery("products", PRODUCT_SORT_FIELDS, PRODUCT_DEFAULT_SORT)
        .equals("category_id", category_id)
        .order_by(sort, order)
    )
    rows, meta = paginate(db, query, parse_limit(limit), parse_offset(offset))
    return success([Product(**row).model_dump() for row in rows], meta=meta)


@router.post("", status_code=201)
def create_category(payload: Optional[Dict[str, Any]] = Body(None), db: Database = Depends(get_db)):
    fields = clean_category_payload(payload or {}, partial=False)
    ensure_unique_name(db, fields["name"])

    columns = ", ".join(fields)
    placeholders = ", ".join("?" for _ in fields)
    result = db.run(f"INSERT INTO categories ({columns}) VALUES ({placeholders})", list(fields.values()))
    logger.info(f"Category '{fields['name']}' created with id {result.insert_id}")

    category = Category(**find_category(db, result.insert_id)).model_dump()
    return success(category, message="Categorie succesvol aangemaakt")


@router.put("/{category_id}")
def update_category(category_id: int, payload: Optional[Dict[str, Any]] = Body(None), db: Database = Depends(get_db)):
    fields = clean_category_payload(payload or {}, partial=True)

    update = UpdateBuilder("categories")
    for column, value in fields.items():
        update.set(column, value)
    sql, params = update.statement(category_id)

    find_category(db, category_id)
    if "name" in fields:
        ensure_unique_name(db, fields["name"], exclude_id=category_id)

    db.run(sql, params)
    logger.info(f"Category {category_id} updated: {', '.join(fields)}")

    category = Category(**find_category(db, category_id)).model_dump()
    return success(category, message="Categorie succesvol geüpdatet")


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Database = Depends(get_db)):
    """Удаляет категорию; товары не удаляются, а отвязываются (category_id = NULL)"""
    category = Category(**find_category(db, category_id)).model_dump()

    affected = db.query("SELECT COUNT(*) AS total FROM products WHERE category_id = ?", [category_id])[0]["total"]
    result = db.run("DELETE FROM categories WHERE id = ?", [category_id])
    if result.affected_rows == 0:
        raise NotFoundError("Categorie niet gevonden")

    logger.info(f"Category {category_id} deleted, {affected} products detached")
    return success(
        {"category": category, "affectedProducts": affected},
        message="Categorie succesvol verwijderd",
    )
