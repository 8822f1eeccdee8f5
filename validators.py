import math
import re
from typing import Any, Optional

# Поле отсутствует в запросе (в отличие от явного null)
MISSING = object()

NAME_LIMITS = {
    "product": (3, 200),
    "category": (2, 100),
}

MAX_PRICE = 1_000_000
# Пределы INTEGER в SQLite (64 бита со знаком)
MAX_INTEGER = 2 ** 63 - 1
MIN_INTEGER = -2 ** 63
CATEGORY_DESCRIPTION_MAX = 500

# Латиница, пробелы и буквы Latin-1 Supplement (без × и ÷)
CATEGORY_NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ ]+$")
DIGIT_RE = re.compile(r"\d")
INTEGER_RE = re.compile(r"-?\d+")
NUMBER_RE = re.compile(r"-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")


def validate_name(name: Any, kind: str) -> Optional[str]:
    """Возвращает None, если имя корректно, иначе текст ошибки"""
    if name is MISSING or name is None:
        return "Naam is verplicht"
    if not isinstance(name, str):
        return "Naam moet tekst zijn"

    name = name.strip()
    if not name:
        return "Naam mag niet leeg zijn"

    min_len, max_len = NAME_LIMITS[kind]
    if len(name) < min_len or len(name) > max_len:
        return f"Naam moet tussen {min_len} en {max_len} tekens lang zijn"

    if kind == "category":
        if DIGIT_RE.search(name):
            return "Categorie naam mag geen cijfers bevatten"
        if not CATEGORY_NAME_RE.match(name):
            return "Categorie naam mag alleen letters en spaties bevatten"

    return None


def parse_price(price: Any) -> Optional[float]:
    if isinstance(price, bool) or price is None:
        return None
    # Строки только в обычной десятичной записи: без пробелов и "1_000"
    if isinstance(price, str) and not NUMBER_RE.fullmatch(price):
        return None
    try:
        value = float(price)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def validate_price(price: Any) -> Optional[str]:
    if price is MISSING or price is None or price == "":
        return "Prijs is verplicht"

    value = parse_price(price)
    if value is None:
        return "Prijs moet een getal zijn"
    if value < 0:
        return "Prijs moet een positief getal zijn"
    if value > MAX_PRICE:
        return f"Prijs mag niet hoger zijn dan {MAX_PRICE}"
    return None


def parse_integer(value: Any) -> Optional[int]:
    """Целое число без проверки диапазона"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and INTEGER_RE.fullmatch(value):
        return int(value)
    return None


def fits_integer(value: int) -> bool:
    return MIN_INTEGER <= value <= MAX_INTEGER


def parse_stock(stock: Any) -> Optional[int]:
    value = parse_integer(stock)
    if value is None or not fits_integer(value):
        return None
    return value


def validate_stock(stock: Any) -> Optional[str]:
    # Отсутствие допустимо: при создании подставляется 0
    if stock is MISSING:
        return None

    value = parse_integer(stock)
    if value is None:
        return "Voorraad moet een geheel getal zijn"
    if value < 0:
        return "Voorraad moet een positief getal zijn"
    if value > MAX_INTEGER:
        return "Voorraad is te groot"
    return None


def validate_description(description: Any, max_length: Optional[int] = None) -> Optional[str]:
    if description is MISSING or description is None:
        return None
    if not isinstance(description, str):
        return "Beschrijving moet tekst zijn"
    if max_length is not None and len(description) > max_length:
        return f"Beschrijving mag maximaal {max_length} tekens lang zijn"
    return None


def parse_id(value: Any) -> Optional[int]:
    value = parse_integer(value)
    if value is None or value <= 0 or value > MAX_INTEGER:
        return None
    return value


def validate_category_id(category_id: Any) -> Optional[str]:
    if category_id is MISSING or category_id is None:
        return None
    if parse_id(category_id) is None:
        return "Categorie id moet een positief geheel getal zijn"
    return None
