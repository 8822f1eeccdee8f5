"""Построение SELECT-запросов со списком фильтров, сортировкой и пагинацией.

Фильтры хранятся как упорядоченный список пар (фрагмент, значения). Из одного и
того же списка строится и запрос страницы, и запрос количества, поэтому порядок
плейсхолдеров всегда совпадает с порядком параметров.
"""
import math
from typing import Any, List, Optional, Sequence, Tuple

from config import DEFAULT_LIMIT
from errors import ValidationError
from models import Pagination
from validators import MAX_INTEGER, parse_id, parse_integer, parse_price


class Predicate:
    def __init__(self, fragment: str, values: Sequence[Any] = ()):
        self.fragment = fragment
        self.values = tuple(values)

    def __repr__(self):
        return f"Predicate({self.fragment!r}, {self.values!r})"


class PredicateList:
    """Условия WHERE, начиная с всегда истинного 1 = 1"""
    BASE = "1 = 1"

    def __init__(self):
        self.predicates: List[Predicate] = []

    def add(self, fragment: str, *values):
        self.predicates.append(Predicate(fragment, values))
        return self

    def __len__(self):
        return len(self.predicates)

    def where(self) -> str:
        clause = "WHERE " + self.BASE
        for predicate in self.predicates:
            clause += f" AND {predicate.fragment}"
        return clause

    def params(self) -> list:
        values = []
        for predicate in self.predicates:
            values.extend(predicate.values)
        return values


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ListQuery:
    def __init__(self, table: str, sort_fields: Sequence[str], default_sort: str, columns: str = "*"):
        if default_sort not in sort_fields:
            raise ValueError(f"Default sort field {default_sort!r} is not in the whitelist")
        self.table = table
        self.columns = columns
        self.sort_fields = tuple(sort_fields)
        self.default_sort = default_sort
        self.filters = PredicateList()
        self.sort = default_sort
        self.direction = "ASC"

    # --- фильтры ---

    def contains(self, column: str, term: Optional[str]):
        if term:
            self.filters.add(f"{column} LIKE ? ESCAPE '\\'", f"%{escape_like(term)}%")
        return self

    def contains_any(self, columns: Sequence[str], term: Optional[str]):
        if term:
            pattern = f"%{escape_like(term)}%"
            fragment = " OR ".join(f"{column} LIKE ? ESCAPE '\\'" for column in columns)
            self.filters.add(f"({fragment})", *([pattern] * len(columns)))
        return self

    def at_least(self, column: str, value: Optional[float]):
        if value is not None:
            self.filters.add(f"{column} >= ?", value)
        return self

    def at_most(self, column: str, value: Optional[float]):
        if value is not None:
            self.filters.add(f"{column} <= ?", value)
        return self

    def equals(self, column: str, value: Any):
        # 0 и пустые значения фильтр не включают
        if value:
            self.filters.add(f"{column} = ?", value)
        return self

    def equals_id(self, column: str, raw: Any):
        # Пусто или 0: без фильтра; некорректный id: ничего не найдено
        if not raw or parse_integer(raw) == 0:
            return self
        value = parse_id(raw)
        if value is None:
            self.filters.add("1 = 0")
        else:
            self.filters.add(f"{column} = ?", value)
        return self

    def stock_presence(self, flag: Optional[str], column: str = "stock"):
        if flag == "true":
            self.filters.add(f"{column} > 0")
        elif flag == "false":
            self.filters.add(f"{column} = 0")
        return self

    # --- сортировка ---

    def order_by(self, sort: Optional[str], order: Optional[str]):
        # Неизвестное поле не ошибка: берём поле по умолчанию
        self.sort = sort if sort in self.sort_fields else self.default_sort
        self.direction = "DESC" if (order or "").lower() == "desc" else "ASC"
        return self

    # --- SQL ---

    def count_statement(self) -> Tuple[str, list]:
        sql = f"SELECT COUNT(*) AS total FROM {self.table} {self.filters.where()}"
        return sql, self.filters.params()

    def page_statement(self, limit: int, offset: int) -> Tuple[str, list]:
        sql = (
            f"SELECT {self.columns} FROM {self.table} {self.filters.where()}"
            f" ORDER BY {self.sort} {self.direction}, id ASC LIMIT ? OFFSET ?"
        )
        return sql, self.filters.params() + [limit, offset]


def _parse_non_negative(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 0:
        return default
    return min(number, MAX_INTEGER)


def parse_limit(value: Any) -> int:
    return _parse_non_negative(value, DEFAULT_LIMIT)


def parse_offset(value: Any) -> int:
    return _parse_non_negative(value, 0)


def parse_price_bound(value: Optional[str], field: str) -> Optional[float]:
    if value is None or value == "":
        return None
    number = parse_price(value)
    if number is None:
        raise ValidationError(f"{field} moet een getal zijn", field=field)
    return number


def build_pagination(limit: int, offset: int, total: int, count: int) -> Pagination:
    return Pagination(
        limit=limit,
        offset=offset,
        total=total,
        count=count,
        has_more=offset + limit < total,
        page=offset // limit + 1 if limit > 0 else 1,
        total_pages=math.ceil(total / limit) if limit > 0 else 0,
    )


def paginate(db, query: ListQuery, limit: int, offset: int):
    """Выполняет запрос количества и запрос страницы, возвращает (rows, Pagination)"""
    count_sql, count_params = query.count_statement()
    total = db.query(count_sql, count_params)[0]["total"]

    page_sql, page_params = query.page_statement(limit, offset)
    rows = db.query(page_sql, page_params)

    return rows, build_pagination(limit, offset, total, len(rows))
