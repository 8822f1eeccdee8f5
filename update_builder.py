from typing import Any, List, Tuple
from errors import ValidationError

NOTHING_TO_UPDATE = "Geef minstens één veld op om te wijzigen"


class UpdateBuilder:
    """Собирает UPDATE только из переданных полей; updated_at обновляется всегда"""

    def __init__(self, table: str):
        self.table = table
        self.columns: List[str] = []
        self.values: List[Any] = []

    def set(self, column: str, value: Any):
        self.columns.append(column)
        self.values.append(value)
        return self

    def __len__(self):
        return len(self.columns)

    def statement(self, record_id: int) -> Tuple[str, list]:
        if not self.columns:
            raise ValidationError(NOTHING_TO_UPDATE)

        assignments = [f"{column} = ?" for column in self.columns]
        assignments.append("updated_at = CURRENT_TIMESTAMP")
        sql = f"UPDATE {self.table} SET {', '.join(assignments)} WHERE id = ?"
        return sql, self.values + [record_id]
