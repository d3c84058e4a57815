"""
Row validation at the data backend boundary.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into 'field: message; field: message'."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "row"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def validate_rows(
    rows: list[dict], model: type[ModelT], label: str
) -> tuple[list[ModelT], list[str]]:
    """
    Validate untyped backend rows into records of `model`.

    Invalid rows are skipped, not fatal. Order of valid rows is preserved.

    Returns:
        Tuple of (records, error messages for skipped rows)
    """
    records: list[ModelT] = []
    errors: list[str] = []

    for index, row in enumerate(rows):
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id", f"#{index}") if isinstance(row, dict) else f"#{index}"
            errors.append(f"Skipped {label} {row_id}: {describe_validation_error(e)}")

    return records, errors
