# schemas/common.py
from typing import Annotated, Any, Dict, List

from pydantic import AfterValidator, BeforeValidator


# ----------------------
# Generic / Shared Types
# ----------------------
JSONDict = Dict[str, Any]
JSONList = List[Dict[str, Any]]


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


def _unique(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _none_as_zero(value: Any) -> Any:
    return 0.0 if value is None else value


def as_bool(value: Any) -> bool:
    """Normalize flags stored as bool, 0/1 or text."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


# Stores may hand back null for empty lists
StrList = Annotated[List[str], BeforeValidator(_none_as_empty)]

# Tag set: order kept, blanks and duplicates dropped
Tags = Annotated[List[str], BeforeValidator(_none_as_empty), AfterValidator(_unique)]

Hours = Annotated[float, BeforeValidator(_none_as_zero)]

Flag = Annotated[bool, BeforeValidator(as_bool)]


def reject_null(value: Any) -> Any:
    """Partial updates may omit a required field but not null it."""
    if value is None:
        raise ValueError("field may be omitted but not set to null")
    return value
