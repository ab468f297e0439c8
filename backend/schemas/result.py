# backend/schemas/result.py
import enum
from typing import Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field
from typing_extensions import TypeAliasType

T = TypeVar("T")


# Why an operation failed; drives the HTTP status, never serialised
class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


# Successful outcome carrying an optional payload (None for operations without one)
class Ok(BaseModel, Generic[T]):
    success: Literal[True] = True
    message: str = "Operation completed successfully"
    errors: List[str] = Field(default_factory=list)
    data: Optional[T] = None


# Failed outcome with itemised error messages
class Err(BaseModel):
    success: Literal[False] = False
    message: str = "Operation failed"
    errors: List[str] = Field(default_factory=list)
    data: None = None
    kind: ErrorKind = Field(default=ErrorKind.VALIDATION, exclude=True)

    @classmethod
    def invalid(cls, *errors: str) -> "Err":
        return cls(errors=list(errors), kind=ErrorKind.VALIDATION)

    @classmethod
    def not_found(cls, error: str) -> "Err":
        return cls(errors=[error], kind=ErrorKind.NOT_FOUND)

    @classmethod
    def conflict(cls, error: str) -> "Err":
        return cls(errors=[error], kind=ErrorKind.CONFLICT)

    @classmethod
    def internal(cls, error: str) -> "Err":
        return cls(errors=[error], kind=ErrorKind.INTERNAL)


# Ok[T] is Ok itself for an unbound T, so a plain Union alias could not be subscripted
Result = TypeAliasType("Result", Union[Ok[T], Err], type_params=(T,))
