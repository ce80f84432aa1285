"""Typed result of a service payload lookup.

A lookup either succeeds with the payload (ServiceOk) or reports the type
mismatch (ServiceTypeMismatch). Neither variant raises until unwrap() is
called on a mismatch.
"""

from dataclasses import dataclass
from types import UnionType
from typing import (
    Annotated,
    Any,
    ClassVar,
    Generic,
    NoReturn,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from service_config.errors import ServiceTypeMismatchError

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceOk(Generic[T]):
    """Successful lookup."""

    value: T
    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class ServiceTypeMismatch:
    """Lookup whose stored payload is not of the requested type."""

    expected: Any
    actual: type
    ok: ClassVar[bool] = False

    @property
    def error(self) -> ServiceTypeMismatchError:
        return ServiceTypeMismatchError(self.expected, self.actual)

    def unwrap(self) -> NoReturn:
        raise self.error


ServiceResult = ServiceOk[T] | ServiceTypeMismatch


def _runtime_types(service_type: Any) -> Any:
    """Map a type hint to something isinstance() accepts."""
    origin = get_origin(service_type)
    if origin is Annotated:
        return _runtime_types(get_args(service_type)[0])
    if origin is Union or origin is UnionType:
        flattened: list[Any] = []
        for arg in get_args(service_type):
            runtime = _runtime_types(arg)
            flattened.extend(runtime if isinstance(runtime, tuple) else (runtime,))
        return tuple(flattened)
    return origin or service_type


def check_service_type(value: Any, service_type: type[T]) -> "ServiceResult[T]":
    """Check that value is an instance of service_type.

    Parameterized generics such as dict[str, int] are checked against their
    origin type, unions (including Optional) against each member. Hints that
    cannot be checked at runtime, such as Any or Literal, are reported as a
    mismatch.

    Args:
        value: Stored service payload.
        service_type: Type requested by the caller.

    Returns:
        ServiceOk with the value, or ServiceTypeMismatch naming both types.
    """
    try:
        matches = isinstance(value, _runtime_types(service_type))
    except TypeError:
        matches = False
    if matches:
        return ServiceOk(value)
    return ServiceTypeMismatch(expected=service_type, actual=type(value))
