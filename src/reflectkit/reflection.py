"""Reflective accessors with a uniform find/get failure convention.

Every operation comes in one or both of two flavours:

- ``find_*`` looks up optional information. Any failure is logged at
  DEBUG level (with the traceback) and ``None`` is returned.
- ``get_*`` (and the other non-``find`` operations) require success. Any
  failure is raised as :class:`~reflectkit.errors.InvalidArgumentError`
  chained to the original exception.

This module is a namespace of functions and holds no state between calls.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from reflectkit.annotations import declared_annotations
from reflectkit.errors import InvalidArgumentError
from reflectkit.fields import FieldRef, iter_fields, resolve_field, storage_name

logger = logging.getLogger(__name__)

T = TypeVar("T")
A = TypeVar("A")


def _find(operation: Callable[[], T], description: str) -> T | None:
    try:
        return operation()
    except Exception:
        logger.debug("Could not %s. Were you expecting a value here?", description, exc_info=True)
        return None


def _get(operation: Callable[[], T], description: str) -> T:
    try:
        return operation()
    except InvalidArgumentError:
        raise
    except Exception as exc:
        raise InvalidArgumentError(f"Could not {description}: {exc}") from exc


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


def find_field(cls: type, field_name: str) -> FieldRef | None:
    """Field *field_name* of *cls* or one of its bases, or None."""
    return _find(lambda: resolve_field(cls, field_name), f"resolve field {field_name!r}")


def get_field(cls: type, field_name: str) -> FieldRef:
    """Field *field_name* of *cls* or one of its bases."""
    return _get(lambda: resolve_field(cls, field_name), f"resolve field {field_name!r}")


def get_fields(cls: type) -> list[FieldRef]:
    """Every field visible on *cls*, most-derived declarations first."""

    def collect() -> list[FieldRef]:
        if not isinstance(cls, type):
            raise TypeError(f"Expected a class, got {cls!r}")
        return list(iter_fields(cls))

    return _get(collect, f"list fields of {cls!r}")


def find_field_annotation(cls: type, field_name: str, annotation_type: type[A]) -> A | None:
    """Annotation of type *annotation_type* on field *field_name*, or None.

    None when either the field or the annotation is missing.
    """
    return _find(
        lambda: resolve_field(cls, field_name).annotation_of(annotation_type),
        f"resolve {annotation_type!r} on field {field_name!r}",
    )


def get_field_annotation(cls: type, field_name: str, annotation_type: type[A]) -> A | None:
    """Annotation of type *annotation_type* on field *field_name*.

    The field must exist; a field without such an annotation yields None.
    """
    return _get(
        lambda: resolve_field(cls, field_name).annotation_of(annotation_type),
        f"resolve {annotation_type!r} on field {field_name!r}",
    )


def _attribute_of(instance: object, field_name: str) -> str:
    try:
        return storage_name(type(instance), field_name)
    except AttributeError:
        # Undeclared attributes assigned in __init__ are fields too.
        if field_name in getattr(instance, "__dict__", {}):
            return field_name
        raise


def read_field(instance: object, field_name: str) -> Any:
    """Current value of *field_name* on *instance*.

    Private and inherited fields are supported. Custom ``__getattr__`` and
    ``__getattribute__`` hooks are bypassed.
    """
    if instance is None:
        raise InvalidArgumentError(f"Cannot read field {field_name!r} of None")
    return _get(
        lambda: object.__getattribute__(instance, _attribute_of(instance, field_name)),
        f"read field {field_name!r}",
    )


def write_field(instance: object, field_name: str, value: Any) -> None:
    """Set *field_name* on *instance* to *value* (which may be None).

    Private and inherited fields are supported. Custom ``__setattr__`` hooks
    are bypassed, so frozen dataclasses and frozen pydantic models are
    written too.
    """
    if instance is None:
        raise InvalidArgumentError(f"Cannot write field {field_name!r} of None")
    _get(
        lambda: object.__setattr__(instance, _attribute_of(instance, field_name), value),
        f"write field {field_name!r}",
    )


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------


def _search_declared(target: Any, annotation_type: type[A], visited: set[type]) -> A | None:
    """Direct annotations of *target*, then meta-annotations of their types."""
    declared = declared_annotations(target)
    for annotation in declared:
        if isinstance(annotation, annotation_type):
            return annotation
    for annotation in declared:
        meta_type = type(annotation)
        if meta_type in visited:
            continue
        visited.add(meta_type)
        found = _search_declared(meta_type, annotation_type, visited)
        if found is not None:
            return found
    return None


def _type_annotation(cls: type, annotation_type: type[A]) -> A | None:
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    visited: set[type] = set()
    for klass in cls.__mro__:
        found = _search_declared(klass, annotation_type, visited)
        if found is not None:
            return found
    return None


def find_type_annotation(cls: type, annotation_type: type[A]) -> A | None:
    """Annotation of type *annotation_type* on *cls*, or None.

    Searches *cls* and then its bases in MRO order. On each class, the
    annotations applied to annotation types (meta-annotations) are searched
    after the directly applied ones.
    """
    return _find(lambda: _type_annotation(cls, annotation_type), f"resolve {annotation_type!r} on {cls!r}")


def _unwrap(member: Any) -> Any:
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    if isinstance(member, property):
        return member.fget
    return member


def _method_annotation(cls: type, method_name: str, annotation_type: type[A]) -> A | None:
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    defined = False
    visited: set[type] = set()
    for klass in cls.__mro__:
        if method_name not in vars(klass):
            continue
        defined = True
        member = vars(klass)[method_name]
        function = _unwrap(member)
        # The decorator may sit outside or inside staticmethod/classmethod.
        for target in (member,) if function is member else (member, function):
            found = _search_declared(target, annotation_type, visited)
            if found is not None:
                return found
    if not defined:
        raise AttributeError(f"{cls.__qualname__} defines no method {method_name!r}")
    return None


def find_method_annotation(cls: type, method_name: str, annotation_type: type[A]) -> A | None:
    """Annotation of type *annotation_type* on method *method_name*, or None.

    Overridden definitions in base classes are searched too, so an
    annotation on a base method is visible through an unannotated override.
    """
    return _find(
        lambda: _method_annotation(cls, method_name, annotation_type),
        f"resolve {annotation_type!r} on method {method_name!r}",
    )


def _member(annotation_type: type[BaseModel], member_name: str) -> FieldInfo:
    if not (isinstance(annotation_type, type) and issubclass(annotation_type, BaseModel)):
        raise TypeError(f"Expected an annotation type, got {annotation_type!r}")
    try:
        return annotation_type.model_fields[member_name]
    except KeyError:
        msg = f"{annotation_type.__qualname__} has no member {member_name!r}"
        raise AttributeError(msg) from None


def _member_default(annotation_type: type[BaseModel], member_name: str) -> Any:
    info = _member(annotation_type, member_name)
    if info.is_required():
        raise LookupError(f"Member {member_name!r} of {annotation_type.__qualname__} has no default")
    return info.get_default(call_default_factory=True)


def find_annotation_member_default(annotation_type: type[BaseModel], member_name: str) -> Any:
    """Declared default of *member_name*, or None if missing or required."""
    return _find(
        lambda: _member_default(annotation_type, member_name),
        f"resolve default of member {member_name!r}",
    )


def get_annotation_member_default(annotation_type: type[BaseModel], member_name: str) -> Any:
    """Declared default of *member_name* on *annotation_type*."""
    return _get(
        lambda: _member_default(annotation_type, member_name),
        f"resolve default of member {member_name!r}",
    )


def get_annotation_member_type(annotation_type: type[BaseModel], member_name: str) -> Any:
    """Declared type of *member_name* on *annotation_type*."""
    return _get(
        lambda: _member(annotation_type, member_name).annotation,
        f"resolve type of member {member_name!r}",
    )


def get_annotation_member_value(annotation: BaseModel, member_name: str) -> Any:
    """Value bound to *member_name* on the *annotation* instance."""

    def value() -> Any:
        _member(type(annotation), member_name)
        return getattr(annotation, member_name)

    return _get(value, f"read member {member_name!r}")


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def _check_arguments(cls: type, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        # Some builtins expose no signature; the constructor call decides.
        return
    signature.bind(*args, **kwargs)


def new_instance(cls: type[T], *args: Any, **kwargs: Any) -> T:
    """Build an instance of *cls* from the constructor matching the arguments.

    With arguments, they are bound against the constructor signature first
    so that a mismatch fails before the constructor runs.
    """

    def construct() -> T:
        if not isinstance(cls, type):
            raise TypeError(f"Expected a class, got {cls!r}")
        if args or kwargs:
            _check_arguments(cls, args, kwargs)
        return cls(*args, **kwargs)

    return _get(construct, f"instantiate {getattr(cls, '__qualname__', cls)!r}")
