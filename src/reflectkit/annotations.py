"""Declarative metadata attached to classes, functions and fields.

An annotation type is a subclass of :class:`Annotation`. Its members are the
model fields; a member's declared default is the field default. Instances are
applied as decorators::

    class Table(Annotation):
        name: str = "default"

    @Table(name="users")
    class User:
        email: Annotated[str, Column(unique=True)]

Class and function annotations are recorded on the decorated object itself.
Field annotations live in ``typing.Annotated`` extras and are read through
:mod:`reflectkit.fields`.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

ANNOTATIONS_ATTR = "__reflectkit_annotations__"

T = TypeVar("T")


class Annotation(BaseModel):
    """Base class for annotation types.

    Instances are immutable. They are hashable when every member value is,
    so prefer tuples and frozensets over lists and dicts for members.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    def __call__(self, target: T) -> T:
        """Record this annotation on *target* and return it unchanged."""
        setattr(target, ANNOTATIONS_ATTR, (*declared_annotations(target), self))
        return target


def declared_annotations(target: Any) -> tuple[Annotation, ...]:
    """Annotations applied directly to *target*, in application order.

    Annotations on base classes are not included; see
    :func:`reflectkit.reflection.find_type_annotation` for inherited lookup.
    """
    try:
        namespace = vars(target)
    except TypeError:
        return ()
    return tuple(namespace.get(ANNOTATIONS_ATTR, ()))
