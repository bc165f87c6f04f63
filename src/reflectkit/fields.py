"""Field descriptors and field resolution along the MRO.

A class *declares* a field when the name appears in its own annotations or
names one of its own ``__slots__``. Fields declared on base classes are found
by walking ``cls.__mro__`` from the most-derived class; the first class that
declares the name wins.

Private names (``__secret``) are stored by the interpreter under the mangled
name ``_Owner__secret``. Resolution mangles the requested name against every
class on the way, so ``"__secret"`` finds the private field of whichever
class declares it.
"""

from __future__ import annotations

import inspect
import logging
import sys
import types
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar

logger = logging.getLogger(__name__)

A = TypeVar("A")


@dataclass(frozen=True)
class FieldRef:
    """Reflective handle on a field declared by a class.

    Attributes:
        owner: The class that declares the field.
        name: The field name as requested (unmangled).
        attribute: The storage name on instances (mangled for private fields).
        annotation: The declared type, ``Annotated`` extras stripped.
            ``None`` for untyped slots, the original string when a string
            annotation names something not importable at runtime.
        metadata: ``Annotated`` extras followed by the values of a
            dataclass ``field(metadata=...)`` mapping.
    """

    owner: type
    name: str
    attribute: str
    annotation: Any = None
    metadata: tuple[Any, ...] = ()

    def annotation_of(self, annotation_type: type[A]) -> A | None:
        """First metadata entry that is an instance of *annotation_type*."""
        if not isinstance(annotation_type, type):
            raise TypeError(f"Expected an annotation type, got {annotation_type!r}")
        for item in self.metadata:
            if isinstance(item, annotation_type):
                return item
        return None


def mangle(cls: type, name: str) -> str:
    """Storage name of *name* when declared inside *cls*.

    Examples:
        >>> class Account: ...
        >>> mangle(Account, "__balance")
        '_Account__balance'
        >>> mangle(Account, "owner")
        'owner'
    """
    if not name.startswith("__") or name.endswith("__"):
        return name
    stripped = cls.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


def _unmangle(cls: type, attribute: str) -> str:
    prefix = f"_{cls.__name__.lstrip('_')}__"
    if attribute.startswith(prefix) and len(attribute) > len(prefix):
        return attribute[len(prefix) - 2 :]
    return attribute


def _own_slots(cls: type) -> list[str]:
    return [
        attr
        for attr, value in vars(cls).items()
        if isinstance(value, types.MemberDescriptorType)
    ]


def _resolve_hint(cls: type, raw: Any) -> Any:
    """Evaluate a string annotation (PEP 563) in the declaring namespace.

    Only *raw* is evaluated. A name that cannot be resolved at runtime, such
    as a ``TYPE_CHECKING`` import or a class local to a function, leaves the
    annotation as the original string.
    """
    if not isinstance(raw, str):
        return raw
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return eval(raw, globalns, dict(vars(cls)))  # noqa: S307
    except (NameError, AttributeError):
        logger.debug("Keeping unresolved annotation %r on %s", raw, cls.__qualname__)
        return raw


def _declares(cls: type, attribute: str) -> bool:
    return attribute in inspect.get_annotations(cls) or attribute in _own_slots(cls)


def _check_lookup(cls: type, name: str) -> None:
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    if not isinstance(name, str) or not name:
        raise ValueError(f"Invalid field name: {name!r}")


def declared_field(cls: type, name: str) -> FieldRef | None:
    """The field *name* as declared by *cls* itself, ignoring base classes."""
    attribute = mangle(cls, name)
    own = inspect.get_annotations(cls)
    if attribute in own:
        hint = _resolve_hint(cls, own[attribute])
        annotation, metadata = hint, ()
        if typing.get_origin(hint) is Annotated:
            annotation = hint.__origin__
            metadata = tuple(hint.__metadata__)
        dc_field = vars(cls).get("__dataclass_fields__", {}).get(attribute)
        if dc_field is not None:
            metadata += tuple(dc_field.metadata.values())
        return FieldRef(cls, name, attribute, annotation, metadata)
    if attribute in _own_slots(cls):
        return FieldRef(cls, name, attribute)
    return None


def resolve_field(cls: type, name: str) -> FieldRef:
    """Find *name* on *cls* or the nearest base class that declares it.

    Raises:
        TypeError: *cls* is not a class.
        ValueError: *name* is not a non-empty string.
        AttributeError: no class in the MRO declares *name*.
    """
    _check_lookup(cls, name)
    for klass in cls.__mro__:
        field = declared_field(klass, name)
        if field is not None:
            return field
    raise AttributeError(f"{cls.__qualname__} declares no field {name!r}")


def storage_name(cls: type, name: str) -> str:
    """Instance attribute backing field *name*, without evaluating annotations.

    Raises the same errors as :func:`resolve_field`.
    """
    _check_lookup(cls, name)
    for klass in cls.__mro__:
        attribute = mangle(klass, name)
        if _declares(klass, attribute):
            return attribute
    raise AttributeError(f"{cls.__qualname__} declares no field {name!r}")


def iter_fields(cls: type) -> Iterator[FieldRef]:
    """Yield every field visible on *cls*, most-derived declaration first.

    A name redeclared by a subclass is yielded once, for the subclass.
    Private fields of different classes have distinct storage and are all
    yielded.
    """
    seen: set[str] = set()
    for klass in cls.__mro__:
        attributes = [*inspect.get_annotations(klass), *_own_slots(klass)]
        for attribute in attributes:
            if attribute in seen:
                continue
            seen.add(attribute)
            field = declared_field(klass, _unmangle(klass, attribute))
            if field is not None:
                yield field
