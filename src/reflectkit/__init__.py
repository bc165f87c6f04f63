"""reflectkit: find/get accessors over Python introspection."""

from reflectkit.annotations import Annotation, declared_annotations
from reflectkit.errors import InvalidArgumentError
from reflectkit.fields import FieldRef
from reflectkit.reflection import (
    find_annotation_member_default,
    find_field,
    find_field_annotation,
    find_method_annotation,
    find_type_annotation,
    get_annotation_member_default,
    get_annotation_member_type,
    get_annotation_member_value,
    get_field,
    get_field_annotation,
    get_fields,
    new_instance,
    read_field,
    write_field,
)

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "FieldRef",
    "InvalidArgumentError",
    "declared_annotations",
    "find_annotation_member_default",
    "find_field",
    "find_field_annotation",
    "find_method_annotation",
    "find_type_annotation",
    "get_annotation_member_default",
    "get_annotation_member_type",
    "get_annotation_member_value",
    "get_field",
    "get_field_annotation",
    "get_fields",
    "new_instance",
    "read_field",
    "write_field",
]
