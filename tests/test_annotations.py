"""Tests for the Annotation base type and decorator application."""

import pytest
from pydantic import ValidationError

from reflectkit.annotations import ANNOTATIONS_ATTR, Annotation, declared_annotations


class Route(Annotation):
    path: str = "/"
    methods: tuple[str, ...] = ("GET",)


class Deprecated(Annotation):
    reason: str = ""


class TestAnnotation:
    def test_defaults(self) -> None:
        route = Route()
        assert route.path == "/"
        assert route.methods == ("GET",)

    def test_frozen(self) -> None:
        route = Route()
        with pytest.raises(ValidationError):
            route.path = "/other"  # type: ignore[misc]

    def test_unknown_member_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Route(verb="POST")  # type: ignore[call-arg]

    def test_equal_and_hashable(self) -> None:
        assert Route(path="/a") == Route(path="/a")
        assert len({Route(path="/a"), Route(path="/a")}) == 1

    def test_list_member_is_not_hashable(self) -> None:
        class Tags(Annotation):
            values: list[str] = []

        assert Tags(values=["a"]) == Tags(values=["a"])
        with pytest.raises(TypeError):
            hash(Tags(values=["a"]))


class TestDecorator:
    def test_returns_target_unchanged(self) -> None:
        def handler() -> str:
            return "ok"

        decorated = Route(path="/h")(handler)
        assert decorated is handler
        assert decorated() == "ok"

    def test_records_in_application_order(self) -> None:
        @Route(path="/inner")
        @Deprecated(reason="use v2")
        class Endpoint:
            pass

        assert declared_annotations(Endpoint) == (Deprecated(reason="use v2"), Route(path="/inner"))
        assert ANNOTATIONS_ATTR in vars(Endpoint)

    def test_not_inherited_by_declared_annotations(self) -> None:
        @Route()
        class Parent:
            pass

        class Kid(Parent):
            pass

        assert declared_annotations(Kid) == ()

    def test_subclass_annotation_does_not_touch_parent(self) -> None:
        @Route(path="/parent")
        class Parent:
            pass

        @Route(path="/kid")
        class Kid(Parent):
            pass

        assert declared_annotations(Parent) == (Route(path="/parent"),)
        assert declared_annotations(Kid) == (Route(path="/kid"),)

    def test_object_without_namespace(self) -> None:
        assert declared_annotations(42) == ()
