"""Tests for constant resolution.

This test suite validates that:
1. Paths are split on the first '#' and both parts are required
2. Registered constants win over reflective lookup
3. Reflective lookup imports modules and walks class attributes
4. Non-constants and unknown names fail with BadReferenceError
"""
import http

import pytest
from doc_restlet.constants import ConstantRegistry, split_path, to_text
from doc_restlet.errors import BadReferenceError


class Limits:
    MAX = 10
    NAME = "limits"
    NOTHING = None

    def helper(self):
        return 1


class TestSplitPath:
    """Test path validation."""

    def test_splits_on_hash(self):
        assert split_path("com.x.Svc#NAME") == ("com.x.Svc", "NAME")

    @pytest.mark.parametrize("path", ["com.x.Svc", "#NAME", "com.x.Svc#", "", "#"])
    def test_rejects_incomplete_paths(self, path):
        with pytest.raises(BadReferenceError):
            split_path(path)


class TestRegistry:
    """Test the symbolic constant table."""

    def test_resolves_registered_constant(self, registry):
        assert registry.resolve("com.x.Svc#NAME") == "health"

    def test_non_string_values_render_as_text(self, registry):
        assert registry.resolve("com.x.Svc#LIMIT") == "2"

    def test_register_rejects_bad_path(self):
        with pytest.raises(BadReferenceError):
            ConstantRegistry().register("no-hash", 1)

    def test_register_module_picks_upper_case_constants(self):
        registry = ConstantRegistry()
        count = registry.register_module(Limits, type_path="app.Limits")

        # NOTHING is None and helper is lower case
        assert count == 2
        assert "app.Limits#MAX" in registry
        assert registry.resolve("app.Limits#NAME") == "limits"

    def test_register_module_by_name(self):
        registry = ConstantRegistry()
        registry.register_module("http.client")
        assert registry.resolve("http.client#HTTP_PORT") == "80"
        assert "http.client#__name__" not in registry


class TestReflectiveLookup:
    """Test lookup of unregistered paths."""

    def test_module_attribute(self):
        assert ConstantRegistry().resolve("string#digits") == "0123456789"

    def test_class_attribute_in_module(self):
        assert ConstantRegistry().resolve(f"{__name__}.Limits#MAX") == "10"

    def test_enum_member_renders_value(self):
        assert ConstantRegistry().resolve("http.HTTPStatus#NOT_FOUND") == "404"

    def test_unknown_module(self):
        with pytest.raises(BadReferenceError) as exc_info:
            ConstantRegistry().resolve("no_such_pkg.Type#NAME")
        assert exc_info.value.details["path"] == "no_such_pkg.Type#NAME"

    def test_unknown_member(self):
        with pytest.raises(BadReferenceError):
            ConstantRegistry().resolve(f"{__name__}.Limits#MISSING")

    def test_none_value_is_not_a_constant(self):
        with pytest.raises(BadReferenceError):
            ConstantRegistry().resolve(f"{__name__}.Limits#NOTHING")

    @pytest.mark.parametrize("path", [".Svc#NAME", ".#X", "a..b#X", "com.x.Svc#NA-ME", "com x.Svc#NAME"])
    def test_malformed_type_path(self, path):
        with pytest.raises(BadReferenceError) as exc_info:
            ConstantRegistry().resolve(path)
        assert exc_info.value.details["path"] == path

    def test_error_raised_on_import_is_wrapped(self, tmp_path, monkeypatch):
        (tmp_path / "broken_constants_mod.py").write_text("raise RuntimeError(\"boom\")\n", encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(BadReferenceError) as exc_info:
            ConstantRegistry().resolve("broken_constants_mod#NAME")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_registered_path_skips_reflective_lookup(self):
        registry = ConstantRegistry()
        registry.register(".Svc#NAME", "x")
        assert registry.resolve(".Svc#NAME") == "x"

    def test_callable_is_not_a_constant(self):
        with pytest.raises(BadReferenceError):
            ConstantRegistry().resolve(f"{__name__}.Limits#helper")


def test_to_text():
    assert to_text("x") == "x"
    assert to_text(3) == "3"
    assert to_text(http.HTTPStatus.OK) == "200"
