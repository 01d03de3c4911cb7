"""Tests for _symbols.py — Atom, ModuleRef, SymbolRegistry."""

import json

import pytest

from envlayers._symbols import Atom, ModuleRef, SymbolRegistry


class TestAtom:
    def test_equality_and_hash(self):
        assert Atom("a") == Atom("a")
        assert {Atom("a"), Atom("a")} == {Atom("a")}

    def test_not_equal_to_str(self):
        assert Atom("a") != "a"

    def test_str(self):
        assert str(Atom("info")) == "info"


class TestModuleRef:
    def test_load(self):
        assert ModuleRef("json").load() is json

    def test_root(self):
        root = ModuleRef("")
        assert root.is_root
        with pytest.raises(ImportError):
            root.load()

    def test_missing_module(self):
        with pytest.raises(ModuleNotFoundError):
            ModuleRef("envlayers_no_such_module").load()

    @pytest.mark.parametrize("path", ["a.", ".a", "a b", "a-b"])
    def test_invalid_path(self, path):
        with pytest.raises(ValueError, match="not a valid module path"):
            ModuleRef(path)


class TestSymbolRegistry:
    def test_contains(self):
        registry = SymbolRegistry(["info"])
        assert "info" in registry
        assert Atom("info") in registry
        assert "debug" not in registry

    def test_register(self):
        registry = SymbolRegistry()
        assert registry.register("debug") == Atom("debug")
        assert "debug" in registry
        assert len(registry) == 1

    def test_iter_sorted(self):
        assert list(SymbolRegistry(["b", "a"])) == ["a", "b"]
