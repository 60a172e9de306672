from conftest import live, static

from dynasym.merger import convert_live, convert_static, is_function_like, merge
from dynasym.models import LiveSymbol, Module, StaticFunction

MODULE = Module(modulename="/usr/lib/libfoo.so", base=0x1000, size=0x10000)


class TestFunctionKinds:
    def test_function_kinds_kept(self):
        for kind in ("Function", "FUNC", "Public", "Thunk"):
            assert is_function_like(live("f", 0x1000, 4, kind))

    def test_sect_needs_size(self):
        assert is_function_like(live("f", 0x1000, 4, "SECT"))
        assert not is_function_like(live("f", 0x1000, 0, "SECT"))

    def test_data_kinds_dropped(self):
        for kind in ("OBJECT", "Data", "", "NOTYPE"):
            assert not is_function_like(live("f", 0x1000, 4, kind))


class TestConvert:
    def test_live_addresses_are_absolute(self):
        [sym] = convert_live([live("foo", 0x1200, 0x10)], MODULE)
        assert sym.address == 0x1200
        assert sym.end_address == 0x1210
        assert sym.module_name == "libfoo.so"
        assert sym.module_base == 0x1000

    def test_zero_size_becomes_one_byte(self):
        [sym] = convert_live([live("foo", 0x1200)], MODULE)
        assert sym.end_address == 0x1201

    def test_malformed_live_address_skipped(self):
        bad = LiveSymbol(name="bad", address="nope", size=4, type="FUNC")
        assert convert_live([bad, live("ok", 0x1300, 4)], MODULE)[0].name == "ok"
        assert len(convert_live([bad], MODULE)) == 0

    def test_static_offsets_with_and_without_prefix(self):
        syms = convert_static(
            [
                StaticFunction(name="a", address="0x200", size=8),
                StaticFunction(name="b", address="300", size=8),
            ],
            MODULE,
        )
        assert [s.address for s in syms] == [0x1200, 0x1300]

    def test_malformed_static_offset_skipped(self):
        syms = convert_static([StaticFunction(name="a", address="xyz")], MODULE)
        assert syms == []


class TestMerge:
    def test_live_wins_at_same_address(self):
        merged = merge([live("foo", 0x1000, 0x10)], [static("foo_static", 0x0, 0x20)], MODULE)
        assert len(merged) == 1
        assert merged[0].address == 0x1000
        assert merged[0].name == "foo"

    def test_static_fills_gaps(self):
        merged = merge(
            [live("foo", 0x1000, 0x10)],
            [static("bar", 0x100, 0x20), static("dup", 0x0, 4)],
            MODULE,
        )
        assert [(s.name, s.address) for s in merged] == [("foo", 0x1000), ("bar", 0x1100)]

    def test_static_missing(self):
        merged = merge([live("foo", 0x1000, 0x10)], None, MODULE)
        assert [s.name for s in merged] == ["foo"]

    def test_live_empty(self):
        merged = merge([], [static("bar", 0x100, 0x20)], MODULE)
        assert [s.name for s in merged] == ["bar"]

    def test_non_function_live_does_not_shadow_static(self):
        merged = merge(
            [live("table", 0x1100, 8, "OBJECT")], [static("bar", 0x100, 0x20)], MODULE
        )
        assert [s.name for s in merged] == ["bar"]
