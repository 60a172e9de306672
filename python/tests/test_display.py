import asyncio

import pytest
from conftest import FakeDemangler

from dynasym.demangle import IdentityDemangler
from dynasym.display import DisplayNameFormatter, simplify_template_name
from dynasym.store import SymbolStore


class TestSimplifyTemplateName:
    def test_plain_name_unchanged(self):
        assert simplify_template_name("main") == "main"

    def test_short_template_unchanged(self):
        name = "std::vector<int>::push_back"
        assert simplify_template_name(name) == name

    def test_long_template_keeps_short_first_arg(self):
        name = "std::map<int, std::basic_string<char, std::char_traits<char>>>::find"
        assert simplify_template_name(name) == "std::map<int, ...>::find"

    def test_long_first_arg_collapses(self):
        name = (
            "std::map<std::basic_string<char, std::char_traits<char>>, int>::find"
        )
        assert simplify_template_name(name) == "std::map<...>::find"

    def test_single_long_argument_collapses(self):
        name = "Holder<" + "A" * 60 + ">"
        assert simplify_template_name(name) == "Holder<...>"

    def test_unbalanced_brackets_unchanged(self):
        assert simplify_template_name("operator<") == "operator<"
        assert simplify_template_name("a>b<c") == "a>b<c"

    def test_suffix_after_last_bracket_kept(self):
        name = "ns::Foo<" + "x" * 40 + ">::bar(int) const"
        assert simplify_template_name(name) == "ns::Foo<...>::bar(int) const"


class TestDisplayNameFormatter:
    def test_disabled_returns_raw(self):
        fmt = DisplayNameFormatter(SymbolStore(), IdentityDemangler(), enabled=False)
        assert fmt.display_name("_Z3foov") == "_Z3foov"
        assert fmt.pending_count == 0

    def test_miss_queues_and_returns_raw(self):
        fmt = DisplayNameFormatter(SymbolStore(), FakeDemangler({"_Z3foov": "foo()"}))
        assert fmt.display_name("_Z3foov") == "_Z3foov"
        assert fmt.pending_count == 1

    @pytest.mark.asyncio
    async def test_drain_fills_cache(self):
        store = SymbolStore()
        demangler = FakeDemangler({"_Z3foov": "foo()", "_Z3barv": "bar()"})
        fmt = DisplayNameFormatter(store, demangler)
        assert fmt.queue(["_Z3foov", "_Z3barv", "_Z3foov"]) == 2
        assert await fmt.drain() == 2
        assert fmt.display_name("_Z3foov") == "foo()"
        assert fmt.display_name("_Z3barv") == "bar()"
        assert fmt.demangled_count == 2
        assert fmt.pending_count == 0

    @pytest.mark.asyncio
    async def test_batches_respect_size(self):
        demangler = FakeDemangler()
        fmt = DisplayNameFormatter(SymbolStore(), demangler, batch_size=2)
        fmt.queue(["a", "b", "c", "d", "e"])
        await fmt.drain()
        assert [len(b) for b in demangler.batches] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_cached_names_not_requeued(self):
        demangler = FakeDemangler()
        fmt = DisplayNameFormatter(SymbolStore(), demangler)
        fmt.queue(["a"])
        await fmt.drain()
        assert fmt.queue(["a"]) == 0

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_raw(self):
        demangler = FakeDemangler(fail=True)
        fmt = DisplayNameFormatter(SymbolStore(), demangler)
        fmt.queue(["_Z3foov"])
        await fmt.drain()
        assert fmt.display_name("_Z3foov") == "_Z3foov"
        # Raw name is cached, so it is not retried.
        assert fmt.pending_count == 0
        assert len(demangler.batches) == 1

    @pytest.mark.asyncio
    async def test_simplifies_demangled_name(self):
        long = "std::map<std::basic_string<char, std::char_traits<char>>, int>::find"
        fmt = DisplayNameFormatter(SymbolStore(), FakeDemangler({"_ZN3std3mapE": long}))
        fmt.queue(["_ZN3std3mapE"])
        await fmt.drain()
        assert fmt.display_name("_ZN3std3mapE") == "std::map<...>::find"

    @pytest.mark.asyncio
    async def test_clear_discards_batch_in_flight(self):
        store = SymbolStore()
        release = asyncio.Event()

        class SlowDemangler:
            async def demangle(self, names):
                await release.wait()
                return [n.upper() for n in names]

        fmt = DisplayNameFormatter(store, SlowDemangler())
        fmt.queue(["a"])
        task = asyncio.create_task(fmt.flush())
        await asyncio.sleep(0)
        fmt.clear()
        release.set()
        await task
        assert store.demangled == {}

    @pytest.mark.asyncio
    async def test_display_name_schedules_background_drain(self):
        store = SymbolStore()
        fmt = DisplayNameFormatter(store, FakeDemangler({"_Z3foov": "foo()"}))
        assert fmt.display_name("_Z3foov") == "_Z3foov"
        for _ in range(5):
            await asyncio.sleep(0)
        assert fmt.display_name("_Z3foov") == "foo()"
