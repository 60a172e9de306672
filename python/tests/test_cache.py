import asyncio

import pytest
from conftest import FakeDemangler, FakeLiveSource, FakeStaticSource, live, static

from dynasym.cache import SymbolCache
from dynasym.models import Module, ServerInfo
from dynasym.registers import parse_registers
from dynasym.sources import AgentClient

LIBFOO = Module(modulename="/opt/app/libfoo.so", base=0x7000, size=0x1000)
SERVER = ServerInfo(ip="127.0.0.1", port=3030, target_os="linux")


def _cache(config, symbols=None, statics=None, demangler=None):
    source = FakeLiveSource(symbols or {})
    return (
        SymbolCache(source, FakeStaticSource(statics or {}), demangler, config),
        source,
    )


async def _settle():
    for _ in range(10):
        await asyncio.sleep(0)


class TestFormatAddress:
    def test_library_mode_never_loads(self, config):
        cache, source = _cache(config, {LIBFOO.base: [live("foo", 0x7000, 0x40)]})
        text = cache.format_address_with_symbol(0x7020, [LIBFOO], "library")
        assert text == "libfoo.so + 0x20"
        assert source.calls == []
        assert not cache.coordinator.is_loading(LIBFOO.base)

    def test_address_outside_modules(self, config):
        cache, _ = _cache(config)
        assert cache.format_address_with_symbol(0x10, [LIBFOO]) is None

    def test_invalid_mode(self, config):
        cache, _ = _cache(config)
        with pytest.raises(ValueError):
            cache.format_address_with_symbol(0x7020, [LIBFOO], "bogus")

    @pytest.mark.asyncio
    async def test_function_mode_falls_back_until_loaded(self, config):
        cache, source = _cache(
            config,
            {LIBFOO.base: [live("_Z3foov", 0x7000, 0x40)]},
            demangler=FakeDemangler({"_Z3foov": "foo()"}),
        )
        assert cache.format_address_with_symbol(0x7020, [LIBFOO]) == "libfoo.so + 0x20"
        await _settle()
        assert cache.format_address_with_symbol(0x7020, [LIBFOO]) == "libfoo.so@foo() + 0x20"
        assert cache.format_address_with_symbol(0x7000, [LIBFOO]) == "libfoo.so@foo()"
        assert source.calls == [LIBFOO.base]

    @pytest.mark.asyncio
    async def test_function_mode_outside_any_symbol(self, config):
        cache, _ = _cache(config, {LIBFOO.base: [live("foo", 0x7000, 0x10)]})
        await cache.load_module(LIBFOO)
        assert cache.format_address_with_symbol(0x7800, [LIBFOO]) == "libfoo.so + 0x800"

    @pytest.mark.asyncio
    async def test_static_symbols_resolve(self, config):
        cache, _ = _cache(
            config, statics={("unknown", "libfoo.so"): [static("helper", 0x100, 0x20)]}
        )
        await cache.load_module(LIBFOO)
        assert cache.format_address_with_symbol(0x7104, [LIBFOO]) == "libfoo.so@helper + 0x4"


class TestPreload:
    @pytest.mark.asyncio
    async def test_requires_server_info(self, config):
        cache, source = _cache(config)
        assert not await cache.ensure_module_symbols_loaded(0x7020, [LIBFOO], None)
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_loads_once_and_applies_target_os(self, config):
        cache, source = _cache(config, {LIBFOO.base: [live("foo", 0x7000, 0x40)]})
        assert await cache.ensure_module_symbols_loaded(0x7020, [LIBFOO], SERVER)
        assert not await cache.ensure_module_symbols_loaded(0x7020, [LIBFOO], SERVER)
        assert source.calls == [LIBFOO.base]
        assert cache.coordinator.target_os == "linux"
        assert cache.find_symbol_for_address(0x7020).symbol.name == "foo"

    @pytest.mark.asyncio
    async def test_address_outside_modules(self, config):
        cache, _ = _cache(config)
        assert not await cache.ensure_module_symbols_loaded(0x10, [LIBFOO], SERVER)


class TestReverseLookup:
    @pytest.mark.asyncio
    async def test_find_address_for_symbol(self, config):
        cache, _ = _cache(config, {LIBFOO.base: [live("do_work", 0x7200, 0x40)]})
        sym = await cache.find_address_for_symbol("work", "libfoo.so", [LIBFOO])
        assert sym.address == 0x7200


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_clear_cache_returns_to_fresh_state(self, config):
        cache, source = _cache(
            config,
            {LIBFOO.base: [live("_Z3foov", 0x7000, 0x40)]},
            demangler=FakeDemangler({"_Z3foov": "foo()"}),
        )
        await cache.load_module(LIBFOO)
        await cache.formatter.drain()
        assert cache.stats().symbol_count == 1
        assert cache.stats().demangled_count == 1

        cache.clear_cache()

        stats = cache.stats()
        assert stats.symbol_count == 0
        assert stats.loaded_module_count == 0
        assert stats.demangled_count == 0
        assert stats.pending_demangle_count == 0
        assert cache.find_symbol_for_address(0x7020) is None
        await cache.load_module(LIBFOO)
        assert source.calls == [LIBFOO.base, LIBFOO.base]

    @pytest.mark.asyncio
    async def test_stats_counts(self, config):
        cache, _ = _cache(config, {LIBFOO.base: [live("a", 0x7000, 4), live("b", 0x7010, 4)]})
        cache.demangle_enabled = False
        await cache.load_module(LIBFOO)
        stats = cache.stats()
        assert stats.symbol_count == 2
        assert stats.loaded_module_count == 1
        assert stats.loading_module_count == 0
        assert stats.pending_demangle_count == 0
        assert not stats.demangle_enabled

    @pytest.mark.asyncio
    async def test_load_queues_names_for_demangling(self, config):
        demangler = FakeDemangler({"_Z1av": "a()"})
        cache, _ = _cache(config, {LIBFOO.base: [live("_Z1av", 0x7000, 4)]}, demangler=demangler)
        await cache.load_module(LIBFOO)
        await _settle()
        assert cache.get_display_name("_Z1av") == "a()"
        assert demangler.batches == [["_Z1av"]]


class TestRegisters:
    @pytest.mark.asyncio
    async def test_symbolize_arm64(self, config):
        cache, _ = _cache(config, {LIBFOO.base: [live("handler", 0x7100, 0x80)]})
        await cache.load_module(LIBFOO)
        regs = parse_registers({"arch": "aarch64", "pc": "0x7104", "lr": "0x9000"})
        out = cache.symbolize_registers(regs, [LIBFOO])
        assert out == {"pc": "libfoo.so@handler + 0x4", "lr": None}

    def test_symbolize_x86_64_library_mode(self, config):
        cache, _ = _cache(config)
        regs = parse_registers({"arch": "x86_64", "rip": 0x7042})
        assert cache.symbolize_registers(regs, [LIBFOO], "library") == {
            "rip": "libfoo.so + 0x42"
        }


class TestServerInfo:
    def test_update_server_info_retargets_agent(self, config):
        agent = AgentClient("http://10.0.0.1:3030", token="old")
        cache = SymbolCache(agent, None, None, config)
        cache.update_server_info(
            ServerInfo(ip="10.0.0.2", port=4000, target_os="android", auth_token="new")
        )
        assert agent.base_url == "http://10.0.0.2:4000"
        assert agent.token == "new"
        assert cache.coordinator.target_os == "android"

    def test_from_config_wires_collaborators(self, config):
        config.agent_host = "127.0.0.1"
        cache = SymbolCache.from_config(config)
        assert isinstance(cache.live_source, AgentClient)
        assert cache.live_source.base_url == "http://127.0.0.1:3030"
