# tests/loader/test_rom_loader.py
"""
chip8_tracer.loader.loader (RomLoader) の単体テスト。
"""
import pytest

from chip8_tracer.core.errors import LoadError
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.loader.loader import RomLoader

# @intent:test_suite ROMイメージのロードと、失敗時にメモリを変更しないことを検証します。

class TestRomLoader:
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        return bus

    # @intent:test_case_load ファイルの内容が0x200からそのまま配置されることを検証します。
    def test_load_rom_from_file(self, bus, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))

        loaded = RomLoader().load_rom(rom, bus)

        assert loaded == 4
        assert [bus.peek(a) for a in range(0x200, 0x204)] == [0x00, 0xE0, 0x12, 0x00]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_max_size 3584バイトちょうどのROMはメモリの末尾まで埋まることを検証します。
    def test_load_rom_of_maximum_size(self, bus, tmp_path):
        rom = tmp_path / "full.ch8"
        rom.write_bytes(bytes([0xAB]) * 3584)
        assert RomLoader().load_rom(rom, bus) == 3584
        assert bus.peek(0xFFF) == 0xAB

    # @intent:test_case_too_large 上限を超えるROMはLoadErrorとなり、メモリは変更されないことを検証します。
    def test_oversized_rom_leaves_memory_untouched(self, bus, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes([0x55]) * 3585)

        with pytest.raises(LoadError, match="size mismatch"):
            RomLoader().load_rom(rom, bus)
        assert all(bus.peek(a) == 0 for a in range(0x200, 0x1000))

    # @intent:test_case_missing 存在しないファイルはLoadErrorとなることを検証します。
    def test_missing_file(self, bus, tmp_path):
        with pytest.raises(LoadError, match="Cannot read ROM"):
            RomLoader().load_rom(tmp_path / "missing.ch8", bus)

    # @intent:test_case_empty 空のROMは0バイトとしてロードされることを検証します。
    def test_empty_rom(self, bus, tmp_path):
        rom = tmp_path / "empty.ch8"
        rom.write_bytes(b"")
        assert RomLoader().load_rom(rom, bus) == 0

    # @intent:test_case_bytes メモリ上のバイト列からもロードできることを検証します。
    def test_load_rom_bytes(self, bus):
        assert RomLoader().load_rom_bytes(b"\x60\x01", bus) == 2
        assert bus.peek(0x200) == 0x60
        with pytest.raises(LoadError, match="exceeds maximum"):
            RomLoader().load_rom_bytes(bytes(3585), bus)

    # @intent:test_case_custom_address ロードアドレスを変更できることを検証します。
    def test_custom_load_address(self, bus):
        RomLoader(load_address=0x600, max_size=0xA00).load_rom_bytes(b"\xAA", bus)
        assert bus.peek(0x600) == 0xAA
