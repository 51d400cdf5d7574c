# tests/arch/chip8/test_disassembler.py
"""
chip8_tracer.arch.chip8.disassembler の単体テスト。
"""
from chip8_tracer.arch.chip8.disassembler import disassemble

# @intent:test_suite 逆アセンブル結果の形式と、バスログに影響しないことを検証します。

class TestDisassembler:
    # @intent:test_case_listing 2バイト単位でアドレス・命令語・ニーモニックが並ぶことを検証します。
    def test_listing(self, machine, load_program):
        _, bus = machine
        load_program(bus, 0x00E0, 0xA22A, 0xD015, 0x2300)
        assert disassemble(bus, 0x200, 8) == [
            (0x200, "00E0", "CLS"),
            (0x202, "A22A", "LD I, $22A"),
            (0x204, "D015", "DRW V0, V1, 5"),
            (0x206, "2300", "CALL $300"),
        ]

    # @intent:test_case_unknown デコードできない命令語は DW として表記されることを検証します。
    def test_unknown_word_is_data(self, machine, load_program):
        _, bus = machine
        load_program(bus, 0xFFFF, 0x8AB9)
        assert disassemble(bus, 0x200, 4) == [
            (0x200, "FFFF", "DW $FFFF"),
            (0x202, "8AB9", "DW $8AB9"),
        ]

    # @intent:test_case_no_log 逆アセンブルはバスアクティビティログに残らないことを検証します。
    def test_does_not_touch_activity_log(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6001)
        bus.get_and_clear_activity_log()
        cpu.disassemble(0x200, 16)
        assert bus.get_and_clear_activity_log() == []
