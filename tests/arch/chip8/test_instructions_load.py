# tests/arch/chip8/test_instructions_load.py
"""
CHIP-8 ロード/ストア命令 (レジスタ・I・タイマー・メモリ・キー待ち・フォント) のテスト。
"""
import pytest

from chip8_tracer.core.errors import MemoryFault
from chip8_tracer.arch.chip8.quirks import Quirks, TimerMode

# @intent:test_suite ロード/ストア命令によるレジスタとメモリの変化を検証します。

class TestRegisterLoads:
    def test_ld_vx_byte_and_vx_vy(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6A42, 0x8BA0)
        cpu.step()
        cpu.step()
        assert cpu.get_state().v[0xA] == 0x42
        assert cpu.get_state().v[0xB] == 0x42

    # @intent:test_case_ld_i Annn: I = nnn。
    def test_ld_i(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0xA2F0)
        cpu.step()
        assert cpu.get_state().i == 0x2F0

    # @intent:test_case_add_i Fx1E: I += Vx (VFは変化しない)。
    def test_add_i(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0xAFFF, 0x6302, 0xF31E)
        for _ in range(3):
            cpu.step()
        assert cpu.get_state().i == 0x1001
        assert cpu.get_state().vf == 0

    # @intent:test_case_font Fx29: I = 0x050 + Vx*5。
    def test_ld_f(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x630A, 0xF329)
        cpu.step()
        cpu.step()
        assert cpu.get_state().i == 0x050 + 0xA * 5
        assert bus.peek(cpu.get_state().i) == 0xF0  # 'A' の1行目


class TestTimers:
    # @intent:test_case_timer_load Fx15/Fx18/Fx07 でタイマーを読み書きできることを検証します。
    def test_timer_round_trip(self, machine_factory, load_program):
        cpu, bus = machine_factory(quirks=Quirks(timer_mode=TimerMode.CLOCKED))
        load_program(bus, 0x6130, 0xF115, 0xF118, 0xF207)
        for _ in range(4):
            cpu.step()
        state = cpu.get_state()
        assert state.delay_timer == 0x30
        assert state.sound_timer == 0x30
        assert state.v[2] == 0x30


class TestMemory:
    # @intent:test_case_bcd Fx33: 234 を 0x300 に置くと 2, 3, 4 になることを検証します。
    def test_bcd(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x60EA, 0xA300, 0xF033)
        for _ in range(3):
            cpu.step()
        assert [bus.peek(a) for a in (0x300, 0x301, 0x302)] == [2, 3, 4]
        assert cpu.get_state().i == 0x300

    # @intent:test_case_store_load Fx55 -> Fx65 の往復でV0..Vxが復元され、Iは変化しないことを検証します。
    def test_store_and_load_round_trip(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6011, 0x6122, 0x6233, 0x6344, 0xA400, 0xF255)
        for _ in range(6):
            cpu.step()
        assert [bus.peek(0x400 + r) for r in range(4)] == [0x11, 0x22, 0x33, 0x00]
        assert cpu.get_state().i == 0x400

        state = cpu.get_state()
        state.v[0:3] = [0, 0, 0]
        load_program(bus, 0xF265, address=0x20C)
        cpu.step()
        assert state.v[0:4] == [0x11, 0x22, 0x33, 0x44]
        assert state.i == 0x400

    # @intent:test_case_memory_fault アドレス空間外への書き込みはMemoryFaultとなり、命令アドレスが付与されることを検証します。
    def test_store_past_end_of_memory(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0xAFFE, 0xF255)
        cpu.step()
        with pytest.raises(MemoryFault) as excinfo:
            cpu.step()
        assert excinfo.value.memory_address == 0x1000
        assert excinfo.value.address == 0x202
        assert excinfo.value.word == 0xF255


class TestKeyWait:
    # @intent:test_case_key_wait_pressed Fx0A: 押されているキーのうち最小の番号をVxに格納します。
    def test_key_wait_with_key_pressed(self, machine, load_program):
        cpu, bus = machine
        keys = [False] * 16
        keys[0x9] = True
        keys[0xC] = True
        cpu.set_keys(keys)
        load_program(bus, 0xF50A)
        cpu.step()
        assert cpu.get_state().v[5] == 0x9
        assert cpu.get_state().pc == 0x202

    # @intent:test_case_key_wait_none 既定ではキーが押されていなくても待たずに進み、Vxは変化しません。
    def test_key_wait_without_key_does_not_block(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6577, 0xF50A)
        cpu.step()
        cpu.step()
        assert cpu.get_state().v[5] == 0x77
        assert cpu.get_state().pc == 0x204

    # @intent:test_case_key_wait_blocking blocking_key_wait有効時はキーが押されるまでPCが留まります。
    def test_key_wait_blocking(self, machine_factory, load_program):
        cpu, bus = machine_factory(quirks=Quirks(blocking_key_wait=True))
        load_program(bus, 0xF50A)
        cpu.step()
        cpu.step()
        assert cpu.get_state().pc == 0x200

        cpu.keypad.press(0x3)
        cpu.step()
        assert cpu.get_state().v[5] == 0x3
        assert cpu.get_state().pc == 0x202
