# tests/arch/chip8/test_chip8_state.py
"""
Chip8CpuState / FrameBuffer / Keypad の単体テスト。
"""
import pytest

from chip8_tracer.core.errors import StackOverflowFault, StackUnderflowFault, KeyIndexFault
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.arch.chip8.keypad import Keypad

# @intent:test_suite CHIP-8のレジスタ・スタック・タイマー・画素バッファ・キー状態を検証します。

class TestChip8CpuState:
    # @intent:test_case_defaults 初期値 (PC=0x200, 全レジスタ0) を検証します。
    def test_defaults(self):
        state = Chip8CpuState()
        assert state.pc == 0x200
        assert state.sp == 0
        assert state.i == 0
        assert state.v == [0] * 16
        assert state.stack == [0] * 16
        assert state.delay_timer == 0 and state.sound_timer == 0

    # @intent:test_case_vf vfプロパティがV[15]を読み書きし、8bitにマスクすることを検証します。
    def test_vf_property(self):
        state = Chip8CpuState()
        state.vf = 0x101
        assert state.v[15] == 0x01
        assert state.vf == 0x01

    # @intent:test_case_stack push/popがLIFOで動作することを検証します。
    def test_push_pop(self):
        state = Chip8CpuState()
        state.push(0x200)
        state.push(0x304)
        assert state.sp == 2
        assert state.pop() == 0x304
        assert state.pop() == 0x200
        assert state.sp == 0

    # @intent:test_case_overflow 17回目のpushはStackOverflowFaultとなり、状態を壊さないことを検証します。
    def test_push_overflow(self):
        state = Chip8CpuState()
        for depth in range(16):
            state.push(0x200 + depth * 2)
        with pytest.raises(StackOverflowFault):
            state.push(0x400)
        assert state.sp == 16
        assert state.stack[15] == 0x200 + 15 * 2

    # @intent:test_case_underflow 空のスタックからのpopはStackUnderflowFaultとなることを検証します。
    def test_pop_underflow(self):
        state = Chip8CpuState()
        with pytest.raises(StackUnderflowFault):
            state.pop()
        assert state.sp == 0

    # @intent:test_case_timers タイマーが0で止まることを検証します。
    def test_tick_timers_saturates_at_zero(self):
        state = Chip8CpuState(delay_timer=2, sound_timer=1)
        assert state.sound_active
        state.tick_timers()
        assert (state.delay_timer, state.sound_timer) == (1, 0)
        assert not state.sound_active
        state.tick_timers()
        state.tick_timers()
        assert (state.delay_timer, state.sound_timer) == (0, 0)

    # @intent:test_case_copy copy()がレジスタとスタックのリストも複製することを検証します。
    def test_copy_is_deep_for_lists(self):
        state = Chip8CpuState()
        copied = state.copy()
        state.v[3] = 0x77
        state.stack[0] = 0x123
        assert copied.v[3] == 0
        assert copied.stack[0] == 0


class TestFrameBuffer:
    # @intent:test_case_toggle toggle_pixelがXORし、反転前の点灯状態を返すことを検証します。
    def test_toggle_pixel(self):
        fb = FrameBuffer()
        assert fb.toggle_pixel(3, 4) is False
        assert fb.get_pixel(3, 4) == 1
        assert fb.toggle_pixel(3, 4) is True
        assert fb.get_pixel(3, 4) == 0
        assert fb.is_blank()

    # @intent:test_case_bounds 範囲外の座標はIndexErrorとなることを検証します。
    def test_out_of_bounds(self):
        fb = FrameBuffer()
        with pytest.raises(IndexError):
            fb.get_pixel(64, 0)
        with pytest.raises(IndexError):
            fb.toggle_pixel(0, 32)

    # @intent:test_case_rows rows()/to_bytes()が行優先の画素列を返すことを検証します。
    def test_rows_and_bytes(self):
        fb = FrameBuffer()
        fb.toggle_pixel(63, 31)
        rows = fb.rows()
        assert len(rows) == 32 and len(rows[0]) == 64
        assert rows[31][63] == 1
        assert fb.to_bytes()[31 * 64 + 63] == 1
        fb.clear()
        assert fb.is_blank()


class TestKeypad:
    # @intent:test_case_state set_stateで16キーの状態を置き換えることを検証します。
    def test_set_state_and_first_pressed(self):
        keypad = Keypad()
        assert keypad.first_pressed() is None
        state = [False] * 16
        state[0xB] = True
        state[0x4] = True
        keypad.set_state(state)
        assert keypad.is_pressed(0xB)
        assert keypad.first_pressed() == 0x4

    # @intent:test_case_invalid 16要素でない状態や範囲外のキー番号を拒否することを検証します。
    def test_invalid_inputs(self):
        keypad = Keypad()
        with pytest.raises(ValueError):
            keypad.set_state([False] * 15)
        with pytest.raises(KeyIndexFault):
            keypad.is_pressed(16)

    # @intent:test_case_press_release press/releaseで個別にキーを操作できることを検証します。
    def test_press_release(self):
        keypad = Keypad()
        keypad.press(0xF)
        assert keypad.get_state()[0xF] is True
        keypad.release(0xF)
        assert keypad.get_state() == [False] * 16
