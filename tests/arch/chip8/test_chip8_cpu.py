# tests/arch/chip8/test_chip8_cpu.py
"""
chip8_tracer.arch.chip8.cpu の単体テスト。
初期化・命令サイクル・タイマー・描画フラグ・障害通知を検証します。
"""
import pytest

from chip8_tracer.core.errors import UnknownOpcodeFault
from chip8_tracer.transport.bus import BusAccessType
from chip8_tracer.arch.chip8.font import FONT_SET
from chip8_tracer.arch.chip8.quirks import Quirks, TimerMode

# @intent:test_suite Chip8Cpuの命令サイクル全体の振る舞いを検証します。

class TestInitialization:
    # @intent:test_case_reset 初期化後の状態 (PC=0x200, グリフテーブル配置、他は全て0) を検証します。
    def test_initial_state(self, machine):
        cpu, bus = machine
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.sp == 0 and state.i == 0
        assert state.v == [0] * 16
        assert state.delay_timer == 0 and state.sound_timer == 0
        assert bytes(bus.peek(0x050 + k) for k in range(80)) == FONT_SET
        assert all(bus.peek(a) == 0 for a in range(0x0A0, 0x1000))
        assert cpu.frame_buffer.is_blank()
        assert cpu.frame_buffer.draw_flag is False
        assert cpu.keypad.get_state() == [False] * 16

    # @intent:test_case_idempotent reset()を何度呼んでも同じ初期状態になり、ロード済みデータも消えることを検証します。
    def test_reset_is_idempotent(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6A42, 0xA300)
        cpu.step()
        cpu.step()
        cpu.keypad.press(3)
        cpu.frame_buffer.toggle_pixel(1, 1)

        cpu.reset()
        first = cpu.get_state().copy()
        cpu.reset()
        assert cpu.get_state() == first
        assert first.pc == 0x200 and first.v[0xA] == 0 and first.i == 0
        assert bus.peek(0x200) == 0
        assert bytes(bus.peek(0x050 + k) for k in range(80)) == FONT_SET
        assert cpu.frame_buffer.is_blank()
        assert cpu.keypad.get_state() == [False] * 16


class TestCycle:
    # @intent:test_case_pc_advance 通常命令はPCを2進めることを検証します。
    def test_pc_advances_by_two(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6001, 0x6102)
        cpu.step()
        assert cpu.get_state().pc == 0x202
        cpu.step()
        assert cpu.get_state().pc == 0x204

    # @intent:test_case_fetch 命令語はビッグエンディアンで読み出され、Snapshotに記録されることを検証します。
    def test_snapshot_records_fetch(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6A42)
        snapshot = cpu.step()
        assert snapshot.operation.opcode_hex == "6A42"
        assert snapshot.metadata.symbol_info == "LD VA, #$42"
        assert [(a.address, a.data, a.access_type) for a in snapshot.bus_activity] == [
            (0x200, 0x6A, BusAccessType.READ),
            (0x201, 0x42, BusAccessType.READ),
        ]
        assert snapshot.state.v[0xA] == 0x42

    # @intent:test_case_draw_flag 描画フラグはDRWで立ち、次の命令の開始時にクリアされることを検証します。
    def test_draw_flag_is_per_cycle(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0xD001, 0x6000)
        cpu.step()
        assert cpu.frame_buffer.draw_flag is True
        assert cpu.get_flag_state()["DRAW"] is True
        cpu.step()
        assert cpu.frame_buffer.draw_flag is False

    # @intent:test_case_unknown 未定義の命令語はアドレス付きのUnknownOpcodeFaultとなり、状態は変化しないことを検証します。
    def test_unknown_opcode_fault(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6001, 0xFFFF)
        cpu.step()
        with pytest.raises(UnknownOpcodeFault) as excinfo:
            cpu.step()
        assert excinfo.value.address == 0x202
        assert excinfo.value.word == 0xFFFF
        assert cpu.get_state().pc == 0x202

    # @intent:test_case_cycle_count 累計サイクル数が1命令につき1増えることを検証します。
    def test_cycle_count(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6001, 0x6102, 0x6203)
        for _ in range(3):
            cpu.step()
        assert cpu.get_cycle_count() == 3


class TestTimers:
    # @intent:test_case_coupled coupledモードでは1命令ごとに両タイマーが1減ることを検証します。
    def test_coupled_mode_ticks_per_step(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6005, 0xF015, 0xF018, 0x6100, 0x6100)
        for _ in range(3):
            cpu.step()
        state = cpu.get_state()
        # Fx15の直後に1減り、Fx18の後にさらに1減る
        assert state.delay_timer == 3
        assert state.sound_timer == 4
        assert cpu.get_flag_state()["SOUND"] is True

        cpu.step()
        cpu.step()
        assert (state.delay_timer, state.sound_timer) == (1, 2)

    # @intent:test_case_clocked clockedモードでは命令実行でタイマーが減らず、tick_timers()でのみ減ることを検証します。
    def test_clocked_mode_ticks_only_on_demand(self, machine_factory, load_program):
        cpu, bus = machine_factory(quirks=Quirks(timer_mode=TimerMode.CLOCKED))
        load_program(bus, 0x6005, 0xF015, 0x6100, 0x6100)
        for _ in range(4):
            cpu.step()
        assert cpu.get_state().delay_timer == 5
        cpu.tick_timers()
        assert cpu.get_state().delay_timer == 4

    # @intent:test_case_timer_zero タイマーは0未満にならないことを検証します。
    def test_timers_stop_at_zero(self, machine, load_program):
        cpu, bus = machine
        load_program(bus, 0x6000, 0x6000)
        cpu.step()
        cpu.step()
        assert cpu.get_state().delay_timer == 0
        assert cpu.get_state().sound_timer == 0


class TestInspection:
    # @intent:test_case_register_map UI向けのレジスタマップとレイアウトが一致することを検証します。
    def test_register_map_matches_layout(self, machine):
        cpu, _ = machine
        registers = cpu.get_register_map()
        layout_names = [reg.name for group in cpu.get_register_layout() for reg in group.registers]
        assert set(layout_names) == set(registers)
        assert registers["PC"] == 0x200
        assert [group.group_name for group in cpu.get_register_layout()] == ["General", "Pointers", "Timers"]

    # @intent:test_case_set_keys set_keysがキーパッドに反映されることを検証します。
    def test_set_keys(self, machine):
        cpu, _ = machine
        keys = [False] * 16
        keys[0xE] = True
        cpu.set_keys(keys)
        assert cpu.keypad.is_pressed(0xE)


class TestProgramCounterAdvance:
    # @intent:test_case_pc_plus_two 分岐しない命令は、どの系統でもPCをちょうど2だけ進めることを検証します。
    @pytest.mark.parametrize("word", [
        0x00E0,                                  # CLS
        0x0123,                                  # SYS
        0x6A42, 0x7A01,                          # LD Vx,kk / ADD Vx,kk
        0x8AB0, 0x8AB1, 0x8AB2, 0x8AB3,          # LD / OR / AND / XOR
        0x8AB4, 0x8AB5, 0x8AB6, 0x8AB7, 0x8ABE,  # ADD / SUB / SHR / SUBN / SHL
        0xA300, 0xC0FF, 0xD015,                  # LD I / RND / DRW
        0x3A01, 0x4A00, 0x5AB0, 0x9AA0,          # スキップ条件が成立しない SE / SNE
        0xEA9E,                                  # キーが押されていない SKP
        0xFA07, 0xFA0A, 0xFA15, 0xFA18,          # LD Vx,DT / LD Vx,K / LD DT / LD ST
        0xFA1E, 0xFA29, 0xFA33,                  # ADD I / LD F / LD B
        0xFA55, 0xFA65,                          # LD [I] / LD Vx,[I]
    ])
    def test_non_branch_advances_by_two(self, machine, load_program, word):
        cpu, bus = machine
        load_program(bus, word)
        cpu.get_state().i = 0x300
        snapshot = cpu.step()
        assert snapshot.state.pc == 0x202
