# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

1回の step() で1命令を実行します。
順序: 描画フラグのクリア → フェッチ → デコード → PC+2 → 実行 → タイマー減算 (coupledモード時)。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo, KeyState
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.errors import CpuFault
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.constants import FONT_START_ADDRESS, NUM_REGISTERS
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.arch.chip8.font import FONT_SET
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.quirks import Quirks, TimerMode
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction
from chip8_tracer.arch.chip8.instructions.maps import decode_opcode, execute_instruction

logger = logging.getLogger(__name__)


# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジックを提供する。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 仮想マシンをエミュレートするクラス。
    メモリはBus経由でアクセスし、画素バッファとキーボード状態を所有します。
    """
    # @intent:pre-condition bus には 0x000-0xFFF の4KB RAM が登録済みであること。
    def __init__(self, bus: Bus, quirks: Optional[Quirks] = None, rng: Optional[random.Random] = None):
        self.quirks = quirks or Quirks()
        self.frame_buffer = FrameBuffer()
        self.keypad = Keypad()
        self._rng = rng or random.Random()
        super().__init__(bus)
        self.reset()

    # @intent:responsibility CHIP-8の初期状態 (PC=0x200, SP=0, I=0, タイマー0) を生成する。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility マシン全体を初期化する。
    # @intent:post-condition メモリ・レジスタ・スタック・キー・画素は全て0、グリフテーブルは0x050に配置済み。
    # @intent:rationale 何度呼んでも同じ初期状態になる (冪等)。ロード済みのROMも消去される。
    def reset(self) -> None:
        super().reset()
        self._bus.clear_devices()
        self._bus.load(FONT_START_ADDRESS, FONT_SET)
        self.frame_buffer.clear()
        self.frame_buffer.draw_flag = False
        self.keypad.clear()

    def get_state(self) -> Chip8CpuState:
        return self._state

    # @intent:responsibility 入力アダプタからのキー状態を反映する。
    def set_keys(self, key_state: KeyState) -> None:
        self.keypad.set_state(key_state)

    # @intent:responsibility 60Hzの論理クロックで呼ばれるタイマー減算。
    def tick_timers(self) -> None:
        self._state.tick_timers()

    def _begin_cycle(self) -> None:
        self.frame_buffer.draw_flag = False

    # @intent:responsibility 命令フェッチ。PC, PC+1 の2バイトをビッグエンディアンで結合する。
    def _fetch(self) -> int:
        pc = self._state.pc
        high = self._bus.read(pc)
        low = self._bus.read(pc + 1)
        return (high << 8) | low

    # @intent:responsibility 命令デコード。この時点のPCは命令自身のアドレスを指している。
    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode, self._state.pc)

    # @intent:responsibility 命令実行。障害には命令のアドレスと命令語を付与して再送出する。
    def _execute(self, operation: Instruction) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%03X: %s %s %s", operation.address, operation.opcode_hex,
                         operation.mnemonic, ", ".join(operation.operands))
        ctx = ExecutionContext(
            state=self._state,
            bus=self._bus,
            display=self.frame_buffer,
            keypad=self.keypad,
            rng=self._rng,
            quirks=self.quirks,
        )
        try:
            execute_instruction(operation, ctx)
        except CpuFault as fault:
            if fault.address is None:
                fault.address = operation.address
            if fault.word is None:
                fault.word = operation.word
            raise

    # @intent:responsibility coupledモードでは1命令ごとにタイマーを1減算する。
    def _end_cycle(self, operation: Operation) -> None:
        if self.quirks.timer_mode is TimerMode.COUPLED:
            self.tick_timers()

    # @intent:responsibility レジスタマップ（UI表示用）を返す。
    def get_register_map(self) -> Dict[str, int]:
        state = self._state
        registers = {f"V{r:X}": state.v[r] for r in range(NUM_REGISTERS)}
        registers.update({
            "PC": state.pc,
            "I": state.i,
            "SP": state.sp,
            "DT": state.delay_timer,
            "ST": state.sound_timer,
        })
        return registers

    # @intent:responsibility フラグ状態（UI表示用）を返す。
    def get_flag_state(self) -> Dict[str, bool]:
        return {
            "VF": self._state.vf != 0,
            "DRAW": self.frame_buffer.draw_flag,
            "SOUND": self._state.sound_active,
        }

    # @intent:responsibility レジスタレイアウト定義を返す。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{r:X}", 8) for r in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("PC", 16),
                RegisterInfo("I", 16),
                RegisterInfo("SP", 8),
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8),
                RegisterInfo("ST", 8),
            ]),
        ]

    # @intent:responsibility 指定範囲の逆アセンブル結果を返す。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        from chip8_tracer.arch.chip8 import disassembler
        return disassembler.disassemble(self._bus, start_addr, length)
