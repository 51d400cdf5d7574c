# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。

このモジュールは、CHIP-8のレジスタファイル、インデックスレジスタ、
コールスタック、タイマーを保持するデータ構造を定義します。
メモリはBus上のRAMが、画面とキーボードはFrameBuffer/Keypadが保持します。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.errors import StackOverflowFault, StackUnderflowFault
from chip8_tracer.arch.chip8.constants import (
    NUM_REGISTERS, STACK_DEPTH, PROGRAM_START_ADDRESS, FLAG_REGISTER,
)


# @intent:responsibility CHIP-8 CPUの全てのレジスタとタイマーの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    spはスタックの次の空きスロットを指し、0 <= sp <= 16 を常に満たします。
    """
    pc: int = PROGRAM_START_ADDRESS
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0x000
    delay_timer: int = 0
    sound_timer: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)

    # @intent:accessor フラグレジスタVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility サウンドタイマーが非ゼロ（＝音が鳴っているべき）かを返します。
    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    # @intent:pre-condition sp < 16。満杯の場合はStackOverflowFaultを送出し、隣接状態を破壊しません。
    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH:
            raise StackOverflowFault(f"Call stack overflow (depth {STACK_DEPTH})")
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    # @intent:responsibility スタックから戻りアドレスを取り出します。
    # @intent:pre-condition sp > 0。空の場合はStackUnderflowFaultを送出します。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowFault("Return with empty call stack")
        self.sp -= 1
        return self.stack[self.sp]

    # @intent:responsibility 両タイマーを1減算します（0未満にはしない）。
    def tick_timers(self) -> None:
        if self.sound_timer > 0:
            self.sound_timer -= 1
        if self.delay_timer > 0:
            self.delay_timer -= 1

    # @intent:responsibility Snapshot用にリストを含めた独立コピーを返します。
    def copy(self) -> 'Chip8CpuState':
        from dataclasses import replace
        return replace(self, v=list(self.v), stack=list(self.stack))
