# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8 命令の型定義。

命令語は一度だけデコードされ、有限の命令種別 (Opcode) を持つ不変の Instruction になります。
実行関数は ExecutionContext を通じてCPU状態と周辺機器にアクセスします。
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.quirks import Quirks


# @intent:responsibility CHIP-8の35命令を列挙する閉じた命令種別。値は命令パターン。
class Opcode(Enum):
    CLS = "00E0"
    RET = "00EE"
    SYS = "0nnn"
    JP = "1nnn"
    CALL = "2nnn"
    SE_VX_BYTE = "3xkk"
    SNE_VX_BYTE = "4xkk"
    SE_VX_VY = "5xy0"
    LD_VX_BYTE = "6xkk"
    ADD_VX_BYTE = "7xkk"
    LD_VX_VY = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_VX_VY = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_VX_VY = "9xy0"
    LD_I_ADDR = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I_VX = "Fx1E"
    LD_F_VX = "Fx29"
    LD_B_VX = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"


# @intent:responsibility デコード済みの命令。Operationを拡張し、命令種別とフィールドを保持する。
# @intent:rationale Operationを継承することで、AbstractCpuのPC更新・Snapshot生成をそのまま利用できる。
@dataclass(frozen=True)
class Instruction(Operation):
    kind: Optional[Opcode] = None
    address: int = 0   # 命令が置かれていたアドレス
    word: int = 0      # 16bit命令語
    x: int = 0         # bits 8-11
    y: int = 0         # bits 4-7
    n: int = 0         # bits 0-3
    kk: int = 0        # bits 0-7
    nnn: int = 0       # bits 0-11


# @intent:responsibility 命令実行関数に渡す実行環境。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    display: FrameBuffer
    keypad: Keypad
    rng: random.Random
    quirks: Quirks


# @intent:responsibility スキップ命令の共通処理。PCは実行前に既に+2されているため、成立時のみさらに+2する。
def skip_if(ctx: ExecutionContext, condition: bool) -> None:
    if condition:
        ctx.state.pc = (ctx.state.pc + 2) & 0xFFFF
