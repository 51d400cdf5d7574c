# src/chip8_tracer/arch/chip8/instructions/control.py
"""
CHIP-8 制御系命令 (Jump, Call/Return, Skip, Key skip, Clear)。
"""
from chip8_tracer.core.errors import KeyIndexFault
from chip8_tracer.arch.chip8.constants import NUM_KEYS
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction, skip_if

# @intent:note 制御命令とPCの関係について
# AbstractCpu.step() のフロー:
# 1. Fetch
# 2. Decode -> Instruction (length=2)
# 3. Update PC (PC += 2)
# 4. Execute -> ここで PC を書き換えると、それが次の Fetch アドレスになる。
# つまり、通常命令は何もしなくて良い。ジャンプ系は PC を上書きし、スキップ成立時はさらに +2 する。

# 00E0
def cls(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.display.clear()

# 00EE
# @intent:note スタックには CALL 命令自身のアドレスが積まれているため、復帰後に +2 して次の命令へ進める。
def ret(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = (ctx.state.pop() + 2) & 0xFFFF

# 0nnn
# @intent:note 機械語ルーチン呼び出しは無視し、NOPとして扱う。
def sys_(ctx: ExecutionContext, ins: Instruction) -> None:
    pass

# 1nnn
def jp(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ins.nnn

# 2nnn
def call(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.push(ins.address)
    ctx.state.pc = ins.nnn

# Bnnn
def jp_v0(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = (ins.nnn + ctx.state.v[0]) & 0xFFFF

# 3xkk
def se_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, ctx.state.v[ins.x] == ins.kk)

# 4xkk
def sne_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, ctx.state.v[ins.x] != ins.kk)

# 5xy0
def se_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, ctx.state.v[ins.x] == ctx.state.v[ins.y])

# 9xy0
def sne_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, ctx.state.v[ins.x] != ctx.state.v[ins.y])

def _key_index(ctx: ExecutionContext, ins: Instruction) -> int:
    key = ctx.state.v[ins.x]
    if key >= NUM_KEYS:
        raise KeyIndexFault(f"V{ins.x:X}={key:#04x} is not a key index", address=ins.address, word=ins.word)
    return key

# Ex9E
def skp(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, ctx.keypad.is_pressed(_key_index(ctx, ins)))

# ExA1
def sknp(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_if(ctx, not ctx.keypad.is_pressed(_key_index(ctx, ins)))
