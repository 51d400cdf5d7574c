# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
CHIP-8 算術論理演算命令 (ALU)。

全ての演算は8bitで折り返し、例外を送出しません。
フラグを出力する命令は VF を先に書き込み、その後 Vx に結果を格納します
（x が F の場合は結果が優先されます）。
"""
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction

# 7xkk
# @intent:note キャリーフラグは変化しない。
def add_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    v[ins.x] = (v[ins.x] + ins.kk) & 0xFF

# --- Logical Operations (8xy1, 8xy2, 8xy3) ---

def or_(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    v[ins.x] |= v[ins.y]

def and_(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    v[ins.x] &= v[ins.y]

def xor(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    v[ins.x] ^= v[ins.y]

# --- Arithmetic Operations (8xy4, 8xy5, 8xy7) ---

# 8xy4
def add_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    total = v[ins.x] + v[ins.y]
    ctx.state.vf = 1 if total > 0xFF else 0
    v[ins.x] = total & 0xFF

# 8xy5
# @intent:note VF = NOT borrow。等しい場合は0になる（Vx > Vy の厳密比較）。
def sub(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    vx, vy = v[ins.x], v[ins.y]
    ctx.state.vf = 1 if vx > vy else 0
    v[ins.x] = (vx - vy) & 0xFF

# 8xy7
def subn(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    vx, vy = v[ins.x], v[ins.y]
    ctx.state.vf = 1 if vy > vx else 0
    v[ins.x] = (vy - vx) & 0xFF

# --- Shift Operations (8xy6, 8xyE) ---
# @intent:note Vy は参照しない (Vx 自身をシフトする)。

def shr(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    vx = v[ins.x]
    ctx.state.vf = vx & 0x01
    v[ins.x] = vx >> 1

def shl(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    vx = v[ins.x]
    ctx.state.vf = (vx >> 7) & 0x01
    v[ins.x] = (vx << 1) & 0xFF

# Cxkk
def rnd(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.rng.randrange(0x100) & ins.kk
