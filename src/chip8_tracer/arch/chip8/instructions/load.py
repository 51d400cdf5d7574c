# src/chip8_tracer/arch/chip8/instructions/load.py
"""
CHIP-8 ロード/ストア命令 (レジスタ、インデックス、タイマー、メモリ、キー待ち)。
"""
from chip8_tracer.arch.chip8.font import glyph_address
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction

# 6xkk
def ld_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ins.kk

# 8xy0
def ld_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.state.v[ins.y]

# Annn
def ld_i_addr(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = ins.nnn

# Fx1E
# @intent:note I は16bitで折り返す。VFは変化しない。
def add_i_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = (ctx.state.i + ctx.state.v[ins.x]) & 0xFFFF

# Fx29
def ld_f_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = glyph_address(ctx.state.v[ins.x])

# --- Timers ---

# Fx07
def ld_vx_dt(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.state.delay_timer

# Fx15
def ld_dt_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.delay_timer = ctx.state.v[ins.x]

# Fx18
def ld_st_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.sound_timer = ctx.state.v[ins.x]

# Fx0A
# @intent:note 既定では実行時点のキー状態を走査するだけで待機しない。押されていなければ Vx は変化せず、PCは通常通り進む。
#              blocking_key_wait が有効な場合は、キーが押されるまで PC をこの命令に留める。
def ld_vx_k(ctx: ExecutionContext, ins: Instruction) -> None:
    key = ctx.keypad.first_pressed()
    if key is not None:
        ctx.state.v[ins.x] = key
    elif ctx.quirks.blocking_key_wait:
        ctx.state.pc = ins.address

# --- Memory ---

# Fx33
def ld_b_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    value = ctx.state.v[ins.x]
    i = ctx.state.i
    ctx.bus.write(i, value // 100)
    ctx.bus.write(i + 1, (value // 10) % 10)
    ctx.bus.write(i + 2, value % 10)

# Fx55
# @intent:note I は変化しない。
def ld_mem_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    for r in range(ins.x + 1):
        ctx.bus.write(ctx.state.i + r, ctx.state.v[r])

# Fx65
def ld_vx_mem(ctx: ExecutionContext, ins: Instruction) -> None:
    for r in range(ins.x + 1):
        ctx.state.v[r] = ctx.bus.read(ctx.state.i + r)
