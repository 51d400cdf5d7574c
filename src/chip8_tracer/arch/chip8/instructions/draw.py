# src/chip8_tracer/arch/chip8/instructions/draw.py
"""
CHIP-8 スプライト描画命令 (Dxyn)。
"""
from chip8_tracer.arch.chip8.constants import SPRITE_WIDTH
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction

# @intent:responsibility I から n バイトのスプライトを (Vx mod 64, Vy mod 32) にXOR描画する。
# @intent:note 各バイトの最上位ビットが左端の列。点灯済みの画素を反転した場合 VF=1 (命令中は1のまま保持)。
#              画面外にはみ出す行・列は、quirks.wrap_sprites が偽ならクリップ、真なら折り返す。
def drw(ctx: ExecutionContext, ins: Instruction) -> None:
    display = ctx.display
    origin_x = ctx.state.v[ins.x] % display.width
    origin_y = ctx.state.v[ins.y] % display.height
    wrap = ctx.quirks.wrap_sprites

    ctx.state.vf = 0
    for row in range(ins.n):
        py = origin_y + row
        if py >= display.height:
            if not wrap:
                break
            py %= display.height

        sprite_byte = ctx.bus.read(ctx.state.i + row)
        for col in range(SPRITE_WIDTH):
            if not sprite_byte & (0x80 >> col):
                continue
            px = origin_x + col
            if px >= display.width:
                if not wrap:
                    break
                px %= display.width
            if display.toggle_pixel(px, py):
                ctx.state.vf = 1

    display.draw_flag = True
