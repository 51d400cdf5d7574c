# src/chip8_tracer/arch/chip8/display.py
"""
CHIP-8 のモノクロ画素バッファ。

各セルは0/1のバイトとして保持され、画素はXORでのみ反転されます（全消去を除く）。
描画フラグは表示アダプタに再描画が必要であることを伝える一時的な信号です。
"""
from typing import List

from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT


# @intent:responsibility 64x32の画素バッファと描画フラグを管理します。
class FrameBuffer:
    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self.draw_flag: bool = False

    # @intent:responsibility 全画素を消灯します。
    def clear(self) -> None:
        self._pixels[:] = bytes(self.width * self.height)

    # @intent:responsibility 画素を取得します。範囲外の座標はIndexErrorとします。
    def get_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) out of bounds for {self.width}x{self.height} buffer.")
        return self._pixels[y * self.width + x]

    # @intent:responsibility 画素をXOR反転し、反転前に点灯していたか（衝突）を返します。
    def toggle_pixel(self, x: int, y: int) -> bool:
        was_on = self.get_pixel(x, y) == 1
        self._pixels[y * self.width + x] ^= 1
        return was_on

    # @intent:responsibility 表示アダプタ向けに行ごとの画素リストを返します。
    def rows(self) -> List[List[int]]:
        return [list(self._pixels[y * self.width:(y + 1) * self.width]) for y in range(self.height)]

    # @intent:responsibility 点灯している画素が一つもないかを返します。
    def is_blank(self) -> bool:
        return not any(self._pixels)

    def to_bytes(self) -> bytes:
        return bytes(self._pixels)
