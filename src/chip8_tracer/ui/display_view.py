"""
CHIP-8 画面表示ウィジェット。
64x32の画素バッファを指定倍率で拡大して描画します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QPainter, QColor
from PySide6.QtCore import QSize

from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.config.models import DisplayConfig

# @intent:responsibility 画素バッファのコピーを保持し、paintEventで描画します。
class DisplayView(QWidget):
    def __init__(self, config: Optional[DisplayConfig] = None, parent=None):
        super().__init__(parent)
        self._pixels = bytes(SCREEN_WIDTH * SCREEN_HEIGHT)
        self.configure(config or DisplayConfig())
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(SCREEN_WIDTH * 2, SCREEN_HEIGHT * 2)

    # @intent:responsibility 倍率と配色を設定し直します。
    def configure(self, config: DisplayConfig) -> None:
        self._config = config
        self._fg = QColor(config.foreground)
        self._bg = QColor(config.background)
        self.updateGeometry()
        self.update()

    def sizeHint(self) -> QSize:
        scale = self._config.scale
        return QSize(SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale)

    # @intent:responsibility 画素バッファのスナップショットを取り込み、再描画を要求します。
    def present(self, frame_buffer: FrameBuffer) -> None:
        self._pixels = frame_buffer.to_bytes()
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._bg)

        # ウィジェットサイズに合わせて整数倍率で中央に配置
        scale = max(1, min(self.width() // SCREEN_WIDTH, self.height() // SCREEN_HEIGHT))
        offset_x = (self.width() - SCREEN_WIDTH * scale) // 2
        offset_y = (self.height() - SCREEN_HEIGHT * scale) // 2

        for y in range(SCREEN_HEIGHT):
            row = y * SCREEN_WIDTH
            for x in range(SCREEN_WIDTH):
                if self._pixels[row + x]:
                    painter.fillRect(offset_x + x * scale, offset_y + y * scale, scale, scale, self._fg)
        painter.end()
