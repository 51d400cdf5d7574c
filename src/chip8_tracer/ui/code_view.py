"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from chip8_tracer.arch.chip8.constants import MEMORY_SIZE, PROGRAM_START_ADDRESS
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.ui.fonts import get_monospace_font

_HIGHLIGHT = QColor("#404000")
_NORMAL = QColor("#101010")

# @intent:responsibility プログラム領域の逆アセンブル結果を表で表示し、現在のPC行を強調します。
class CodeView(QWidget):
    # PC行の下に常に見せておく行数
    SCROLL_MARGIN = 5

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Word", "Mnemonic"])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB;")
        layout.addWidget(self.table)

        self._rows: List[Tuple[int, str, str]] = []
        self._highlighted = -1

    # @intent:responsibility ROMロード後などメモリ内容が変わったときに逆アセンブルをやり直します。
    def refresh(self, cpu: AbstractCpu) -> None:
        self._rows = cpu.disassemble(PROGRAM_START_ADDRESS, MEMORY_SIZE - PROGRAM_START_ADDRESS)
        self.table.setRowCount(len(self._rows))
        for row, (addr, word, text) in enumerate(self._rows):
            self.table.setItem(row, 0, QTableWidgetItem(f"{addr:03X}"))
            self.table.setItem(row, 1, QTableWidgetItem(word))
            self.table.setItem(row, 2, QTableWidgetItem(text))
        self._highlighted = -1
        self.update_pc(cpu.get_state().pc)

    # @intent:responsibility PCに対応する行をハイライトし、その先が見えるようにスクロールします。
    def update_pc(self, pc: int) -> None:
        if not self._rows:
            return
        row_index = (pc - PROGRAM_START_ADDRESS) // 2
        if not 0 <= row_index < len(self._rows) or self._rows[row_index][0] != pc:
            # 奇数アドレスやプログラム領域外ではハイライトしない
            row_index = -1

        self._set_row_background(self._highlighted, _NORMAL)
        self._set_row_background(row_index, _HIGHLIGHT)
        self._highlighted = row_index

        if row_index != -1:
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)
            ahead = min(row_index + self.SCROLL_MARGIN, len(self._rows) - 1)
            self.table.scrollToItem(self.table.item(ahead, 0), QTableWidget.EnsureVisible)

    def _set_row_background(self, row: int, color: QColor) -> None:
        if row < 0:
            return
        for col in range(self.table.columnCount()):
            item = self.table.item(row, col)
            if item is not None:
                item.setBackground(color)
