"""
CPUのレジスタとフラグを表示するウィジェット。
AbstractCpuのレイアウト情報を元にUIを組み立てます。
"""
from typing import Dict, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.ui.fonts import get_monospace_font

_VALUE_STYLE = "color: #FFD700;"
_FLAG_ON_STYLE = "color: #33FF66; font-weight: bold;"
_FLAG_OFF_STYLE = "color: #555555;"

# @intent:responsibility レジスタ値とフラグ状態をグループごとに表示します。
class RegisterView(QWidget):
    """
    get_register_layout() のグループをそれぞれQGroupBoxとして並べ、
    最後に get_flag_state() のフラグを1行で表示します。
    """
    # 1グループあたりの列数 (V0-VFは4x4で並べる)
    COLUMNS = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(5, 5, 5, 5)

        self._font = get_monospace_font(10)
        self._register_labels: Dict[str, QLabel] = {}
        self._register_widths: Dict[str, int] = {}
        self._flag_labels: Dict[str, QLabel] = {}
        self._cpu: Optional[AbstractCpu] = None

    # @intent:responsibility 表示対象のCPUを差し替え、ウィジェットを作り直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._setup_ui()
        self.update_registers()

    def _setup_ui(self) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._register_labels.clear()
        self._register_widths.clear()
        self._flag_labels.clear()

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            grid = QGridLayout(group_box)
            grid.setContentsMargins(8, 12, 8, 8)
            grid.setHorizontalSpacing(12)

            for index, reg in enumerate(group.registers):
                hex_width = (reg.width + 3) // 4
                self._register_widths[reg.name] = hex_width

                row, col = divmod(index, self.COLUMNS)
                name_label = QLabel(f"{reg.name}:")
                name_label.setFont(self._font)
                value_label = QLabel("0" * hex_width)
                value_label.setFont(self._font)
                value_label.setStyleSheet(_VALUE_STYLE)
                value_label.setAlignment(Qt.AlignRight)

                grid.addWidget(name_label, row, col * 2)
                grid.addWidget(value_label, row, col * 2 + 1)
                self._register_labels[reg.name] = value_label

            self._layout.addWidget(group_box)

        flag_box = QGroupBox("Flags")
        flag_grid = QGridLayout(flag_box)
        for col, name in enumerate(self._cpu.get_flag_state()):
            label = QLabel(name)
            label.setFont(self._font)
            label.setAlignment(Qt.AlignCenter)
            flag_grid.addWidget(label, 0, col)
            self._flag_labels[name] = label
        self._layout.addWidget(flag_box)
        self._layout.addStretch()

    # @intent:responsibility 現在のCPU状態で表示値を更新します。
    def update_registers(self) -> None:
        if not self._cpu:
            return

        for name, value in self._cpu.get_register_map().items():
            if name in self._register_labels:
                width = self._register_widths[name]
                self._register_labels[name].setText(f"{value:0{width}X}")

        for name, active in self._cpu.get_flag_state().items():
            if name in self._flag_labels:
                self._flag_labels[name].setStyleSheet(_FLAG_ON_STYLE if active else _FLAG_OFF_STYLE)
