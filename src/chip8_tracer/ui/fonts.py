"""
UIフォント管理モジュール。
"""
from PySide6.QtGui import QFont, QFontDatabase

_PREFERRED_FAMILIES = ("Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility レジスタ表示・逆アセンブル表示で共通に使う等幅フォントを返します。
def get_monospace_font(size: int = 10) -> QFont:
    available = set(QFontDatabase.families())
    for family in _PREFERRED_FAMILIES:
        if family in available:
            return QFont(family, size)

    # 候補がなければQtのシステム等幅フォント
    font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
    font.setPointSize(size)
    return font
