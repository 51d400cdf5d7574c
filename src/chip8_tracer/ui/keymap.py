"""
キーマップモジュール。

Qtの物理キーコードをCHIP-8の論理キー番号 (0x0-0xF) に変換し、
押下状態を16要素のキー状態として保持します。
"""
from typing import Dict, List, Set

from PySide6.QtCore import Qt

from chip8_tracer.core.errors import ConfigError
from chip8_tracer.arch.chip8.constants import NUM_KEYS

# @intent:responsibility キー名 ("X", "1" など) のマップを Qtキーコード -> キー番号 の辞書に変換します。
def build_key_lookup(keymap: Dict[str, int]) -> Dict[int, int]:
    lookup: Dict[int, int] = {}
    for name, index in keymap.items():
        qt_key = getattr(Qt.Key, f"Key_{name}", None)
        if qt_key is None:
            raise ConfigError(f"Unknown key name '{name}' in keymap")
        lookup[int(qt_key)] = index
    return lookup

# @intent:responsibility 押されている物理キーを追跡し、論理キー状態を生成します。
class KeyTracker:
    """
    複数の物理キーが同じ論理キーに割り当てられていても、
    そのいずれかが押されている間は論理キーを押下中として扱います。
    """
    def __init__(self, keymap: Dict[str, int]):
        self._lookup = build_key_lookup(keymap)
        self._held: Set[int] = set()  # 押下中の Qtキーコード

    # @intent:responsibility キー押下を記録し、マップ対象のキーであればTrueを返します。
    def press(self, qt_key: int) -> bool:
        if qt_key not in self._lookup:
            return False
        self._held.add(qt_key)
        return True

    def release(self, qt_key: int) -> bool:
        if qt_key not in self._lookup:
            return False
        self._held.discard(qt_key)
        return True

    def clear(self) -> None:
        self._held.clear()

    def state(self) -> List[bool]:
        pressed = {self._lookup[qt_key] for qt_key in self._held}
        return [index in pressed for index in range(NUM_KEYS)]
