# src/chip8_tracer/arch/chip8/keypad.py
"""
CHIP-8 の16キー入力状態。
"""
from typing import List, Optional

from chip8_tracer.common.types import KeyState
from chip8_tracer.core.errors import KeyIndexFault
from chip8_tracer.arch.chip8.constants import NUM_KEYS


# @intent:responsibility 論理キー0x0-0xFの押下状態を保持します。
# @intent:rationale 書き込みは入力アダプタのみが行い、命令側は is_pressed / first_pressed で読み取るだけです。
class Keypad:
    def __init__(self):
        self._keys: List[bool] = [False] * NUM_KEYS

    def clear(self) -> None:
        self._keys = [False] * NUM_KEYS

    # @intent:responsibility 入力アダプタから受け取った16要素の状態で置き換えます。
    def set_state(self, state: KeyState) -> None:
        if len(state) != NUM_KEYS:
            raise ValueError(f"Key state must have {NUM_KEYS} entries, got {len(state)}.")
        self._keys = [bool(pressed) for pressed in state]

    def press(self, key: int) -> None:
        self._check_index(key)
        self._keys[key] = True

    def release(self, key: int) -> None:
        self._check_index(key)
        self._keys[key] = False

    def is_pressed(self, key: int) -> bool:
        self._check_index(key)
        return self._keys[key]

    # @intent:responsibility 0から順に走査し、最初に押されているキー番号を返します。なければNone。
    def first_pressed(self) -> Optional[int]:
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def get_state(self) -> List[bool]:
        return list(self._keys)

    def _check_index(self, key: int) -> None:
        if not 0 <= key < NUM_KEYS:
            raise KeyIndexFault(f"Key index {key:#x} out of range 0x0-0x{NUM_KEYS - 1:X}")
