from dataclasses import dataclass, field
from typing import Dict, Optional

from chip8_tracer.arch.chip8.quirks import Quirks

@dataclass
class ClockConfig:
    cycles_per_frame: int = 10  # 1フレーム (1/frame_rate秒) あたりの実行命令数
    frame_rate: int = 60

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

# 物理キー名 (Qtのキー名) -> CHIP-8 キー番号
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class SystemConfig:
    rom: Optional[str] = None
    log_level: str = "INFO"
    random_seed: Optional[int] = None
    quirks: Quirks = field(default_factory=Quirks)
    clock: ClockConfig = field(default_factory=ClockConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
