# src/chip8_tracer/arch/chip8/quirks.py
"""
CHIP-8 の挙動差異 (quirks) の設定。

既定値は COSMAC VIP 系の一般的なインタプリタに合わせる。
"""
from dataclasses import dataclass
from enum import Enum


# @intent:responsibility 遅延/サウンドタイマーの減算タイミングを定義します。
class TimerMode(Enum):
    COUPLED = "coupled"  # 1命令ごとに1減算
    CLOCKED = "clocked"  # 外部スケジューラが60Hzでtick_timers()を呼ぶ


@dataclass(frozen=True)
class Quirks:
    timer_mode: TimerMode = TimerMode.COUPLED
    wrap_sprites: bool = False        # Falseなら画面端でクリップ、Trueならトーラス状に折り返す
    blocking_key_wait: bool = False   # TrueならFx0Aはキー押下までPCを保持する
