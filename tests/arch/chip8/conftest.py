# tests/arch/chip8/conftest.py
"""
CHIP-8 テスト共通のフィクスチャ。
"""
import random

import pytest

from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.constants import MEMORY_SIZE, PROGRAM_START_ADDRESS
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.quirks import Quirks


def build_machine(quirks: Quirks = None, seed: int = 1234):
    bus = Bus()
    bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
    cpu = Chip8Cpu(bus, quirks=quirks, rng=random.Random(seed))
    return cpu, bus


@pytest.fixture
def machine():
    """既定のクセ設定 (coupled, クリップ, 非ブロッキング) のCPUとバス。"""
    return build_machine()


@pytest.fixture
def machine_factory():
    """クセ設定を変えたCPUを作るためのファクトリ。"""
    return build_machine


@pytest.fixture
def load_program():
    """命令語の列を (既定で0x200から) ビッグエンディアンでロードする関数を返します。"""
    def _load(bus: Bus, *words: int, address: int = PROGRAM_START_ADDRESS) -> None:
        data = bytearray()
        for word in words:
            data += bytes([(word >> 8) & 0xFF, word & 0xFF])
        bus.load(address, data)
    return _load
