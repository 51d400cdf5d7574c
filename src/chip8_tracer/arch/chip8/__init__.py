# src/chip8_tracer/arch/chip8/__init__.py
"""
CHIP-8 Architecture Package
"""
from .cpu import Chip8Cpu
from .state import Chip8CpuState
from .display import FrameBuffer
from .keypad import Keypad
from .quirks import Quirks, TimerMode
