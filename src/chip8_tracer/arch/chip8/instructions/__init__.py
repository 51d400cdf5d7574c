# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from .base import Opcode, Instruction, ExecutionContext
from .maps import OPCODE_MAP, decode_opcode, execute_instruction, match_opcode
