# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 逆アセンブラ。
"""
from typing import List, Tuple

from chip8_tracer.core.errors import UnknownOpcodeFault
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.instructions.maps import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを2バイト単位で解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    デコードできない命令語は "DW $xxxx" と表記する。
    読み出しには peek を使うため、バスアクティビティログには残らない。
    """
    results = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        hex_str = f"{word:04X}"
        try:
            instruction = decode_opcode(word, current_addr)
        except UnknownOpcodeFault:
            results.append((current_addr, hex_str, f"DW ${hex_str}"))
        else:
            text = f"{instruction.mnemonic} {', '.join(instruction.operands)}".strip()
            results.append((current_addr, hex_str, text))
        current_addr += 2

    return results
