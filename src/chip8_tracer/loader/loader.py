# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
ヘッダを持たない生のCHIP-8バイナリを 0x200 からメモリへロードします。
"""
import logging
import os
from typing import Union

from chip8_tracer.core.errors import LoadError
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.constants import PROGRAM_START_ADDRESS, MAX_ROM_SIZE

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class RomLoader:
    """
    CHIP-8 ROMイメージを読み込み、データをバスにロードするローダー。
    """
    def __init__(self, load_address: int = PROGRAM_START_ADDRESS, max_size: int = MAX_ROM_SIZE):
        self.load_address = load_address
        self.max_size = max_size

    # @intent:responsibility ファイルからROMを読み込み、バスにロードします。
    # @intent:post-condition 失敗時はLoadErrorを送出し、メモリには一切書き込みません。
    def load_rom(self, file_path: PathLike, bus: Bus) -> int:
        try:
            file_size = os.stat(file_path).st_size
            with open(file_path, "rb") as f:
                data = f.read(self.max_size)
        except OSError as e:
            raise LoadError(f"Cannot read ROM '{file_path}': {e}") from e

        if len(data) != file_size:
            raise LoadError(
                f"ROM '{file_path}' size mismatch: read {len(data)} of {file_size} bytes "
                f"(maximum {self.max_size} bytes)"
            )
        loaded = self._copy(data, bus)
        logger.info("Loaded ROM %s (%d bytes) at %#05x", file_path, loaded, self.load_address)
        return loaded

    # @intent:responsibility メモリ上のバイト列をROMとしてロードします。
    def load_rom_bytes(self, data: bytes, bus: Bus) -> int:
        if len(data) > self.max_size:
            raise LoadError(f"ROM image of {len(data)} bytes exceeds maximum of {self.max_size} bytes")
        loaded = self._copy(bytes(data), bus)
        logger.info("Loaded ROM image (%d bytes) at %#05x", loaded, self.load_address)
        return loaded

    def _copy(self, data: bytes, bus: Bus) -> int:
        copied = bus.load(self.load_address, data)
        if copied != len(data):
            raise LoadError(f"Copied {copied} bytes, expected {len(data)}")
        return copied
