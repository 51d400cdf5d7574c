import logging
import random
from typing import Tuple

from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.constants import MEMORY_SIZE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.loader.loader import RomLoader
from .models import SystemConfig

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPUを生成・接続し、ROMをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        rng = random.Random(config.random_seed)
        cpu = Chip8Cpu(bus, quirks=config.quirks, rng=rng)
        logger.info(
            "Built CHIP-8 system (timer_mode=%s, wrap_sprites=%s, blocking_key_wait=%s)",
            config.quirks.timer_mode.value, config.quirks.wrap_sprites, config.quirks.blocking_key_wait,
        )

        if config.rom:
            RomLoader().load_rom(config.rom, bus)

        return cpu, bus
