import logging
import yaml
from typing import Dict, Any

from chip8_tracer.core.errors import ConfigError
from chip8_tracer.arch.chip8.constants import NUM_KEYS
from chip8_tracer.arch.chip8.quirks import Quirks, TimerMode
from .models import SystemConfig, ClockConfig, DisplayConfig, DEFAULT_KEYMAP

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {"rom", "log_level", "random_seed", "quirks", "clock", "display", "keymap"}

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
        return self.parse_config(data or {})

    def parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigError("Top level of the config must be a mapping")
        for key in data:
            if key not in _KNOWN_KEYS:
                logger.warning("Ignoring unknown config key '%s'", key)

        seed = data.get("random_seed")
        return SystemConfig(
            rom=data.get("rom"),
            log_level=self._parse_log_level(data.get("log_level", "INFO")),
            random_seed=self._parse_int(seed) if seed is not None else None,
            quirks=self._parse_quirks(self._section(data, "quirks")),
            clock=self._parse_clock(self._section(data, "clock")),
            display=self._parse_display(self._section(data, "display")),
            keymap=self._parse_keymap(data.get("keymap")),
        )

    # @intent:utility_function 省略またはnullのセクションは空の辞書として扱い、それ以外は辞書であることを要求します。
    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_log_level(self, value: Any) -> str:
        level = str(value).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log_level '{value}'")
        return level

    def _parse_quirks(self, data: Dict[str, Any]) -> Quirks:
        mode = data.get("timer_mode", TimerMode.COUPLED.value)
        try:
            timer_mode = TimerMode(str(mode).lower())
        except ValueError:
            raise ConfigError(f"Unknown timer_mode '{mode}' (expected 'coupled' or 'clocked')") from None
        return Quirks(
            timer_mode=timer_mode,
            wrap_sprites=self._parse_bool("wrap_sprites", data.get("wrap_sprites", False)),
            blocking_key_wait=self._parse_bool("blocking_key_wait", data.get("blocking_key_wait", False)),
        )

    # YAMLの true/false のみを受け付ける ("false" のような文字列は不可)
    def _parse_bool(self, name: str, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ConfigError(f"'{name}' must be true or false, got {value!r}")
        return value

    def _parse_clock(self, data: Dict[str, Any]) -> ClockConfig:
        clock = ClockConfig(
            cycles_per_frame=self._parse_int(data.get("cycles_per_frame", ClockConfig.cycles_per_frame)),
            frame_rate=self._parse_int(data.get("frame_rate", ClockConfig.frame_rate)),
        )
        if clock.cycles_per_frame <= 0 or clock.frame_rate <= 0:
            raise ConfigError("cycles_per_frame and frame_rate must be positive")
        return clock

    def _parse_display(self, data: Dict[str, Any]) -> DisplayConfig:
        return DisplayConfig(
            scale=self._parse_int(data.get("scale", DisplayConfig.scale)),
            foreground=str(data.get("foreground", DisplayConfig.foreground)),
            background=str(data.get("background", DisplayConfig.background)),
        )

    def _parse_keymap(self, data: Any) -> Dict[str, int]:
        if data is None:
            return dict(DEFAULT_KEYMAP)
        if not isinstance(data, dict):
            raise ConfigError(f"'keymap' must be a mapping, got {type(data).__name__}")
        keymap = {}
        for name, index in data.items():
            value = self._parse_int(index)
            if not 0 <= value < NUM_KEYS:
                raise ConfigError(f"Key '{name}' maps to {value}, outside 0x0-0xF")
            keymap[str(name).upper()] = value
        return keymap

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")
