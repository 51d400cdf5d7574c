# src/chip8_tracer/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数と設定ファイルを読み込み、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_tracer.core.errors import EmulatorError
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.config.loader import ConfigLoader
from .main_window import MainWindow

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 emulator and instruction tracer")
    parser.add_argument("rom", nargs="?", help="CHIP-8 ROM image to load at 0x200")
    parser.add_argument("--config", help="YAML system configuration file")
    return parser


# @intent:responsibility コマンドライン引数と設定ファイルから最終的なSystemConfigを決定します。
# @intent:rationale 位置引数のROMは設定ファイルの rom より優先します。
def resolve_config(argv: Optional[List[str]] = None) -> SystemConfig:
    args = build_arg_parser().parse_args(argv)
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.rom:
        config.rom = args.rom
    return config


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = resolve_config(argv)
    except EmulatorError as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error("%s", e)
        return 2

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    app = QApplication(sys.argv[:1])
    try:
        main_win = MainWindow(config)
    except EmulatorError as e:
        logger.error("%s", e)
        return 1
    main_win.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
