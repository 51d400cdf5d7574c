# src/chip8_tracer/arch/chip8/constants.py
"""
CHIP-8 仮想マシンの固定パラメータ。
"""

# メモリ
MEMORY_SIZE = 0x1000          # 4KB
FONT_START_ADDRESS = 0x050    # グリフテーブルの配置先
PROGRAM_START_ADDRESS = 0x200 # プログラムのロード先 (PC初期値)
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START_ADDRESS  # 3584 bytes

# レジスタ・スタック
NUM_REGISTERS = 16
FLAG_REGISTER = 0xF           # VF: キャリー/ボロー/衝突フラグ
STACK_DEPTH = 16

# 入力
NUM_KEYS = 16

# 表示
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
SPRITE_WIDTH = 8

# 命令
INSTRUCTION_LENGTH = 2
TIMER_FREQUENCY = 60          # Hz
