# chip8_tracer/core/errors.py
"""
エラー型の定義

エミュレータが外部（ドライバやUI）に通知する例外の階層を定義します。
いずれもコア内部では握りつぶさず、呼び出し元が中断・リセット・報告を判断します。
"""
from typing import Optional


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラスです。
class EmulatorError(Exception):
    pass


# @intent:responsibility ROMイメージが読めない、またはサイズが一致しない場合に送出されます。
class LoadError(EmulatorError):
    pass


# @intent:responsibility システム構成ファイルの内容が不正な場合に送出されます。
class ConfigError(EmulatorError, ValueError):
    pass


# @intent:responsibility 命令実行中の回復不能な障害を表します。
class CpuFault(EmulatorError):
    """
    命令実行中に発生した回復不能な障害。
    address/word は障害を起こした命令のアドレスと命令語です。
    送出箇所で不明な場合はNoneとし、CPUが実行中の命令情報で補完します。
    """
    def __init__(self, message: str, address: Optional[int] = None, word: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.word = word


# @intent:responsibility 既知のパターンに一致しない命令語を検出した場合に送出されます。
class UnknownOpcodeFault(CpuFault):
    def __init__(self, word: int, address: Optional[int] = None):
        where = f" at {address:#05x}" if address is not None else ""
        super().__init__(f"Unknown opcode {word:04X}{where}", address=address, word=word)


class StackOverflowFault(CpuFault):
    pass


class StackUnderflowFault(CpuFault):
    pass


# @intent:responsibility アドレス空間外へのバスアクセスを表します。
# @intent:rationale 既存の境界チェック（IndexError）との互換性のため、IndexErrorも継承します。
class MemoryFault(CpuFault, IndexError):
    def __init__(self, message: str, memory_address: int):
        super().__init__(message)
        self.memory_address = memory_address


# @intent:responsibility キー番号として0x0-0xFの範囲外の値が参照された場合に送出されます。
class KeyIndexFault(CpuFault):
    pass
