# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer
    # @intent:rationale 初期値は0x0000とする。具体的な初期値（CHIP-8ではPC=0x200）はアーキテクチャ側で上書きされる。

    # @intent:responsibility Snapshotに格納するための独立したコピーを返します。
    # @intent:rationale 可変リストを持つサブクラスはこのメソッドをオーバーライドし、深いコピーを返す必要があります。
    def copy(self) -> 'CpuState':
        from dataclasses import replace
        return replace(self)
