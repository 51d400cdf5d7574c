# chip8_tracer/driver/runner.py
"""
ドライバモジュール。

CPUを一定のフレームレートで駆動し、入力のポーリングと画面の提示を
注入されたFrontendに委譲する責務を負います。
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from chip8_tracer.common.types import KeyState
from chip8_tracer.core.errors import CpuFault
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.arch.chip8.quirks import TimerMode
from chip8_tracer.config.models import ClockConfig

logger = logging.getLogger(__name__)


# @intent:responsibility 表示・入力アダプタのインターフェースを定義します。
# @intent:rationale コアはウィンドウなどのグローバル状態を参照せず、このインターフェースのみを介して外部とやり取りします。
class Frontend(ABC):
    @abstractmethod
    def poll_input(self) -> KeyState:
        """現在の16キーの押下状態を返します。"""
        pass

    @abstractmethod
    def present(self, frame_buffer: FrameBuffer) -> None:
        """画素バッファを表示します。描画フラグが立ったフレームでのみ呼ばれます。"""
        pass

    @property
    def quit_requested(self) -> bool:
        return False


# @intent:responsibility フレーム単位でCPUを実行し、タイマーと画面更新を管理します。
class Runner:
    """
    1フレーム = 入力ポーリング1回 + cycles_per_frame 命令 + (clockedモードなら) タイマー減算1回。
    """
    def __init__(self, cpu: Chip8Cpu, frontend: Frontend, clock: Optional[ClockConfig] = None):
        self._cpu = cpu
        self._frontend = frontend
        self._clock = clock or ClockConfig()
        self._running = False
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def running(self) -> bool:
        return self._running

    # @intent:responsibility 1フレーム分の処理を行い、画面を提示したかどうかを返します。
    # @intent:rationale 描画フラグは命令ごとにクリアされるため、フレーム内で一度でも立ったかを記録します。
    def run_frame(self) -> bool:
        self._cpu.set_keys(self._frontend.poll_input())

        drawn = False
        for _ in range(self._clock.cycles_per_frame):
            self._cpu.step()
            drawn = drawn or self._cpu.frame_buffer.draw_flag

        if self._cpu.quirks.timer_mode is TimerMode.CLOCKED:
            self._cpu.tick_timers()

        if drawn:
            self._frontend.present(self._cpu.frame_buffer)
        self._frame_count += 1
        return drawn

    # @intent:responsibility 終了要求・stop()・障害のいずれかまでフレームを繰り返します。
    # @intent:post-condition CpuFaultはログに記録した上で呼び出し元に再送出します。
    def run(self, max_frames: Optional[int] = None, paced: bool = True) -> None:
        self._running = True
        frame_period = 1.0 / self._clock.frame_rate
        next_frame = time.perf_counter()
        logger.info("Run started (%d cycles/frame @ %d Hz)", self._clock.cycles_per_frame, self._clock.frame_rate)
        try:
            while self._running and not self._frontend.quit_requested:
                if max_frames is not None and self._frame_count >= max_frames:
                    break
                self.run_frame()
                if paced:
                    next_frame += frame_period
                    delay = next_frame - time.perf_counter()
                    if delay > 0:
                        time.sleep(delay)
                    else:
                        next_frame = time.perf_counter()
        except CpuFault as fault:
            logger.error("CPU fault at %s: %s", self._format_address(fault.address), fault)
            raise
        finally:
            self._running = False
            logger.info("Run stopped after %d frames", self._frame_count)

    def stop(self) -> None:
        self._running = False

    @staticmethod
    def _format_address(address: Optional[int]) -> str:
        return f"{address:#05x}" if address is not None else "?"
