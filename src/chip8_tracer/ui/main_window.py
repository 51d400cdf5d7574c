# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
画面・レジスタ・逆アセンブルの各ビューを配置し、QTimerでRunnerを駆動します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QTabWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_tracer.common.types import KeyState
from chip8_tracer.core.errors import CpuFault, EmulatorError
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.display import FrameBuffer
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.loader.loader import RomLoader
from chip8_tracer.debugger.debugger import Debugger
from chip8_tracer.driver.runner import Frontend, Runner
from .display_view import DisplayView
from .register_view import RegisterView
from .code_view import CodeView
from .keymap import KeyTracker

logger = logging.getLogger(__name__)


# @intent:responsibility DisplayViewとKeyTrackerを束ね、RunnerにFrontendとして提供します。
class QtFrontend(Frontend):
    def __init__(self, display_view: DisplayView, key_tracker: KeyTracker):
        self.display_view = display_view
        self.key_tracker = key_tracker
        self.presented_frames = 0

    def poll_input(self) -> KeyState:
        return self.key_tracker.state()

    def present(self, frame_buffer: FrameBuffer) -> None:
        self.display_view.present(frame_buffer)
        self.presented_frames += 1


# @intent:responsibility アプリケーションのメインウィンドウを定義し、エミュレータの実行を制御します。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    実行中はQTimerがframe_rateごとにRunner.run_frame()を呼び出します。
    """
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("CHIP-8 Tracer")
        self.setDockNestingEnabled(True)

        self._config = config or SystemConfig()
        self._rom_path: Optional[str] = None
        self._frame_timer = QTimer(self)
        self._frame_timer.timeout.connect(self._on_frame)

        self.display_view = DisplayView(self._config.display)
        self.setCentralWidget(self.display_view)
        self._create_inspector()
        self._create_toolbar()
        self._create_menus()
        self._set_dark_theme()

        self.sound_label = QLabel("")
        self.statusBar().addPermanentWidget(self.sound_label)

        self._apply_config(self._config)
        self._update_ui_state(False)

    # --- 構築 ---

    # @intent:responsibility 設定からCPU・バス・Runnerを組み立て直し、各ビューを接続します。
    def _apply_config(self, config: SystemConfig) -> None:
        self.cpu, self.bus = SystemBuilder().build_system(config)
        self._config = config
        self._rom_path = config.rom
        self.display_view.configure(config.display)
        self.debugger = Debugger(self.cpu)
        self.frontend = QtFrontend(self.display_view, KeyTracker(config.keymap))
        self.runner = Runner(self.cpu, self.frontend, config.clock)
        self._frame_timer.setInterval(max(1, round(1000 / config.clock.frame_rate)))

        self.register_view.set_cpu(self.cpu)
        self._refresh_views(redisassemble=True)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_file)
        file_menu.addAction(self.load_rom_action)

        self.load_config_action = QAction("Load Config...", self)
        self.load_config_action.triggered.connect(self._load_config_file)
        file_menu.addAction(self.load_config_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setFocusPolicy(Qt.NoFocus)
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self._run)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self._pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset)
        toolbar.addAction(self.reset_action)

    def _create_inspector(self) -> None:
        dock = QDockWidget("Inspector", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        tabs = QTabWidget()
        self.register_view = RegisterView()
        tabs.addTab(self.register_view, "Registers")
        self.code_view = CodeView()
        tabs.addTab(self.code_view, "Disassembly")
        dock.setWidget(tabs)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    def _set_dark_theme(self) -> None:
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor(29, 29, 29))
        palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        palette.setColor(QPalette.Base, QColor(30, 30, 30))
        palette.setColor(QPalette.Text, QColor(224, 224, 224))
        palette.setColor(QPalette.Button, QColor(53, 53, 53))
        palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        QApplication.setPalette(palette)
        self.setStyleSheet("""
            QMainWindow, QToolBar { background-color: #1D1D1D; border: none; }
            QDockWidget::title { text-align: left; background: #101010; padding: 4px; font-weight: bold; }
            QTabWidget::pane { border-top: 2px solid #2A82DA; }
        """)

    # --- 実行制御 ---

    def _update_ui_state(self, is_running: bool) -> None:
        self.load_rom_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.pause_action.setEnabled(is_running)

    @Slot()
    def _run(self) -> None:
        self._update_ui_state(True)
        self.statusBar().showMessage("Running")
        self._frame_timer.start()

    @Slot()
    def _pause(self) -> None:
        self._frame_timer.stop()
        self._update_ui_state(False)
        self.statusBar().showMessage(f"Paused after {self.runner.frame_count} frames")
        self._refresh_views()

    # @intent:responsibility 1命令だけ実行し、描画フラグが立っていれば画面も更新します。
    @Slot()
    def _step(self) -> None:
        try:
            snapshot = self.debugger.step_instruction()
        except CpuFault as fault:
            self._report_fault(fault)
            return
        if self.cpu.frame_buffer.draw_flag:
            self.frontend.present(self.cpu.frame_buffer)
        self.statusBar().showMessage(snapshot.metadata.symbol_info)
        self._refresh_views()

    # @intent:responsibility CPUを初期化し、現在のROMを読み込み直します。
    @Slot()
    def _reset(self) -> None:
        self.cpu.reset()
        if self._rom_path:
            try:
                RomLoader().load_rom(self._rom_path, self.bus)
            except EmulatorError as e:
                self._frame_timer.stop()
                self._update_ui_state(False)
                QMessageBox.critical(self, "Reset", str(e))
        self.frontend.present(self.cpu.frame_buffer)
        self._refresh_views()

    # @intent:responsibility QTimerから呼ばれ、1フレーム分エミュレーションを進めます。
    @Slot()
    def _on_frame(self) -> None:
        try:
            self.runner.run_frame()
        except CpuFault as fault:
            self._report_fault(fault)
            return
        self.sound_label.setText("SOUND" if self.cpu.get_state().sound_active else "")

    def _report_fault(self, fault: CpuFault) -> None:
        self._frame_timer.stop()
        self._update_ui_state(False)
        logger.error("CPU fault: %s", fault)
        self._refresh_views()
        QMessageBox.critical(self, "CPU Fault", str(fault))

    def _refresh_views(self, redisassemble: bool = False) -> None:
        self.register_view.update_registers()
        if redisassemble:
            self.code_view.refresh(self.cpu)
        else:
            self.code_view.update_pc(self.cpu.get_state().pc)
        self.display_view.present(self.cpu.frame_buffer)
        self.sound_label.setText("SOUND" if self.cpu.get_state().sound_active else "")

    # --- ファイル操作 ---

    @Slot()
    def _load_rom_file(self) -> None:
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if not file_name:
            return
        # 以前のROMが残らないようにメモリを初期化してからロードする
        self.cpu.reset()
        try:
            loaded = RomLoader().load_rom(file_name, self.bus)
        except EmulatorError as e:
            QMessageBox.critical(self, "Load ROM", str(e))
            self._rom_path = None
        else:
            self._rom_path = file_name
            self.statusBar().showMessage(f"Loaded {file_name} ({loaded} bytes)")
        self._refresh_views(redisassemble=True)

    @Slot()
    def _load_config_file(self) -> None:
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if not file_name:
            return
        try:
            config = ConfigLoader().load_from_file(file_name)
            self._apply_config(config)
        except EmulatorError as e:
            QMessageBox.critical(self, "Load Config", str(e))
            return
        self.statusBar().showMessage(f"Loaded config {file_name}")

    # --- キー入力 ---

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.isAutoRepeat() or not self.frontend.key_tracker.press(event.key()):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        if event.isAutoRepeat() or not self.frontend.key_tracker.release(event.key()):
            super().keyReleaseEvent(event)

    def focusOutEvent(self, event) -> None:
        self.frontend.key_tracker.clear()
        super().focusOutEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._frame_timer.stop()
        event.accept()
