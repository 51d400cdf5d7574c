# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
CHIP-8 命令マップとデコード/実行ロジック。

デコードは上位4bit (ファミリー) で分岐し、0/8/E/F ファミリーのみサブセレクタを参照します。
"""
from typing import Callable, Dict, List, Optional, Tuple

from chip8_tracer.core.errors import UnknownOpcodeFault
from chip8_tracer.arch.chip8.instructions.base import Opcode, Instruction, ExecutionContext
from chip8_tracer.arch.chip8.instructions import control, alu, load, draw

# Operand Formatter Type: (x, y, n, kk, nnn) -> operands
OperandFunc = Callable[[int, int, int, int, int], List[str]]
# Execution Function Type
ExecFunc = Callable[[ExecutionContext, Instruction], None]

# Opcode Entry: (Mnemonic, Operand Formatter, Execution Function)
OpcodeEntry = Tuple[str, OperandFunc, ExecFunc]

# --- Operand Formatters ---

def _none(x, y, n, kk, nnn): return []
def _addr(x, y, n, kk, nnn): return [f"${nnn:03X}"]
def _vx(x, y, n, kk, nnn): return [f"V{x:X}"]
def _vx_byte(x, y, n, kk, nnn): return [f"V{x:X}", f"#${kk:02X}"]
def _vx_vy(x, y, n, kk, nnn): return [f"V{x:X}", f"V{y:X}"]
def _i_addr(x, y, n, kk, nnn): return ["I", f"${nnn:03X}"]
def _v0_addr(x, y, n, kk, nnn): return ["V0", f"${nnn:03X}"]
def _vx_vy_n(x, y, n, kk, nnn): return [f"V{x:X}", f"V{y:X}", f"{n}"]
def _vx_dt(x, y, n, kk, nnn): return [f"V{x:X}", "DT"]
def _vx_k(x, y, n, kk, nnn): return [f"V{x:X}", "K"]
def _dt_vx(x, y, n, kk, nnn): return ["DT", f"V{x:X}"]
def _st_vx(x, y, n, kk, nnn): return ["ST", f"V{x:X}"]
def _i_vx(x, y, n, kk, nnn): return ["I", f"V{x:X}"]
def _f_vx(x, y, n, kk, nnn): return ["F", f"V{x:X}"]
def _b_vx(x, y, n, kk, nnn): return ["B", f"V{x:X}"]
def _mem_vx(x, y, n, kk, nnn): return ["[I]", f"V{x:X}"]
def _vx_mem(x, y, n, kk, nnn): return [f"V{x:X}", "[I]"]

OPCODE_MAP: Dict[Opcode, OpcodeEntry] = {
    # --- Control ---
    Opcode.CLS:         ("CLS",  _none,     control.cls),
    Opcode.RET:         ("RET",  _none,     control.ret),
    Opcode.SYS:         ("SYS",  _addr,     control.sys_),
    Opcode.JP:          ("JP",   _addr,     control.jp),
    Opcode.CALL:        ("CALL", _addr,     control.call),
    Opcode.JP_V0:       ("JP",   _v0_addr,  control.jp_v0),
    Opcode.SE_VX_BYTE:  ("SE",   _vx_byte,  control.se_vx_byte),
    Opcode.SNE_VX_BYTE: ("SNE",  _vx_byte,  control.sne_vx_byte),
    Opcode.SE_VX_VY:    ("SE",   _vx_vy,    control.se_vx_vy),
    Opcode.SNE_VX_VY:   ("SNE",  _vx_vy,    control.sne_vx_vy),
    Opcode.SKP:         ("SKP",  _vx,       control.skp),
    Opcode.SKNP:        ("SKNP", _vx,       control.sknp),

    # --- ALU ---
    Opcode.ADD_VX_BYTE: ("ADD",  _vx_byte,  alu.add_vx_byte),
    Opcode.OR:          ("OR",   _vx_vy,    alu.or_),
    Opcode.AND:         ("AND",  _vx_vy,    alu.and_),
    Opcode.XOR:         ("XOR",  _vx_vy,    alu.xor),
    Opcode.ADD_VX_VY:   ("ADD",  _vx_vy,    alu.add_vx_vy),
    Opcode.SUB:         ("SUB",  _vx_vy,    alu.sub),
    Opcode.SHR:         ("SHR",  _vx_vy,    alu.shr),
    Opcode.SUBN:        ("SUBN", _vx_vy,    alu.subn),
    Opcode.SHL:         ("SHL",  _vx_vy,    alu.shl),
    Opcode.RND:         ("RND",  _vx_byte,  alu.rnd),

    # --- Load / Store ---
    Opcode.LD_VX_BYTE:  ("LD",   _vx_byte,  load.ld_vx_byte),
    Opcode.LD_VX_VY:    ("LD",   _vx_vy,    load.ld_vx_vy),
    Opcode.LD_I_ADDR:   ("LD",   _i_addr,   load.ld_i_addr),
    Opcode.LD_VX_DT:    ("LD",   _vx_dt,    load.ld_vx_dt),
    Opcode.LD_VX_K:     ("LD",   _vx_k,     load.ld_vx_k),
    Opcode.LD_DT_VX:    ("LD",   _dt_vx,    load.ld_dt_vx),
    Opcode.LD_ST_VX:    ("LD",   _st_vx,    load.ld_st_vx),
    Opcode.ADD_I_VX:    ("ADD",  _i_vx,     load.add_i_vx),
    Opcode.LD_F_VX:     ("LD",   _f_vx,     load.ld_f_vx),
    Opcode.LD_B_VX:     ("LD",   _b_vx,     load.ld_b_vx),
    Opcode.LD_MEM_VX:   ("LD",   _mem_vx,   load.ld_mem_vx),
    Opcode.LD_VX_MEM:   ("LD",   _vx_mem,   load.ld_vx_mem),

    # --- Display ---
    Opcode.DRW:         ("DRW",  _vx_vy_n,  draw.drw),
}

# ファミリー (上位4bit) だけで命令が決まるもの
# @intent:note 5xy0/9xy0 は下位4bitを参照しない (5xy1 なども SE/SNE として扱う)。
_FAMILY_MAP: Dict[int, Opcode] = {
    0x1: Opcode.JP,
    0x2: Opcode.CALL,
    0x3: Opcode.SE_VX_BYTE,
    0x4: Opcode.SNE_VX_BYTE,
    0x5: Opcode.SE_VX_VY,
    0x6: Opcode.LD_VX_BYTE,
    0x7: Opcode.ADD_VX_BYTE,
    0x9: Opcode.SNE_VX_VY,
    0xA: Opcode.LD_I_ADDR,
    0xB: Opcode.JP_V0,
    0xC: Opcode.RND,
    0xD: Opcode.DRW,
}

# 8xyN: 下位4bitで選択
_ALU_MAP: Dict[int, Opcode] = {
    0x0: Opcode.LD_VX_VY,
    0x1: Opcode.OR,
    0x2: Opcode.AND,
    0x3: Opcode.XOR,
    0x4: Opcode.ADD_VX_VY,
    0x5: Opcode.SUB,
    0x6: Opcode.SHR,
    0x7: Opcode.SUBN,
    0xE: Opcode.SHL,
}

# ExKK: 下位8bitで選択
_KEY_MAP: Dict[int, Opcode] = {
    0x9E: Opcode.SKP,
    0xA1: Opcode.SKNP,
}

# FxKK: 下位8bitで選択
_MISC_MAP: Dict[int, Opcode] = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I_VX,
    0x29: Opcode.LD_F_VX,
    0x33: Opcode.LD_B_VX,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}

# @intent:responsibility 命令語から命令種別を決定する。該当しなければNone。
def match_opcode(word: int) -> Optional[Opcode]:
    family = (word >> 12) & 0xF
    if family == 0x0:
        if word == 0x00E0:
            return Opcode.CLS
        if word == 0x00EE:
            return Opcode.RET
        return Opcode.SYS
    if family == 0x8:
        return _ALU_MAP.get(word & 0x000F)
    if family == 0xE:
        return _KEY_MAP.get(word & 0x00FF)
    if family == 0xF:
        return _MISC_MAP.get(word & 0x00FF)
    return _FAMILY_MAP.get(family)

# @intent:responsibility 命令語をデコードし、Instructionを返す。
# @intent:post-condition 未定義の命令語の場合はUnknownOpcodeFaultを送出する。
def decode_opcode(word: int, address: int) -> Instruction:
    kind = match_opcode(word)
    if kind is None:
        raise UnknownOpcodeFault(word, address)

    x = (word >> 8) & 0xF
    y = (word >> 4) & 0xF
    n = word & 0xF
    kk = word & 0xFF
    nnn = word & 0xFFF

    mnemonic, operand_func, _ = OPCODE_MAP[kind]
    return Instruction(
        opcode_hex=f"{word:04X}",
        mnemonic=mnemonic,
        operands=operand_func(x, y, n, kk, nnn),
        kind=kind,
        address=address,
        word=word,
        x=x, y=y, n=n, kk=kk, nnn=nnn,
    )

# @intent:responsibility 命令種別に対応する実行関数を呼び出す。
def execute_instruction(instruction: Instruction, ctx: ExecutionContext) -> None:
    _, _, exec_func = OPCODE_MAP[instruction.kind]
    exec_func(ctx, instruction)
