"""End-to-end behaviour of the fetch-decode-execute cycle."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from chip8vm import (
    AddressOutOfRange,
    ImageTooLarge,
    InvalidOpcode,
    MachineConfig,
    StackOverflow,
    StackUnderflow,
)
from chip8vm.constants import FONT_SET, FONT_START, MAX_PROGRAM_SIZE, PROGRAM_START

from .helpers import assemble


def test_reset_state_and_font(make_interpreter) -> None:
    interp = make_interpreter()

    assert interp.regs.pc == PROGRAM_START
    assert interp.regs.sp == 0
    assert interp.regs.i == 0
    assert interp.regs.v == [0] * 16
    assert interp.memory.read_block(FONT_START, len(FONT_SET)) == FONT_SET
    assert not interp.framebuffer.dirty
    assert interp.framebuffer.lit_pixels() == 0


def test_fetch_is_big_endian_and_advances_pc(make_interpreter) -> None:
    interp = make_interpreter(0x602A)

    interp.cycle()

    assert interp.opcode == 0x602A
    assert interp.regs[0] == 0x2A
    assert interp.regs.pc == 0x202
    assert interp.cycle_count == 1


def test_skip_adds_four_net(make_interpreter) -> None:
    interp = make_interpreter(0x6005, 0x3005, 0x6101, 0x6202)

    interp.cycle()
    interp.cycle()

    assert interp.regs.pc == 0x206
    interp.cycle()
    assert interp.regs[2] == 0x02
    assert interp.regs[1] == 0x00


def test_call_then_return_round_trips(make_interpreter) -> None:
    # 0x200 CALL 0x206 / 0x202 LD V1,1 / 0x204 JP 0x204 / 0x206 RET
    interp = make_interpreter(0x2206, 0x6101, 0x1204, 0x00EE)

    interp.cycle()
    assert interp.regs.pc == 0x206
    assert interp.regs.call_stack() == [0x202]

    interp.cycle()
    assert interp.regs.pc == 0x202
    assert interp.regs.sp == 0


def test_cls_then_jump_loops(make_interpreter) -> None:
    interp = make_interpreter(0x00E0, 0x1200)
    interp.framebuffer.set_pixel(3, 4, 1)
    interp.framebuffer.acknowledge()

    interp.cycle()
    assert interp.regs.pc == 0x202
    assert interp.framebuffer.lit_pixels() == 0
    assert interp.framebuffer.dirty

    interp.cycle()
    assert interp.regs.pc == 0x200

    interp.run(10)
    assert interp.regs.pc in (0x200, 0x202)


def test_load_and_add_immediate(make_interpreter) -> None:
    interp = make_interpreter(0x6005, 0x7003)

    interp.run(2)

    assert interp.regs[0] == 8


def test_font_lookup_for_zero_points_at_glyph_base(make_interpreter) -> None:
    interp = make_interpreter(0xA300, 0xF029)

    interp.run(2)

    assert interp.regs.i == 0x50


def test_seventeenth_call_overflows_stack(make_interpreter) -> None:
    interp = make_interpreter(0x2200)

    interp.run(16)
    assert interp.regs.sp == 16

    with pytest.raises(StackOverflow):
        interp.cycle()
    # Nothing was pushed and the PC still points at the faulting CALL.
    assert interp.regs.sp == 16
    assert interp.regs.pc == 0x200
    assert interp.regs.call_stack() == [0x202] * 16


def test_return_without_call_underflows(make_interpreter) -> None:
    interp = make_interpreter(0x00EE)

    with pytest.raises(StackUnderflow):
        interp.cycle()
    assert interp.regs.pc == 0x200


def test_key_wait_reexecutes_until_key_pressed(make_interpreter) -> None:
    interp = make_interpreter(0xF30A, 0x6101)

    for _ in range(5):
        interp.cycle()
        assert interp.regs.pc == 0x200

    interp.keypad.press(0xB)
    interp.keypad.press(0x7)
    interp.cycle()

    assert interp.regs[3] == 0x7
    assert interp.regs.pc == 0x202


def test_key_wait_keeps_timers_running(make_interpreter, per_cycle_config) -> None:
    interp = make_interpreter(0x6005, 0xF015, 0xF00A, config=per_cycle_config)

    interp.run(2)
    assert interp.timers.delay == 4
    interp.run(3)
    assert interp.timers.delay == 1
    assert interp.regs.pc == 0x204


def test_invalid_opcode_is_reported_not_fatal(make_interpreter, caplog) -> None:
    interp = make_interpreter(0x6001, 0x0123)
    interp.cycle()

    with caplog.at_level(logging.ERROR, logger="chip8vm.interpreter"):
        with pytest.raises(InvalidOpcode) as excinfo:
            interp.cycle()

    assert excinfo.value.opcode == 0x0123
    assert excinfo.value.pc == 0x202
    assert interp.regs.pc == 0x202
    assert "0123" in caplog.text


@pytest.mark.parametrize("opcode", [0x0123, 0x00E1, 0x8008, 0xE09F, 0xE1A2, 0xF000, 0xF0FF])
def test_unassigned_encodings_raise(make_interpreter, opcode: int) -> None:
    interp = make_interpreter(opcode)

    with pytest.raises(InvalidOpcode):
        interp.cycle()


def test_words_sharing_a_slot_execute_its_handler(make_interpreter) -> None:
    # 0x0120 and 0x0000 sit in the CLS slot, 0x01EE in the RET slot.
    interp = make_interpreter(0x2206, 0x0000, 0x1202, 0x0120, 0x01EE)
    interp.framebuffer.set_pixel(0, 0, 1)

    interp.run(3)
    assert interp.framebuffer.lit_pixels() == 0
    assert interp.regs.pc == 0x202
    assert interp.regs.sp == 0

    interp.framebuffer.set_pixel(5, 5, 1)
    interp.cycle()
    assert interp.framebuffer.lit_pixels() == 0


@pytest.mark.parametrize("opcode, pressed, skipped", [
    (0xE1AE, True, True),
    (0xE1AE, False, False),
    (0xE191, True, False),
    (0xE191, False, True),
])
def test_key_skips_resolve_on_low_nibble(make_interpreter, opcode, pressed, skipped) -> None:
    interp = make_interpreter(opcode)
    interp.regs[1] = 0x4
    interp.keypad.set(0x4, pressed)

    interp.cycle()

    assert interp.regs.pc == (0x204 if skipped else 0x202)


def test_fetch_past_end_of_memory(make_interpreter) -> None:
    interp = make_interpreter(0x1FFF)
    interp.cycle()

    with pytest.raises(AddressOutOfRange):
        interp.cycle()
    assert interp.regs.pc == 0xFFF


def test_load_rejects_oversize_image_before_mutation(make_interpreter) -> None:
    interp = make_interpreter(0x6042)
    interp.cycle()

    with pytest.raises(ImageTooLarge) as excinfo:
        interp.load(bytes(MAX_PROGRAM_SIZE + 1))

    assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
    assert excinfo.value.limit == 3584
    assert interp.regs[0] == 0x42
    assert interp.regs.pc == 0x202


def test_load_accepts_image_filling_memory(make_interpreter) -> None:
    interp = make_interpreter()
    image = bytes([0xAB]) * MAX_PROGRAM_SIZE

    interp.load(image)

    assert interp.memory.read_byte(0xFFF) == 0xAB
    assert interp.memory.read_byte(PROGRAM_START) == 0xAB


def test_load_resets_previous_program(make_interpreter) -> None:
    interp = make_interpreter(0x6042, 0xA123, 0x00E0)
    interp.run(3)
    interp.keypad.press(1)

    interp.load(assemble([0x1200]))

    assert interp.regs[0] == 0
    assert interp.regs.i == 0
    assert interp.regs.pc == PROGRAM_START
    assert interp.keypad.pressed_keys() == ()
    assert not interp.framebuffer.dirty
    assert interp.memory.read_byte(0x202) == 0


def test_load_file(make_interpreter, tmp_path) -> None:
    rom = tmp_path / "PROGRAM"
    rom.write_bytes(assemble([0x6007]))
    interp = make_interpreter()

    interp.load_file(rom)
    interp.cycle()

    assert interp.regs[0] == 7


def test_random_with_zero_mask_is_zero(make_interpreter) -> None:
    interp = make_interpreter(*([0xC500] * 32))

    for _ in range(32):
        interp.cycle()
        assert interp.regs[5] == 0


def test_random_sequence_is_reproducible(make_interpreter) -> None:
    program = [0xC0FF, 0xC1FF, 0xC2FF, 0xC3FF]
    first = make_interpreter(*program, seed=99)
    second = make_interpreter(*program, seed=99)

    first.run(4)
    second.run(4)

    assert first.regs.v[:4] == second.regs.v[:4]


def test_config_seed_drives_default_rng() -> None:
    from chip8vm import Interpreter

    a = Interpreter(MachineConfig(seed=5))
    b = Interpreter(MachineConfig(seed=5))
    image = assemble([0xC0FF, 0xC1FF])
    a.load(image)
    b.load(image)

    a.run(2)
    b.run(2)

    assert a.regs.v[:2] == b.regs.v[:2]


def test_draw_glyph_program(make_interpreter) -> None:
    # LD V0,0xA / LD F,V0 / LD V1,2 / LD V2,3 / DRW V1,V2,5
    interp = make_interpreter(0x600A, 0xF029, 0x6102, 0x6203, 0xD125)

    interp.run(5)

    grid = interp.framebuffer.get_display_buffer()
    glyph_a = FONT_SET[0xA * 5 : 0xA * 5 + 5]
    for row, byte in enumerate(glyph_a):
        expected = [(byte >> (7 - col)) & 1 for col in range(8)]
        assert list(grid[3 + row, 2:10]) == expected
    assert interp.regs.vf == 0
    assert interp.framebuffer.dirty


def test_get_cpu_state_reports_registers(make_interpreter) -> None:
    interp = make_interpreter(0x6A11, 0x2206, 0x0000, 0x6B22, 0xF0FF)

    interp.run(3)
    state = interp.get_cpu_state()

    assert state["pc"] == 0x208
    assert state["v"][0xA] == 0x11
    assert state["v"][0xB] == 0x22
    assert state["stack"] == [0x204]
    assert state["cycles"] == 3
    assert interp.current_instruction() == "DW 0xF0FF"


def test_sound_active_follows_sound_timer(make_interpreter, per_cycle_config) -> None:
    interp = make_interpreter(0x6002, 0xF018, 0x1204, config=per_cycle_config)

    interp.run(2)
    assert interp.sound_active
    interp.cycle()
    assert not interp.sound_active


def test_trace_logging_disassembles(make_interpreter, caplog) -> None:
    interp = make_interpreter(0x6005, config=MachineConfig(trace=True))

    with caplog.at_level(logging.DEBUG, logger="chip8vm.interpreter"):
        interp.cycle()

    assert "LD V0, 0x05" in caplog.text


def test_framebuffer_grid_is_independent_copy(make_interpreter) -> None:
    interp = make_interpreter()
    grid = interp.framebuffer.get_display_buffer()

    grid[0, 0] = 1

    assert np.count_nonzero(interp.framebuffer.display_buffer) == 0


def test_wall_clock_timers_follow_elapsed_time(make_interpreter, fake_clock) -> None:
    config = MachineConfig(timer_hz=4)
    # LD V0,10 / LD DT,V0 / JP 0x204
    interp = make_interpreter(0x600A, 0xF015, 0x1204, config=config)

    interp.run(50)
    assert interp.timers.delay == 10

    fake_clock.advance(0.25)
    interp.cycle()
    assert interp.timers.delay == 9


def test_wall_clock_timers_tick_once_per_cycle_after_stall(
    make_interpreter, fake_clock
) -> None:
    config = MachineConfig(timer_hz=4)
    interp = make_interpreter(0x600A, 0xF015, 0x1204, config=config)
    interp.run(2)

    fake_clock.advance(1.0)
    interp.cycle()
    assert interp.timers.delay == 9
    # Only one more period is carried over from the stall.
    interp.run(5)
    assert interp.timers.delay == 8
