from soulcast.input import (
    SCANCODE_UP,
    InputButton,
    InputButtons,
    InputState,
)


def test_button_hold_cycle():
    b = InputButton()
    b.set_held()
    assert (b.press, b.hold, b.down) == (True, True, True)
    b.set_held()
    assert (b.press, b.hold) == (False, True)
    b.set_released()
    assert (b.press, b.hold, b.down) == (False, False, False)


def test_up_is_mapped_to_its_scancode():
    state = InputState()
    assert state.buttons[InputButtons.UP].key_mapping == SCANCODE_UP


def test_press_then_hold_then_release():
    state = InputState()
    state.process({SCANCODE_UP: True})
    assert state.is_button_down(InputButtons.UP)
    assert state.is_button_pressed(InputButtons.UP)

    state.process({SCANCODE_UP: True})
    assert state.is_button_down(InputButtons.UP)
    assert not state.is_button_pressed(InputButtons.UP)

    state.process({})
    assert not state.is_button_down(InputButtons.UP)
    assert not state.is_button_pressed(InputButtons.UP)


def test_any_latches_on_first_press():
    state = InputState()
    state.process({SCANCODE_UP: True})
    assert state.is_button_down(InputButtons.ANY)
    state.process({})
    assert state.is_button_down(InputButtons.ANY)


def test_unmapped_buttons_stay_released():
    state = InputState()
    state.process([False] * 512)
    assert not state.is_button_down(InputButtons.A)
    assert not state.is_button_down(InputButtons.ANY)


def test_mouse_position_truncated():
    state = InputState()
    state.process({}, (10.7, 3.2))
    assert (state.mouse_x, state.mouse_y) == (10, 3)
    state.process({})
    assert (state.mouse_x, state.mouse_y) == (10, 3)


def test_clear_releases_everything():
    state = InputState()
    state.process({SCANCODE_UP: True})
    state.clear()
    assert not any(b.down for b in state.buttons)