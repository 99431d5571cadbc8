"""
End-to-end tests for the WristDo app shell in mock hardware mode
"""

from pathlib import Path

import pytest
import yaml

from wristdo.main import WristDoApp
from wristdo.ui.navigation import Screen

TIMEOUT = 5


@pytest.fixture()
def app(tmp_path: Path):
    config = {
        'display': {'width': 200, 'height': 200, 'mock_output': str(tmp_path / 'display.png')},
        'storage': {'database': str(tmp_path / 'tasks.db')},
        'keyboard': {'enabled': False},
        'buttons': {
            name: {'pin': pin, 'pull': 'up'}
            for name, pin in (('prev', 5), ('next', 6), ('select', 13), ('back', 19))
        },
        'web': {'enabled': False},
        'logging': {'level': 'DEBUG', 'console': True},
    }
    config_path = tmp_path / 'config.yaml'
    config_path.write_text(yaml.safe_dump(config))

    wristdo = WristDoApp(str(config_path))
    wristdo.setup()
    wristdo.manager.refresh().result(timeout=TIMEOUT)
    yield wristdo
    wristdo.stop()


def _settle(app):
    """Wait for every queued store job"""
    return app.manager.refresh().result(timeout=TIMEOUT)


def test_initial_render_written(app, tmp_path):
    assert app.navigation.is_on_screen(Screen.TASK_LIST)
    assert (tmp_path / 'display.png').exists()


def test_add_flow(app):
    app.gpio.trigger_button('select')
    assert app.navigation.is_on_screen(Screen.TASK_INPUT)

    app.input_screen.type_char("Buy milk")
    app.gpio.trigger_button('select')

    assert app.navigation.is_on_screen(Screen.TASK_LIST)
    assert [t.text for t in _settle(app)] == ["Buy milk"]


def test_cancelled_input_adds_nothing(app):
    app.gpio.trigger_button('select')
    app.input_screen.type_char("Walk dog")
    app.gpio.trigger_button('back')

    assert app.navigation.is_on_screen(Screen.TASK_LIST)
    assert _settle(app) == []
    assert app.store.count() == 0


def test_blank_input_adds_nothing(app):
    app.gpio.trigger_button('select')
    app.input_screen.type_char("   ")
    app.gpio.trigger_button('select')

    assert app.navigation.is_on_screen(Screen.TASK_LIST)
    assert _settle(app) == []


def test_delete_flow(app):
    app.manager.add_task("Buy milk")
    app.manager.add_task("Walk dog")
    _settle(app)

    app.gpio.trigger_button('next')
    app.gpio.trigger_button('select')

    assert [t.text for t in _settle(app)] == ["Walk dog"]


def test_navigation_buttons_ignored_while_typing(app):
    app.gpio.trigger_button('select')
    app.gpio.trigger_button('next')
    app.gpio.trigger_button('prev')

    assert app.navigation.is_on_screen(Screen.TASK_INPUT)
    assert app.list_screen.current_index == 0


def test_add_action_opens_input(app):
    app._handle_add()

    assert app.navigation.is_on_screen(Screen.TASK_INPUT)
    assert app.input_screen.active


def test_add_action_ignored_while_typing(app):
    app._handle_add()
    app.input_screen.type_char("Buy")
    app._handle_add()

    assert app.input_screen.text == "Buy", "Second add must not reset the buffer"


def test_delete_action_removes_selected_task(app):
    app.manager.add_task("Buy milk")
    app.manager.add_task("Walk dog")
    _settle(app)

    app._handle_next()
    app._handle_next()
    app._handle_delete()

    assert [t.text for t in _settle(app)] == ["Buy milk"]


def test_delete_action_on_add_row_does_nothing(app):
    app.manager.add_task("Buy milk")
    _settle(app)

    app._handle_delete()

    assert [t.text for t in _settle(app)] == ["Buy milk"]
    assert app.navigation.is_on_screen(Screen.TASK_LIST)


def test_delete_action_ignored_while_typing(app):
    app.manager.add_task("Buy milk")
    _settle(app)
    app._handle_next()
    app._handle_add()

    app._handle_delete()

    assert [t.text for t in _settle(app)] == ["Buy milk"]


def test_raw_keys_type_and_save_a_task(app):
    ecodes = pytest.importorskip("evdev").ecodes
    app._handle_add()

    for char, code in (('o', ecodes.KEY_O), ('k', ecodes.KEY_K)):
        app._handle_raw_key(code, char, {})
    app._handle_raw_key(ecodes.KEY_ENTER, None, {})

    assert app.navigation.is_on_screen(Screen.TASK_LIST)
    assert [t.text for t in _settle(app)] == ["ok"]
