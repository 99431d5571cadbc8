"""
WristDo - Main Application
Event-driven to-do list for a wrist-worn e-paper device
"""

import sys
import os
import logging
import signal
import threading
from typing import Optional

from wristdo.config import Config
from wristdo.display.display_driver import DisplayDriver
from wristdo.hardware.gpio_handler import GPIOHandler
from wristdo.hardware.keyboard_handler import KeyboardHandler
from wristdo.ui.navigation import NavigationManager, Screen
from wristdo.apps.todo import TaskStore, TodoManager, ToDoScreen, TextInputScreen


DEFAULT_CONFIG = os.path.join(os.path.dirname(__file__), '../config/config.yaml')


class WristDoApp:
    """
    Main To-Do application
    """

    def __init__(self, config_path: str):
        """
        Initialize application

        Args:
            config_path: Path to config.yaml
        """
        self.config = Config(config_path)

        self._setup_logging()
        self.logger = logging.getLogger(__name__)
        self.logger.info("WristDo starting...")

        width = self.config.get('display.width', 200)
        height = self.config.get('display.height', 200)
        font_size = self.config.get('todo.font_size', 14)

        self.display = DisplayDriver(
            width, height,
            self.config.get('display.rotation', 0),
            mock_output=self.config.get('display.mock_output', 'output/display_output.png')
        )
        self.display.set_full_refresh_interval(self.config.get('display.full_refresh_interval', 10))

        self.gpio = GPIOHandler(self.config.get('buttons', {}))
        self.keyboard: Optional[KeyboardHandler] = None
        if self.config.get('keyboard.enabled', True):
            self.keyboard = KeyboardHandler(self.config.get('keyboard.device_pattern'))

        self.navigation = NavigationManager(Screen.TASK_LIST)

        # Store handle is owned here and handed to the manager
        self.store = TaskStore(self.config.get('storage.database', 'data/tasks.db'))
        self.manager = TodoManager(self.store, on_change=self._on_tasks_changed)

        self.list_screen = ToDoScreen(
            self.manager,
            width=width,
            height=height,
            items_per_page=self.config.get('todo.items_per_page', 3),
            font_size=font_size
        )
        self.input_screen = TextInputScreen(
            width=width,
            height=height,
            font_size=font_size,
            max_length=self.config.get('todo.max_text_length', 120)
        )

        self.running = False
        self.web_server = None
        self._render_lock = threading.RLock()

    def _setup_logging(self):
        """Configure logging"""
        log_level = getattr(logging, str(self.config.get('logging.level', 'INFO')).upper(), logging.INFO)
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        handlers = []

        if self.config.get('logging.console', True):
            handlers.append(logging.StreamHandler())

        log_file = self.config.get('logging.file')
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=handlers or None
        )

    def setup(self):
        """Initialize hardware, register input and load the task list"""
        self.logger.info("Initializing hardware...")
        self.display.initialize()
        self._register_gpio_callbacks()
        self._register_keyboard_callbacks()

        if self.config.get('web.enabled', False):
            from wristdo.web.webserver import WristDoWebServer
            web_port = self.config.get('web.port', 5000)
            self.web_server = WristDoWebServer(
                self.manager, web_port,
                max_length=self.config.get('todo.max_text_length', 120)
            )
            self.web_server.run()
            self.logger.info(f"Remote entry available at http://<device-ip>:{web_port}")

        self.running = True

        # Shows "Loading..." until the first store read lands
        self._render_current_screen(use_partial=False)
        self.manager.refresh()

    def start(self):
        """Start the application and wait for input"""
        try:
            self.setup()
            self.logger.info("WristDo started successfully!")

            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)

            # Button and keyboard threads drive everything from here
            signal.pause()

        except KeyboardInterrupt:
            self.logger.info("Received interrupt signal")
            self.stop()
        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            self.stop()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        self.logger.info(f"Received signal {signum}")
        self.stop()
        sys.exit(0)

    def stop(self):
        """Clean shutdown"""
        self.logger.info("Shutting down...")
        self.running = False

        if self.keyboard:
            self.keyboard.stop()

        self.manager.close()
        self.store.close()
        self.display.cleanup()
        self.gpio.cleanup()

        self.logger.info("WristDo stopped")

    def _register_gpio_callbacks(self):
        """Register button callbacks for the buttons present in config"""
        handlers = {
            'next': self._handle_next,
            'prev': self._handle_prev,
            'select': self._handle_select,
            'back': self._handle_back,
        }
        for name, handler in handlers.items():
            if self.gpio.has_button(name):
                self.gpio.register_callback(name, handler)

        self.logger.info("GPIO callbacks registered")

    def _register_keyboard_callbacks(self):
        if not self.keyboard:
            return

        self.keyboard.register_callback('next', self._handle_next)
        self.keyboard.register_callback('prev', self._handle_prev)
        self.keyboard.register_callback('select', self._handle_select)
        self.keyboard.register_callback('back', self._handle_back)
        self.keyboard.register_callback('add', self._handle_add)
        self.keyboard.register_callback('delete', self._handle_delete)
        self.keyboard.start()

    # ---- input handlers ----

    def _handle_next(self):
        if not self.running:
            return
        if self.navigation.is_on_screen(Screen.TASK_LIST):
            self.list_screen.next_item()
            self._render_current_screen()

    def _handle_prev(self):
        if not self.running:
            return
        if self.navigation.is_on_screen(Screen.TASK_LIST):
            self.list_screen.prev_item()
            self._render_current_screen()

    def _handle_select(self):
        """Select: open input on the add row, delete on a task row, save on input"""
        if not self.running:
            return
        self.logger.info("Button: Select")

        if self.navigation.is_on_screen(Screen.TASK_INPUT):
            self.input_screen.commit()
            return

        if self.list_screen.activate() == 'add':
            self._open_input()
        else:
            self._delete_selected()

    def _handle_back(self):
        if not self.running:
            return
        self.logger.info("Button: Back")

        if self.navigation.is_on_screen(Screen.TASK_INPUT):
            self.input_screen.cancel()

    def _handle_add(self):
        if self.running and self.navigation.is_on_screen(Screen.TASK_LIST):
            self._open_input()

    def _handle_delete(self):
        if self.running and self.navigation.is_on_screen(Screen.TASK_LIST):
            self._delete_selected()

    def _handle_raw_key(self, key_code: int, char: Optional[str], modifiers: dict):
        """Keyboard events while the input screen is open"""
        self.input_screen.handle_key(key_code, char, modifiers)
        if self.navigation.is_on_screen(Screen.TASK_INPUT):
            self._render_current_screen()

    # ---- task actions ----

    def _open_input(self):
        self.navigation.navigate_to(Screen.TASK_INPUT)
        self.input_screen.begin(self._on_input_done)
        if self.keyboard:
            self.keyboard.raw_key_callback = self._handle_raw_key
        self._render_current_screen()

    def _on_input_done(self, text: Optional[str]):
        """Input screen closed: store non-blank text, return to the list"""
        if self.keyboard:
            self.keyboard.raw_key_callback = None
        self.navigation.go_back()

        if text is not None and self.manager.add_task(text) is not None:
            self.logger.info(f"Adding task: {text.strip()}")
        self._render_current_screen()

    def _delete_selected(self):
        task = self.list_screen.get_selected_task()
        if task is None:
            return
        self.logger.info(f"Deleting task {task.id}: {task.text}")
        self.manager.delete_task(task)

    def _on_tasks_changed(self):
        """Called by the manager after each store round-trip"""
        if self.running and self.navigation.is_on_screen(Screen.TASK_LIST):
            self._render_current_screen()

    def _render_current_screen(self, use_partial: bool = True):
        """Render the current screen to display"""
        with self._render_lock:
            try:
                if self.navigation.is_on_screen(Screen.TASK_LIST):
                    image = self.list_screen.render()
                elif self.navigation.is_on_screen(Screen.TASK_INPUT):
                    image = self.input_screen.render()
                else:
                    self.logger.warning(f"Unknown screen: {self.navigation.current_screen}")
                    return

                self.display.display_image(image, use_partial=use_partial)

            except Exception as e:
                self.logger.error(f"Render error: {e}", exc_info=True)


def main():
    """Main entry point"""
    if len(sys.argv) > 1:
        config_path = sys.argv[1]
    else:
        config_path = os.environ.get('WRISTDO_CONFIG', DEFAULT_CONFIG)

    if not os.path.exists(config_path):
        print(f"ERROR: Configuration file not found: {config_path}")
        print(f"Usage: {sys.argv[0]} [config_path]")
        sys.exit(1)

    app = WristDoApp(config_path)
    app.start()


if __name__ == '__main__':
    main()
