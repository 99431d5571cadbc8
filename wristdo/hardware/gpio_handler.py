"""
GPIO button handling with gpiozero.
Buttons are described by the 'buttons' section of config.yaml.
"""

import logging
from typing import Callable, Dict, Optional


class GPIOHandler:
    """
    Handle GPIO button inputs using gpiozero
    """

    def __init__(self, buttons_config: Dict[str, Dict]):
        """
        Initialize GPIO handler

        Args:
            buttons_config: Mapping of button name to {'pin', 'pull', 'bounce_time'}
        """
        self.logger = logging.getLogger(__name__)
        self.config = buttons_config or {}
        self.callbacks: Dict[str, Callable] = {}
        self.buttons: Dict[str, Optional[object]] = {}

        try:
            from gpiozero import Button
            self.Button = Button
            self.hardware_available = True
            self.logger.info("GPIO hardware available")
        except ImportError:
            self.logger.warning("gpiozero not available. Running in mock mode.")
            self.hardware_available = False
            self.Button = None

        self._setup_buttons()

    def _setup_buttons(self):
        """Configure all buttons from config"""
        if not self.hardware_available:
            for button_name in self.config:
                self.buttons[button_name] = None
            self.logger.info(f"Mock GPIO buttons configured: {', '.join(self.config) or 'none'}")
            return

        for button_name, button_config in self.config.items():
            pin = button_config['pin']
            pull_up = button_config.get('pull', 'up') == 'up'
            bounce_time = button_config.get('bounce_time', 0.1)

            try:
                self.buttons[button_name] = self.Button(pin, pull_up=pull_up, bounce_time=bounce_time)
                self.logger.info(f"Configured button '{button_name}' on GPIO {pin}")
            except Exception as e:
                self.logger.error(f"Failed to setup button '{button_name}': {e}")
                self.buttons[button_name] = None

    def register_callback(self, button_name: str, callback: Callable):
        """
        Register a callback function for a button

        Args:
            button_name: Name of button (from config)
            callback: Function to call when button is pressed

        Raises:
            ValueError: If the button is not configured
        """
        if button_name not in self.buttons:
            raise ValueError(f"Unknown button: {button_name}")

        self.callbacks[button_name] = callback

        button = self.buttons[button_name]
        if button:
            button.when_pressed = callback
            self.logger.info(f"Registered callback for button '{button_name}'")
        else:
            self.logger.debug(f"Mock callback registered for '{button_name}'")

    def has_button(self, button_name: str) -> bool:
        return button_name in self.buttons

    def trigger_button(self, button_name: str):
        """
        Manually trigger a button callback (for testing/mock mode)

        Args:
            button_name: Name of button to trigger
        """
        if button_name in self.callbacks:
            self.logger.info(f"Manually triggering button '{button_name}'")
            self.callbacks[button_name]()
        else:
            self.logger.warning(f"No callback registered for '{button_name}'")

    def cleanup(self):
        """Clean up GPIO resources"""
        for button_name, button in self.buttons.items():
            if button:
                try:
                    button.close()
                except Exception as e:
                    self.logger.error(f"Error cleaning up button '{button_name}': {e}")

        self.logger.info("GPIO cleaned up")
