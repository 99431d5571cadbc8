"""
Navigation state machine for WristDo screens.

The task list is the home screen; the text input screen is modal on top
of it and always returns to it.
"""

from enum import Enum
from typing import Optional
import logging


class Screen(Enum):
    """Available screens in the application"""
    TASK_LIST = "task_list"
    TASK_INPUT = "task_input"


class NavigationManager:
    """
    Track the active screen
    """

    def __init__(self, initial_screen: Screen = Screen.TASK_LIST):
        """
        Initialize navigation manager

        Args:
            initial_screen: Starting screen
        """
        self.logger = logging.getLogger(__name__)
        self.current_screen = initial_screen
        self.previous_screen: Optional[Screen] = None

        self.logger.info(f"Navigation initialized at {self.current_screen.value}")

    def navigate_to(self, screen: Screen):
        """
        Navigate to a new screen

        Args:
            screen: Target screen
        """
        if screen == self.current_screen:
            self.logger.debug(f"Already on {screen.value}")
            return

        self.previous_screen = self.current_screen
        self.current_screen = screen
        self.logger.info(f"Navigated from {self.previous_screen.value} to {self.current_screen.value}")

    def go_back(self) -> bool:
        """
        Return to the previous screen

        Returns:
            True if navigation occurred, False if there is nowhere to go
        """
        if self.previous_screen is None:
            self.logger.debug("No previous screen to go back to")
            return False

        self.current_screen, self.previous_screen = self.previous_screen, None
        self.logger.info(f"Navigated back to {self.current_screen.value}")
        return True

    def is_on_screen(self, screen: Screen) -> bool:
        return self.current_screen == screen
