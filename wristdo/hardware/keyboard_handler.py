"""
Bluetooth Keyboard Handler for WristDo
Monitors evdev input devices for keyboard events
"""

import logging
import select
import threading
import time
from typing import Callable, Dict, Optional, Tuple

try:
    import evdev
    from evdev import categorize, ecodes
    EVDEV_AVAILABLE = True
except ImportError:
    EVDEV_AVAILABLE = False


# US layout: key name suffix, unshifted char, shifted char
_US_LAYOUT = (
    [(c.upper(), c, c.upper()) for c in 'abcdefghijklmnopqrstuvwxyz']
    + [(d, d, s) for d, s in zip('1234567890', '!@#$%^&*()')]
    + [('SPACE', ' ', ' '), ('MINUS', '-', '_'), ('EQUAL', '=', '+'),
       ('SEMICOLON', ';', ':'), ('APOSTROPHE', "'", '"'), ('COMMA', ',', '<'),
       ('DOT', '.', '>'), ('SLASH', '/', '?')]
)


def _build_char_map() -> Dict[int, Tuple[str, str]]:
    if not EVDEV_AVAILABLE:
        return {}
    return {getattr(ecodes, f'KEY_{name}'): (plain, shifted)
            for name, plain, shifted in _US_LAYOUT}


def _build_action_map() -> Dict[int, str]:
    if not EVDEV_AVAILABLE:
        return {}
    return {
        ecodes.KEY_UP: 'prev',
        ecodes.KEY_LEFT: 'prev',
        ecodes.KEY_DOWN: 'next',
        ecodes.KEY_RIGHT: 'next',
        ecodes.KEY_ENTER: 'select',
        ecodes.KEY_ESC: 'back',
        ecodes.KEY_N: 'add',
        ecodes.KEY_INSERT: 'add',
        ecodes.KEY_DELETE: 'delete',
    }


class KeyboardHandler:
    """
    Handles Bluetooth keyboard input via evdev

    Navigation mode maps keys to actions:
    - Up/Down (or Left/Right): Move selection
    - Enter: Select
    - Escape: Back
    - N / Insert: Add task
    - Delete: Delete selected task

    Text mode (raw_key_callback set) forwards every key press with its
    character, for the task input screen.
    """

    ACTION_MAP = _build_action_map()
    KEY_TO_CHAR = _build_char_map()

    RECONNECT_INTERVAL = 2.0

    def __init__(self, device_pattern: Optional[str] = None):
        """
        Initialize keyboard handler

        Args:
            device_pattern: Substring matched against device names (e.g. "Keyboard")
        """
        self.logger = logging.getLogger(__name__)
        self.device_pattern = device_pattern
        self.callbacks: Dict[str, Callable] = {}
        self.device = None
        self.running = False
        self._thread: Optional[threading.Thread] = None

        # When set, receives (key_code, char, modifiers) for every key press
        self.raw_key_callback: Optional[Callable] = None

        self.modifiers = {'shift': False, 'ctrl': False, 'alt': False}

        if not EVDEV_AVAILABLE:
            self.logger.warning("evdev not available - keyboard input disabled")

    def register_callback(self, action: str, callback: Callable):
        """
        Register a callback for an action

        Args:
            action: Action name ('next', 'prev', 'select', 'back', 'add', 'delete')
            callback: Function to call when action triggered
        """
        self.callbacks[action] = callback
        self.logger.debug(f"Registered keyboard callback for '{action}'")

    def _is_keyboard(self, device) -> bool:
        keys = device.capabilities().get(ecodes.EV_KEY, [])
        if ecodes.KEY_ENTER not in keys or ecodes.KEY_A not in keys:
            return False

        name = device.name.lower()
        if self.device_pattern:
            return self.device_pattern.lower() in name
        return 'gpio' not in name and 'power button' not in name

    def _find_keyboard_device(self):
        """First input device that looks like a keyboard, or None"""
        try:
            for path in evdev.list_devices():
                device = evdev.InputDevice(path)
                if self._is_keyboard(device):
                    self.logger.info(f"Keyboard connected: {device.name} at {device.path}")
                    return device
                device.close()
        except OSError as e:
            self.logger.warning(f"Error scanning input devices: {e}")
        return None

    def _track_modifier(self, key_code: int, keystate: int) -> bool:
        """Update modifier state; True if the key was a modifier"""
        for name, codes in (('shift', (ecodes.KEY_LEFTSHIFT, ecodes.KEY_RIGHTSHIFT)),
                            ('ctrl', (ecodes.KEY_LEFTCTRL, ecodes.KEY_RIGHTCTRL)),
                            ('alt', (ecodes.KEY_LEFTALT, ecodes.KEY_RIGHTALT))):
            if key_code in codes:
                self.modifiers[name] = keystate != 0
                return True
        return False

    def _dispatch(self, key_code: int):
        """Send a key-down to the raw callback or the mapped action"""
        if self.raw_key_callback:
            char = None
            if key_code in self.KEY_TO_CHAR:
                plain, shifted = self.KEY_TO_CHAR[key_code]
                char = shifted if self.modifiers['shift'] else plain
            try:
                self.raw_key_callback(key_code, char, dict(self.modifiers))
            except Exception as e:
                self.logger.error(f"Error in raw key callback: {e}", exc_info=True)
            return

        action = self.ACTION_MAP.get(key_code)
        callback = self.callbacks.get(action) if action else None
        if callback is None:
            return

        self.logger.debug(f"Keyboard: {key_code} -> {action}")
        try:
            callback()
        except Exception as e:
            self.logger.error(f"Error in keyboard callback: {e}", exc_info=True)

    def _handle_events(self):
        for event in self.device.read():
            if event.type != ecodes.EV_KEY:
                continue
            key_event = categorize(event)
            if self._track_modifier(key_event.scancode, key_event.keystate):
                continue
            # Key down only, no release or repeat
            if key_event.keystate == key_event.key_down:
                self._dispatch(key_event.scancode)

    def _run(self):
        """Reader loop: connects, reads, and reconnects after a disconnect"""
        self.logger.info("Keyboard reader started")
        while self.running:
            if self.device is None:
                self.device = self._find_keyboard_device()
                if self.device is None:
                    time.sleep(self.RECONNECT_INTERVAL)
                    continue

            try:
                # Timeout so self.running is rechecked
                ready, _, _ = select.select([self.device.fd], [], [], 0.5)
                if ready:
                    self._handle_events()
            except OSError as e:
                self.logger.warning(f"Keyboard disconnected: {e}")
                self.device = None

    def start(self) -> bool:
        """Start the keyboard reader thread"""
        if not EVDEV_AVAILABLE:
            self.logger.warning("Cannot start keyboard handler - evdev not available")
            return False

        if self.running:
            return True

        self.running = True
        self._thread = threading.Thread(target=self._run, name="keyboard", daemon=True)
        self._thread.start()
        return True

    def stop(self):
        """Stop the reader thread and release the device"""
        self.running = False

        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None

        if self.device:
            try:
                self.device.close()
            except OSError as e:
                self.logger.debug(f"Error closing keyboard device: {e}")
            self.device = None

        self.logger.info("Keyboard handler stopped")

    def is_connected(self) -> bool:
        """Check if a keyboard is connected"""
        return self.device is not None
