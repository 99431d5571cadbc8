"""
E-paper display driver for the Waveshare 1.54" e-Paper module (200x200).
Runs in mock mode (PNG output) when the Waveshare library is not installed.
"""

import os
import logging
from PIL import Image


class DisplayDriver:
    """
    Hardware abstraction for the Waveshare 1.54" V2 e-Paper panel
    """

    def __init__(self, width: int = 200, height: int = 200, rotation: int = 0,
                 mock_output: str = "output/display_output.png"):
        """
        Initialize display driver

        Args:
            width: Display width in pixels (logical, after rotation)
            height: Display height in pixels (logical, after rotation)
            rotation: Rotation angle (0, 90, 180, 270)
            mock_output: PNG path written in mock mode
        """
        self.width = width
        self.height = height
        self.rotation = rotation
        self.mock_output = mock_output
        self.epd = None
        self.logger = logging.getLogger(__name__)
        self.partial_refresh_count = 0
        self.full_refresh_interval = 10
        self.partial_base_set = False

        try:
            from waveshare_epd import epd1in54_V2
            self.epd_module = epd1in54_V2
            self.hardware_available = True
            self.logger.info("Using Waveshare 1.54inch V2 driver (200x200)")
        except ImportError:
            self.logger.warning("Waveshare library not found. Running in mock mode.")
            self.epd_module = None
            self.hardware_available = False

    def initialize(self):
        """Initialize the display hardware"""
        if not self.hardware_available:
            self.logger.info("Mock display initialized (no hardware)")
            return

        try:
            self.epd = self.epd_module.EPD()
            self.epd.init(0)
            self.epd.Clear(0xFF)
            self.logger.info("E-paper display initialized successfully")
        except Exception as e:
            self.logger.error(f"Display initialization failed: {e}")
            raise

    def _prepare(self, image: Image.Image) -> Image.Image:
        """Fit, convert to 1-bit and rotate an image for the panel"""
        if image.size != (self.width, self.height):
            self.logger.warning(f"Resizing from {image.size} to ({self.width}, {self.height}) - check renderer!")
            image = image.resize((self.width, self.height), Image.Resampling.NEAREST)

        if image.mode != '1':
            image = image.convert('1', dither=Image.Dither.NONE)

        if self.rotation != 0:
            image = image.rotate(-self.rotation, expand=True, resample=Image.Resampling.NEAREST)

        return image

    def display_image(self, image: Image.Image, use_partial: bool = True):
        """
        Display a PIL Image with partial or full refresh

        Args:
            image: PIL Image object
            use_partial: Use partial refresh if True, full refresh if False
        """
        image = self._prepare(image)

        if not self.hardware_available or not self.epd:
            directory = os.path.dirname(self.mock_output)
            if directory:
                os.makedirs(directory, exist_ok=True)
            image.save(self.mock_output)
            self.logger.info(f"Mock display: Image saved to {self.mock_output}")
            return

        try:
            buffer_data = self.epd.getbuffer(image)
            should_full_refresh = (
                not use_partial
                or not self.partial_base_set
                or self.partial_refresh_count >= self.full_refresh_interval
            )

            if should_full_refresh:
                # Full refresh clears ghosting and sets the base for partial updates
                self.logger.info(f"Performing FULL refresh (count reset from {self.partial_refresh_count})")
                self.epd.init(0)
                if hasattr(self.epd, 'displayPartBaseImage'):
                    self.epd.displayPartBaseImage(buffer_data)
                    self.partial_base_set = True
                else:
                    self.epd.display(buffer_data)
                self.partial_refresh_count = 0
                return

            try:
                self.epd.init(1)
                self.epd.displayPart(buffer_data)
                self.partial_refresh_count += 1
                self.logger.info(f"PARTIAL refresh {self.partial_refresh_count}/{self.full_refresh_interval}")
            except Exception as e:
                self.logger.warning(f"Partial refresh failed: {e}, using full refresh")
                self.epd.init(0)
                self.epd.display(buffer_data)
                self.partial_refresh_count = 0
                self.partial_base_set = False

        except Exception as e:
            self.logger.error(f"Display image failed: {e}")
            raise

    def set_full_refresh_interval(self, interval: int):
        """
        Set how many partial refreshes before a full refresh

        Args:
            interval: Number of partial refreshes
        """
        self.full_refresh_interval = max(1, interval)
        self.logger.info(f"Full refresh interval set to {self.full_refresh_interval}")

    def cleanup(self):
        """Clean up resources and put display to sleep"""
        if not self.hardware_available or not self.epd:
            self.logger.debug("Mock cleanup")
            return

        try:
            self.epd.sleep()
            self.logger.info("Display cleaned up")
        except Exception as e:
            self.logger.error(f"Display cleanup failed: {e}")
