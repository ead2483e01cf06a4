"""Fan relay control: the common interface and a stand-in without hardware."""

from __future__ import annotations

import abc
import logging

logger = logging.getLogger(__name__)


class Gpio(abc.ABC):
    """Access to the fan relay and its sense input."""

    @abc.abstractmethod
    def read_fan_sense(self) -> bool:
        """Whether the fan is detected as running."""

    @abc.abstractmethod
    def set_fan(self, on: bool) -> None:
        """Switch the fan on or off."""


class DummyGpio(Gpio):
    """A fan controller without hardware that only logs state changes."""

    def __init__(self) -> None:
        self._fan_state = False

    @property
    def fan_state(self) -> bool:
        """The state the fan was last switched to."""
        return self._fan_state

    def read_fan_sense(self) -> bool:
        return False

    def set_fan(self, on: bool) -> None:
        if on != self._fan_state:
            logger.info("Switching Fan to %s", on)
        self._fan_state = on