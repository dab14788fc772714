"""Collection of headless input drivers."""

from upside_core.drivers.random_driver import RandomInputDriver
from upside_core.drivers.scripted_driver import ScriptedInputDriver

__all__ = ["RandomInputDriver", "ScriptedInputDriver"]
