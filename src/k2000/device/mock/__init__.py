from .mock_keithley2000 import MockKeithley2000

__all__ = ["MockKeithley2000"]
