# -*- coding: utf-8 -*-
"""
Instrument drivers for k2000.

- `Keithley2000`: the real instrument over VISA (GPIB)
- `MockKeithley2000`: a simulated instrument for dry runs and tests

Examples
--------
```python
from k2000.device import Keithley2000
with Keithley2000("GPIB0::16::INSTR") as dmm:
    dmm.initialize()
    print(dmm.query_identity())
```
"""

from .device import Device
from .keithley2000 import Keithley2000
from .mock import MockKeithley2000

__all__ = [
    "Device",
    "Keithley2000",
    "MockKeithley2000",
]
