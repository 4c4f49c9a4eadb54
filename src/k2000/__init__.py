# -*- coding: utf-8 -*-
"""# k2000

Unattended data acquisition from a Keithley 2000 multimeter over GPIB.

Readings are logged to a plain text file (`minutes<TAB>reading`) and can be
mirrored to a live gnuplot chart. A session stops after a set time, when
'q' or ESC is pressed, or on an instrument error, and always restores the
terminal, the instrument and the log file on the way out.

- `k2000.session` : the acquisition loop and the resources it owns
- `k2000.device` : instrument drivers
- `k2000.types` : configuration, readings and errors
- `k2000.cli` : the `k2000` command
"""

from ._version import __version__
