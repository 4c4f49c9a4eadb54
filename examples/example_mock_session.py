from pathlib import Path

import k2000.util
from k2000.device import MockKeithley2000
from k2000.session import AcquisitionSession
from k2000.types import MeasurementMode, SessionConfig

# Minutes to acquire for
STOP_AFTER = 0.25

k2000.util.start_log(log_to_stdout=True, log_level="INFO")  # and ~/.k2000/k2000.log

config = SessionConfig(
    output=Path("mock_run.dat"),
    mode=MeasurementMode.OHM,
    interval=0.5,
    flush_every=5,
    stop_after=STOP_AFTER,
    comment="mock resistor, every 4th reading out of range",
    # graphics=False,  # no gnuplot installed
)

dmm = MockKeithley2000(overflow_every=4, seed=1)
result = AcquisitionSession(config, dmm).run()

print(f"\n{result.samples} samples, status {result.status.name}")
print(Path("mock_run.dat").read_text())

k2000.util.shutdown_log()
