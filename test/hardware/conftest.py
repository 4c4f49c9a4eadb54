import os

import pytest
import pyvisa

from k2000.util.check_hw import list_visa_devices


@pytest.fixture(scope="session")
def k2000_resource():
    """VISA resource of a connected Keithley 2000, or skip.

    Set K2000_RESOURCE to skip the bus scan.
    """
    resource = os.environ.get("K2000_RESOURCE")
    if resource:
        return resource
    try:
        rm = pyvisa.ResourceManager()
    except (OSError, ValueError) as e:
        pytest.skip(f"No VISA backend available: {e}")
    try:
        devices = list_visa_devices(
            model_filter="MODEL 2000", detailed=False, resource_manager=rm
        )
    finally:
        rm.close()
    if not devices:
        pytest.skip("No Keithley 2000 found")
    return next(iter(devices))
