from typing import Dict, Optional

import pyvisa
from loguru import logger

from .defaults import DEFAULT_VISA_TIMEOUT


def list_visa_devices(
    filter_string: Optional[str] = None,
    model_filter: Optional[str] = None,
    detailed: bool = True,
    resource_manager: Optional[pyvisa.ResourceManager] = None,
    progress_callback: Optional[callable] = None,
) -> Dict[str, Dict[str, str]] | Dict[str, str]:
    """List available VISA devices and query their identity.

    Args:
        filter_string: Optional string to filter resources (e.g., "GPIB")
        model_filter: Optional string to filter devices by model name
        detailed: If True, return status info. If False, just return IDN strings
        resource_manager: Optional ResourceManager to use. If None, creates one
        progress_callback: Optional callback function(current, total, message)

    Returns:
        If detailed=True:
            Dictionary mapping VISA addresses to dictionaries with
            'idn', 'status' ('connected' or 'error') and 'error'
        If detailed=False:
            Dictionary mapping VISA addresses to IDN strings
    """
    owns_rm = False
    if resource_manager is None:
        resource_manager = pyvisa.ResourceManager()
        owns_rm = True

    try:
        devices = {}
        resources = resource_manager.list_resources()
        total_resources = len(resources)

        for idx, resource in enumerate(resources):
            if progress_callback:
                progress_callback(idx, total_resources, f"Scanning {resource}")

            if filter_string and filter_string not in resource:
                continue

            inst = None
            try:
                inst = resource_manager.open_resource(resource)
                inst.timeout = DEFAULT_VISA_TIMEOUT
                inst.read_termination = "\n"
                inst.write_termination = "\n"

                idn = inst.query("*IDN?").strip()
                if model_filter and model_filter not in idn:
                    continue

                if detailed:
                    devices[resource] = {"idn": idn, "status": "connected", "error": ""}
                else:
                    devices[resource] = idn
                logger.debug(f"Found device at {resource}: {idn}")

            except Exception as e:
                if detailed:
                    devices[resource] = {"idn": "", "status": "error", "error": str(e)}
                logger.debug(f"Error with resource {resource}: {str(e)}")
            finally:
                if inst is not None:
                    try:
                        inst.close()
                    except Exception:
                        pass

        return devices

    finally:
        if owns_rm:
            resource_manager.close()
