"""Endpoint validation.

PUBLIC API:
  - validate_endpoint: Check that an endpoint's PID is kitty and its socket exists
"""

import logging

import aiofiles.os

from ..config import RemoteSettings
from ..process import is_target_process
from .endpoint import DiscoveredEndpoint

logger = logging.getLogger(__name__)


async def validate_endpoint(endpoint: DiscoveredEndpoint, settings: RemoteSettings) -> bool:
    """Validate a candidate or cached endpoint.

    Args:
        endpoint: Endpoint to check.
        settings: Signature and self-name used for the process check.

    Returns:
        True if the PID still runs kitty and the socket file exists.
    """
    if not await is_target_process(endpoint.pid, settings.signature, settings.self_name):
        logger.debug(f"PID {endpoint.pid} is not a {settings.signature} process")
        return False

    if not await aiofiles.os.path.exists(endpoint.socket_file):
        logger.debug(f"Socket {endpoint.socket_file} does not exist")
        return False

    return True
