"""One fetch cycle: fetch every nest concurrently, then redraw."""

import asyncio

from nestmon.display.render import update_connection_status, update_device_display
from nestmon.display.surface import DisplaySurface
from nestmon.lib.registry import Registry
from nestmon.logging import get_logger
from nestmon.nest.fetch import DeviceFetcher, fetch_device
from nestmon.nest.models import CycleOutcome, DeviceOutcome

logger = get_logger("nest.cycle")


async def run_cycle(
    registry: Registry,
    fetcher: DeviceFetcher,
    surface: DisplaySurface,
) -> CycleOutcome:
    """Fetch all devices, then update every row and the connection banner.

    Fetches run concurrently and the cycle waits for all of them to settle;
    nothing is drawn until every device has either a reading or a failure.
    """
    results = await asyncio.gather(
        *(fetch_device(fetcher, device) for device in registry),
        return_exceptions=True,
    )

    outcomes: list[DeviceOutcome] = []
    for device, result in zip(registry, results, strict=True):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.error(
                "Unexpected error fetching %s",
                device.name,
                exc_info=result,
            )
            result = DeviceOutcome(device)
        outcomes.append(result)

    for outcome in outcomes:
        update_device_display(surface, outcome.device.id, outcome.reading)

    cycle = CycleOutcome(tuple(outcomes))
    update_connection_status(surface, cycle.connected, cycle.total)
    logger.debug("Cycle done: %d of %d devices online", cycle.connected, cycle.total)
    return cycle
