"""Tests for the fetch cycle orchestration."""

import asyncio

import pytest

from nestmon.display.render import STATUS_ACTIVE, STATUS_OFFLINE
from nestmon.display.surface import ConnectionState, DeviceField
from nestmon.lib.exceptions import (
    HttpStatusError,
    MalformedPayloadError,
    TransportError,
)
from nestmon.nest.cycle import run_cycle
from tests.conftest import StubFetcher


class TestRunCycle:
    """Tests for run_cycle."""

    @pytest.mark.asyncio
    async def test_all_online(self, registry, display, sample_reading, calm_reading):
        fetcher = StubFetcher({1: sample_reading, 2: calm_reading, 3: calm_reading})

        cycle = await run_cycle(registry, fetcher, display)

        assert cycle.connected == 3
        assert cycle.total == 3
        assert sorted(fetcher.calls) == [1, 2, 3]
        assert display.banner.text == "Connected to 3 of 3 devices"
        for device in registry:
            assert display.row(device.id).text(DeviceField.STATUS) == STATUS_ACTIVE

    @pytest.mark.asyncio
    async def test_two_of_three(self, registry, display, sample_reading, calm_reading):
        fetcher = StubFetcher(
            {1: sample_reading, 2: HttpStatusError(500), 3: calm_reading}
        )

        cycle = await run_cycle(registry, fetcher, display)

        assert cycle.connected == 2
        assert display.banner.state == ConnectionState.ONLINE
        assert display.banner.text == "Connected to 2 of 3 devices"

    @pytest.mark.asyncio
    async def test_none_online(self, registry, display):
        fetcher = StubFetcher({i: TransportError("unreachable") for i in (1, 2, 3)})

        cycle = await run_cycle(registry, fetcher, display)

        assert cycle.connected == 0
        assert display.banner.state == ConnectionState.OFFLINE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TransportError("Connection refused"),
            HttpStatusError(503),
            MalformedPayloadError("Invalid JSON"),
        ],
    )
    async def test_failure_isolated_to_device(
        self, registry, display, sample_reading, calm_reading, error
    ):
        await run_cycle(
            registry,
            StubFetcher({1: sample_reading, 2: sample_reading, 3: calm_reading}),
            display,
        )
        before_others = [display.row(1).to_dict(), display.row(3).to_dict()]

        fetcher = StubFetcher({1: sample_reading, 2: error, 3: calm_reading})
        cycle = await run_cycle(registry, fetcher, display)

        row = display.row(2)
        assert row.text(DeviceField.STATUS) == STATUS_OFFLINE
        assert row.text(DeviceField.TEMPERATURE) == "--"
        assert row.alert is False
        assert [o.ok for o in cycle.outcomes] == [True, False, True]
        assert cycle.outcomes[1].error is error
        # Timestamps aside, the other rows are unchanged
        after_others = [display.row(1).to_dict(), display.row(3).to_dict()]
        for before, after in zip(before_others, after_others):
            before["fields"].pop("last_update")
            after["fields"].pop("last_update")
        assert after_others == before_others

    @pytest.mark.asyncio
    async def test_unexpected_error_marks_device_offline(
        self, registry, display, calm_reading, caplog
    ):
        fetcher = StubFetcher({1: calm_reading, 2: RuntimeError("boom"), 3: calm_reading})

        cycle = await run_cycle(registry, fetcher, display)

        assert cycle.connected == 2
        assert display.row(2).text(DeviceField.STATUS) == STATUS_OFFLINE
        assert "Unexpected error fetching Nest 2" in caplog.text

    @pytest.mark.asyncio
    async def test_banner_rendered_last_and_once(
        self, registry, recording_surface, calm_reading
    ):
        fetcher = StubFetcher(
            {1: calm_reading, 2: calm_reading, 3: TransportError("x")},
            delays={1: 0.02},
        )

        await run_cycle(registry, fetcher, recording_surface)

        kinds = [call[0] for call in recording_surface.calls]
        assert kinds.count("banner") == 1
        assert kinds[-1] == "banner"
        touched = {call[1] for call in recording_surface.calls if call[0] != "banner"}
        assert touched == {1, 2, 3}

    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self, registry, display, calm_reading):
        started = 0
        all_started = asyncio.Event()

        class BarrierFetcher(StubFetcher):
            async def fetch(self, device):
                nonlocal started
                started += 1
                if started == len(registry):
                    all_started.set()
                # Sequential fetching would never get past this wait
                await asyncio.wait_for(all_started.wait(), timeout=1)
                return await super().fetch(device)

        fetcher = BarrierFetcher({1: calm_reading, 2: calm_reading, 3: calm_reading})
        cycle = await run_cycle(registry, fetcher, display)

        assert cycle.connected == 3

    @pytest.mark.asyncio
    async def test_nothing_drawn_until_all_fetches_settle(
        self, registry, display, calm_reading
    ):
        fetcher = StubFetcher(
            {1: calm_reading, 2: calm_reading, 3: calm_reading},
            delays={2: 0.05},
        )

        task = asyncio.create_task(run_cycle(registry, fetcher, display))
        await asyncio.sleep(0.01)
        # Nothing is drawn until every fetch has settled
        assert display.row(1).text(DeviceField.STATUS) == "--"
        cycle = await task

        assert cycle.connected == 3
        assert display.row(1).text(DeviceField.STATUS) == STATUS_ACTIVE
