"""AllocationTracker 단위 테스트"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from tcdd_hunter.agent.allocation import (
    MSG_ALLOCATE_FAILED, MSG_ALREADY_HELD, MSG_IN_PROGRESS, MSG_NO_SEAT,
    MSG_NO_SEAT_MAP, MSG_NOT_HELD, MSG_STALE, AllocationTracker,
)
from tcdd_hunter.models.train import CabinAvailability, TrainCandidate
from tcdd_hunter.skills.tcdd_client import BUSY, TCDDClient, TransportError


@pytest.fixture
def train() -> TrainCandidate:
    return TrainCandidate(
        train_id=1001,
        name="YHT 81002",
        departure_time="09:15",
        arrival_time="11:05",
        cabins=(CabinAvailability("ECONOMY", "Ekonomi Sınıfı", 3, 450.0, True),),
    )


@pytest.fixture
def client(seat_map_response) -> MagicMock:
    client = MagicMock(spec=TCDDClient)
    client.check_seat_map = AsyncMock(return_value=seat_map_response)
    client.allocate_seat = AsyncMock(
        return_value={"allocationId": "alloc-1", "lockFor": 12}
    )
    client.deallocate_seat = AsyncMock(return_value={"success": True})
    return client


@pytest.fixture
def tracker(client, observer) -> AllocationTracker:
    return AllocationTracker(client, observer)


class TestAllocate:
    @pytest.mark.asyncio
    async def test_success(self, tracker, client, observer, train, sample_criteria):
        outcome = await tracker.allocate(train, sample_criteria)

        assert outcome.success
        allocation = outcome.allocation
        assert allocation is tracker.allocation
        assert allocation.seat_number == "2A"
        assert allocation.car_id == 5501
        assert allocation.wagon_label == "3"
        assert allocation.allocation_id == "alloc-1"
        assert allocation.hold_minutes == 12
        assert allocation.train_name == "YHT 81002"
        assert observer.established == [allocation]

        client.check_seat_map.assert_awaited_once_with(1001, 796, 98)
        request = client.allocate_seat.call_args.args[0]
        assert request.seat_number == "2A"
        assert request.from_station_id == 796
        assert request.to_station_id == 98

    @pytest.mark.asyncio
    async def test_default_hold_minutes(self, tracker, client, train, sample_criteria):
        client.allocate_seat.return_value = {"allocationId": "alloc-1"}
        outcome = await tracker.allocate(train, sample_criteria)
        assert outcome.allocation.hold_minutes == 10

    @pytest.mark.asyncio
    async def test_refuses_when_already_held(self, tracker, client, train, sample_criteria):
        await tracker.allocate(train, sample_criteria)
        client.check_seat_map.reset_mock()

        outcome = await tracker.allocate(train, sample_criteria)
        assert not outcome.success
        assert outcome.message == MSG_ALREADY_HELD
        client.check_seat_map.assert_not_called()

    @pytest.mark.asyncio
    async def test_refuses_while_another_allocate_in_progress(
        self, tracker, client, train, sample_criteria, seat_map_response,
    ):
        gate = asyncio.Event()

        async def slow_seat_map(*args):
            await gate.wait()
            return seat_map_response

        client.check_seat_map.side_effect = slow_seat_map
        first = asyncio.ensure_future(tracker.allocate(train, sample_criteria))
        await asyncio.sleep(0)

        second = await tracker.allocate(train, sample_criteria)
        assert second.message == MSG_IN_PROGRESS
        gate.set()
        assert (await first).success
        assert client.check_seat_map.await_count == 1

    @pytest.mark.asyncio
    async def test_clear_during_allocate_drops_result(
        self, tracker, client, observer, train, sample_criteria, seat_map_response,
    ):
        gate = asyncio.Event()

        async def slow_seat_map(*args):
            await gate.wait()
            return seat_map_response

        client.check_seat_map.side_effect = slow_seat_map
        pending = asyncio.ensure_future(tracker.allocate(train, sample_criteria))
        await asyncio.sleep(0)

        assert tracker.clear() is None
        gate.set()
        outcome = await pending

        assert not outcome.success
        assert outcome.message == MSG_STALE
        assert not tracker.has_allocation
        assert observer.established == []
        assert not tracker.allocating

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seat_map", [None, {}, {"seatMaps": []}])
    async def test_seat_map_unavailable(self, tracker, client, train, sample_criteria, seat_map):
        client.check_seat_map.return_value = seat_map
        outcome = await tracker.allocate(train, sample_criteria)
        assert outcome.message == MSG_NO_SEAT_MAP
        assert not tracker.has_allocation
        client.allocate_seat.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_free_seat(self, tracker, client, train, sample_criteria):
        client.check_seat_map.return_value = {"seatMaps": [{"seatMapTemplate": {"seatMaps": []}}]}
        outcome = await tracker.allocate(train, sample_criteria)
        assert outcome.message == MSG_NO_SEAT
        client.allocate_seat.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [None, {}, {"allocationId": None}])
    async def test_allocate_failed(self, tracker, client, train, sample_criteria, response):
        client.allocate_seat.return_value = response
        outcome = await tracker.allocate(train, sample_criteria)
        assert outcome.message == MSG_ALLOCATE_FAILED
        assert not tracker.has_allocation

    @pytest.mark.asyncio
    async def test_unexpected_error_absorbed(self, tracker, client, train, sample_criteria):
        client.check_seat_map.side_effect = KeyError("boom")
        outcome = await tracker.allocate(train, sample_criteria)
        assert not outcome.success
        assert outcome.message.startswith("Hata:")
        assert not tracker.allocating


class TestRelease:
    @pytest.mark.asyncio
    async def test_release_without_allocation(self, tracker, client):
        outcome = await tracker.release()
        assert not outcome.success
        assert outcome.message == MSG_NOT_HELD
        client.deallocate_seat.assert_not_called()

    @pytest.mark.asyncio
    async def test_release_success_clears(self, tracker, client, observer, train, sample_criteria):
        await tracker.allocate(train, sample_criteria)
        outcome = await tracker.release()

        assert outcome.success
        assert not tracker.has_allocation
        assert observer.cleared == 1
        request = client.deallocate_seat.call_args.args[0]
        assert request.to_payload() == {
            "trainCarId": 5501, "allocationId": "alloc-1", "seatNumber": "2A",
        }

    @pytest.mark.asyncio
    async def test_transport_failure_keeps_allocation(self, tracker, client, observer, train, sample_criteria):
        await tracker.allocate(train, sample_criteria)
        client.deallocate_seat.side_effect = TransportError("HTTP 500", 500)

        with pytest.raises(TransportError):
            await tracker.release()
        assert tracker.has_allocation
        assert observer.cleared == 0

    @pytest.mark.asyncio
    async def test_busy_keeps_allocation(self, tracker, client, train, sample_criteria):
        await tracker.allocate(train, sample_criteria)
        client.deallocate_seat.return_value = BUSY

        outcome = await tracker.release()
        assert not outcome.success
        assert tracker.has_allocation


class TestClear:
    @pytest.mark.asyncio
    async def test_clear_discards_without_network(self, tracker, client, observer, train, sample_criteria):
        await tracker.allocate(train, sample_criteria)
        discarded = tracker.clear()

        assert discarded is not None
        assert not tracker.has_allocation
        assert observer.cleared == 1
        client.deallocate_seat.assert_not_called()

    def test_clear_empty_does_not_notify(self, tracker, observer):
        assert tracker.clear() is None
        assert observer.cleared == 0
