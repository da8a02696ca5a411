"""좌석 탐색 스킬 테스트"""

from __future__ import annotations

import pytest

from tcdd_hunter.skills.seat_locator import SeatLocatorSkill, wagon_label


@pytest.fixture
def skill() -> SeatLocatorSkill:
    return SeatLocatorSkill()


def _car(car_id, seats, occupied=(), description="1. VAGON"):
    return {
        "trainCarId": car_id,
        "allocationSeats": [{"seatNumber": s} for s in occupied],
        "seatMapTemplate": {
            "description": description,
            "seatMaps": [
                {"seatNumber": num, "item": {"saleable": sale, "cabinClassId": cid, "id": i}}
                for i, (num, cid, sale) in enumerate(seats)
            ],
        },
    }


class TestLocate:
    def test_occupied_only_seat_returns_none(self, skill):
        maps = [_car(1, [("5A", 2, True)], occupied=["5A"])]
        assert skill.locate(maps, ["ECONOMY"]) is None

    def test_first_free_seat_in_selected_class(self, skill, seat_map_response):
        seat = skill.locate(seat_map_response["seatMaps"], ["ECONOMY"])
        assert seat is not None
        assert seat.seat_number == "2A"
        assert seat.car_id == 5501
        assert seat.car_name == "C3"
        assert seat.wagon_label == "3"
        assert seat.cabin_class_name == "Ekonomi Sınıfı"
        assert seat.item_id == 4

    def test_class_filter(self, skill, seat_map_response):
        seat = skill.locate(seat_map_response["seatMaps"], ["BUSINESS"])
        assert seat.seat_number == "1B"
        assert seat.cabin_class_name == "Business Sınıfı"

    def test_non_saleable_and_unnumbered_skipped(self, skill):
        maps = [_car(1, [("1A", 2, False), (None, 2, True), ("", 2, True), ("3C", 2, True)])]
        assert skill.locate(maps, ["ECONOMY"]).seat_number == "3C"

    def test_server_order_across_cars(self, skill):
        maps = [
            _car(1, [("1A", 1, True)]),
            _car(2, [("9D", 2, True), ("1A", 2, True)], description="2.VAGON"),
        ]
        seat = skill.locate(maps, ["ECONOMY"])
        assert (seat.car_id, seat.seat_number, seat.wagon_label) == (2, "9D", "2")

    def test_occupancy_is_per_car(self, skill):
        maps = [
            _car(1, [("1A", 2, True)], occupied=["1A"]),
            _car(2, [("1A", 2, True)]),
        ]
        seat = skill.locate(maps, ["ECONOMY"])
        assert seat.car_id == 2

    @pytest.mark.parametrize("maps", [None, {}, [None], [{"seatMapTemplate": None}]])
    def test_malformed_input(self, skill, maps):
        assert skill.locate(maps, ["ECONOMY"]) is None

    def test_no_selected_classes(self, skill, seat_map_response):
        assert skill.locate(seat_map_response["seatMaps"], []) is None


class TestWagonLabel:
    @pytest.mark.parametrize("text,expected", [
        ("YHT CAF 1. VAGON BUSINESS", "1"),
        ("CAF 2.VAGON ENGELLİ", "2"),
        ("12 vagon", "12"),
        ("Yemekli", "?"),
        ("", "?"),
    ])
    def test_extraction(self, text, expected):
        assert wagon_label({"description": text}) == expected

    def test_name_fallback(self):
        assert wagon_label({"description": "", "name": "4. VAGON"}) == "4"
