"""가용성 응답 필터 테스트"""

from __future__ import annotations

import pytest

from tcdd_hunter.skills.result_filter import ResultFilterSkill

ECONOMY, BUSINESS, LOCA = 2, 1, 11


@pytest.fixture
def skill() -> ResultFilterSkill:
    return ResultFilterSkill()


class TestFoundScenarios:
    def test_economy_available_in_window(self, skill, make_train, make_response):
        raw = make_response(make_train("09:15", cabins=[(ECONOMY, 3)]))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])

        assert result.found is True
        assert len(result.trains) == 1
        assert result.total_selected_seats == 3
        train = result.trains[0]
        assert train.departure_time == "09:15"
        assert train.arrival_time == "11:05"
        assert train.name == "YHT 81002"

    def test_sold_out_selected_class_is_listed_but_not_found(
        self, skill, make_train, make_response,
    ):
        raw = make_response(
            make_train("09:15", cabins=[(ECONOMY, 0), (BUSINESS, 5)])
        )
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])

        assert result.found is False
        assert len(result.trains) == 1
        economy = [c for c in result.trains[0].cabins if c.class_key == "ECONOMY"]
        assert economy[0].availability == 0
        assert economy[0].is_selected is True
        business = [c for c in result.trains[0].cabins if c.class_key == "BUSINESS"]
        assert business[0].is_selected is False
        assert result.total_selected_seats == 0

    def test_train_without_selected_class_is_dropped(
        self, skill, make_train, make_response,
    ):
        raw = make_response(make_train("09:15", cabins=[(BUSINESS, 5)]))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert result.found is False
        assert result.trains == ()

    def test_total_sums_selected_classes_over_trains(
        self, skill, make_train, make_response,
    ):
        raw = make_response(
            make_train("08:30", cabins=[(ECONOMY, 2), (BUSINESS, 4)], train_id=1),
            make_train("10:00", cabins=[(ECONOMY, 0), (BUSINESS, 1)], train_id=2),
        )
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY", "BUSINESS"])
        assert result.found is True
        assert result.total_selected_seats == 7
        assert [t.train_id for t in result.trains] == [1, 2]


class TestTimeWindow:
    @pytest.mark.parametrize("departure", ["08:00", "10:30", "12:00"])
    def test_inclusive_bounds(self, skill, make_train, make_response, departure):
        raw = make_response(make_train(departure))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert [t.departure_time for t in result.trains] == [departure]

    @pytest.mark.parametrize("departure", ["07:59", "12:01", "23:30"])
    def test_outside_window_rejected(self, skill, make_train, make_response, departure):
        raw = make_response(make_train(departure))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert result.trains == ()

    def test_single_minute_window(self, skill, make_train, make_response):
        raw = make_response(make_train("09:15"), make_train("09:16", train_id=2))
        result = skill.filter(raw, "09:15", "09:15", ["ECONOMY"])
        assert [t.departure_time for t in result.trains] == ["09:15"]


class TestDefensiveTraversal:
    @pytest.mark.parametrize("raw", [
        None,
        [],
        {},
        {"trainLegs": None},
        {"trainLegs": []},
        {"trainLegs": [None]},
        {"trainLegs": [{"trainAvailabilities": None}]},
        {"trainLegs": [{"trainAvailabilities": [{"trains": None}]}]},
        {"trainLegs": [{"trainAvailabilities": [None, {"trains": [None, 5]}]}]},
    ])
    def test_malformed_levels_yield_no_candidates(self, skill, raw):
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert result.found is False
        assert result.trains == ()
        assert result.total_selected_seats == 0

    def test_train_without_segments_rejected(self, skill, make_train, make_response):
        train = make_train()
        train["segments"] = []
        assert skill.filter(make_response(train), "08:00", "12:00", ["ECONOMY"]).trains == ()

    @pytest.mark.parametrize("train_id", [None, "1001", 10.5, True])
    def test_train_without_integer_id_rejected(self, skill, make_train, make_response, train_id):
        missing = make_train(train_id=2)
        del missing["id"]
        invalid = make_train(train_id=train_id)
        valid = make_train(train_id=3)
        result = skill.filter(make_response(missing, invalid, valid), "08:00", "12:00", ["ECONOMY"])
        assert [t.train_id for t in result.trains] == [3]
        assert result.total_selected_seats == 3

    def test_unknown_cabin_class_dropped(self, skill, make_train, make_response):
        raw = make_response(make_train(cabins=[(99, 10), (ECONOMY, 1)]))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert [c.class_key for c in result.trains[0].cabins] == ["ECONOMY"]
        assert result.total_selected_seats == 1

    def test_name_falls_back_to_name_field(self, skill, make_train, make_response):
        raw = make_response(make_train(name=None))
        result = skill.filter(raw, "08:00", "12:00", ["ECONOMY"])
        assert result.trains[0].name == "81002"


class TestPriceResolution:
    def _price(self, skill, make_train, make_response, **entry):
        train = make_train(cabins=[(ECONOMY, 1)])
        cabin = train["cabinClassAvailabilities"][0]
        cabin.pop("minPrice")
        cabin.update(entry)
        return skill.filter(make_response(train), "08:00", "12:00", ["ECONOMY"]).trains[0].cabins[0].price

    def test_parsed_min_price_first(self, skill, make_train, make_response):
        price = self._price(
            skill, make_train, make_response,
            minPrice={"parsedValue": 300.5},
            bookingClassAvailabilities=[{"price": {"parsedValue": 999}}],
        )
        assert price == 300.5

    def test_raw_numeric_min_price(self, skill, make_train, make_response):
        assert self._price(skill, make_train, make_response, minPrice=275) == 275.0

    def test_booking_class_price_fallback(self, skill, make_train, make_response):
        price = self._price(
            skill, make_train, make_response,
            bookingClassAvailabilities=[{"price": {"parsedValue": 512.25}}],
        )
        assert price == 512.25

    def test_no_price(self, skill, make_train, make_response):
        assert self._price(skill, make_train, make_response) is None
