import logging
from datetime import date

import pytest

from strprice.core.config import Season
from strprice.core.conflicts import detect_conflicts
from strprice.core.mapping import map_weeks
from strprice.core.models import ConflictOption, Resolution, StrategyReversalConflict
from strprice.core.pricing import season_percentage_lookup
from strprice.core.resolution import GAP_FILL_RANGE, apply_resolutions


def resolve(conflict, **resolution):
    return conflict.model_copy(update={"resolved": True, "resolution": Resolution(**resolution)})


@pytest.fixture
def colliding_mappings():
    records = [
        {"start": date(2026, 6, 6), "price": "$2,900"},
        {"start": date(2026, 6, 13), "price": "$3,000"},
        {"start": date(2026, 6, 20), "price": "$3,300"},
    ]
    return map_weeks(records, 2026, 2027)


@pytest.fixture
def collision(colliding_mappings):
    return next(c for c in detect_conflicts(colliding_mappings, 2027) if c.type == "collision")


@pytest.fixture
def july_gap(mapping_factory):
    mappings = [
        mapping_factory(date(2026, 7, 4), date(2027, 7, 3), "$3,000"),
        mapping_factory(date(2026, 7, 18), date(2027, 7, 17), "$3,101"),
    ]
    gap = next(c for c in detect_conflicts(mappings, 2027) if c.type == "gap" and c.target_week == "2027-07-10")
    return mappings, gap


class TestUnresolved:

    def test_no_conflicts_returns_equal_mappings(self, colliding_mappings):
        result = apply_resolutions(colliding_mappings, [])

        assert result == sorted(colliding_mappings, key=lambda m: m.target.start)
        assert all(any(r is m for m in colliding_mappings) for r in result)

    def test_unresolved_conflicts_change_nothing(self, colliding_mappings, collision):
        conflicts = detect_conflicts(colliding_mappings, 2027)

        assert apply_resolutions(colliding_mappings, conflicts) == apply_resolutions(colliding_mappings, [])
        assert collision.resolved is False

    def test_failed_mappings_are_dropped(self, colliding_mappings):
        failed = colliding_mappings[0].model_copy(update={"target": None, "error": "No matching anchor in target year"})

        result = apply_resolutions([failed, *colliding_mappings[1:]], [])

        assert len(result) == 2
        assert all(m.target is not None for m in result)

    def test_strategy_reversals_are_ignored(self, mapping_factory):
        mapping = mapping_factory(date(2026, 1, 10), date(2027, 1, 23), "$3,000")
        reversal = StrategyReversalConflict(
            source_range=mapping.source_range,
            target_range=mapping.target_range,
            price="$3,000",
            source_pattern="higher",
            target_pattern="lower",
            description="reversed",
            options=[ConflictOption(label="Adjust", value="adjust")],
            resolved=True,
            resolution=Resolution(value="adjust"),
        )

        assert apply_resolutions([mapping], [reversal]) == [mapping]


class TestCollisionResolution:

    def test_pick_second_source(self, colliding_mappings, collision):
        result = apply_resolutions(colliding_mappings, [resolve(collision, value="$3,300", source_index=1)])

        at_target = [m for m in result if m.target.key == "2027-06-19"]
        assert len(at_target) == 1
        assert at_target[0].source_range == "Jun 20 - Jun 27"
        assert at_target[0].proposed_price == "$3,300"
        assert len(result) == 2

    def test_pick_first_source(self, colliding_mappings, collision):
        result = apply_resolutions(colliding_mappings, [resolve(collision, value="$3,000", source_index=0)])

        at_target = [m for m in result if m.target.key == "2027-06-19"]
        assert [m.source_range for m in at_target] == ["Jun 13 - Jun 20"]

    def test_custom_price_keeps_earliest_contributor(self, colliding_mappings, collision):
        result = apply_resolutions(
            colliding_mappings, [resolve(collision, value="custom", custom_price="$3,150", source_index=-1)]
        )

        at_target = [m for m in result if m.target.key == "2027-06-19"]
        assert len(at_target) == 1
        assert at_target[0].source_range == "Jun 13 - Jun 20"
        assert at_target[0].proposed_price == "$3,150"

    def test_custom_without_price_is_skipped(self, colliding_mappings, collision, strprice_caplog):
        with strprice_caplog.at_level(logging.WARNING, logger="strprice"):
            result = apply_resolutions(colliding_mappings, [resolve(collision, value="custom")])

        assert len([m for m in result if m.target.key == "2027-06-19"]) == 2
        assert "without a price" in strprice_caplog.text

    def test_unknown_source_index_is_skipped(self, colliding_mappings, collision, strprice_caplog):
        with strprice_caplog.at_level(logging.WARNING, logger="strprice"):
            result = apply_resolutions(colliding_mappings, [resolve(collision, value="$9,999", source_index=5)])

        assert len(result) == 3
        assert "no contributing mapping" in strprice_caplog.text

    def test_originals_are_not_mutated(self, colliding_mappings, collision):
        before = [m.model_dump() for m in colliding_mappings]

        apply_resolutions(colliding_mappings, [resolve(collision, value="$3,300", source_index=1)])

        assert [m.model_dump() for m in colliding_mappings] == before

    def test_target_keys_unique_after_resolution(self, colliding_mappings, collision):
        result = apply_resolutions(colliding_mappings, [resolve(collision, value="$3,000", source_index=0)])
        keys = [m.target.key for m in result]

        assert len(keys) == len(set(keys))
        assert keys == sorted(keys)


class TestGapFill:

    def test_interpolate(self, july_gap):
        mappings, gap = july_gap
        result = apply_resolutions(mappings, [resolve(gap, value="interpolate", interpolated_price="$3,051")])

        assert [m.target.key for m in result] == ["2027-07-03", "2027-07-10", "2027-07-17"]
        fill = result[1]
        assert fill.is_gap_fill is True
        assert fill.source is None
        assert fill.source_range == GAP_FILL_RANGE
        assert fill.proposed_price == "$3,051"
        assert fill.relationship == "1 week after July 4th"
        assert fill.target_range == "Jul 10 - Jul 17"
        assert fill.target.end == date(2027, 7, 17)

    def test_interpolate_falls_back_to_option_price(self, july_gap):
        mappings, gap = july_gap
        result = apply_resolutions(mappings, [resolve(gap, value="interpolate")])

        assert result[1].proposed_price == "$3,051"

    def test_previous_week_price(self, july_gap):
        mappings, gap = july_gap
        result = apply_resolutions(mappings, [resolve(gap, value="$3,000")])

        assert result[1].proposed_price == "$3,000"

    def test_custom_price(self, july_gap):
        mappings, gap = july_gap
        result = apply_resolutions(mappings, [resolve(gap, value="custom", custom_price="$2,750")])

        assert result[1].proposed_price == "$2,750"

    def test_custom_without_price_is_skipped(self, july_gap, strprice_caplog):
        mappings, gap = july_gap
        with strprice_caplog.at_level(logging.WARNING, logger="strprice"):
            result = apply_resolutions(mappings, [resolve(gap, value="custom")])

        assert len(result) == 2
        assert "2027-07-10" in strprice_caplog.text


class TestSeasonAdjustment:

    @pytest.fixture
    def summer_plus_ten(self):
        return season_percentage_lookup([
            Season(name="Summer", start_month=6, start_day=1, end_month=8, end_day=31, percentage=10),
        ])

    def test_collision_choice_is_adjusted(self, colliding_mappings, collision, summer_plus_ten):
        result = apply_resolutions(
            colliding_mappings, [resolve(collision, value="$3,000", source_index=0)], summer_plus_ten
        )

        assert next(m for m in result if m.target.key == "2027-06-19").proposed_price == "$3,300"

    def test_untouched_mappings_are_not_adjusted(self, colliding_mappings, collision, summer_plus_ten):
        result = apply_resolutions(
            colliding_mappings, [resolve(collision, value="$3,000", source_index=0)], summer_plus_ten
        )

        assert result[0].proposed_price == "$2,900"

    def test_gap_fill_is_adjusted(self, july_gap, summer_plus_ten):
        mappings, gap = july_gap
        result = apply_resolutions(mappings, [resolve(gap, value="$3,000")], summer_plus_ten)

        assert result[1].proposed_price == "$3,300"

    def test_outside_any_season_is_unchanged(self, july_gap):
        mappings, gap = july_gap
        winter = season_percentage_lookup([
            Season(name="Winter", start_month=12, start_day=1, end_month=12, end_day=31, percentage=-15),
        ])

        result = apply_resolutions(mappings, [resolve(gap, value="$3,000")], winter)

        # 0% still rounds to the nearest $10
        assert result[1].proposed_price == "$3,000"
