import pytest
from pydantic import ValidationError

from strprice.core.pricing import parse_price
from strprice.generators import SampleCalendarConfig, generate_sample_calendar


class TestSampleCalendar:

    def test_covers_every_week(self):
        records = generate_sample_calendar(SampleCalendarConfig(year=2026))

        assert len(records) == 52
        assert records[0].key == "2026-01-03"
        assert records[-1].key == "2026-12-26"

    def test_structured_start_is_zero_indexed(self):
        first = generate_sample_calendar(SampleCalendarConfig(year=2026))[0]

        assert (first.start.year, first.start.month, first.start.day) == (2026, 0, 3)
        assert first.start.to_date().isoformat() == first.key

    def test_peak_and_base(self):
        records = generate_sample_calendar(SampleCalendarConfig(year=2026))

        assert records[29].price == "$4,200"
        assert records[0].price == "$1,800"
        assert max(parse_price(r.price) for r in records) == 4200

    def test_prices_in_ten_dollar_steps(self):
        records = generate_sample_calendar(SampleCalendarConfig(year=2026, noise_level=0.1, seed=7))

        assert all(r.price.startswith("$") for r in records)
        assert all(parse_price(r.price) % 10 == 0 for r in records)

    def test_seed_is_deterministic(self):
        config = SampleCalendarConfig(year=2026, noise_level=0.2, seed=42)

        assert generate_sample_calendar(config) == generate_sample_calendar(config)

    def test_noise_changes_prices(self):
        smooth = generate_sample_calendar(SampleCalendarConfig(year=2026))
        noisy = generate_sample_calendar(SampleCalendarConfig(year=2026, noise_level=0.2, seed=42))

        assert [r.price for r in smooth] != [r.price for r in noisy]
        assert [r.key for r in smooth] == [r.key for r in noisy]

    def test_week_start_day(self):
        records = generate_sample_calendar(SampleCalendarConfig(year=2026, week_start_day=0))

        assert records[0].key == "2026-01-04"

    def test_peak_below_base_rejected(self):
        with pytest.raises(ValidationError, match="peak_price"):
            SampleCalendarConfig(year=2026, base_price=3000, peak_price=2000)

    def test_noise_level_bounded(self):
        with pytest.raises(ValidationError):
            SampleCalendarConfig(year=2026, noise_level=0.9)
