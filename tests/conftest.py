import logging
from datetime import date, timedelta

import pytest

from strprice.core.holidays import format_week_range
from strprice.core.models import Mapping, SourceWeekRecord, Week


def make_mapping(source_start: date, target_start: date, price, relationship: str = "test") -> Mapping:
    """Build a mapping directly, bypassing anchor resolution."""
    target = Week.from_start(target_start)
    return Mapping(
        source=SourceWeekRecord(start=source_start, key=source_start.isoformat(), price=price),
        source_start=source_start,
        source_range=format_week_range(source_start, source_start + timedelta(days=7)),
        target=target,
        target_range=format_week_range(target.start, target.end),
        relationship=relationship,
        proposed_price=price,
    )


@pytest.fixture
def mapping_factory():
    return make_mapping


@pytest.fixture
def strprice_caplog(caplog):
    """caplog that also sees records once the package logger stops propagating."""
    logger = logging.getLogger("strprice")
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
