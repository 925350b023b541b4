import pytest

from services.duration_parser import FALLBACK_HOURS, parse_duration


@pytest.mark.parametrize(
    "text, hours",
    [
        ("2 hours", 2.0),
        ("3h", 3.0),
        ("1.5 hr", 1.5),
        ("30 mins", 0.5),
        ("90 mins", 1.5),
        ("45m", 0.75),
        ("1h 30m", 1.5),
        ("1 hour 30 minutes", 1.5),
        ("2", 2.0),
        ("1.5", 1.5),
        ("2 HOURS", 2.0),
    ],
)
def test_parse_duration(text, hours):
    assert parse_duration(text) == pytest.approx(hours)


@pytest.mark.parametrize("text", ["", None, "a while", "soon", "0 hours"])
def test_unparseable_falls_back_to_one_hour(text):
    assert parse_duration(text) == FALLBACK_HOURS


def test_bare_number_only_when_whole_string():
    # "about 3" is not a bare number and has no unit
    assert parse_duration("about 3") == FALLBACK_HOURS
