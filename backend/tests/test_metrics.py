from datetime import datetime

import pytest

from models.schemas import Education, Project, Skill, Task, UserProfile, WorkExperience
from services.metrics import (
    calculate_completion,
    calculate_learning_hours,
    calculate_profile_strength,
    calculate_readiness,
    compute_metrics,
    estimate_hours_this_week,
    generate_trend_series,
    parse_join_date,
    qualitative_label,
)

NOW = datetime(2024, 6, 15)


class FixedRng:
    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = 0

    def uniform(self, a, b):
        self.calls += 1
        return self.value


def _full_profile(**overrides) -> UserProfile:
    data = dict(
        name="Ada Lovelace",
        role="Engineer",
        location="London",
        bio="Writes programs for engines",
        target_role="Staff Engineer",
        avatar_url="https://example.com/" + "a" * 60,
        skills=[Skill(name="Python"), Skill(name="SQL"), Skill(name="Go")],
        experience=[WorkExperience(id="1", company="Analytical Engines", role="Engineer")],
        education=[Education(id="1", institution="Home", degree="Maths")],
        projects=[Project(id="1", name="Notes")],
    )
    data.update(overrides)
    return UserProfile(**data)


class TestProfileStrength:
    def test_empty_profile(self):
        assert calculate_profile_strength(UserProfile()) == 0

    def test_full_profile_is_capped_at_100(self):
        assert calculate_profile_strength(_full_profile()) == 100

    def test_short_identity_fields_do_not_count(self):
        profile = UserProfile(name="Al", role="Dev", location="NY")
        # "Al" and "NY" have length 2
        assert calculate_profile_strength(profile) == 10

    def test_skill_tiers(self):
        assert calculate_profile_strength(UserProfile(skills=[Skill(name="Python")])) == 5
        two = [Skill(name="Python"), Skill(name="SQL")]
        assert calculate_profile_strength(UserProfile(skills=two)) == 5
        three = two + [Skill(name="Go")]
        assert calculate_profile_strength(UserProfile(skills=three)) == 15

    def test_short_avatar_does_not_count(self):
        assert calculate_profile_strength(UserProfile(avatar_url="x" * 50)) == 0
        assert calculate_profile_strength(UserProfile(avatar_url="x" * 51)) == 10

    def test_collections(self):
        profile = UserProfile(
            experience=[WorkExperience(id="1")],
            education=[Education(id="1")],
            projects=[Project(id="1")],
        )
        assert calculate_profile_strength(profile) == 25


class TestCompletion:
    def test_empty_list(self):
        assert calculate_completion([]) == (0, 0, 0)

    def test_rounds_half_up(self):
        tasks = [Task(title="a", status="Done")] + [Task(title=str(i)) for i in range(7)]
        assert calculate_completion(tasks) == (13, 1, 8)

    def test_in_progress_is_not_done(self):
        tasks = [Task(title="a", status="In Progress"), Task(title="b", status="Done")]
        assert calculate_completion(tasks) == (50, 1, 2)


def test_learning_hours_only_counts_done_tasks():
    tasks = [
        Task(title="a", status="Done", duration="2 hours"),
        Task(title="b", status="Done", duration="30 mins"),
        Task(title="c", status="Done", duration="whenever"),
        Task(title="d", status="Todo", duration="10 hours"),
    ]
    assert calculate_learning_hours(tasks) == pytest.approx(3.5)


@pytest.mark.parametrize("total, expected", [(0, 0), (2, 1), (10, 2), (23, 5)])
def test_hours_this_week(total, expected):
    assert estimate_hours_this_week(total) == expected


class TestReadiness:
    def test_weights(self):
        assert calculate_readiness(50, 40, False) == 35
        assert calculate_readiness(50, 40, True) == 55

    def test_clamped(self):
        assert calculate_readiness(100, 100, True) == 100
        assert calculate_readiness(0, 0, False) == 0


class TestTrendSeries:
    def test_linear_without_jitter(self):
        series = generate_trend_series("March 2024", 70, now=NOW, rng=FixedRng())
        assert [p.label for p in series] == ["Mar", "Apr", "May", "Jun"]
        assert [p.score for p in series] == [10, 30, 50, 70]

    def test_endpoints_never_jittered(self):
        rng = FixedRng(5)
        series = generate_trend_series("March 2024", 70, now=NOW, rng=rng)
        assert series[0].score == 10
        assert series[-1].score == 70
        assert [p.score for p in series[1:-1]] == [35, 55]
        assert rng.calls == 2

    def test_at_least_three_points(self):
        series = generate_trend_series("June 2024", 40, now=NOW, rng=FixedRng())
        assert len(series) == 3
        assert series[-1].label == "Jun"

    def test_at_most_twelve_points(self):
        series = generate_trend_series("2019-01-01", 40, now=NOW, rng=FixedRng())
        assert len(series) == 12
        assert series[0].label == "Jul"
        assert series[-1].label == "Jun"

    def test_unparseable_join_date_assumes_six_months(self):
        series = generate_trend_series("sometime", 40, now=NOW, rng=FixedRng())
        assert len(series) == 7

    def test_scores_never_negative(self):
        series = generate_trend_series("March 2024", 0, now=NOW, rng=FixedRng(-5))
        assert all(p.score >= 0 for p in series)

    def test_crosses_year_boundary(self):
        series = generate_trend_series("Nov 2023", 50, now=datetime(2024, 1, 10), rng=FixedRng())
        assert [p.label for p in series] == ["Nov", "Dec", "Jan"]


class TestParseJoinDate:
    def test_month_year(self):
        assert parse_join_date("March 2023", NOW) == datetime(2023, 3, 1)

    def test_iso(self):
        assert parse_join_date("2023-03-05", NOW) == datetime(2023, 3, 5)

    def test_fallback(self):
        assert parse_join_date("", NOW) == datetime(2023, 12, 1)


def test_compute_metrics():
    profile = _full_profile(joined_date="March 2024")
    tasks = [
        Task(title="a", status="Done", duration="2 hours"),
        Task(title="b", status="Done", duration="3 hours"),
        Task(title="c"),
        Task(title="d"),
    ]
    metrics = compute_metrics(profile, tasks, now=NOW, rng=FixedRng())
    assert metrics.profile_strength == 100
    assert metrics.completion_rate == 50
    assert (metrics.completed_tasks, metrics.total_tasks) == (2, 4)
    assert metrics.learning_hours == 5
    assert metrics.hours_this_week == 1
    # 100 * 0.3 + 50 * 0.5 + 20
    assert metrics.readiness_score == 75
    assert metrics.trend_series[-1].score == 75



def test_learning_hours_round_half_up():
    tasks = [Task(title="a", status="Done", duration="90 mins"), Task(title="b", duration="3 hours")]
    assert calculate_learning_hours(tasks) == pytest.approx(1.5)
    metrics = compute_metrics(UserProfile(), tasks, now=NOW, rng=FixedRng())
    assert metrics.learning_hours == 2

def test_compute_metrics_empty_profile_never_raises():
    metrics = compute_metrics(UserProfile(), [], now=NOW, rng=FixedRng())
    assert metrics.readiness_score == 0
    assert metrics.total_tasks == 0
    assert len(metrics.trend_series) == 7


@pytest.mark.parametrize("score, label", [(81, "Excellent"), (80, "Strong"), (61, "Strong"), (41, "Good"), (40, "Developing")])
def test_qualitative_label(score, label):
    assert qualitative_label(score) == label
