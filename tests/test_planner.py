import pytest

from gpxpace.analyze.outcome import Outcome
from gpxpace.config import load_config
from gpxpace.errors import UnknownPresetError
from gpxpace.pace.planner import PaceGoal, plan_pace, plan_pace_with_preset


@pytest.fixture
def flat(profile_track):
    def build(total_m):
        return profile_track([(0, 100), (total_m / 2, 100), (total_m, 100)])
    return build


def test_flat_2500m_at_five_minute_pace(flat):
    plan = plan_pace(flat(2500), PaceGoal(flat_pace="05:00"), 0.2)

    assert plan.outcome is Outcome.OK
    assert [leg.distance_km for leg in plan.legs] == [1.0, 1.0, 0.5]
    assert [leg.leg_time_s for leg in plan.legs] == [300, 300, 150]
    assert [leg.pace_s_per_km for leg in plan.legs] == [300, 300, 300]
    assert [leg.is_partial for leg in plan.legs] == [False, False, True]
    assert [leg.cumulative_time_s for leg in plan.legs] == [300, 600, 750]
    assert plan.total_time_s == 750
    assert plan.total_distance_km == 2.5


def test_target_duration_over_flat_10k(flat):
    plan = plan_pace(flat(10000), PaceGoal(target_duration_s=3600), 0.2)

    assert plan.base_pace_s_per_km == 360
    assert len(plan.legs) == 10
    assert all(leg.pace_s_per_km == pytest.approx(360) for leg in plan.legs)
    assert plan.total_time_s == pytest.approx(3600)


def test_target_duration_wins_over_flat_pace(flat):
    plan = plan_pace(flat(10000), PaceGoal(target_duration_s=3600, flat_pace="4:00"), 0.2)
    assert plan.base_pace_s_per_km == 360


def test_non_positive_target_falls_back_to_flat_pace(flat):
    plan = plan_pace(flat(10000), PaceGoal(target_duration_s=0, flat_pace=240), 0.2)
    assert plan.base_pace_s_per_km == 240


def test_elevation_delta_uses_interpolated_km_marks(profile_track):
    # 1000 m mark falls mid-segment: elevation there is 5
    points = profile_track([(0, 0), (500, 10), (1500, 0), (2000, 5)])
    plan = plan_pace(points, PaceGoal(flat_pace="5:00"), 0.2)

    first, second = plan.legs
    assert first.elevation_delta_m == pytest.approx(5)
    assert second.elevation_delta_m == pytest.approx(0)
    assert first.leg_time_s == pytest.approx(301)
    assert second.leg_time_s == pytest.approx(300)
    assert (first.start_m, first.end_m, second.start_m, second.end_m) == (0, 1000, 1000, 2000)


def test_partial_threshold_tolerates_rounding(profile_track):
    points = profile_track([(0, 0), (1999.5, 0)])
    plan = plan_pace(points, PaceGoal(flat_pace="5:00"), 0.2)

    assert plan.legs[-1].distance_km == pytest.approx(0.9995)
    assert plan.legs[-1].is_partial is False


def test_exact_kilometres_have_no_partial_leg(flat):
    plan = plan_pace(flat(3000), PaceGoal(flat_pace="5:00"), 0.2)
    assert len(plan.legs) == 3
    assert not any(leg.is_partial for leg in plan.legs)
    assert [leg.index for leg in plan.legs] == [1, 2, 3]


@pytest.mark.parametrize("delta", [25.0, -25.0])
def test_sensitivity_factor_scales_with_climb_direction(profile_track, delta):
    points = profile_track([(0, 100), (1000, 100 + delta)])
    goal = PaceGoal(flat_pace="5:00")

    times = [plan_pace(points, goal, f).legs[0].leg_time_s for f in (0.0, 0.1, 0.2, 0.5)]

    if delta > 0:
        assert times == sorted(times) and len(set(times)) == 4
    else:
        assert times == sorted(times, reverse=True) and len(set(times)) == 4


def test_empty_track_is_no_data():
    plan = plan_pace([], PaceGoal(flat_pace="5:00"), 0.2)
    assert plan.outcome is Outcome.NO_DATA
    assert plan.legs == ()


@pytest.mark.parametrize(
    "goal",
    [
        PaceGoal(),
        PaceGoal(flat_pace="abc"),
        PaceGoal(flat_pace="0:00"),
        PaceGoal(flat_pace=-300),
        PaceGoal(target_duration_s=-60),
        None,
    ],
)
def test_goal_without_positive_pace_is_insufficient(flat, goal):
    plan = plan_pace(flat(5000), goal, 0.2)
    assert plan.outcome is Outcome.INSUFFICIENT_INPUT
    assert plan.legs == ()


def test_non_numeric_sensitivity_is_insufficient(flat):
    plan = plan_pace(flat(5000), PaceGoal(flat_pace="5:00"), float("nan"))
    assert plan.outcome is Outcome.INSUFFICIENT_INPUT


def test_zero_length_track_has_no_legs(profile_track):
    plan = plan_pace(profile_track([(0, 100)]), PaceGoal(target_duration_s=600), 0.2)

    assert plan.outcome is Outcome.OK
    assert plan.legs == ()
    assert plan.total_time_s == 0
    assert plan.base_pace_s_per_km == pytest.approx(600 / 0.001)


@pytest.mark.parametrize(
    "hms, expected",
    [((1, 2, 3), 3723), ((0, 45, 0), 2700), ((None, "", 30), 30), ((-1, 10, 0), 600)],
)
def test_goal_from_clock_fields(hms, expected):
    assert PaceGoal.from_hms(*hms).target_duration_s == expected


def test_plan_with_named_preset(tmp_path, profile_track):
    cfg = load_config(repo_root=tmp_path, user_config_path=tmp_path / "user.toml")
    points = profile_track([(0, 0), (1000, 50)])
    goal = PaceGoal(flat_pace="5:00")

    high = plan_pace_with_preset(points, goal, "high", config=cfg)
    default = plan_pace_with_preset(points, goal, config=cfg)

    assert high.sensitivity_factor == 0.4
    assert high.legs[0].leg_time_s == pytest.approx(320)
    assert default.sensitivity_factor == 0.2


def test_unknown_preset_raises(tmp_path, flat):
    cfg = load_config(repo_root=tmp_path, user_config_path=tmp_path / "user.toml")
    with pytest.raises(UnknownPresetError):
        plan_pace_with_preset(flat(1000), PaceGoal(flat_pace="5:00"), "ludicrous", config=cfg)
