from app.models.workout import PERSON_NAMES, Workout
from app.services.analytics import (
    compute_cumulative_series,
    compute_leaderboard,
    compute_person_stats,
    compute_stats,
    compute_weekly_breakdown,
    list_people,
)
from app.services.workouts import demo_workouts


def make(person, workout_type="Gym", day="2024-01-15", duration=30):
    return Workout(person_name=person, workout_type=workout_type, date=day, duration=duration)


def example_workouts():
    return [
        Workout(
            person_name="Greg",
            workout_type="Gym",
            start_time="09:00",
            end_time="09:45",
            duration=45,
            date="2024-01-15",
        ),
        Workout(
            person_name="Cortese",
            workout_type="HIIT",
            start_time="18:00",
            end_time="18:30",
            duration=30,
            date="2024-01-15",
        ),
    ]


def test_compute_stats_example():
    stats = compute_stats(example_workouts())

    assert stats.total_workouts == 2
    assert stats.workouts_by_type == {"Gym": 1, "HIIT": 1}
    assert stats.total_duration == 75
    assert stats.average_duration == 37.5
    assert stats.workouts_by_week == {"2024-01-14": 2}
    assert stats.workouts_by_month == {"2024-01": 2}
    assert stats.workouts_by_quarter == {"2024-01": 2}
    assert stats.workouts_by_year == {"2024": 2}


def test_compute_stats_empty():
    stats = compute_stats([])
    assert stats.total_workouts == 0
    assert stats.total_duration == 0
    assert stats.average_duration == 0
    assert stats.workouts_by_type == {}


def test_average_is_total_over_count():
    workouts = [make("Greg", duration=d) for d in (10, 25, 40)]
    stats = compute_stats(workouts)
    assert stats.average_duration == stats.total_duration / stats.total_workouts


def test_hours_minutes_durations_are_summed_as_minutes():
    workouts = [make("Greg", duration="1:30"), make("Greg", duration="0:15")]
    assert compute_stats(workouts).total_duration == 105


def test_bad_date_skips_date_buckets_only():
    workouts = [make("Greg", day="sometime"), make("Greg", day="1/16/2024")]
    stats = compute_stats(workouts)

    assert stats.total_workouts == 2
    assert stats.workouts_by_type == {"Gym": 2}
    assert stats.workouts_by_month == {"2024-01": 1}
    assert stats.workouts_by_week == {"2024-01-14": 1}


def test_bad_duration_counts_as_zero():
    workouts = [make("Greg", duration="a while"), make("Greg", duration=40)]
    stats = compute_stats(workouts)
    assert stats.total_duration == 40
    assert stats.average_duration == 20


def test_buckets_across_years():
    workouts = [make("Greg", day="2023-12-31"), make("Greg", day="2024-01-01")]
    stats = compute_stats(workouts)
    assert stats.workouts_by_year == {"2023": 1, "2024": 1}
    assert stats.workouts_by_quarter == {"2023-04": 1, "2024-01": 1}
    # Both days fall in the week starting Sunday 2023-12-31
    assert stats.workouts_by_week == {"2023-12-31": 2}


def test_person_stats_exact_match():
    workouts = example_workouts() + [make("greg")]
    stats = compute_person_stats(workouts, "Greg")

    assert stats.person_name == "Greg"
    assert stats.total_workouts == 1
    assert stats.total_duration == 45

    nobody = compute_person_stats(workouts, "Stu")
    assert nobody.total_workouts == 0
    assert nobody.average_duration == 0


def test_leaderboard_example_keeps_encounter_order_for_ties():
    board = compute_leaderboard(example_workouts())
    assert [(e.person_name, e.total_workouts, e.rank) for e in board] == [
        ("Greg", 1, 1),
        ("Cortese", 1, 2),
    ]


def test_leaderboard_sorted_descending_with_gapless_ranks():
    workouts = [
        make("Stu"),
        make("Greg"),
        make("Greg"),
        make("Niki"),
        make("Greg"),
        make("Niki"),
        make("Amanda"),
    ]
    board = compute_leaderboard(workouts)

    assert [e.person_name for e in board] == ["Greg", "Niki", "Stu", "Amanda"]
    assert [e.total_workouts for e in board] == [3, 2, 1, 1]
    assert [e.rank for e in board] == [1, 2, 3, 4]


def test_leaderboard_empty():
    assert compute_leaderboard([]) == []


def test_cumulative_same_day_then_next_day():
    workouts = [
        make("Greg", day="2024-01-16"),
        make("Greg", day="2024-01-15"),
        make("Cortese", day="2024-01-15"),
    ]
    series = compute_cumulative_series(workouts)

    assert len(series) == 2
    assert series[0].date == "2024-01-15"
    assert series[0].label == "Jan 15"
    assert series[0].totals == {"Greg": 1, "Cortese": 1}
    assert series[1].date == "2024-01-16"
    assert series[1].totals == {"Greg": 2, "Cortese": 1}


def test_cumulative_mixed_date_formats_share_a_day():
    workouts = [make("Greg", day="2024-01-15"), make("Nick", day="1/15/2024")]
    series = compute_cumulative_series(workouts)
    assert len(series) == 1
    assert series[0].totals == {"Greg": 1, "Nick": 1}


def test_cumulative_skips_unparseable_dates():
    workouts = [make("Greg", day="???"), make("Nick", day="2024-02-01")]
    series = compute_cumulative_series(workouts)
    assert [p.totals for p in series] == [{"Nick": 1}]


def test_weekly_breakdown():
    workouts = [
        make("Greg", day="2024-01-21"),
        make("Greg", day="2024-01-15"),
        make("Cortese", day="2024-01-20"),
        make("Greg", day="2024-01-20"),
    ]
    weeks = compute_weekly_breakdown(workouts)

    assert [(w.week, w.label) for w in weeks] == [
        ("2024-01-14", "Jan 14"),
        ("2024-01-21", "Jan 21"),
    ]
    assert weeks[0].counts == {"Greg": 2, "Cortese": 1}
    assert weeks[1].counts == {"Greg": 1}


def test_functions_do_not_mutate_input():
    workouts = example_workouts()
    before = [w.model_dump() for w in workouts]

    compute_stats(workouts)
    compute_leaderboard(workouts)
    compute_cumulative_series(workouts)

    assert [w.model_dump() for w in workouts] == before
    assert compute_stats(workouts) == compute_stats(workouts)


def test_demo_dataset_statistics():
    workouts = demo_workouts()
    stats = compute_stats(workouts)

    assert stats.total_workouts == 16
    assert stats.total_duration == 895
    assert stats.workouts_by_type == {"Gym": 5, "HIIT": 4, "Cardio": 4, "Activity": 3}

    board = compute_leaderboard(workouts)
    assert [e.person_name for e in board] == [
        "Greg", "Cortese", "JP", "Kyle", "Nick", "Amanda", "Niki", "Stu",
    ]
    assert all(e.total_workouts == 2 for e in board)
    assert sorted(e.person_name for e in board) == sorted(PERSON_NAMES)

    greg = compute_person_stats(workouts, "Greg")
    assert greg.total_workouts == 2
    assert greg.total_duration == 85
    assert greg.average_duration == 42.5

    weeks = compute_weekly_breakdown(workouts)
    assert [(w.week, sum(w.counts.values())) for w in weeks] == [
        ("2024-01-14", 6),
        ("2024-01-21", 7),
        ("2024-01-28", 3),
    ]

    series = compute_cumulative_series(workouts)
    assert len(series) == 16
    assert series[-1].totals == {name: 2 for name in PERSON_NAMES}


def test_list_people_puts_roster_first():
    workouts = [make("Zed"), make("Greg")]
    assert list_people(workouts, ["Greg", "Stu"]) == ["Greg", "Stu", "Zed"]
