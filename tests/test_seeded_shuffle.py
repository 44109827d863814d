from datetime import datetime, timezone

from src.seeded_shuffle import (
    FALLBACK_SEED,
    XorShift32,
    fnv1a_32,
    schedule_seed,
    seeded_permutation,
)

TITLES = [f"Title {i}" for i in range(12)]


def test_fnv1a_known_values():
    assert fnv1a_32("") == 2166136261
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_zero_seed_uses_fallback():
    assert XorShift32(0).state == FALLBACK_SEED


def test_xorshift_floats_in_unit_interval():
    rng = XorShift32(42)
    values = [rng.next_float() for _ in range(1000)]
    assert all(0 <= v < 1 for v in values)
    assert len(set(values)) > 990


def test_permutation_is_deterministic_and_complete():
    first = seeded_permutation(TITLES, "pay-1")
    second = seeded_permutation(TITLES, "pay-1")
    assert first == second
    assert sorted(first) == sorted(TITLES)


def test_permutation_leaves_input_untouched():
    items = list(TITLES)
    seeded_permutation(items, "x")
    assert items == TITLES


def test_seed_components_change_order():
    start = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
    base = seeded_permutation(TITLES, schedule_seed("p1", start, "vdaa", "beginner"))
    variants = [
        schedule_seed("p2", start, "vdaa", "beginner"),
        schedule_seed("p1", datetime(2025, 1, 2, 8, 0, tzinfo=timezone.utc), "vdaa", "beginner"),
        schedule_seed("p1", start, "vadmin", "beginner"),
        schedule_seed("p1", start, "vdaa", "expert"),
    ]
    for seed in variants:
        assert seeded_permutation(TITLES, seed) != base


def test_schedule_seed_format():
    start = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert schedule_seed("abc", start, "vdaa", "beginner") == "abc-2025-01-01T08:00:00.000Z-vdaa-beginner"


def test_short_lists():
    assert seeded_permutation([], "s") == []
    assert seeded_permutation(["only"], "s") == ["only"]
