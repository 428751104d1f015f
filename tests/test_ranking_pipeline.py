import pytest

from league_analysis.analysis.ranking_pipeline import (
    RankingPipeline,
    coverage_score,
    paginate,
    toggle_sort,
)
from league_analysis.models.options import ManualSort, RankingOptions
from league_analysis.models.profile import TopicRanks
from league_analysis.models.topic import Metric
from conftest import make_profile


def ids(profiles):
    return [p.profile_id for p in profiles]


@pytest.fixture
def pipeline():
    return RankingPipeline()


def test_scenario_b_coverage_score_orders_profiles(pipeline):
    u1 = make_profile("u1", {"alpha": 1, "beta": 5})
    u2 = make_profile("u2", {"alpha": 2})

    assert coverage_score(u1, Metric.TOTAL, 10) == pytest.approx(1.6)
    assert coverage_score(u2, Metric.TOTAL, 10) == pytest.approx(0.9)

    ranked = pipeline.rank_profiles([u2, u1], RankingOptions(top_limit=10))
    assert ids(ranked) == ["u1", "u2"]


def test_coverage_ties_break_alphabetically_case_insensitive(pipeline):
    profiles = [
        make_profile("1", {"alpha": 3}, name="bravo"),
        make_profile("2", {"beta": 3}, name="Alpha"),
    ]
    ranked = pipeline.rank_profiles(profiles, RankingOptions(top_limit=10))
    assert ids(ranked) == ["2", "1"]


def test_limit_filter_is_reapplied(pipeline):
    profiles = [
        make_profile("a", {"alpha": 1, "beta": 30}),
        make_profile("b", {"beta": 40}),
    ]
    ranked = pipeline.rank_profiles(profiles, RankingOptions(top_limit=20))

    assert ids(ranked) == ["a"]
    assert ranked[0].topics == {"alpha"}
    # the input profile keeps its ranks
    assert profiles[0].topics == {"alpha", "beta"}


def test_text_filter_matches_name_or_handle(pipeline):
    profiles = [
        make_profile("a", {"t": 1}, name="Satoshi", handle="nakamoto"),
        make_profile("b", {"t": 2}, name="Vitalik", handle="vbuterin"),
    ]
    assert ids(pipeline.rank_profiles(profiles, RankingOptions(search_text="SATO"))) == ["a"]
    assert ids(pipeline.rank_profiles(profiles, RankingOptions(search_text="buter"))) == ["b"]
    assert ids(pipeline.rank_profiles(profiles, RankingOptions(search_text="   "))) == ["a", "b"]


def test_single_topic_sort_by_rank(pipeline):
    profiles = [
        make_profile("a", {"alpha": 9, "beta": 1}),
        make_profile("b", {"alpha": 2}),
        make_profile("c", {"beta": 3}),
    ]
    ranked = pipeline.rank_profiles(profiles, RankingOptions(selected_topic_slugs=["alpha"]))

    assert ids(ranked) == ["b", "a"]


def test_single_topic_sort_uses_metric(pipeline):
    profiles = [
        make_profile("a", {"alpha": TopicRanks(rank_total=1, rank_signal=8)}),
        make_profile("b", {"alpha": TopicRanks(rank_total=2, rank_signal=3)}),
    ]
    options = RankingOptions(selected_topic_slugs=["alpha"], metric=Metric.SIGNAL)
    assert ids(pipeline.rank_profiles(profiles, options)) == ["b", "a"]


def test_multi_topic_sort_by_best_then_sum(pipeline):
    profiles = [
        make_profile("a", {"alpha": 1, "beta": 50}),
        make_profile("b", {"alpha": 1, "beta": 10}),
        make_profile("c", {"beta": 1}),
        make_profile("d", {"alpha": 4}),
        make_profile("e", {"gamma": 1}),
    ]
    options = RankingOptions(selected_topic_slugs=["alpha", "beta"])
    ranked = pipeline.rank_profiles(profiles, options)

    # best 1: c (sum 1), b (sum 11), a (sum 51); then d (best 4); e not selected
    assert ids(ranked) == ["c", "b", "a", "d"]


def test_topic_count_filter_counts_within_selection(pipeline):
    profiles = [
        make_profile("a", {"alpha": 1, "beta": 2, "gamma": 3}),
        make_profile("b", {"alpha": 1, "gamma": 3}),
        make_profile("c", {"alpha": 1, "beta": 1}),
    ]
    options = RankingOptions(selected_topic_slugs=["alpha", "beta"], topic_count_filter=1)
    assert ids(pipeline.rank_profiles(profiles, options)) == ["b"]

    options = RankingOptions(topic_count_filter=3)
    assert ids(pipeline.rank_profiles(profiles, options)) == ["a"]


def test_manual_sort_overrides_automatic_order(pipeline):
    profiles = [
        make_profile("a", {"alpha": 1, "beta": 7}),
        make_profile("b", {"alpha": 2, "beta": 3}),
        make_profile("c", {"alpha": 3}),
    ]
    options = RankingOptions(
        selected_topic_slugs=["alpha"],
        manual_sort=ManualSort(topic_slug="beta", field="rankTotal", direction="asc"),
    )
    assert ids(pipeline.rank_profiles(profiles, options)) == ["b", "a", "c"]

    options.manual_sort = ManualSort(topic_slug="beta", field="rankTotal", direction="desc")
    assert ids(pipeline.rank_profiles(profiles, options)) == ["a", "b", "c"]


def test_manual_sort_on_ratio_rank(pipeline):
    profiles = [
        make_profile("a", {"t": TopicRanks(rank_total=1, signal_points=10, noise_points=9)}),
        make_profile("b", {"t": TopicRanks(rank_total=2, signal_points=10, noise_points=1)}),
    ]
    options = RankingOptions(manual_sort=ManualSort(topic_slug="t", field="ratioRank"))
    ranked = pipeline.rank_profiles(profiles, options)

    assert ids(ranked) == ["b", "a"]
    assert ranked[0].ranks["t"].ratio_rank == 1


def test_empty_result_is_empty_list(pipeline):
    profiles = [make_profile("a", {"t": 1})]
    assert pipeline.rank_profiles(profiles, RankingOptions(search_text="nobody")) == []
    assert pipeline.rank_profiles([], RankingOptions()) == []


def test_ranking_is_deterministic(pipeline):
    profiles = [make_profile(f"p{i}", {"t": (i % 3) + 1}, name="same") for i in range(12)]
    first = pipeline.rank_profiles(profiles, RankingOptions())
    second = pipeline.rank_profiles(list(reversed(profiles)), RankingOptions())

    assert ids(first) == ids(second)


def test_invalid_manual_sort_rejected():
    with pytest.raises(ValueError):
        ManualSort(topic_slug="t", direction="sideways")
    with pytest.raises(ValueError):
        ManualSort(topic_slug="t", field="points")


def test_toggle_sort():
    first = toggle_sort(None, "alpha", "rankSignal")
    assert (first.topic_slug, first.field, first.direction) == ("alpha", "rankSignal", "asc")

    second = toggle_sort(first, "alpha", "rankSignal")
    assert second.direction == "desc"
    assert toggle_sort(second, "alpha", "rankSignal").direction == "asc"
    assert toggle_sort(second, "alpha", "rankNoise").direction == "asc"


def test_paginate_slices_and_clamps():
    profiles = [make_profile(f"p{i}", {"t": i + 1}) for i in range(65)]

    page = paginate(profiles, page=3, page_size=30)
    assert page.total_pages == 3
    assert ids(page.items) == [f"p{i}" for i in range(60, 65)]

    out_of_range = paginate(profiles, page=9, page_size=30)
    assert out_of_range.page == 1
    assert len(out_of_range.items) == 30

    empty = paginate([], page=1, page_size=30)
    assert empty.total_pages == 1
    assert empty.items == []


def test_ratio_ranks_are_numbered_after_search(pipeline):
    profiles = [
        make_profile("a", {"t": TopicRanks(rank_total=1, signal_points=100, noise_points=10)}, name="alice"),
        make_profile("b", {"t": TopicRanks(rank_total=2, signal_points=100, noise_points=50)}, name="bob"),
    ]
    ranked = pipeline.rank_profiles(profiles, RankingOptions(search_text="bob"))

    assert ids(ranked) == ["b"]
    assert ranked[0].ranks["t"].ratio_rank == 1

    everyone = {p.profile_id: p.ranks["t"].ratio_rank for p in pipeline.rank_profiles(profiles, RankingOptions())}
    assert everyone == {"a": 1, "b": 2}
