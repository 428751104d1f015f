import pytest

from league_analysis.analysis.farming_index import FarmingIndexCalculator
from league_analysis.models.profile import TopicRanks
from league_analysis.models.topic import League, Metric, Topic
from conftest import make_profile


def test_scenario_c_half_the_cohort_farms_elsewhere():
    profiles = [
        make_profile("A", {"T": 1}),
        make_profile("B", {"T": 2, "U": 3}),
    ]
    calc = FarmingIndexCalculator(top_cutoff=2, good_rank_threshold=5)
    metric = calc.analyze_topic("T", profiles)

    assert metric.farming_score == 0.5
    assert metric.organic_index == 0.667
    assert metric.exclusive_top_count == 1
    assert [p.profile_id for p in metric.exclusive_profiles] == ["A"]
    assert [p.profile_id for p in metric.top_profiles] == ["A", "B"]


def test_cohort_is_limited_to_top_cutoff():
    profiles = [
        make_profile("a", {"T": 1}),
        make_profile("b", {"T": 2}),
        make_profile("c", {"T": 3, "U": 1, "V": 1}),
    ]
    metric = FarmingIndexCalculator(top_cutoff=2, good_rank_threshold=5).analyze_topic("T", profiles)

    assert [p.profile_id for p in metric.top_profiles] == ["a", "b"]
    assert metric.farming_score == 0.0
    assert metric.organic_index == 1.0


def test_ranks_beyond_threshold_do_not_count():
    profiles = [make_profile("a", {"T": 1, "U": 6, "V": 5})]
    metric = FarmingIndexCalculator(top_cutoff=10, good_rank_threshold=5).analyze_topic("T", profiles)

    assert metric.farming_score == 1.0
    assert metric.organic_index == 0.5
    assert metric.exclusive_top_count == 0


def test_topic_without_ranked_profiles():
    metric = FarmingIndexCalculator().analyze_topic("empty", [make_profile("a", {"other": 1})])

    assert metric.farming_score == 0.0
    assert metric.organic_index == 1.0
    assert metric.top_profiles == []
    assert metric.exclusive_top_count == 0


def test_metric_selects_rank_field():
    profiles = [
        make_profile("a", {"T": TopicRanks(rank_total=1, rank_noise=1), "U": TopicRanks(rank_total=2, rank_noise=90)}),
    ]
    total = FarmingIndexCalculator(good_rank_threshold=10).analyze_topic("T", profiles)
    noise = FarmingIndexCalculator(good_rank_threshold=10, metric=Metric.NOISE).analyze_topic("T", profiles)

    assert total.farming_score == 1.0
    assert noise.farming_score == 0.0


def test_compute_farming_index_sorts_most_organic_first():
    topics = [Topic(slug="alpha", title="Alpha", league=League.XEET)]
    profiles = [
        make_profile("a", {"alpha": 1}),
        make_profile("b", {"beta": 1, "gamma": 1}),
        make_profile("c", {"delta": 1}),
    ]
    metrics = FarmingIndexCalculator().compute_farming_index(topics, profiles)

    assert [m.topic_slug for m in metrics] == ["alpha", "delta", "beta", "gamma"]
    assert metrics[0].title == "Alpha"
    assert metrics[1].title == "delta"
    for m in metrics:
        assert m.farming_score >= 0
        assert 0 < m.organic_index <= 1
        assert 0 <= m.exclusive_top_count <= len(m.top_profiles)


def test_to_dict_lists_exclusive_ids():
    metric = FarmingIndexCalculator().analyze_topic("T", [make_profile("a", {"T": 1})])
    data = metric.to_dict()

    assert data["exclusive_profile_ids"] == ["a"]
    assert data["top_count"] == 1


@pytest.mark.parametrize("kwargs", [{"top_cutoff": 0}, {"good_rank_threshold": -1}, {"top_cutoff": 1.5}])
def test_invalid_parameters_rejected(kwargs):
    with pytest.raises(ValueError):
        FarmingIndexCalculator(**kwargs)
