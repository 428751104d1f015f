import pytest

from league_analysis.analysis.metric_resolver import qualifies, resolve_field, resolve_rank
from league_analysis.models.profile import TopicRanks
from league_analysis.models.topic import Metric
from conftest import make_entry


def test_total_falls_back_to_generic_rank():
    entry = make_entry("u1", "alpha", rank=7)
    assert resolve_rank(entry, Metric.TOTAL) == 7


def test_noise_does_not_borrow_signal_rank():
    entry = make_entry("u1", "alpha", rank_signal=5)
    assert resolve_rank(entry, Metric.NOISE) is None
    assert resolve_rank(entry, Metric.TOTAL) is None
    assert resolve_rank(entry, Metric.SIGNAL) == 5


@pytest.mark.parametrize(
    "metric,expected",
    [
        (Metric.TOTAL, 3),
        (Metric.SIGNAL, 1),
        (Metric.NOISE, 3),
    ],
)
def test_precedence_with_partial_fields(metric, expected):
    ranks = TopicRanks(rank=10, rank_total=3, rank_signal=1)
    assert resolve_rank(ranks, metric) == expected


def test_signal_and_noise_fall_through_to_rank():
    ranks = TopicRanks(rank=12)
    assert resolve_rank(ranks, Metric.SIGNAL) == 12
    assert resolve_rank(ranks, Metric.NOISE) == 12


def test_non_finite_value_means_no_rank():
    ranks = TopicRanks(rank=4, rank_total=float("nan"))
    assert resolve_rank(ranks, Metric.TOTAL) is None
    assert resolve_rank(None, Metric.TOTAL) is None


def test_qualifies_respects_cutoff():
    assert qualifies(TopicRanks(rank_total=50), Metric.TOTAL, 50)
    assert not qualifies(TopicRanks(rank_total=51), Metric.TOTAL, 50)
    assert not qualifies(TopicRanks(total_points=100), Metric.TOTAL, 50)


def test_resolve_field_handles_ratio_columns():
    ranks = TopicRanks(rank_total=2, ratio=40.0, ratio_rank=1)
    assert resolve_field(ranks, "ratio") == 40.0
    assert resolve_field(ranks, "ratioRank") == 1
    assert resolve_field(ranks, "rankNoise") == 2
    assert resolve_field(None, "ratio") is None


@pytest.mark.parametrize("bad", [0, -3, 0.5])
def test_ranks_below_one_are_not_ranks(bad):
    ranks = TopicRanks(rank_total=bad)
    assert resolve_rank(ranks, Metric.TOTAL) is None
    assert not qualifies(ranks, Metric.TOTAL, 10)
