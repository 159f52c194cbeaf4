"""
Unit tests for the StatisticsStore delta and rate computation.
"""

import pytest

from procmon.errors import KeyNotFound
from procmon.models.keys import ALL, SINGLE, Category, MetricKey
from procmon.models.snapshot import CounterSnapshot
from procmon.statistics import MIN_ELAPSED_SECONDS, StatisticsStore

USER = MetricKey(Category.CPU, ALL, "user")
LOAD_1 = MetricKey(Category.LOAD, SINGLE, "load_1")


@pytest.mark.unit
class TestStatisticsUpdate:
    """Test cases for single-key updates."""

    def test_first_observation_has_no_rate(self):
        """The first value only establishes a baseline."""
        store = StatisticsStore()
        statistic = store.update(USER, 1000.0, 100)

        assert statistic.last_value == 100.0
        assert statistic.delta_value == 0.0
        assert statistic.per_second_value == 0.0
        assert statistic.updated_value is False

    def test_rate_from_two_observations(self):
        """Delta and per-second value follow from consecutive observations."""
        store = StatisticsStore()
        store.update(USER, 1000.0, 100)
        statistic = store.update(USER, 1002.0, 150)

        assert statistic.delta_value == 50.0
        assert statistic.per_second_value == pytest.approx(25.0)
        assert statistic.updated_value is True
        assert statistic.last_timestamp == 1002.0

    def test_rate_sequence(self):
        """Rates of 100, 150, 230, 260 at one-second steps are 50, 80, 30."""
        store = StatisticsStore()
        rates = []
        for step, value in enumerate([100, 150, 230, 260]):
            statistic = store.update(USER, 1000.0 + step, value)
            rates.append(statistic.per_second_value if statistic.updated_value else None)

        assert rates == [None, 50.0, 80.0, 30.0]

    def test_counter_decrease_rebaselines(self):
        """A decreasing cumulative counter restarts from the new value."""
        store = StatisticsStore()
        store.update(USER, 1000.0, 500)
        reset = store.update(USER, 1001.0, 20)

        assert reset.updated_value is False
        assert reset.per_second_value == 0.0
        assert reset.last_value == 20.0

        after = store.update(USER, 1002.0, 50)
        assert after.updated_value is True
        assert after.per_second_value == pytest.approx(30.0)

    def test_gauge_may_decrease(self):
        """Gauges produce negative deltas instead of rebaselining."""
        store = StatisticsStore()
        store.update(LOAD_1, 1000.0, 2.0, cumulative=False)
        statistic = store.update(LOAD_1, 1001.0, 1.5, cumulative=False)

        assert statistic.updated_value is True
        assert statistic.delta_value == pytest.approx(-0.5)
        assert statistic.last_value == 1.5

    def test_tiny_elapsed_time_keeps_baseline(self):
        """Observations closer than the minimum elapsed time produce no rate."""
        store = StatisticsStore()
        store.update(USER, 1000.0, 100)
        statistic = store.update(USER, 1000.0 + MIN_ELAPSED_SECONDS / 2, 120)

        assert statistic.updated_value is False
        assert statistic.last_value == 100.0

        statistic = store.update(USER, 1001.0, 140)
        assert statistic.per_second_value == pytest.approx(40.0)

    def test_missing_value_retains_statistic(self):
        """A missing reading marks the statistic stale without dropping it."""
        store = StatisticsStore()
        store.update(USER, 1000.0, 100)
        store.update(USER, 1001.0, 130)
        stale = store.update(USER, 1002.0, None)

        assert stale.updated_value is False
        assert stale.last_value == 130.0
        assert stale.per_second_value == pytest.approx(30.0)

        resumed = store.update(USER, 1003.0, 190)
        assert resumed.updated_value is True
        assert resumed.per_second_value == pytest.approx(30.0)

    def test_missing_value_for_unknown_key_is_not_inserted(self):
        """An unsupported counter never appears in the store."""
        store = StatisticsStore()
        assert store.update(USER, 1000.0, None) is None
        assert store.get(USER) is None
        assert len(store) == 0


@pytest.mark.unit
class TestStorePublishing:
    """Test cases for published views."""

    def test_snapshot_is_empty_before_publish(self):
        store = StatisticsStore()
        store.update(USER, 1000.0, 100)

        assert len(store.snapshot()) == 0

    def test_published_view_is_isolated_from_later_updates(self):
        """A view keeps the values of the tick it was published for."""
        store = StatisticsStore()
        store.update(USER, 1000.0, 100)
        store.update(USER, 1001.0, 150)
        view = store.publish(1001.0)

        store.update(USER, 1002.0, 400)

        assert view[USER].last_value == 150.0
        assert store.snapshot() is view
        assert store.publish(1002.0)[USER].last_value == 400.0

    def test_view_cannot_be_modified(self):
        store = StatisticsStore()
        store.update(USER, 1000.0, 1)
        view = store.publish()

        with pytest.raises(TypeError):
            view[USER] = None

    def test_require_raises_key_not_found(self):
        """Missing keys raise KeyNotFound, which is also a KeyError."""
        view = StatisticsStore().publish()

        with pytest.raises(KeyNotFound) as exc_info:
            view.require(USER)
        assert "stat/all/user" in str(exc_info.value)
        assert isinstance(exc_info.value, KeyError)

    def test_value_or_and_instances(self):
        store = StatisticsStore()
        for cpu_name in ("cpu1", "all", "cpu0"):
            store.update(MetricKey(Category.CPU, cpu_name, "user"), 1000.0, 1)
        view = store.publish()

        assert view.instances(Category.CPU) == ["all", "cpu0", "cpu1"]
        assert view.value_or(MetricKey(Category.DISK, "sda", "read_bytes"), 7.0) == 7.0

    def test_apply_snapshot(self):
        """apply() updates every reading and counts produced rates."""
        store = StatisticsStore()
        first = CounterSnapshot(1000.0, {USER: 100.0, LOAD_1: 1.0})
        second = CounterSnapshot(1001.0, {USER: 150.0, LOAD_1: 0.5})

        assert store.apply(first) == 0
        assert store.apply(second, lambda key: key.category != Category.LOAD) == 2
        assert store.get(LOAD_1).delta_value == pytest.approx(-0.5)
