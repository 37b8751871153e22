"""Tests for the resource sampler fail-safe behaviour."""
from __future__ import annotations

import pytest

from fakes import FakeProcessSource
from treemon.system.sampler import ResourceSampler
from treemon.system.segment import SegmentStats, SegmentStore

USAGE = {1: (10.0, 2.0), 2: (5.5, 1.5), 3: (0.5, 0.25)}


@pytest.fixture()
def segment() -> SegmentStore:
    return SegmentStore(SegmentStats(cpu_usage=12.5, mem_usage=8.0))


def test_sample_returns_tree_sums(segment: SegmentStore) -> None:
    source = FakeProcessSource({1: [2], 2: [3]}, usage=USAGE)

    cpu, mem = ResourceSampler(segment, source, root_pid=1).sample()

    assert cpu == pytest.approx(16.0)
    assert mem == pytest.approx(3.75)


def test_sample_does_not_write_segment(segment: SegmentStore) -> None:
    source = FakeProcessSource({1: [2]}, usage=USAGE)

    ResourceSampler(segment, source, root_pid=1).sample()

    assert segment.averages() == (12.5, 8.0)


def test_failed_query_returns_stored_averages(segment: SegmentStore) -> None:
    source = FakeProcessSource({1: [2, 3]}, usage=USAGE, failing_cpu={3})

    assert ResourceSampler(segment, source, root_pid=1).sample() == (12.5, 8.0)
    assert segment.averages() == (12.5, 8.0)


def test_sentinel_in_tree_returns_stored_averages(segment: SegmentStore) -> None:
    source = FakeProcessSource({1: [2, 3]}, usage=USAGE, vanished={2})

    assert ResourceSampler(segment, source, root_pid=1).sample() == (12.5, 8.0)


def test_invalid_root_returns_stored_averages(segment: SegmentStore) -> None:
    source = FakeProcessSource({1: []}, usage=USAGE)

    assert ResourceSampler(segment, source, root_pid=0).sample() == (12.5, 8.0)


def test_sample_and_record_updates_averages_only_on_success() -> None:
    segment = SegmentStore()
    good = ResourceSampler(segment, FakeProcessSource({1: []}, usage=USAGE), root_pid=1)
    bad = ResourceSampler(segment, FakeProcessSource({1: []}, vanished={1}), root_pid=1)

    assert good.sample_and_record() == (10.0, 2.0)
    assert bad.sample_and_record() == (10.0, 2.0)
    assert segment.averages() == (10.0, 2.0)


def test_default_source_samples_current_process() -> None:
    cpu, mem = ResourceSampler(SegmentStore()).sample()

    assert cpu >= 0.0
    assert mem >= 0.0
