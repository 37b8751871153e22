"""Tests for the process tree walk."""
from __future__ import annotations

import os

from fakes import FakeProcessSource
from treemon.system.process_tree import (
    SENTINEL_PID,
    ProcessHandle,
    PsutilProcessSource,
    walk_tree,
)


def _pids(tree):
    return [handle.pid for handle in tree]


def test_walk_emits_root_first_then_all_descendants() -> None:
    source = FakeProcessSource({1: [2, 3], 2: [4], 3: [], 4: []})

    tree = walk_tree(ProcessHandle(1), source)

    assert tree[0].pid == 1
    assert sorted(_pids(tree)) == [1, 2, 3, 4]


def test_walk_is_depth_first() -> None:
    source = FakeProcessSource({1: [2, 3], 2: [4], 3: [5]})

    assert _pids(walk_tree(ProcessHandle(1), source)) == [1, 2, 4, 3, 5]


def test_childless_process_is_not_an_error() -> None:
    source = FakeProcessSource({1: [2], 2: []}, leaves_raise=True)

    tree = walk_tree(ProcessHandle(1), source)

    assert _pids(tree) == [1, 2]
    assert not any(handle.is_sentinel for handle in tree)


def test_vanished_child_becomes_single_sentinel() -> None:
    source = FakeProcessSource({1: [2, 3], 2: [5], 3: [4], 4: []}, vanished={2})

    tree = walk_tree(ProcessHandle(1), source)

    assert tree[0].pid == 1
    assert _pids(tree).count(SENTINEL_PID) == 1
    # the vanished branch is not descended into, siblings are
    assert 5 not in _pids(tree)
    assert 3 in _pids(tree) and 4 in _pids(tree)


def test_walk_never_raises_when_root_vanishes() -> None:
    source = FakeProcessSource({}, vanished={1})

    tree = walk_tree(ProcessHandle(1), source)

    assert tree == [ProcessHandle.sentinel()]


def test_repeated_pid_is_walked_once() -> None:
    source = FakeProcessSource({1: [2], 2: [1]})

    assert _pids(walk_tree(ProcessHandle(1), source)) == [1, 2]


def test_psutil_source_walks_current_process() -> None:
    tree = walk_tree(ProcessHandle(os.getpid()), PsutilProcessSource())

    assert tree
    assert tree[0].pid == os.getpid()
