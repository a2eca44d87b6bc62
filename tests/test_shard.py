import pytest

from netsweep.shard import Cycle, Shard

# 2 is a primitive root modulo 11, so it generates all of 1..10.
CYCLE = Cycle(generator=2, order=10, offset=0, prime=11)


def lookup(index):
    return index + 1


def make(shard_idx=0, num_shards=1, thread_idx=0, num_threads=1,
         max_total_targets=0, cycle=CYCLE, max_index=10):
    return Shard(shard_idx, num_shards, thread_idx, num_threads,
                 max_total_targets, cycle, max_index, lookup)


def test_single_shard_visits_every_element_once():
    addresses = list(make())
    assert sorted(addresses) == list(range(1, 11))


@pytest.mark.parametrize(
    "num_shards,num_threads", [(2, 1), (1, 2), (3, 1), (1, 3), (2, 2)]
)
def test_subshards_partition_the_group(num_shards, num_threads):
    collected = []
    for shard_idx in range(num_shards):
        for thread_idx in range(num_threads):
            collected.extend(make(shard_idx, num_shards, thread_idx, num_threads))
    assert sorted(collected) == list(range(1, 11))


def test_blacklisted_elements_are_skipped_and_counted():
    shard = make(max_index=5)
    addresses = list(shard)
    assert sorted(addresses) == list(range(1, 6))
    assert shard.state.whitelisted == len(addresses) - 1
    assert shard.state.whitelisted + shard.state.blacklisted == CYCLE.order - 1


def test_start_rolls_forward_to_allowed_element():
    cycle = Cycle(generator=2, order=10, offset=3, prime=11)
    shard = make(cycle=cycle, max_index=5)
    first = shard.current_ip()
    assert first is not None
    assert 1 <= first <= 5
    assert sorted(shard) == list(range(1, 6))


def test_offset_changes_start_but_not_coverage():
    plain = list(make())
    shifted = list(make(cycle=Cycle(generator=2, order=10, offset=4, prime=11)))
    assert plain[0] != shifted[0]
    assert sorted(shifted) == sorted(plain)


def test_finished_shard_stays_finished():
    shard = make()
    list(shard)
    assert shard.done
    assert shard.next_ip() is None
    assert shard.current_ip() is None


def test_max_targets_are_split_across_subshards():
    shards = [make(i, 3, max_total_targets=8) for i in range(3)]
    targets = [s.state.max_targets for s in shards]
    assert sum(targets) == 8
    assert max(targets) - min(targets) <= 1
    assert targets == sorted(targets, reverse=True)


def test_no_max_targets_leaves_zero():
    assert make().state.max_targets == 0


def test_thread_id_is_recorded():
    assert make(0, 1, 1, 2).thread_id == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_shards": 0},
        {"num_threads": 0},
        {"shard_idx": 1, "num_shards": 1},
        {"thread_idx": 2, "num_threads": 2},
        {"num_shards": 10},
        {"num_shards": 3, "max_total_targets": 2},
    ],
)
def test_invalid_parameters_raise(kwargs):
    with pytest.raises(ValueError):
        make(**kwargs)