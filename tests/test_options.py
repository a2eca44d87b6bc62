import pytest

from netsweep.options import (
    OutputFilter,
    check_sharding,
    parse_bandwidth,
    parse_cores,
    parse_source_ports,
    resolve_output_filter,
)


def test_bandwidth_plain_number():
    assert parse_bandwidth("100") == 100


@pytest.mark.parametrize("suffix", ["G", "g"])
def test_bandwidth_giga(suffix):
    assert parse_bandwidth("2" + suffix) == 2 * 1000000000


@pytest.mark.parametrize("suffix", ["M", "m", "Mbps"])
def test_bandwidth_mega(suffix):
    assert parse_bandwidth("10" + suffix) == 10 * 1000000


def test_bandwidth_kilo():
    assert parse_bandwidth("3k") == 3 * 1000


def test_bandwidth_ordering_of_suffixes():
    assert parse_bandwidth("1k") < parse_bandwidth("1m") < parse_bandwidth("1g")


@pytest.mark.parametrize("text", ["10x", "-5", "5 M"])
def test_bandwidth_unknown_suffix(text):
    with pytest.raises(ValueError):
        parse_bandwidth(text)


def test_source_port_range():
    assert parse_source_ports("1000-2000") == (1000, 2000)


def test_single_source_port():
    assert parse_source_ports("80") == (80, 80)


@pytest.mark.parametrize("text", ["2000-1000", "70000", "1-70000"])
def test_source_port_errors(text):
    with pytest.raises(ValueError):
        parse_source_ports(text)


def test_sharding_defaults():
    assert check_sharding(None, None, False) == (0, 1)


def test_sharding_given():
    assert check_sharding(1, 4, True) == (1, 4)


@pytest.mark.parametrize(
    "shard, shards, seed",
    [
        (0, 2, False),
        (1, None, True),
        (None, 2, True),
        (4, 4, True),
        (0, 0, True),
        (65535, 65535, True),
    ],
)
def test_sharding_errors(shard, shards, seed):
    with pytest.raises(ValueError):
        check_sharding(shard, shards, seed)


@pytest.mark.parametrize("text", [None, "default"])
def test_default_output_filter(text):
    assert resolve_output_filter(text) == OutputFilter(True, True, None)


def test_empty_output_filter():
    assert resolve_output_filter("") == OutputFilter(False, False, None)


def test_expression_output_filter():
    result = resolve_output_filter("success = 1 && repeat = 0")
    assert result.expression == "success = 1 && repeat = 0"
    assert result.filter_duplicates is False
    assert result.filter_unsuccessful is False


def test_parse_cores():
    assert parse_cores("0,2,3") == [0, 2, 3]


def test_parse_cores_with_spaces():
    assert parse_cores("1, 5") == [1, 5]


def test_parse_cores_empty():
    with pytest.raises(ValueError):
        parse_cores("")