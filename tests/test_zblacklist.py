import io
import ipaddress

import pytest

from netsweep.zblacklist import (
    AddressPolicy,
    extract_address,
    filter_lines,
    load_cidr_file,
    main,
)


def net(text):
    return ipaddress.IPv4Network(text)


@pytest.mark.parametrize(
    "line",
    [
        "1.2.3.4\n",
        "1.2.3.4,extra,fields\n",
        "1.2.3.4\tsomething\n",
        "1.2.3.4 trailing\n",
        "1.2.3.4#comment\n",
        "1.2.3.4",
    ],
)
def test_extract_address_cuts_at_first_delimiter(line):
    assert extract_address(line) == "1.2.3.4"


def test_extract_address_earliest_delimiter_wins():
    assert extract_address("a b,c\n") == "a"


def test_policy_blacklist_only():
    policy = AddressPolicy(blacklist=[net("10.0.0.0/8")])
    assert policy.is_allowed("10.20.30.40") is False
    assert policy.is_allowed("11.0.0.1") is True


def test_policy_whitelist_and_blacklist():
    policy = AddressPolicy(
        whitelist=[net("10.0.0.0/8")], blacklist=[net("10.1.0.0/16")]
    )
    assert policy.is_allowed("10.2.0.1") is True
    assert policy.is_allowed("10.1.0.1") is False
    assert policy.is_allowed("192.0.2.1") is False


def test_policy_accepts_integers():
    policy = AddressPolicy(blacklist=[net("10.0.0.0/8")])
    assert policy.is_allowed(int(ipaddress.IPv4Address("10.0.0.1"))) is False


def test_filter_removes_blacklisted_and_duplicates():
    policy = AddressPolicy(blacklist=[net("10.0.0.0/8")])
    lines = ["1.2.3.4\n", "10.1.1.1\n", "1.2.3.4,x\n", "bogus\n"]
    assert list(filter_lines(lines, policy)) == ["1.2.3.4\n", "bogus\n"]


def test_filter_without_duplicate_checking():
    policy = AddressPolicy(blacklist=[net("10.0.0.0/8")])
    lines = ["1.2.3.4\n", "1.2.3.4\n"]
    out = list(filter_lines(lines, policy, check_duplicates=False))
    assert out == lines


def test_filter_ignoring_input_errors_drops_invalid():
    policy = AddressPolicy(blacklist=[])
    lines = ["bogus\n", "\n", "5.6.7.8\n"]
    out = list(filter_lines(lines, policy, ignore_input_errors=True))
    assert out == ["5.6.7.8\n"]


def test_filter_disallowed_address_is_not_marked_seen():
    policy = AddressPolicy(whitelist=[net("192.0.2.0/24")])
    lines = ["198.51.100.1\n", "192.0.2.7\n", "192.0.2.7\n"]
    assert list(filter_lines(lines, policy)) == ["192.0.2.7\n"]


def test_filter_rejects_overlong_line():
    policy = AddressPolicy(blacklist=[])
    with pytest.raises(ValueError):
        list(filter_lines(["1" * (1024 * 1024 + 5)], policy))


def test_load_cidr_file(tmp_path):
    path = tmp_path / "list.conf"
    path.write_text("10.0.0.0/8   # private\n\n# a comment\n192.0.2.1\n")
    assert load_cidr_file(path) == [net("10.0.0.0/8"), net("192.0.2.1/32")]


def test_load_cidr_file_invalid_entry(tmp_path):
    path = tmp_path / "list.conf"
    path.write_text("not-a-network\n10.0.0.0/8\n")
    with pytest.raises(ValueError):
        load_cidr_file(path)
    assert load_cidr_file(path, ignore_errors=True) == [net("10.0.0.0/8")]


def test_main_filters_stdin(tmp_path, monkeypatch, capsys):
    blacklist = tmp_path / "blacklist.conf"
    blacklist.write_text("10.0.0.0/8\n")
    monkeypatch.setattr(
        "sys.stdin", io.StringIO("1.2.3.4,keep\n10.0.0.1\n1.2.3.4\n")
    )
    assert main(["-b", str(blacklist)]) == 0
    assert capsys.readouterr().out == "1.2.3.4,keep\n"


def test_main_requires_a_list(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("1.2.3.4\n"))
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 1


def test_main_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    with pytest.raises(SystemExit) as info:
        main(["-w", str(tmp_path / "absent.conf")])
    assert info.value.code == 1