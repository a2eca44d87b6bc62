# netsweep

Building blocks for stateless IPv4 scanning: walking the address space in a
pseudo-random order split across shards, parsing and checking scan options,
writing a JSON summary of a scan, and a command that filters address lists
through a blacklist and whitelist.

## What is inside

- `netsweep.state`: the `Config` dataclass with the scan defaults (source
  ports 32768-61000, rate -1 meaning "use the default", one sender, TTL 255,
  and so on), and the `SendState` and `RecvState` counters.
- `netsweep.shard`: `Cycle` describes a generator of a multiplicative group
  modulo a prime, its order and a start offset. `Shard` walks one subshard
  of that group; `current_ip()` and `next_ip()` return addresses (or `None`
  once the subshard is finished) and iterating a `Shard` yields every
  address it covers. Its `state` (`ShardState`) counts allowed and skipped
  elements and holds the subshard's share of a target limit.
- `netsweep.utility`: `string_to_ip_address` parses one IPv4 address into a
  host-order integer; `parse_source_ip_addresses` accepts a single address,
  a comma-separated list, an inclusive `a.b.c.d-e.f.g.h` range, or a mix,
  and raises `ValueError` past 256 addresses.
- `netsweep.options`: `parse_bandwidth` (G, M and K suffixes),
  `parse_source_ports`, `check_sharding`, `resolve_output_filter` (returns an
  `OutputFilter`) and `parse_cores`.
- `netsweep.scanconfig`: `select_output_fields`, `find_field_indices`
  (returns `FieldIndices`), `choose_senders`, `check_module_compatibility`,
  `check_log_options`, `default_output_module` and `log_file_path`.
- `netsweep.summary`: `build_metadata` gathers a `Config`, `SendState` and
  `RecvState` into a dictionary, and `json_metadata` writes it as one line of
  JSON. `format_mac` and `format_timestamp` are the formatters it uses.
- `netsweep.zblacklist`: `AddressPolicy`, `load_cidr_file`,
  `extract_address`, `filter_lines`, and the `netsweep-blacklist` command.

Invalid values raise `ValueError` throughout.

## Installation

    pip install .

## Command: netsweep-blacklist

Reads lines from standard input and writes out, unchanged, those whose
address is allowed: inside the whitelist (if one is given) and outside the
blacklist. The address is the text before the first newline, comma, tab,
space or `#`. Repeated addresses are dropped unless
`--no-duplicate-checking` is given. Lines without a valid address are passed
through unless `--ignore-input-errors` is given.

    netsweep-blacklist --blacklist-file blocked.conf < candidates.txt

Options:

- `-b`, `--blacklist-file`: file of excluded networks
- `-w`, `--whitelist-file`: file of allowed networks
- `-l`, `--log-file`: write log messages to this file instead of stderr
- `-v`, `--verbosity`: log level from 0 to 5 (default 3)
- `--no-duplicate-checking`
- `--ignore-blacklist-errors`: skip invalid entries in the network files
- `--ignore-input-errors`
- `--disable-syslog`

At least one of the blacklist and whitelist files is required. Network files
hold one CIDR block or address per line; text after `#` is a comment.

## Library examples

    from netsweep.shard import Cycle, Shard

    cycle = Cycle(generator=2, order=10, offset=0, prime=11)
    shard = Shard(0, 1, 0, 1, 0, cycle, max_index=10, lookup_index=lambda i: i)
    indices = list(shard)  # each of 0..9 exactly once

    from netsweep.utility import parse_source_ip_addresses
    from netsweep.options import parse_bandwidth

    addresses = parse_source_ip_addresses("10.0.0.1-10.0.0.3,10.0.0.9")
    assert len(addresses) == 4
    assert parse_bandwidth("10M") == 10_000_000

## What this package does not do

It does not send probes or capture replies: there is no packet
construction, no probe validation, no rate-controlled sending loop and no
response receiver, and no command that runs a scan. It also has no command
for splitting scan output between a file and standard output. The pieces
here cover addressing, option handling, summaries and address-list
filtering.

## Tests

    pip install .[test]
    pytest