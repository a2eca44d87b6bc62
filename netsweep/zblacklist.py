"""Filter a stream of addresses through a blacklist and/or whitelist.

Addresses are read one per line from standard input. Lines whose address is
allowed (and, unless disabled, has not been seen before) are copied to
standard output unchanged.
"""

from __future__ import annotations

import argparse
import ipaddress
import logging
import os
import socket
import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import Optional, Union

log = logging.getLogger("netsweep.zblacklist")

# 1 MiB of content plus newline and terminator
MAX_LINE_LENGTH = 1024 * 1024 + 2
_DELIMITERS = ("\n", ",", "\t", " ", "#")
_VERBOSITY_LEVELS = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
    logging.DEBUG,
)

Address = Union[int, str, ipaddress.IPv4Address]


class AddressPolicy:
    """Decides whether an address may be scanned.

    With a whitelist, only addresses inside it are allowed; a blacklist then
    removes addresses from whatever is allowed.
    """

    def __init__(
        self,
        whitelist: Optional[Iterable[ipaddress.IPv4Network]] = None,
        blacklist: Optional[Iterable[ipaddress.IPv4Network]] = None,
    ) -> None:
        self.whitelist = None if whitelist is None else list(whitelist)
        self.blacklist = [] if blacklist is None else list(blacklist)

    def is_allowed(self, address: Address) -> bool:
        """Whether ``address`` passes the whitelist and is not blacklisted."""
        ip = ipaddress.IPv4Address(address)
        if self.whitelist is not None and not any(
            ip in network for network in self.whitelist
        ):
            return False
        return not any(ip in network for network in self.blacklist)


def load_cidr_file(
    path: Union[str, os.PathLike], ignore_errors: bool = False
) -> list[ipaddress.IPv4Network]:
    """Read networks from a file of CIDR blocks or addresses, one per line.

    Text after ``#`` is a comment and blank lines are skipped. An invalid
    entry raises ValueError unless ``ignore_errors`` is set, in which case it
    is logged and skipped.
    """
    networks: list[ipaddress.IPv4Network] = []
    with open(path, encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            entry = line.split("#", 1)[0].strip()
            if not entry:
                continue
            entry = entry.split()[0]
            try:
                networks.append(ipaddress.IPv4Network(entry, strict=False))
            except ValueError:
                message = f"{path}:{number}: invalid network: {entry}"
                if not ignore_errors:
                    raise ValueError(message) from None
                log.warning("%s", message)
    return networks


def extract_address(line: str) -> str:
    """The address part of an input line: everything before the first
    newline, comma, tab, space or ``#``."""
    cut = min(
        (position for position in map(line.find, _DELIMITERS) if position >= 0),
        default=len(line),
    )
    return line[:cut]


def _parse_address(text: str) -> Optional[int]:
    try:
        packed = socket.inet_aton(text)
    except (OSError, ValueError):
        return None
    return int.from_bytes(packed, "big")


def filter_lines(
    lines: Iterable[str],
    policy: AddressPolicy,
    check_duplicates: bool = True,
    ignore_input_errors: bool = False,
) -> Iterator[str]:
    """Yield the input lines that may be scanned, unchanged.

    Lines without a valid address are passed through unless
    ``ignore_input_errors`` is set. Raises ValueError for an overlong line.
    """
    seen: set[int] = set()
    for line in lines:
        if len(line) >= MAX_LINE_LENGTH - 1:
            raise ValueError(
                f"received line longer than max length: {MAX_LINE_LENGTH}"
            )
        text = extract_address(line)
        log.debug("input value %s", text)
        address = _parse_address(text)
        if address is None:
            log.warning("invalid input address: %s", text)
            if not ignore_input_errors:
                yield line
            continue
        if check_duplicates and address in seen:
            log.debug("%s is a duplicate: skipped", text)
            continue
        if policy.is_allowed(address):
            if check_duplicates:
                seen.add(address)
            yield line


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zblacklist",
        description="Pass on addresses from stdin that may be scanned.",
    )
    parser.add_argument("-b", "--blacklist-file", help="file of excluded networks")
    parser.add_argument("-w", "--whitelist-file", help="file of allowed networks")
    parser.add_argument("-l", "--log-file", help="write log messages here")
    parser.add_argument(
        "-v", "--verbosity", type=int, default=3, help="log level (0-5)"
    )
    parser.add_argument(
        "--no-duplicate-checking",
        action="store_true",
        help="pass on repeated addresses",
    )
    parser.add_argument(
        "--ignore-blacklist-errors",
        action="store_true",
        help="skip invalid entries in the blacklist and whitelist",
    )
    parser.add_argument(
        "--ignore-input-errors",
        action="store_true",
        help="drop input lines without a valid address",
    )
    parser.add_argument(
        "--disable-syslog", action="store_true", help="do not log to syslog"
    )
    return parser


class _Fatal(Exception):
    pass


def _load(path: Optional[str], kind: str, ignore_errors: bool):
    if path is None:
        log.debug("no %s file specified", kind)
        return None
    log.debug("%s file at %s to be used", kind, path)
    if not os.access(path, os.R_OK):
        raise _Fatal(f"unable to read specified {kind} file ({path})")
    try:
        return load_cidr_file(path, ignore_errors)
    except (OSError, ValueError) as error:
        raise _Fatal(f"unable to initialize blacklist / whitelist: {error}") from None


def _run(args: argparse.Namespace) -> int:
    if not args.blacklist_file and not args.whitelist_file:
        raise _Fatal("must specify either a whitelist or blacklist file")
    blacklist = _load(args.blacklist_file, "blacklist", args.ignore_blacklist_errors)
    whitelist = _load(args.whitelist_file, "whitelist", args.ignore_blacklist_errors)
    policy = AddressPolicy(whitelist, blacklist)
    try:
        for line in filter_lines(
            sys.stdin,
            policy,
            check_duplicates=not args.no_duplicate_checking,
            ignore_input_errors=args.ignore_input_errors,
        ):
            sys.stdout.write(line)
    except ValueError as error:
        raise _Fatal(str(error)) from None
    sys.stdout.flush()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point."""
    args = _parser().parse_args(argv)
    if args.log_file:
        try:
            handler: logging.Handler = logging.FileHandler(
                args.log_file, mode="w", encoding="utf-8"
            )
        except OSError:
            sys.stderr.write(
                f"FATAL: unable to open specified logfile ({args.log_file})\n"
            )
            raise SystemExit(1) from None
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: zblacklist: %(message)s"))
    level = _VERBOSITY_LEVELS[min(max(args.verbosity, 0), len(_VERBOSITY_LEVELS) - 1)]
    log.addHandler(handler)
    log.setLevel(level)
    try:
        return _run(args)
    except _Fatal as error:
        log.critical("%s", error)
        raise SystemExit(1) from None
    finally:
        log.removeHandler(handler)
        handler.close()


if __name__ == "__main__":
    sys.exit(main())