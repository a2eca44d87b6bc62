"""JSON summary of a finished scan."""

from __future__ import annotations

import ipaddress
import json
import logging
import socket
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional, TextIO

from netsweep.state import Config, RecvState, SendState

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

log = logging.getLogger("netsweep.summary")

Cidr = tuple[int, int]


def format_mac(mac: bytes) -> str:
    """Render a hardware address as colon-separated lower-case hex."""
    return ":".join(f"{octet:02x}" for octet in bytes(mac))


def format_timestamp(timestamp: float) -> str:
    """Render seconds since the epoch as local ISO-8601 time with offset."""
    return datetime.fromtimestamp(timestamp).astimezone().strftime(TIME_FORMAT)


def _ip(address: int) -> str:
    return str(ipaddress.IPv4Address(address))


def _hitrate(success_unique: int, sent: int) -> float:
    if sent:
        return 100.0 * success_unique / sent
    return float("nan") if success_unique == 0 else float("inf")


def _module_name(module: Any) -> Optional[str]:
    return None if module is None else module.name


def _hostnames() -> dict[str, str]:
    names: dict[str, str] = {}
    try:
        hostname = socket.gethostname()
    except OSError:
        log.error("unable to retrieve local hostname")
        return names
    names["local_hostname"] = hostname
    try:
        names["full_hostname"] = socket.gethostbyname_ex(hostname)[0]
    except OSError:
        log.error("unable to retrieve complete hostname")
    return names


def _cidr_list(cidrs: Optional[Iterable[Cidr]]) -> list[str]:
    if not cidrs:
        return []
    return [f"{_ip(address)}/{prefix}" for address, prefix in cidrs]


def build_metadata(
    conf: Config,
    send_state: SendState,
    recv_state: RecvState,
    blacklisted_cidrs: Optional[Iterable[Cidr]] = None,
    whitelisted_cidrs: Optional[Iterable[Cidr]] = None,
) -> dict[str, Any]:
    """Collect the configuration and results of a scan into a dictionary.

    CIDR blocks are given as ``(address, prefix_length)`` pairs with the
    address as a host-order integer.
    """
    obj: dict[str, Any] = dict(_hostnames())
    obj.update(
        target_port=conf.target_port,
        source_port_first=conf.source_port_first,
        source_port_last=conf.source_port_last,
        max_targets=conf.max_targets,
        max_runtime=conf.max_runtime,
        max_results=conf.max_results,
        output_results=recv_state.filter_success,
    )
    if conf.iface:
        obj["iface"] = conf.iface
    obj.update(
        rate=conf.rate,
        bandwidth=conf.bandwidth,
        cooldown_secs=conf.cooldown_secs,
        senders=conf.senders,
        seed=conf.seed,
        seed_provided=int(conf.seed_provided),
        generator=conf.generator,
        hitrate=_hitrate(recv_state.success_unique, send_state.sent),
        shard_num=conf.shard_num,
        total_shards=conf.total_shards,
        min_hitrate=conf.min_hitrate,
        max_sendto_failures=conf.max_sendto_failures,
        syslog=int(conf.syslog),
        filter_duplicates=int(conf.filter_duplicates),
        filter_unsuccessful=int(conf.filter_unsuccessful),
        pcap_recv=recv_state.pcap_recv,
        pcap_drop=recv_state.pcap_drop,
        pcap_ifdrop=recv_state.pcap_ifdrop,
        ip_fragments=recv_state.ip_fragments,
        blacklist_total_allowed=conf.total_allowed,
        blacklist_total_not_allowed=conf.total_disallowed,
        validation_passed=recv_state.validation_passed,
        validation_failed=recv_state.validation_failed,
        first_scanned=send_state.first_scanned,
        send_to_failures=send_state.sendto_failures,
        total_sent=send_state.sent,
        success_total=recv_state.success_total,
        success_unique=recv_state.success_unique,
    )
    if conf.app_success_index >= 0:
        obj["app_success_total"] = recv_state.app_success_total
        obj["app_success_unique"] = recv_state.app_success_unique
    obj.update(
        success_cooldown_total=recv_state.cooldown_total,
        success_cooldown_unique=recv_state.cooldown_unique,
        failure_total=recv_state.failure_total,
        packet_streams=conf.packet_streams,
        probe_module=_module_name(conf.probe_module),
        output_module=_module_name(conf.output_module),
        send_start_time=format_timestamp(send_state.start),
        send_end_time=format_timestamp(send_state.finish),
        recv_start_time=format_timestamp(recv_state.start),
        recv_end_time=format_timestamp(recv_state.finish),
    )
    if conf.output_filter_str:
        obj["output_filter"] = conf.output_filter_str
    if conf.log_file:
        obj["log_file"] = conf.log_file
    if conf.log_directory:
        obj["log_directory"] = conf.log_directory
    if conf.destination_cidrs:
        obj["cli_cidr_destinations"] = list(conf.destination_cidrs)
    if conf.probe_args:
        obj["probe_args"] = conf.probe_args
    if conf.probe_ttl:
        obj["probe_ttl"] = conf.probe_ttl
    if conf.output_args:
        obj["output_args"] = conf.output_args
    obj["gateway_mac"] = format_mac(conf.gw_mac)
    if conf.gw_ip:
        obj["gateway_ip"] = _ip(conf.gw_ip)
    obj["source_mac"] = format_mac(conf.hw_mac)
    obj["source_ips"] = [_ip(address) for address in conf.source_ip_addresses]
    if conf.output_filename:
        obj["output_filename"] = conf.output_filename
    if conf.blacklist_filename:
        obj["blacklist_filename"] = conf.blacklist_filename
    if conf.whitelist_filename:
        obj["whitelist_filename"] = conf.whitelist_filename
    if conf.list_of_ips_filename:
        obj["list_of_ips_filename"] = conf.list_of_ips_filename
        obj["list_of_ips_count"] = conf.list_of_ips_count
        obj["list_of_ips_tried_sent"] = send_state.tried_sent
    obj.update(
        dryrun=int(conf.dryrun),
        quiet=int(conf.quiet),
        log_level=conf.log_level,
    )
    if conf.custom_metadata_str:
        try:
            obj["user-metadata"] = json.loads(conf.custom_metadata_str)
        except json.JSONDecodeError:
            log.error("unable to parse user metadata")
    if conf.notes:
        obj["notes"] = conf.notes
    blacklisted = _cidr_list(blacklisted_cidrs)
    if blacklisted:
        obj["blacklisted_networks"] = blacklisted
    whitelisted = _cidr_list(whitelisted_cidrs)
    if whitelisted:
        obj["whitelisted_networks"] = whitelisted
    return obj


def json_metadata(
    file: TextIO,
    conf: Config,
    send_state: SendState,
    recv_state: RecvState,
    blacklisted_cidrs: Optional[Iterable[Cidr]] = None,
    whitelisted_cidrs: Optional[Iterable[Cidr]] = None,
) -> None:
    """Write the scan summary to ``file`` as one line of JSON."""
    metadata = build_metadata(
        conf, send_state, recv_state, blacklisted_cidrs, whitelisted_cidrs
    )
    file.write(json.dumps(metadata) + "\n")