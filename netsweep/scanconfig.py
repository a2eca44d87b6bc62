"""Deriving scanner settings from the parsed command line."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

log = logging.getLogger("netsweep.scanconfig")

DEFAULT_OUTPUT_MODULE = "csv"
DEFAULT_OUTPUT_FIELDS = "saddr"
LOG_FILE_TEMPLATE = "netsweep-%Y-%m-%dT%H%M%S%z.log"
DEFAULT_HELP_TEXT = (
    "By default, the scanner prints out unique, successful "
    "IP addresses (e.g., SYN-ACK from a TCP SYN scan) "
    "in ASCII form (e.g., 192.168.1.5) to stdout or the specified output "
    'file. Internally this is handled by the "csv" output module and is '
    "equivalent to running with --output-module=csv --output-fields=saddr "
    '--output-filter="success = 1 && repeat = 0".'
)

_FIELD_SEPARATORS = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class FieldIndices:
    """Positions of the fields the framework relies on; -1 when absent."""

    success: int
    app_success: int
    classification: int

    @property
    def has_app_success(self) -> bool:
        """Whether the probe module reports application-level success."""
        return self.app_success >= 0


def log_file_path(
    directory: Union[str, os.PathLike], when: Optional[datetime] = None
) -> str:
    """Path of a time-stamped log file inside ``directory``.

    Without ``when`` the current local time is used.
    """
    if when is None:
        when = datetime.now().astimezone()
    return os.path.join(os.fspath(directory), when.strftime(LOG_FILE_TEMPLATE))


def select_output_fields(raw: Optional[str], available: Sequence[str]) -> list[str]:
    """Names of the fields to output.

    ``None`` selects only the source address, ``*`` selects every available
    field, anything else is a comma- or space-separated list of names, each
    of which must be available.
    """
    if raw is None:
        raw = DEFAULT_OUTPUT_FIELDS
    if raw == "*":
        return list(available)
    names = [name for name in _FIELD_SEPARATORS.split(raw) if name]
    known = set(available)
    for position, name in enumerate(names):
        if name not in known:
            raise ValueError(f"unknown output field: {name}")
        log.debug("requested output field (%d): %s", position, name)
    return names


def _index(names: Sequence[str], wanted: str) -> int:
    try:
        return list(names).index(wanted)
    except ValueError:
        return -1


def find_field_indices(names: Sequence[str]) -> FieldIndices:
    """Locate the success, app_success and classification fields.

    Raises ValueError when a required field is missing.
    """
    success = _index(names, "success")
    if success < 0:
        raise ValueError("probe module does not supply required success field.")
    app_success = _index(names, "app_success")
    if app_success < 0:
        log.debug("probe module does not supply application success field.")
    else:
        log.debug(
            "probe module supplies app_success output field. "
            "It will be included in monitor output"
        )
    classification = _index(names, "classification")
    if classification < 0:
        raise ValueError(
            "probe module does not supply required packet classification field."
        )
    return FieldIndices(success, app_success, classification)


def choose_senders(requested: Optional[int], max_targets: int) -> int:
    """Number of sender threads, falling back to one for small scans."""
    senders = 1 if requested is None else requested
    if 2 * senders >= max_targets:
        log.warning("too few targets relative to senders, dropping to one sender")
        senders = 1
    return senders


def check_module_compatibility(
    probe_dynamic: bool, output_supports_dynamic: bool
) -> None:
    """Raise ValueError if dynamic probe output cannot be exported."""
    if probe_dynamic and not output_supports_dynamic:
        raise ValueError(
            "specified probe module requires dynamic output support, which "
            "the output module does not support. Most likely you want to use "
            "JSON output."
        )


def check_log_options(
    log_file: Optional[str], log_directory: Optional[str]
) -> None:
    """Raise ValueError if both a log file and a log directory are given."""
    if log_file and log_directory:
        raise ValueError(
            "log-file and log-directory cannot specified simultaneously."
        )


def default_output_module(name: str) -> str:
    """The output module actually used for the requested name."""
    if name == "default":
        log.debug("no output module provided. will use csv.")
        return DEFAULT_OUTPUT_MODULE
    return name