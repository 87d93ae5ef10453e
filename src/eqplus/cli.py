#!/usr/bin/env python3
"""
Command-line interface for editing the eqplus companion config.

Filters are addressed by their 1-based position in a device's chain,
since ids only live for the duration of one process.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from eqplus.apo.errors import BadArgumentError
from eqplus.apo.filters import FilterBank, FilterKind, FilterParams
from eqplus.config import (
    APP_NAME,
    DEFAULT_DEVICE_KEY,
    FILTER_FREQUENCY_DEFAULT,
    FILTER_GAIN_DEFAULT,
    FILTER_Q_DEFAULT,
)
from eqplus.services.config_persistence import ConfigPersistence
from eqplus.services.equalizer_service import EqualizerService
from eqplus.services.settings_service import SettingsService
from eqplus.utils.i18n import _
from eqplus.utils.validators import format_db, format_frequency

KIND_CHOICES = [kind.name.lower() for kind in FilterKind]


# =============================================================================
# Helpers
# =============================================================================


def resolve_config_dir(args: argparse.Namespace) -> Path:
    """Config directory from --config-dir, falling back to user settings."""
    if args.config_dir:
        return Path(args.config_dir)
    return SettingsService().config_dir


def open_service(args: argparse.Namespace) -> EqualizerService:
    """Create the equalizer service and load the config file."""
    service = EqualizerService(ConfigPersistence(resolve_config_dir(args)))
    service.initialize()
    return service


def ensure_device(service: EqualizerService, device: str) -> None:
    """Create the bank for a device that has none yet.

    Empty banks are not written to the file, so a bank made by add-device
    only survives once it holds a preamp or a filter.
    """
    if device not in service.get_state():
        service.create_device(device)


def filter_at(service: EqualizerService, device: str, position: int) -> FilterParams:
    """Look up a filter by 1-based position."""
    bank = service.get_state().get(device)
    if bank is None:
        raise BadArgumentError(f"Unknown device: {device}")
    if not 1 <= position <= len(bank.filters):
        raise BadArgumentError(f"No filter at position {position} on device {device}")
    return bank.filters[position - 1]


def describe_bank(device: str, bank: FilterBank) -> list[str]:
    """Human-readable summary of one bank."""
    lines = [f"{device}: {_('preamp')} {format_db(bank.preamp_db)}"]
    for index, f in enumerate(bank.filters, start=1):
        state = "ON" if f.enabled else "OFF"
        gain = f" {format_db(f.gain_db)}" if f.kind.uses_gain else ""
        lines.append(
            f"  {index}. [{state}] {f.kind.name.lower()} "
            f"{format_frequency(f.frequency_hz)}{gain} Q {f.q:g}"
        )
    return lines


# =============================================================================
# Commands
# =============================================================================


def cmd_init(args: argparse.Namespace) -> int:
    """Check the config directory and create eqplus.txt if needed."""
    service = open_service(args)
    print(_("Config ready: {count} device bank(s)").format(count=len(service.get_state())))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the current filter banks."""
    service = open_service(args)
    if args.json:
        print(json.dumps(service.get_state_dict(), indent=2))
        return 0

    for device, bank in service.get_state().items():
        print("\n".join(describe_bank(device, bank)))
    return 0


def cmd_preamp(args: argparse.Namespace) -> int:
    """Set the preamp gain of a device."""
    service = open_service(args)
    ensure_device(service, args.device)
    service.modify_preamp(args.device, args.value)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Append a filter to a device's chain."""
    service = open_service(args)
    ensure_device(service, args.device)
    filter_params = FilterParams.create(
        kind=FilterKind.from_name(args.type),
        frequency_hz=args.freq,
        gain_db=args.gain,
        q=args.q,
        enabled=not args.off,
    )
    service.add_filter(args.device, filter_params)
    print(_("Added filter {position}").format(
        position=len(service.get_state().get(args.device).filters)
    ))
    return 0


def cmd_modify(args: argparse.Namespace) -> int:
    """Change some values of an existing filter."""
    service = open_service(args)
    current = filter_at(service, args.device, args.position)

    changes: dict[str, object] = {}
    if args.type is not None:
        changes["kind"] = FilterKind.from_name(args.type)
    if args.freq is not None:
        changes["frequency_hz"] = args.freq
    if args.gain is not None:
        changes["gain_db"] = args.gain
    if args.q is not None:
        changes["q"] = args.q
    if args.enabled is not None:
        changes["enabled"] = args.enabled

    service.modify_filter(args.device, current.with_values(**changes))
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    """Remove a filter from a device's chain."""
    service = open_service(args)
    current = filter_at(service, args.device, args.position)
    service.remove_filter(args.device, current.id)
    return 0


def cmd_add_device(args: argparse.Namespace) -> int:
    """Create an empty bank for a device."""
    open_service(args).create_device(args.device)
    print(
        _("Created {device}; it is saved once it has a preamp or a filter").format(
            device=args.device
        )
    )
    return 0


def cmd_remove_device(args: argparse.Namespace) -> int:
    """Drop the bank of a device."""
    open_service(args).remove_device(args.device)
    return 0


def cmd_set_config_dir(args: argparse.Namespace) -> int:
    """Remember the Equalizer APO config directory."""
    persistence = ConfigPersistence(Path(args.path))
    persistence.check_config_dir()
    SettingsService().update(config_dir=str(persistence.config_dir))
    print(_("Config directory set to {path}").format(path=persistence.config_dir))
    return 0


# =============================================================================
# Parser
# =============================================================================


def _add_filter_values(parser: argparse.ArgumentParser, defaults: bool) -> None:
    parser.add_argument(
        "--type",
        choices=KIND_CHOICES,
        default="peaking" if defaults else None,
        help=_("Filter shape"),
    )
    parser.add_argument(
        "--freq",
        type=float,
        default=FILTER_FREQUENCY_DEFAULT if defaults else None,
        help=_("Center or corner frequency in Hz"),
    )
    parser.add_argument(
        "--gain",
        type=float,
        default=FILTER_GAIN_DEFAULT if defaults else None,
        help=_("Gain in dB"),
    )
    parser.add_argument(
        "--q",
        type=float,
        default=FILTER_Q_DEFAULT if defaults else None,
        help=_("Quality factor"),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="eqplus",
        description=_("{app} - Edit Equalizer APO filters per audio device").format(
            app=APP_NAME
        ),
    )
    parser.add_argument(
        "--config-dir",
        help=_("Equalizer APO config directory (defaults to saved setting)"),
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help=_("Enable debug logging"),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help=_("Show version and exit"),
    )

    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("init", help=_("Check config directory and create eqplus.txt"))
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("show", help=_("Show filter banks"))
    p.add_argument("--json", action="store_true", help=_("Print as JSON"))
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("preamp", help=_("Set preamp gain"))
    p.add_argument("value", type=float)
    p.add_argument("--device", default=DEFAULT_DEVICE_KEY)
    p.set_defaults(func=cmd_preamp)

    p = sub.add_parser("add", help=_("Add a filter"))
    p.add_argument("--device", default=DEFAULT_DEVICE_KEY)
    _add_filter_values(p, defaults=True)
    p.add_argument("--off", action="store_true", help=_("Add the filter disabled"))
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("modify", help=_("Modify a filter"))
    p.add_argument("position", type=int, help=_("1-based filter position"))
    p.add_argument("--device", default=DEFAULT_DEVICE_KEY)
    _add_filter_values(p, defaults=False)
    state = p.add_mutually_exclusive_group()
    state.add_argument("--on", dest="enabled", action="store_const", const=True)
    state.add_argument("--off", dest="enabled", action="store_const", const=False)
    p.set_defaults(func=cmd_modify, enabled=None)

    p = sub.add_parser("remove", help=_("Remove a filter"))
    p.add_argument("position", type=int, help=_("1-based filter position"))
    p.add_argument("--device", default=DEFAULT_DEVICE_KEY)
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("add-device", help=_("Create a filter bank for a device"))
    p.add_argument("device")
    p.set_defaults(func=cmd_add_device)

    p = sub.add_parser("remove-device", help=_("Remove a device's filter bank"))
    p.add_argument("device")
    p.set_defaults(func=cmd_remove_device)

    p = sub.add_parser("set-config-dir", help=_("Save the config directory"))
    p.add_argument("path")
    p.set_defaults(func=cmd_set_config_dir)

    return parser


def run(args: argparse.Namespace) -> int:
    """Dispatch parsed arguments to their command."""
    func = getattr(args, "func", None)
    if func is None:
        print(_("No command given, try --help"), file=sys.stderr)
        return 2
    return func(args)
