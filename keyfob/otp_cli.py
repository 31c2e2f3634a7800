#!/usr/bin/env python3
"""
otp_cli.py - CLI for the keyfob.

Subcommands:
- accounts : list configured accounts
- code     : print the current TOTP for one account
- hotp     : print the HOTP for one account at a given counter
- uri      : print the otpauth:// URI for one account
- run      : run the device loop on the console
- serve    : run the HTTP device simulator
"""

import argparse
import sys

from keyfob import config, otp_core
from keyfob.accounts import AccountRegistry
from keyfob.buttons import MemoryPin
from keyfob.clock import SystemClock, wait_for_valid_clock
from keyfob.session import SessionController, run_loop
from keyfob.sinks import ConsoleKeyboard, ConsoleRenderer


def positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {text}")
    return value


def counter_value(text: str) -> int:
    value = int(text)
    if not 0 <= value <= otp_core.MAX_COUNTER:
        raise argparse.ArgumentTypeError(f"counter must be in [0, 2^64-1], got {text}")
    return value


def _registry(args) -> AccountRegistry:
    registry = AccountRegistry.from_file(args.accounts)
    if getattr(args, "account", None):
        try:
            registry.selected_index = registry.find(args.account)
        except KeyError:
            raise config.ConfigError(f"No account named '{args.account}'") from None
    return registry


# --- CLI command handlers ---
def cmd_accounts(args):
    registry = _registry(args)
    for i, account in enumerate(registry):
        print(f"{i}: {account.label}")


def cmd_code(args):
    registry = _registry(args)
    account = registry.current()
    now = SystemClock().now()
    if not otp_core.clock_is_valid(now):
        print(f"[!] Clock not valid (now={now}); refusing to compute a code.")
        return 1
    code, remaining, _ = otp_core.totp(account.key, now, args.period)
    print(f"{account.label}: {otp_core.format_code(code)}  (valid ~{remaining:2d}s)")


def cmd_hotp(args):
    registry = _registry(args)
    account = registry.current()
    code = otp_core.hotp(account.key, args.counter)
    print(f"{account.label} HOTP(counter={args.counter}): {otp_core.format_code(code)}")


def cmd_uri(args):
    registry = _registry(args)
    account = registry.current()
    print(otp_core.format_otpauth_uri(account.encoded_secret, account.label,
                                      args.issuer, period=args.period))


def cmd_run(args):
    registry = _registry(args)
    clock = SystemClock()
    synced = wait_for_valid_clock(clock, timeout_s=args.sync_timeout)

    controller = SessionController(
        registry, clock,
        advance_pin=MemoryPin(), request_pin=MemoryPin(),
        renderer=ConsoleRenderer(), keyboard=ConsoleKeyboard(),
        period=args.period,
        debounce_ms=args.debounce_ms,
        display_interval_ms=args.display_interval_ms,
        synced=synced,
    )
    print("Press Ctrl+C to quit.\n")
    run_loop(controller, tick_ms=args.tick_ms, max_ticks=args.max_ticks)
    print("\nBye.")


def cmd_serve(args):
    from keyfob_backend.app import create_app

    app = create_app(args.accounts, account=args.account, period=args.period,
                     debounce_ms=args.debounce_ms,
                     display_interval_ms=args.display_interval_ms,
                     sync_timeout=args.sync_timeout)
    # single-threaded: one control loop per device
    app.run(host=args.host, port=args.port, threaded=False)


def cmd_help(args):
    print("No command specified. Use -h for help.")


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="keyfob", description="Multi-account TOTP keyfob")
    p.add_argument("--accounts", help=f"Accounts JSON file (default ${config.ACCOUNTS_ENV} "
                                      f"or {config.ACCOUNTS_FILE})")
    p.add_argument("--period", type=positive_int, default=config.DEFAULT_TIME_STEP,
                   help="TOTP time step (seconds)")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    pa = sub.add_parser("accounts", help="List configured accounts")
    pa.set_defaults(func=cmd_accounts)

    pc = sub.add_parser("code", help="Print the current TOTP for an account")
    pc.add_argument("--account", "-a", help="Account label or index (default: first)")
    pc.set_defaults(func=cmd_code)

    ph = sub.add_parser("hotp", help="Print the HOTP for an account at a counter")
    ph.add_argument("--account", "-a")
    ph.add_argument("--counter", type=counter_value, required=True)
    ph.set_defaults(func=cmd_hotp)

    pu = sub.add_parser("uri", help="Print the otpauth URI for an account")
    pu.add_argument("--account", "-a")
    pu.add_argument("--issuer", default="keyfob")
    pu.set_defaults(func=cmd_uri)

    for name, func, text in (("run", cmd_run, "Run the keyfob loop on the console"),
                             ("serve", cmd_serve, "Serve the keyfob simulator over HTTP")):
        pr = sub.add_parser(name, help=text)
        pr.add_argument("--account", "-a", help="Initially selected account")
        pr.add_argument("--debounce-ms", type=non_negative_int, default=config.DEBOUNCE_MS)
        pr.add_argument("--display-interval-ms", type=non_negative_int, default=config.DISPLAY_INTERVAL_MS)
        pr.add_argument("--sync-timeout", type=float, default=config.SYNC_TIMEOUT_S,
                        help="Seconds to wait for a valid clock before starting")
        pr.set_defaults(func=func)
        if name == "run":
            pr.add_argument("--tick-ms", type=non_negative_int, default=config.TICK_MS)
            pr.add_argument("--max-ticks", type=int, help=argparse.SUPPRESS)
        else:
            pr.add_argument("--host", default="127.0.0.1")
            pr.add_argument("--port", type=int, default=5000)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.setup_logging(args.verbose)
    try:
        return args.func(args) or 0
    except config.ConfigError as e:
        print(f"[!] {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
