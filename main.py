# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import argparse
import json
import shlex
import subprocess
import sys

import yaml

from tcpprobe import InvocationContractError, ping, probe
from tcpprobe.config import config_from_mapping
from tcpprobe.log import setup_logging


def _fmt_ms(value):
    if value is None:
        return "-"
    return f"{value:.3f}ms"


def evaluate(item, report):
    """Decide whether a probe report passes and describe it in one line."""
    summary = (
        f"{report.attempts - report.dropped}/{report.attempts} connected, "
        f"avg {_fmt_ms(report.avg)} min {_fmt_ms(report.min)} max {_fmt_ms(report.max)}"
    )
    if report.probe_mode:
        summary += f", {report.matches} matched, {report.errors} errors"
    if report.dropped:
        return False, summary
    if item.get("match") is not None and report.matches < report.attempts:
        return False, f"{summary} (response did not match expectation)"
    if report.errors:
        first = next(r.error for r in report.results if r.error is not None)
        return False, f"{summary} ({first})"
    max_avg_ms = item.get("max_avg_ms")
    if max_avg_ms is not None and report.avg is not None and report.avg > float(max_avg_ms):
        return False, f"{summary} (avg > {float(max_avg_ms):.2f}ms)"
    return True, summary


def run_probe(item):
    ptype = item.get("type", "probe")
    if ptype == "probe":
        runner = probe
    elif ptype == "ping":
        runner = ping
    else:
        return False, f"unknown type: {ptype}", None
    try:
        report = runner(config_from_mapping(item))
    except InvocationContractError as exc:
        return False, f"invalid probe: {exc}", None
    ok, msg = evaluate(item, report)
    return ok, msg, report


def run_command(command):
    if not command:
        return True
    try:
        args = shlex.split(command)
        result = subprocess.run(args, check=False)
        return result.returncode == 0
    except OSError:
        return False


def run_probes(config, as_json=False):
    probes = config.get("probes", [])
    if not isinstance(probes, list):
        print("config error: probes must be a list")
        return 1

    any_failed = False
    reports = []
    for item in probes:
        name = item.get("name", "(unnamed)")
        ok, msg, report = run_probe(item)
        if report is not None:
            reports.append({"name": name, "ok": ok, **report.to_dict()})

        if not as_json:
            status = "ok" if ok else "fail"
            print(f"[{status}] {name}: {msg}")

        if ok:
            command = item.get("command")
            if command:
                cmd_ok = run_command(command)
                if not cmd_ok:
                    print(f"[fail] {name}: command failed", file=sys.stderr)
                    any_failed = True
        else:
            fail_command = item.get("fail_command")
            if fail_command:
                cmd_ok = run_command(fail_command)
                if not cmd_ok:
                    print(f"[fail] {name}: fail command failed", file=sys.stderr)
            any_failed = True

    if as_json:
        print(json.dumps(reports, indent=2))

    if any_failed:
        fail_command = config.get("fail_command")
        if fail_command:
            cmd_ok = run_command(fail_command)
            if not cmd_ok:
                print("[fail] global fail_command failed", file=sys.stderr)
        return 1

    command = config.get("command")
    if command:
        cmd_ok = run_command(command)
        if not cmd_ok:
            print("[fail] global command failed", file=sys.stderr)
            return 1
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="TCP reachability and response probe")
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="path to config YAML (default: config.yaml)",
    )
    parser.add_argument("--json", action="store_true", help="print reports as JSON")
    parser.add_argument("--log-level", help="logging level (default: $TCPPROBE_LOG_LEVEL or WARNING)")
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        with open(args.config, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except OSError as exc:
        print(f"failed to read config: {exc}")
        return 1
    except yaml.YAMLError as exc:
        print(f"invalid yaml: {exc}")
        return 1

    return run_probes(config, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
