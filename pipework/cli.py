"""Command-line entry point: run, capture or locate external programs."""
import argparse
import os
import sys
import warnings
from pathlib import Path

from pipework import config
from pipework.command import capture, run
from pipework.errors import CommandWarning, PipeworkError
from pipework.locator import resolve
from pipework.logs import save_exec_log
from pipework.retry import retry_call
from pipework.spinner import run_with_spinner
from pipework.state import RunState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipework",
        description="Run external programs with captured output and decoded exit status",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--verbose", action="store_true", default=config.VERBOSE,
                        help="Print each command and dump state on errors")
    parser.add_argument("--logging", action="store_true", default=config.LOGGING,
                        help="Record every command without printing progress")
    parser.add_argument("--log-file", type=Path, default=config.EXEC_LOG,
                        help="Where to write the execution log when logging is on")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="Run a program on this terminal")
    p_run.add_argument("label")
    p_run.add_argument("program")
    p_run.add_argument("args", nargs=argparse.REMAINDER)

    p_cap = sub.add_parser("capture", help="Run a program and print its captured output")
    p_cap.add_argument("--lines", action="store_true", help="Print output line by line with numbers")
    p_cap.add_argument("--input-file", type=Path, help="Feed this file's lines to the program")
    p_cap.add_argument("--retries", type=int, default=1, help="Attempts for nonzero exits")
    p_cap.add_argument("--retry-delay", type=float, default=1.0, help="Seconds between attempts")
    p_cap.add_argument("label")
    p_cap.add_argument("program")
    p_cap.add_argument("args", nargs=argparse.REMAINDER)

    p_which = sub.add_parser("which", help="Print the resolved path of a program")
    p_which.add_argument("program")
    return parser


def _program_path(state: RunState, program: str) -> str:
    if os.path.isabs(program):
        return program
    return resolve(state, program)


def _do_capture(state: RunState, args) -> None:
    argv = [_program_path(state, args.program), *args.args]
    input_lines = None
    if args.input_file:
        input_lines = args.input_file.read_text(encoding="utf-8").splitlines()

    def attempt():
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", CommandWarning)
            result = capture(state, args.label, argv, lines=args.lines, input=input_lines)
        for w in caught:
            print(f"warning: {w.message}", file=sys.stderr)
        return result

    def call():
        return retry_call(attempt, attempts=max(1, args.retries), delay=args.retry_delay, verbose=state.verbose)

    if state.verbose:
        result = call()
    else:
        result = run_with_spinner(f"{args.label}… ", call)

    if args.lines:
        for number, line in enumerate(result, start=1):
            print(f"{number:5d}  {line}")
    elif result:
        print(result)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    state = RunState.from_env(verbose=args.verbose, logging=args.logging)
    code = 0
    try:
        if args.command == "which":
            print(resolve(state, args.program))
        elif args.command == "run":
            argv_ = [_program_path(state, args.program), *args.args]
            run(state, args.label, argv_)
        else:
            _do_capture(state, args)
    except PipeworkError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if state.log_enabled:
            print("Program state dump...\n" + state.dump(), file=sys.stderr)
        code = 1
    finally:
        if state.log_enabled:
            try:
                save_exec_log(state.exec_log, args.log_file)
            except OSError as exc:
                print(f"error: cannot write execution log {args.log_file}: {exc}", file=sys.stderr)
                code = code or 1
    return code


if __name__ == "__main__":
    raise SystemExit(main())
