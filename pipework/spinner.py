"""Spinning progress indicator for long-running captures."""
import itertools
import sys
import threading
import time

SPINNER_CHARS = "|/-\\"


def run_with_spinner(prefix: str, fn, *args, stream=None, **kwargs):
    """Run fn on a worker thread; spin on stream (stderr) until it completes. Return fn's result."""
    stream = stream or sys.stderr
    result = [None]
    exception = [None]

    def target():
        try:
            result[0] = fn(*args, **kwargs)
        except Exception as e:
            exception[0] = e

    thread = threading.Thread(target=target, daemon=True)
    thread.start()

    if stream.isatty():
        for c in itertools.cycle(SPINNER_CHARS):
            if not thread.is_alive():
                break
            stream.write(f"\r{prefix}{c} ")
            stream.flush()
            time.sleep(0.1)
        stream.write("\r" + " " * (len(prefix) + 2) + "\r")
        stream.flush()

    thread.join()
    if exception[0]:
        raise exception[0]
    return result[0]
