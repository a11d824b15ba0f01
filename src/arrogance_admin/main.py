"""Console entrypoint.

On a terminal each keypress is handled as it arrives. Piped input is read as
one key name per line, which keeps the console scriptable.
"""

import asyncio
import logging
import os
import sys
import threading
from typing import TextIO

from arrogance_admin.app_logging import configure_logging
from arrogance_admin.config import Settings
from arrogance_admin.console.app import ConsoleApp, create_console
from arrogance_admin.console.keys import decode_keys, keypress_mode
from arrogance_admin.containers import AppContainer, build_container

_CLEAR_SCREEN = "\x1b[2J\x1b[H"

_logger = logging.getLogger(__name__)


async def run_console(
    container: AppContainer, source: TextIO, output: TextIO
) -> int:
    """Drive the console from ``source`` until quit or end of input."""
    app = create_console(container)
    clear = _CLEAR_SCREEN if output.isatty() else ""

    def write(screen: str) -> None:
        output.write(f"{clear}{screen}\n\n")
        output.flush()

    app.renderers.append(write)
    app.start()
    try:
        if source.isatty():
            await _read_keypresses(app, source.fileno())
        else:
            await _read_lines(app, source)
    finally:
        await app.wait_idle()
        app.stop()
        await container.close_resources()
    return 0


async def _read_lines(app: ConsoleApp, source: TextIO) -> None:
    # Daemon thread: a blocked readline must not hold up exit.
    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[str] = asyncio.Queue()

    def pump() -> None:
        while True:
            line = source.readline()
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            except RuntimeError:
                # Event loop already closed.
                return
            if not line:
                return

    threading.Thread(target=pump, name="console-input", daemon=True).start()
    while app.running:
        line = await lines.get()
        if not line:
            return
        app.handle_key(line.strip() or "enter")


async def _read_keypresses(app: ConsoleApp, fd: int) -> None:
    loop = asyncio.get_running_loop()
    chunks: asyncio.Queue[bytes] = asyncio.Queue()
    loop.add_reader(fd, lambda: chunks.put_nowait(os.read(fd, 64)))
    try:
        with keypress_mode(fd):
            while app.running:
                chunk = await chunks.get()
                if not chunk:
                    return
                for key in decode_keys(chunk.decode(errors="ignore")):
                    app.handle_key(key)
                    if not app.running:
                        return
    finally:
        loop.remove_reader(fd)


def main() -> int:
    """Run the admin console against the configured Supabase project."""
    settings = Settings()
    configure_logging(settings.log_level, settings.log_file)
    container = build_container(settings)
    try:
        return asyncio.run(run_console(container, sys.stdin, sys.stdout))
    except KeyboardInterrupt:
        _logger.info("Interrupted, exiting")
        return 0


if __name__ == "__main__":
    sys.exit(main())
