"""mdedit CLI entry point.

Allows running via `python -m mdedit` and provides the console script
defined in `pyproject.toml`. The session starts empty; on Ctrl-Q the
document is written to stdout.
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys

USAGE = "usage: mdedit [--version] [--debug LOGFILE]"


def get_version_string() -> str:
    try:
        return f"mdedit {importlib.metadata.version('mdedit')}"
    except importlib.metadata.PackageNotFoundError:
        return "mdedit (not installed)"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if args and args[0] in ("--help", "-h"):
        print(USAGE)
        return 0
    if args and args[0] == "--debug":
        if len(args) < 2:
            print(USAGE, file=sys.stderr)
            return 2
        # The screen belongs to the editor, so debug output goes to a file
        logging.basicConfig(
            filename=args[1],
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    elif args:
        print(USAGE, file=sys.stderr)
        return 2

    # Lazy import to avoid importing UI deps for --version
    from .settings import get_settings_store
    from .terminal import TerminalEditor

    editor = TerminalEditor(settings=get_settings_store().load())
    text = editor.run()
    sys.stdout.write(text)
    if text and not text.endswith('\n'):
        sys.stdout.write('\n')
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
