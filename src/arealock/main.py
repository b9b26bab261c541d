"""Entry-point for launching the CLI application."""
from __future__ import annotations

from .data.errors import StateStoreError
from .presentation.cli.app import main as cli_main


def main() -> int:
    """Run the CLI and return a process exit code."""
    try:
        cli_main()
    except KeyboardInterrupt:
        print()
        return 130
    except StateStoreError as exc:
        print(f"Progress could not be saved: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
