"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from tasklink import AuthenticationError, ConfigError, ProviderError, StoreError, SyncError


def main(argv: list[str] | None = None) -> int:
    import tasklink.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)
    elif args.command == "watch":
        cli.logging.basicConfig(level=cli.logging.INFO, format="%(asctime)s %(message)s", stream=sys.stderr)

    runner = cli.COMMANDS[args.command]
    try:
        cli.asyncio.run(runner(args))
        return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (AuthenticationError, ProviderError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except (SyncError, StoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
