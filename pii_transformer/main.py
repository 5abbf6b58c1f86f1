import argparse
import json
import sys
from dataclasses import asdict

from pii_transformer.config.settings import Settings
from pii_transformer.detection.heuristic import analyze, available_patterns
from pii_transformer.logging.logger import Log
from pii_transformer.transform.transformer import build_transformer


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pii-transform",
        description="Decrypt or encrypt hex PGP envelopes and hash the result.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("forward", "Decrypt an envelope, then hash the plaintext"),
        ("backward", "Encrypt plaintext into an envelope, then hash it"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("text", nargs="?", help="Input text (default: read stdin)")
        cmd.add_argument(
            "--passphrase",
            help="Passphrase (default: PASSPHRASE from the environment)",
        )

    cmd = sub.add_parser("analyze", help="Check whether text looks like an envelope")
    cmd.add_argument("text", nargs="?", help="Input text (default: read stdin)")

    sub.add_parser("patterns", help="List the supported envelope patterns")
    return parser


def _read_text(value: str | None) -> str:
    if value is not None:
        return value
    return sys.stdin.read().rstrip("\n")


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> build transformer -> print JSON result."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if args.command == "patterns":
        payload: object = [asdict(p) for p in available_patterns()]
    elif args.command == "analyze":
        payload = asdict(analyze(_read_text(args.text)))
    else:
        transformer = build_transformer(settings)
        text = _read_text(args.text)
        passphrase = args.passphrase if args.passphrase is not None else settings.passphrase
        if args.command == "forward":
            result = transformer.forward(text, passphrase)
        else:
            result = transformer.backward(text, passphrase)
        payload = result.to_dict()
        if not result.succeeded:
            print(json.dumps(payload, indent=2))
            return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
