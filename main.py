"""Send a prompt to an OpenAI-compatible chat-completions endpoint and print the reply.

Usage:
    llm-cli --prompt "What is the capital of France?" --model gpt-4 --max-tokens 500

The API key is read from LLM_API_KEY (or the legacy OPENAI_API_KEY), from the
environment or a .env file in the working directory.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, resolve_configuration
from errors import ClientError
from services.llm_client import LLMClient

logger = logging.getLogger(__name__)


# ---------------- ARGUMENT TYPES ---------------- #

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}")
    if not number > 0 or number == float("inf"):
        raise argparse.ArgumentTypeError(f"must be a positive number, got {value}")
    return number


def _non_empty(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llm-cli",
        description="Send a prompt to an OpenAI-compatible chat-completions API and print the reply",
    )
    parser.add_argument("-p", "--prompt", required=True, type=_non_empty, help="Prompt text to send")
    parser.add_argument(
        "--max-tokens",
        type=_positive_int,
        default=None,
        help=f"Maximum number of tokens in the response (default: {DEFAULT_MAX_TOKENS})",
    )
    parser.add_argument(
        "--model",
        default=None,
        help=f"Model to use, passed through verbatim (default: {DEFAULT_MODEL})",
    )
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Chat-completions URL (default: LLM_ENDPOINT, OPENAI_API_ENDPOINT or the OpenAI API)",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature (0-2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request details to stderr")
    return parser


# ---------------- LOGGING ---------------- #

def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


# ---------------- PRESENTER ---------------- #

def present_error(error: ClientError) -> int:
    """Print the error's safe message to stderr and return the exit code."""
    print(f"Error: {error}", file=sys.stderr)
    return error.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = resolve_configuration(args)
        client = LLMClient(timeout=config.timeout)
        reply = client.complete(config)
    except ClientError as e:
        logger.debug(f"Request failed with {type(e).__name__}")
        return present_error(e)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130

    print(reply)
    return 0


if __name__ == "__main__":
    sys.exit(main())
