import argparse
import logging
import sys

import tokcount as tc
from tokcount.errors import PricingError, TokCountError


def main() -> None:
    """Count the tokens of a text for a model and estimate its prompt price."""
    parser = argparse.ArgumentParser(description="Count tokens with tokcount.")
    parser.add_argument("model", help="Model name, e.g. gpt-4 or gpt-3.5-turbo.")
    parser.add_argument(
        "text",
        nargs="?",
        default=None,
        help="Text to count (default: read from stdin).",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding .tiktoken vocabulary files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.data_dir:
        tc.set_data_dir(args.data_dir)

    text = args.text if args.text is not None else sys.stdin.read()
    try:
        n_tokens = tc.count_text(args.model, text)
    except TokCountError as e:
        sys.exit(f"error: {e}")
    print(f"model {args.model}: {n_tokens} tokens for {len(text)} chars")

    try:
        price = tc.get_chat_price(args.model, n_tokens, 0)
    except PricingError:
        return
    print(f"prompt price: ${price}")


if __name__ == "__main__":
    main()
