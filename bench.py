"""Benchmark encode_batch() and decode_bytes() on a slice of the Sci-Fi Gutenberg dataset.

Outputs a row with the columns:
  Corpus Size | Encoding | Encoding Throughput | Decoding Throughput |
  Compression Ratio | Size Reduction
"""

import argparse
import time

from datasets import load_dataset

import tokcount as tc

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def load_corpus(num_docs: int | None) -> list[str]:
    """Load up to `num_docs` documents via dataset indexing; full dataset when None."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    if num_docs is not None:
        return ds[:num_docs]["text"]
    return ds["text"]


def load_tokenizer(encoding: str, use_tiktoken: bool) -> tc.Tokenizer:
    """Return the named encoding from the data directory or from tiktoken's cache."""
    if use_tiktoken:
        from tokcount.pretrained import from_tiktoken

        return from_tiktoken(encoding)
    return tc.get_encoding(encoding)


def main() -> None:
    """Run the encode/decode benchmark and print a markdown table row."""
    parser = argparse.ArgumentParser(
        description="Benchmark tokcount encode_batch() and decode_bytes()."
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=None,
        help="Number of documents to encode (default: full dataset).",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default="cl100k_base",
        help="Encoding name (default: cl100k_base).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for encode_batch (default: executor default).",
    )
    parser.add_argument(
        "--tiktoken",
        action="store_true",
        help="Take the vocabulary from tiktoken instead of the data directory.",
    )
    args = parser.parse_args()

    docs = load_corpus(args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    total_bytes = sum(len(d.encode("utf-8")) for d in docs)
    corpus_mb = total_bytes / (1024 * 1024)

    tokenizer = load_tokenizer(args.encoding, args.tiktoken)

    # --- Encoding ---
    t0 = time.perf_counter()
    encoded = tokenizer.encode_batch(docs, num_workers=args.workers)
    encode_elapsed = time.perf_counter() - t0
    encode_mbps = total_bytes / encode_elapsed / (1024 * 1024)

    # --- Decoding ---
    t0 = time.perf_counter()
    for seq in encoded:
        tokenizer.decode_bytes(seq)
    decode_elapsed = time.perf_counter() - t0
    total_tokens = sum(len(seq) for seq in encoded)
    decode_mtps = total_tokens / decode_elapsed / 1_000_000

    # --- Compression stats ---
    compression_ratio = total_bytes / total_tokens
    size_reduction = (1 - 1 / compression_ratio) * 100

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':14} | {'Encoding':12} "
        f"| {'Encoding Throughput':19} | {'Decoding Throughput':19} "
        f"| {'Compression Ratio':17} | {'Size Reduction':14} |"
    )
    sep = (
        f"| {'-' * 14} | {'-' * 12} "
        f"| {'-' * 19} | {'-' * 19} "
        f"| {'-' * 17} | {'-' * 14} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':14} | {tokenizer.name:12} "
        f"| {f'{encode_mbps:.2f} MB/sec':19} | {f'{decode_mtps:.1f}M tokens/sec':19} "
        f"| {f'{compression_ratio:.2f}x':17} | {f'{size_reduction:.1f}%':14} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
