import gzip
from typing import Iterator

def read_tokens(filename: str) -> Iterator[str]:
    """Read whitespace-separated tokens from a text file.

    Files ending in .gz are decompressed on the fly. Lines are read lazily,
    so arbitrarily large inputs use constant memory.
    """
    is_gzipped = filename.endswith(".gz")

    # Open with appropriate method
    opener = gzip.open if is_gzipped else open

    with opener(filename, "rt", encoding="utf-8", errors="replace") as file:
        for line in file:
            yield from line.split()
