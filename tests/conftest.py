import random
import pytest # type: ignore

def pytest_configure(config):
    """Add markers to the pytest configuration."""
    config.addinivalue_line("markers", "quick: mark test as quick to run")
    config.addinivalue_line("markers", "full: mark test as part of the full test suite")
    config.addinivalue_line("markers", "slow: mark test as very slow to run")


@pytest.fixture
def fixed_text() -> str:
    """A deterministic text of 1000 distinct words, most of them repeated."""
    words = [f"word{i}" for i in range(1000)]
    tokens = []
    for i, word in enumerate(words):
        tokens.extend([word] * (1 + i % 5))
    random.Random(7).shuffle(tokens)
    lines = [" ".join(tokens[i:i + 12]) for i in range(0, len(tokens), 12)]
    return "\n".join(lines)
