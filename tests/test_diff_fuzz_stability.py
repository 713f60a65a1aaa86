import random

import pytest

from deepscholar.diff import (
    Equal,
    Modified,
    compute_line_diff,
    compute_word_diff,
    is_heading,
    reconstruct_new,
    reconstruct_old,
    split_lines,
    tokenize,
)

FUZZ_SEED = 20261019
FUZZ_CASES = 400

_LINES = [
    "# Intro",
    "# Introduction",
    "# Findings",
    "  # Indented heading",
    "#hashtag line",
    "",
    "   ",
    "\t",
    "The sky is blue.",
    "The  sky   is\tgrey.",
    " leading space",
    "trailing space ",
    "Ice is melting.",
    "Ice is melting fast.",
    "a b",
    "b a",
]


def _random_document(rng: random.Random) -> str:
    return "\n".join(rng.choice(_LINES) for _ in range(rng.randint(0, 8)))


def _mutate(rng: random.Random, document: str) -> str:
    lines = split_lines(document)
    for _ in range(rng.randint(0, 3)):
        action = rng.randrange(3)
        if action == 0 or not lines:
            lines.insert(rng.randint(0, len(lines)), rng.choice(_LINES))
        elif action == 1:
            del lines[rng.randrange(len(lines))]
        else:
            lines[rng.randrange(len(lines))] = rng.choice(_LINES)
    return "\n".join(lines)


def _document_pairs(seed: int) -> list[tuple[str, str]]:
    rng = random.Random(seed)
    pairs: list[tuple[str, str]] = []
    for _ in range(FUZZ_CASES):
        old = _random_document(rng)
        new = _mutate(rng, old) if rng.random() < 0.6 else _random_document(rng)
        pairs.append((old, new))
    return pairs


@pytest.mark.parametrize("seed", [FUZZ_SEED, FUZZ_SEED + 1])
def test_line_diff_reconstructs_both_documents(seed: int) -> None:
    for old, new in _document_pairs(seed):
        operations = compute_line_diff(old, new)

        assert reconstruct_old(operations) == old, (old, new)
        assert reconstruct_new(operations) == new, (old, new)
        for op in operations:
            if isinstance(op, Modified):
                assert is_heading(op.old_text) == is_heading(op.new_text), op


@pytest.mark.parametrize("seed", [FUZZ_SEED, FUZZ_SEED + 1])
def test_word_diff_reconstructs_both_lines(seed: int) -> None:
    rng = random.Random(seed)
    for _ in range(FUZZ_CASES):
        old_line = " ".join(rng.choice(_LINES) for _ in range(rng.randint(0, 3)))
        new_line = " ".join(rng.choice(_LINES) for _ in range(rng.randint(0, 3)))

        words = compute_word_diff(old_line, new_line)

        assert reconstruct_old(words, separator="") == old_line
        assert reconstruct_new(words, separator="") == new_line
        assert not any(isinstance(word, Modified) for word in words)


def test_identical_inputs_are_all_equal() -> None:
    rng = random.Random(FUZZ_SEED)
    for _ in range(FUZZ_CASES):
        document = _random_document(rng)

        operations = compute_line_diff(document, document)
        assert operations == [Equal(line) for line in split_lines(document)]

        line = rng.choice(_LINES)
        assert compute_word_diff(line, line) == [Equal(token) for token in tokenize(line)]


def test_fuzz_pairs_are_deterministic_for_a_seed() -> None:
    first = [compute_line_diff(old, new) for old, new in _document_pairs(FUZZ_SEED)[:50]]
    second = [compute_line_diff(old, new) for old, new in _document_pairs(FUZZ_SEED)[:50]]

    assert first == second
