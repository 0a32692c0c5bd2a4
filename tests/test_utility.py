# tests/test_utility.py
from __future__ import annotations

import re

import pytest

from numnerd.randnum import make_rng, random_number_text
from numnerd.runtime import APPLY
from numnerd.utility import (
    UserInputError,
    ordinal_suffix,
    parse_nonnegative,
)

# ---------- parse_nonnegative -------------------------------------------------

GOOD = [
    ("0", 0),
    ("7", 7),
    ("007", 7),
    ("18446744073709551616", 2**64),
    ("9" * 300, 10**300 - 1),
]


@pytest.mark.parametrize("raw,expected", GOOD, ids=[g[0][:20] for g in GOOD])
def test_parse_nonnegative(raw, expected):
    assert parse_nonnegative(raw) == expected


BAD = ["", "-1", "+1", " 1", "1 ", "1.0", "abc", "0x10", "1_000", "١٢٣", "1e3", "²"]


@pytest.mark.parametrize("raw", BAD, ids=[repr(b) for b in BAD])
def test_parse_nonnegative_rejects(raw):
    with pytest.raises(UserInputError) as e:
        parse_nonnegative(raw)
    assert str(e.value) == f'"{raw}" could not be parsed as an unsigned integer.'


def test_parse_respects_digit_limit():
    APPLY({"BEHAVIOUR": {"MAX_DIGITS": 5}})
    assert parse_nonnegative("12345") == 12345
    assert parse_nonnegative("0000012345") == 12345
    with pytest.raises(UserInputError, match="more than 5 decimal digits"):
        parse_nonnegative("123456")


# ---------- small helpers -----------------------------------------------------


@pytest.mark.parametrize("n,text", [
    (0, "0th"), (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"),
    (101, "101st"), (111, "111th"), (112, "112th"), (1003, "1003rd"),
])
def test_ordinals(n, text):
    assert f"{n}{ordinal_suffix(n)}" == text


# ---------- random numbers ----------------------------------------------------

_DIGITS = re.compile(r"[1-9][0-9]*")


def test_random_number_shape():
    rng = make_rng(1234)
    for _ in range(500):
        assert _DIGITS.fullmatch(random_number_text(rng))


def test_random_number_length_distribution():
    rng = make_rng(42)
    lengths = [len(random_number_text(rng, p=0.75)) for _ in range(5000)]
    assert 3.6 < sum(lengths) / len(lengths) < 4.4


def test_random_number_zero_probability_is_one_digit():
    rng = make_rng(7)
    assert all(len(random_number_text(rng, p=0.0)) == 1 for _ in range(50))


def test_random_number_probability_from_profile():
    APPLY({"RANDOM": {"CONTINUE_PROBABILITY": 0.0}})
    assert len(random_number_text(make_rng(3))) == 1


@pytest.mark.parametrize("p", [1.0, -0.1, 2])
def test_random_number_rejects_bad_probability(p):
    with pytest.raises(ValueError):
        random_number_text(make_rng(0), p=p)
