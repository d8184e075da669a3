"""Brazilian taxpayer document checks (CPF for people, CNPJ for companies)."""
from __future__ import annotations
import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")
_CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_CNPJ_WEIGHTS_2 = (6,) + _CNPJ_WEIGHTS_1


def only_digits(document: str) -> str:
    return _NON_DIGITS.sub("", document or "")


def _mod11_digit(total: int) -> int:
    rest = total % 11
    return 0 if rest < 2 else 11 - rest


def is_valid_cpf(document: str) -> bool:
    digits = only_digits(document)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    nums = [int(d) for d in digits]
    first = _mod11_digit(sum(n * w for n, w in zip(nums[:9], range(10, 1, -1))))
    second = _mod11_digit(sum(n * w for n, w in zip(nums[:10], range(11, 1, -1))))
    return nums[9] == first and nums[10] == second


def is_valid_cnpj(document: str) -> bool:
    digits = only_digits(document)
    if len(digits) != 14 or digits == digits[0] * 14:
        return False
    nums = [int(d) for d in digits]
    first = _mod11_digit(sum(n * w for n, w in zip(nums[:12], _CNPJ_WEIGHTS_1)))
    second = _mod11_digit(sum(n * w for n, w in zip(nums[:13], _CNPJ_WEIGHTS_2)))
    return nums[12] == first and nums[13] == second


def validate_document(document: str) -> tuple[bool, Optional[str]]:
    """
    Classify and check a CPF or CNPJ, with or without punctuation.

    Returns:
        (valid, "CPF" | "CNPJ" | None); the type is None when the digit count
        matches neither
    """
    digits = only_digits(document)
    if len(digits) == 11:
        return is_valid_cpf(digits), "CPF"
    if len(digits) == 14:
        return is_valid_cnpj(digits), "CNPJ"
    return False, None
