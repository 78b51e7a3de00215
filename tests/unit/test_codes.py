"""Unit tests for promotion code generation."""

import string

import pytest

from voucher_minter.codes import CODE_LENGTH, code_factory, generate_code
from voucher_minter.config import DEFAULT_CODE_ALPHABET


@pytest.mark.unit
class TestGenerateCode:
    def test_alphabet_is_uppercase_letters_and_digits(self):
        assert len(DEFAULT_CODE_ALPHABET) == 36
        assert set(DEFAULT_CODE_ALPHABET) == set(string.ascii_uppercase + string.digits)

    def test_codes_have_fixed_length_and_alphabet(self):
        for _ in range(200):
            code = generate_code()
            assert len(code) == CODE_LENGTH == 6
            assert set(code) <= set(DEFAULT_CODE_ALPHABET)

    def test_draws_cover_the_alphabet(self):
        seen = set("".join(generate_code() for _ in range(500)))
        # 3000 draws over 36 symbols; missing one is astronomically unlikely
        assert seen == set(DEFAULT_CODE_ALPHABET)

    def test_custom_length_and_alphabet(self):
        make = code_factory(length=10, alphabet="AB")
        code = make()
        assert len(code) == 10
        assert set(code) <= {"A", "B"}

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError, match="greater than zero"):
            generate_code(0)
