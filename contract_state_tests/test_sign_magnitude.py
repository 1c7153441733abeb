import pytest

from contract_state.serialization.encoding.sign_magnitude import from_sign_magnitude, to_sign_magnitude


@pytest.mark.parametrize(
    ['value', 'expected'],
    [
        (0, '00'),
        (1, '01'),
        (-1, '81'),
        (5, '05'),
        (127, '7f'),
        (-127, 'ff'),
        (128, '8000'),
        (-128, '8080'),
        (255, 'ff00'),
        (256, '0001'),
        (-256, '0081'),
        (32767, 'ff7f'),
        (32768, '008000'),
        (-32768, '008080'),
        (2**64, '000000000000000001'),
        (-(2**64), '000000000000000081'),
    ],
)
def test_encode_decode(value: int, expected: str) -> None:
    assert to_sign_magnitude(value).hex() == expected
    assert from_sign_magnitude(bytes.fromhex(expected)) == value


@pytest.mark.parametrize(
    ['hex_data', 'expected'],
    [
        ('', 0),
        ('80', 0),
        ('0000', 0),
        ('0500', 5),
        ('0580', -5),
        ('050000', 5),
    ],
)
def test_decode_non_minimal(hex_data: str, expected: int) -> None:
    assert from_sign_magnitude(bytes.fromhex(hex_data)) == expected


def test_large_values() -> None:
    for value in (2**255 - 19, -(2**255 - 19), 2**521 - 1):
        data = to_sign_magnitude(value)
        # the sign never takes a whole byte when the magnitude leaves the top bit free
        assert len(data) == (abs(value).bit_length() + 8) // 8
        assert from_sign_magnitude(data) == value
