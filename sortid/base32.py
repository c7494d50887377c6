"""Restricted Base32 helpers shared by the encoder and tracking ids."""

# Crockford alphabet: no I, L, O, U
ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ENCODING_LEN = len(ALPHABET)

TIME_LEN = 10
RANDOM_LEN = 16

_INDEX = {symbol: i for i, symbol in enumerate(ALPHABET)}


def encode_int(value, length):
    """Encode a non-negative int as `length` symbols, most significant first.

    Digits above `length` are dropped.
    """
    chars = []
    for _ in range(length):
        value, remainder = divmod(value, ENCODING_LEN)
        chars.append(ALPHABET[remainder])
    return "".join(reversed(chars))


def fits(value, length):
    return 0 <= value < ENCODING_LEN ** length


def symbol_for(fraction):
    """Map a float in [0, 1) to one symbol."""
    return ALPHABET[int(fraction * ENCODING_LEN)]


def decode_int(text):
    """Inverse of encode_int. Raises KeyError on a foreign symbol."""
    value = 0
    for symbol in text:
        value = value * ENCODING_LEN + _INDEX[symbol]
    return value
