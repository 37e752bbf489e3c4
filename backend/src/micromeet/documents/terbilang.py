"""Indonesian number-to-words ("terbilang") for receipt amounts.

    >>> terbilang(1500000)
    'Satu Juta Lima Ratus Ribu Rupiah'
"""

from decimal import Decimal

_UNITS = (
    "", "Satu", "Dua", "Tiga", "Empat", "Lima",
    "Enam", "Tujuh", "Delapan", "Sembilan", "Sepuluh", "Sebelas",
)

_SCALES = (
    (10 ** 12, "Triliun"),
    (10 ** 9, "Miliar"),
    (10 ** 6, "Juta"),
)


def _words(n: int) -> str:
    if n < 12:
        return _UNITS[n]
    if n < 20:
        return f"{_UNITS[n - 10]} Belas"
    if n < 100:
        rest = _words(n % 10)
        return f"{_UNITS[n // 10]} Puluh {rest}".strip()
    if n < 200:
        return f"Seratus {_words(n - 100)}".strip()
    if n < 1000:
        return f"{_UNITS[n // 100]} Ratus {_words(n % 100)}".strip()
    if n < 2000:
        return f"Seribu {_words(n - 1000)}".strip()
    if n < 10 ** 6:
        return f"{_words(n // 1000)} Ribu {_words(n % 1000)}".strip()
    for scale, name in _SCALES:
        if n >= scale:
            return f"{_words(n // scale)} {name} {_words(n % scale)}".strip()
    return ""


def number_to_words(amount) -> str:
    """Spell out the integer part of amount, without a currency suffix."""
    n = int(Decimal(str(amount)))
    if n < 0:
        raise ValueError("amount must not be negative")
    if n == 0:
        return "Nol"
    return _words(n)


def terbilang(amount) -> str:
    return f"{number_to_words(amount)} Rupiah"
