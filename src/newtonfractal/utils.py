MINUS_SIGN = "−"


def format_signed(value: float) -> str:
    """'+ 1.00' / '− 0.87', with the sign separated from the magnitude."""
    sign = "+" if 0.0 <= value else MINUS_SIGN
    return f"{sign} {abs(value):.2f}"


def format_complex(z: complex) -> str:
    """Label for a root, e.g. '+ 1.00 − 0.87 i'."""
    return f"{format_signed(z.real)} {format_signed(z.imag)} i"
