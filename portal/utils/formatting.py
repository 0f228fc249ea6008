def format_price(amount_cents: int, currency: str = "BRL") -> str:
    """
    Formata centavos no padrão pt-BR.

    Examples:
        >>> format_price(9990)
        'R$ 99,90'
        >>> format_price(123456789)
        'R$ 1.234.567,89'
    """
    symbol = "R$" if currency.upper() == "BRL" else currency.upper()
    sign = "-" if amount_cents < 0 else ""
    reais, cents = divmod(abs(int(amount_cents)), 100)
    integer_part = f"{reais:,}".replace(",", ".")
    return f"{sign}{symbol} {integer_part},{cents:02d}"
