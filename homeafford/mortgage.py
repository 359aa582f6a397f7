"""Amortized mortgage payments and their inverse."""


def monthly_payment(principal: float, annual_rate_pct: float, term_years: int) -> float:
    """Monthly P&I payment for a fully amortizing loan.

    ``annual_rate_pct`` is a percentage (6.5 means 6.5% p.a.).
    """
    n = term_years * 12
    r = annual_rate_pct / 100 / 12
    if r == 0:
        return principal / n
    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def max_principal(target_payment: float, annual_rate_pct: float, term_years: int) -> float:
    """Largest loan a monthly P&I payment of ``target_payment`` can service.

    Algebraic inverse of ``monthly_payment``.
    """
    n = term_years * 12
    r = annual_rate_pct / 100 / 12
    if r == 0:
        return target_payment * n
    return target_payment * (1 - (1 + r) ** -n) / r


def total_interest(principal: float, annual_rate_pct: float, term_years: int) -> float:
    """Interest paid over the full term."""
    payment = monthly_payment(principal, annual_rate_pct, term_years)
    return payment * term_years * 12 - principal
