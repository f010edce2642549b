"""Суммы в рупиях: отображение и перевод в минимальные единицы шлюза (пайсы)."""


def to_minor_units(amount: int) -> int:
    """500 ₹ -> 50000 paise."""
    return int(amount) * 100


def format_inr(amount: int | float) -> str:
    """Вернуть строку вида «₹500»."""
    return f"₹{int(amount)}"
