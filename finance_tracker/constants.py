# Порядок значений важен: по нему строится разбивка расходов для диаграммы
CATEGORIES: dict[str, tuple[str, ...]] = {
    "income": ("salary", "freelance", "investment", "other"),
    "expense": ("food", "transport", "entertainment", "shopping", "bills", "health", "other"),
}

CATEGORY_LABELS: dict[str, dict[str, str]] = {
    "income": {
        "salary": "Salary",
        "freelance": "Freelance",
        "investment": "Investment",
        "other": "Other",
    },
    "expense": {
        "food": "Food & Dining",
        "transport": "Transportation",
        "entertainment": "Entertainment",
        "shopping": "Shopping",
        "bills": "Bills & Utilities",
        "health": "Health",
        "other": "Other",
    },
}

# Короткие подписи для легенды диаграммы
CHART_LABELS: dict[str, str] = {
    "food": "Food",
    "transport": "Transport",
    "entertainment": "Entertainment",
    "shopping": "Shopping",
    "bills": "Bills",
    "health": "Health",
    "other": "Other",
}

KIND_META: dict[str, dict[str, str]] = {
    "income": {"icon": "💰", "title": "Income", "sign": "+"},
    "expense": {"icon": "💸", "title": "Expense", "sign": "-"},
}

CAT_PAGE_SIZE = 8
LIST_LIMIT = 20
