"""finance_tracker: кэш транзакций, производные представления и Telegram-интерфейс."""
