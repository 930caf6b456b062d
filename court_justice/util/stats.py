def accuracy(correct: int, total: int) -> float:
    # 0..1; sin casos -> 0
    return correct / total if total > 0 else 0.0

def win_rate_pct(correct: int, total: int) -> float:
    return round(accuracy(correct, total) * 100, 1)
