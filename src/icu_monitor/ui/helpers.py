def val_class(level: str) -> str:
    return {"stable": "val-ok", "warning": "val-mod", "critical": "val-sev"}[level]


def head_class(status: str) -> str:
    return {
        "stable": "icu-head-normal",
        "warning": "icu-head-warning",
        "critical": "icu-head-danger",
    }.get(status, "icu-head-normal")


def initials(name: str) -> str:
    parts = [p for p in name.split() if p]
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][0].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def time_ago(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    return f"{minutes // 60} h ago"
