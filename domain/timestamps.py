import datetime


def now_iso() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")
