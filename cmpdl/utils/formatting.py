"""
Helper functions for formatting data into human-readable strings.
"""

LABEL_WIDTH = 40
_LABEL_TAIL = 7


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def fit_label(label: str, width: int = LABEL_WIDTH) -> str:
    """
    Fits a label into exactly `width` characters.

    Long labels keep their head and their last seven characters (usually the
    file extension) around a literal '...'; short labels are padded with spaces.
    """
    if len(label) > width:
        head = width - _LABEL_TAIL - 3
        return label[:head] + "..." + label[-_LABEL_TAIL:]
    return label.ljust(width)


def format_counter(index: int, total: int) -> str:
    """Returns a '(i/total) ' prefix padded to the width of the final counter."""
    counter = f"({index}/{total}) "
    return counter.ljust(len(f"({total}/{total}) "))
