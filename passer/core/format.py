def size_to_string(size: int) -> str:
    """Format a byte count as ``B``, ``KiB`` or ``MiB`` with one decimal."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size / 1024 / 1024:.1f} MiB"
