from __future__ import annotations


def format_file_size(size_mb: float) -> str:
    if size_mb < 1:
        return f"{size_mb * 1024:.0f} KB"
    return f"{size_mb:.1f} MB"
