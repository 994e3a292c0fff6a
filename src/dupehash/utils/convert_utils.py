"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""

import math

_UNITS = {
    'PB': 1024 ** 5, 'P': 1024 ** 5,
    'TB': 1024 ** 4, 'T': 1024 ** 4,
    'GB': 1024 ** 3, 'G': 1024 ** 3,
    'MB': 1024 ** 2, 'M': 1024 ** 2,
    'KB': 1024, 'K': 1024,
    'B': 1,
}


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 256B, 1.50KB).
        """
        if size_bytes < 0:
            return "0B"
        if size_bytes < 1024:
            return f"{size_bytes}B"

        value = float(size_bytes)
        for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '256', '1.5K', '2048KB', '1M', '1GB', etc.
        Raises ValueError for negative sizes or invalid formats.
        """
        size_str = size_str.strip().upper()

        # Longest suffix first so 'KB' is not read as 'K' + 'B'
        for unit in sorted(_UNITS, key=len, reverse=True):
            if size_str.endswith(unit):
                value_str = size_str[:-len(unit)].strip()
                try:
                    value = float(value_str)
                except ValueError:
                    raise ValueError(f"Invalid numeric value in size: '{value_str}'")

                if not math.isfinite(value * _UNITS[unit]):
                    raise ValueError(f"Size must be a finite number: '{size_str}'")
                if value < 0:
                    raise ValueError(f"Negative size not allowed: '{size_str}'")
                return int(value * _UNITS[unit])

        try:
            value = int(size_str)
        except ValueError:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 256, 1K, 1.5MB, 2GB, etc."
            )

        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return value

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        """
        Check if the input string has a valid size format.
        A leading minus sign is accepted: negative thresholds clamp to zero.
        """
        size_str = size_str.strip()
        if size_str.startswith("-"):
            size_str = size_str[1:]
        try:
            ConvertUtils.human_to_bytes(size_str)
            return True
        except (ValueError, OverflowError):
            return False
