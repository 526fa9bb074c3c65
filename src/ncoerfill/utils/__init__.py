"""Utils package for utility functions"""

from ncoerfill.utils.file_utils import read_json, read_json_safe, write_json

__all__ = [
    "read_json",
    "read_json_safe",
    "write_json",
]
