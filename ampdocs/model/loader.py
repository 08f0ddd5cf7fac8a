"""Load raw records from a documentation extractor JSON export."""
import json
from pathlib import Path
from typing import Any, Dict, List

from .errors import ExportFormatError


def load_export(path: str | Path) -> List[Dict[str, Any]]:
    """Read a JSON export and return its raw file records.

    The export is either a JSON list of file records, or an object carrying
    that list under ``files``.

    Args:
        path: Path to the export file

    Returns:
        List of raw file records in export order

    Raises:
        FileNotFoundError: If the export does not exist
        ExportFormatError: If the file is not valid JSON or has another shape
    """
    export_path = Path(path)
    with open(export_path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ExportFormatError(f"Invalid JSON in {export_path.name}: {e}")

    if isinstance(data, dict):
        if 'files' not in data:
            raise ExportFormatError(
                f"Export {export_path.name} is an object without a 'files' list"
            )
        data = data['files']

    if not isinstance(data, list):
        raise ExportFormatError(
            f"Export {export_path.name} is malformed (expected list, got {type(data).__name__})"
        )

    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ExportFormatError(
                f"Export {export_path.name} entry {index} is not an object"
            )

    return data
