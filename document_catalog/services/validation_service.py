"""Upload batch validation and file classification helpers"""

from collections import Counter
from typing import List, Sequence

from ..models.upload import DEFAULT_VALIDATION_CONFIG, MEBIBYTE, FileRef, ValidationConfig, ValidationResult
from ..utils.logging import logger

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

MIME_FILE_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
}


def _to_mib(size_bytes: int) -> str:
    return f"{size_bytes / MEBIBYTE:.1f}"


def validate_files(files: Sequence[FileRef], config: ValidationConfig = DEFAULT_VALIDATION_CONFIG) -> ValidationResult:
    """
    Check a batch of candidate files against ``config``.

    Every rule runs for every file, so one call reports all violations at
    once. Duplicate names inside the batch only produce warnings.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if len(files) > config.max_files:
        errors.append(f"Maximum {config.max_files} files allowed. You selected {len(files)} files.")

    name_counts = Counter(file.name for file in files)

    for file in files:
        if file.size > config.max_size_bytes:
            errors.append(
                f'File "{file.name}" is {_to_mib(file.size)}MB, '
                f'but maximum allowed size is {_to_mib(config.max_size_bytes)}MB.'
            )

        if file.mime_type not in config.allowed_mime_types:
            errors.append(f'File type "{file.mime_type}" is not supported for file "{file.name}".')

        if name_counts[file.name] > 1:
            warnings.append(f'Duplicate file name detected: "{file.name}"')

    result = ValidationResult(accepted=not errors, errors=errors, warnings=warnings)
    logger.log_step("batch_validated", {
        "file_count": len(files),
        "accepted": result.accepted,
        "error_count": len(errors),
        "warning_count": len(warnings)
    })
    return result


def get_file_category(file: FileRef) -> str:
    """Infer the catalog category of an uploaded file from its type and name."""
    name = file.name.lower()
    if file.mime_type.startswith("image/"):
        return "Marketing"
    if file.mime_type == "application/pdf":
        return "Legal"
    if "lease" in name:
        return "Legal"
    if "utility" in name or "bill" in name:
        return "Utilities"
    if "maintenance" in name or "repair" in name:
        return "Maintenance"
    return "Legal"


def get_file_type(file: FileRef) -> str:
    """Short file type label (``pdf``, ``image``, ``docx``...) for a declared MIME type."""
    if file.mime_type.startswith("image/"):
        return "image"
    if file.mime_type in MIME_FILE_TYPES:
        return MIME_FILE_TYPES[file.mime_type]
    if "." in file.name:
        return file.name.rsplit(".", 1)[-1].lower()
    return "file"


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. ``"2.4 MB"`` or ``"456 KB"``."""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(SIZE_UNITS) - 1:
        exponent += 1
    value = f"{size_bytes / 1024 ** exponent:.1f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[exponent]}"
