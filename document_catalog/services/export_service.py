"""CSV, HTML and JSON exports of catalog documents"""

import csv
import html
import io
import json
from datetime import date
from typing import List, Sequence

from ..models.document import Document
from ..models.schemas import ExportFormat, ExportPayload

BASE_HEADERS = ["Name", "Category", "Property", "Tenant", "Status", "Size", "Upload Date", "File Type", "Tags"]
METADATA_HEADERS = ["Expiry Date", "Amount", "Score", "Photo Count"]

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.HTML: "text/html",
    ExportFormat.JSON: "application/json",
}


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def export_csv(documents: Sequence[Document], include_metadata: bool = True) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(BASE_HEADERS + (METADATA_HEADERS if include_metadata else []))

    for document in documents:
        row = [
            document.name,
            document.category,
            document.property,
            document.tenant,
            document.status,
            document.size,
            document.upload_date.isoformat(),
            document.file_type,
            "; ".join(document.tags),
        ]
        if include_metadata:
            row += [
                _text(document.expiry_date),
                _text(document.amount),
                _text(document.score),
                _text(document.photo_count),
            ]
        writer.writerow(row)

    return buffer.getvalue()


def export_html(documents: Sequence[Document], generated_on: date) -> str:
    """Printable HTML report of the documents."""
    sections: List[str] = []
    for document in documents:
        details = [
            ("Category", document.category),
            ("Property", document.property),
            ("Tenant", document.tenant),
            ("Status", document.status),
            ("Size", document.size),
            ("Upload Date", document.upload_date.isoformat()),
        ]
        detail_html = "".join(
            f'<div class="detail"><span class="label">{label}:</span> {html.escape(value)}</div>'
            for label, value in details
        )
        tags_html = ""
        if document.tags:
            tags_html = '<div class="tags">' + "".join(
                f'<span class="tag">{html.escape(tag)}</span>' for tag in document.tags
            ) + "</div>"
        sections.append(
            '<div class="document">'
            f'<div class="document-title">{html.escape(document.name)}</div>'
            f'<div class="document-details">{detail_html}</div>'
            f"{tags_html}"
            "</div>"
        )

    return (
        "<!DOCTYPE html>\n"
        "<html><head><meta charset=\"utf-8\"><title>Document Report</title>"
        "<style>"
        "body { font-family: Arial, sans-serif; margin: 20px; }"
        ".header { text-align: center; margin-bottom: 30px; }"
        ".document { margin-bottom: 20px; padding: 15px; border: 1px solid #ddd; border-radius: 5px; }"
        ".document-title { font-weight: bold; font-size: 16px; margin-bottom: 10px; }"
        ".document-details { display: grid; grid-template-columns: repeat(2, 1fr); gap: 10px; }"
        ".detail { font-size: 14px; } .label { font-weight: bold; }"
        ".tags { margin-top: 10px; }"
        ".tag { background: #f0f0f0; padding: 2px 8px; border-radius: 3px; margin-right: 5px; }"
        "</style></head><body>"
        '<div class="header"><h1>Document Report</h1>'
        f"<p>Generated on {generated_on.isoformat()}</p>"
        f"<p>Total Documents: {len(documents)}</p></div>"
        + "".join(sections)
        + "</body></html>"
    )


def export_manifest(documents: Sequence[Document]) -> str:
    """JSON manifest describing an archive of the documents."""
    manifest = [
        {
            "name": document.name,
            "category": document.category,
            "property": document.property,
            "tenant": document.tenant,
            "status": document.status,
            "size": document.size,
            "uploadDate": document.upload_date.isoformat(),
            "tags": list(document.tags),
        }
        for document in documents
    ]
    return json.dumps(manifest, indent=2)


def export_documents(documents: Sequence[Document], export_format: ExportFormat, today: date) -> ExportPayload:
    export_format = ExportFormat(export_format)
    if export_format is ExportFormat.CSV:
        content = export_csv(documents)
    elif export_format is ExportFormat.HTML:
        content = export_html(documents, today)
    else:
        content = export_manifest(documents)

    return ExportPayload(
        filename=f"documents_export_{today.isoformat()}.{export_format.value}",
        media_type=MEDIA_TYPES[export_format],
        content=content,
        document_count=len(documents),
    )
