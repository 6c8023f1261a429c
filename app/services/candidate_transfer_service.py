"""
Spreadsheet export and import of candidates.

Both directions use the same column headers so an exported file can be
edited and imported again. Imports are all-or-nothing: a single invalid row
rejects the whole file.
"""

import logging
from io import BytesIO
from typing import Any, Dict, List, Optional
from zipfile import BadZipFile

from fastapi import status
from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.pipeline_config import DEFAULT_STAGE
from app.errors import AppError
from app.models.candidate import Candidate
from app.models.user import User
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.user_repository import UserRepository
from app.schemas.candidate import CandidateCreate
from app.services.candidate_service import UNKNOWN_USER_NAME
from app.utils.time import ensure_utc, parse_date_maybe, utc_now

logger = logging.getLogger(__name__)

SHEET_TITLE = "Candidates"

# Spreadsheet header -> candidate field, in column order
COLUMNS = (
    ("Name", "full_name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Gender", "gender"),
    ("City", "city"),
    ("Designation", "designation"),
    ("Company", "company"),
    ("Experience", "experience"),
    ("Current CTC", "current_ctc"),
    ("Expected CTC", "expected_ctc"),
    ("Notice Period", "notice_period"),
    ("Date of Sharing", "date_of_sharing"),
    ("Comment", "comment"),
    ("Notes", "notes"),
    ("Position Name", "position_name"),
    ("Client Name", "client_name"),
    ("Qualification", "qualification"),
    ("Industry", "industry"),
    ("Stage", "stage"),
)
CREATED_AT_HEADER = "Created At"
ADDED_BY_HEADER = "Added By"


def export_filename(now=None) -> str:
    now = now or utc_now()
    return f"candidates-{now.date().isoformat()}.xlsx"


def _cell_text(value: Any) -> Optional[str]:
    """Spreadsheet cell as text; numeric phone numbers lose the trailing .0"""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def build_workbook(candidates: List[Candidate], added_by: Optional[Dict[Any, str]] = None) -> bytes:
    """
    Render candidates as an .xlsx file.

    Args:
        candidates: Rows to export, in order
        added_by: created_by -> name map; when given, an "Added By" column is appended

    Returns:
        The workbook bytes
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    headers = [header for header, _ in COLUMNS] + [CREATED_AT_HEADER]
    if added_by is not None:
        headers.append(ADDED_BY_HEADER)
    ws.append(headers)

    for candidate in candidates:
        row = [getattr(candidate, field) for _, field in COLUMNS]
        row.append(ensure_utc(candidate.created_at).date())
        if added_by is not None:
            row.append(added_by.get(candidate.created_by, UNKNOWN_USER_NAME))
        ws.append(row)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_rows(content: bytes) -> List[Dict[str, Any]]:
    """
    Parse the first sheet of an .xlsx file into header -> value dicts.

    Blank rows are skipped. Raises INVALID_IMPORT for unreadable files.
    """
    try:
        workbook = load_workbook(filename=BytesIO(content), read_only=True, data_only=True)
    except (OSError, BadZipFile, InvalidFileException, KeyError):
        raise AppError(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_IMPORT",
            "Failed to import candidates. Please check the file format.",
        )

    if not workbook.sheetnames:
        raise AppError(status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_IMPORT", "File had no data in it")
    sheet = workbook[workbook.sheetnames[0]]

    rows = sheet.iter_rows(values_only=True)
    header_row = next(rows, None)
    if header_row is None:
        workbook.close()
        raise AppError(status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_IMPORT", "File had no data in it")
    headers = [_cell_text(value) for value in header_row]

    parsed = []
    for values in rows:
        if all(_cell_text(value) is None for value in values):
            continue
        parsed.append({
            header: value
            for header, value in zip(headers, values)
            if header is not None
        })
    workbook.close()
    return parsed


def row_to_payload(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map a spreadsheet row onto candidate fields."""
    payload: Dict[str, Any] = {}
    for header, field in COLUMNS:
        raw = row.get(header)
        if field == "date_of_sharing":
            parsed = parse_date_maybe(raw)
            payload[field] = parsed if parsed is not None else _cell_text(raw)
        else:
            payload[field] = _cell_text(raw)
    for required in ("full_name", "email", "phone", "city"):
        if payload[required] is None:
            payload[required] = ""
    payload["stage"] = payload["stage"] or DEFAULT_STAGE
    return payload


class CandidateTransferService:
    """Service for candidate spreadsheet export and import."""

    def __init__(self, db: AsyncSession):
        self.repository = CandidateRepository(db)
        self.user_repository = UserRepository(db)

    async def export_candidates(self, candidates: List[Candidate], include_creator: bool) -> bytes:
        if not candidates:
            raise AppError(status.HTTP_404_NOT_FOUND, "NOTHING_TO_EXPORT", "No candidates to export")
        added_by = None
        if include_creator:
            added_by = await self.user_repository.get_names(
                list({c.created_by for c in candidates if c.created_by is not None})
            )
        return build_workbook(candidates, added_by)

    async def import_candidates(self, user: User, content: bytes) -> List[Candidate]:
        """
        Validate every row, then insert them all owned by the user.

        Raises:
            AppError: INVALID_IMPORT listing the errors of each bad row
        """
        rows = read_rows(content)
        if not rows:
            raise AppError(status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_IMPORT", "No candidates found in file")

        valid: List[CandidateCreate] = []
        errors: List[Dict[str, Any]] = []
        seen_emails = set()
        seen_phones = set()

        # Row 1 holds the headers
        for row_number, row in enumerate(rows, start=2):
            try:
                data = CandidateCreate(**row_to_payload(row))
            except ValidationError as exc:
                errors.append({
                    "row": row_number,
                    "errors": [
                        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                        for err in exc.errors()
                    ],
                })
                continue

            row_errors = []
            email_key = data.email.lower()
            phone_key = data.phone.lower()
            if email_key in seen_emails or await self.repository.find_by_email(data.email):
                row_errors.append(f"email: already exists ({data.email})")
            if phone_key in seen_phones or await self.repository.find_by_phone(data.phone):
                row_errors.append(f"phone: already exists ({data.phone})")
            seen_emails.add(email_key)
            seen_phones.add(phone_key)

            if row_errors:
                errors.append({"row": row_number, "errors": row_errors})
            else:
                valid.append(data)

        if errors:
            logger.info("Import by %s rejected: %d invalid row(s)", user.email, len(errors))
            raise AppError(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "INVALID_IMPORT",
                f"{len(errors)} row(s) could not be imported",
                {"rows": errors},
            )

        created = await self.repository.create_many(
            [data.model_dump() for data in valid], created_by=user.id
        )
        logger.info("Imported %d candidate(s) for %s", len(created), user.email)
        return created
