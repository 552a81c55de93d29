"""Import of board archives exported by an external Kanban tool.

An archive is a zip holding a ``version.json`` marker, one top-level
directory per exported board with a ``board.jsonl`` record stream inside,
and any number of attachment files. Each line of the record stream is a
JSON object with a ``type`` of ``board`` (the board descriptor and its
property schema) or ``block`` (a card, a view, or a content block).

Every imported entity gets a fresh id. Property and option ids are re-keyed
first so card values and view settings can be rewritten against the new
schema.

Structural problems (not a zip, no marker, no board directory, an unreadable
record stream, no board record) raise ``InvalidArchive`` before anything is
written. Entries are decompressed up to ``MAX_ENTRY_BYTES``; a larger record
stream is rejected outright and a larger attachment is skipped. Once the
board row exists, failures are per record: the record is logged, listed in
the summary's ``skipped`` entries and the import carries on. There is no
rollback of the import as a whole.
"""
import io
import json
import logging
import os
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, get_args
from uuid import uuid4

from pydantic import ValidationError as SchemaError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import Role
from app.core.config import MAX_ENTRY_BYTES
from app.core.errors import InvalidArchive, PayloadTooLarge
from app.core.services import DEFAULT_BOARD_ICON, DEFAULT_CARD_ICON, DEFAULT_KANBAN_VIEW_TITLE
from app.core.storage import BlobStore
from app.db.models import Board, BoardMember, Card, File, View
from app.schemas.base import CamelModel
from app.schemas.fields import CardProperty, PropertyColor, PropertyOption, PropertyType
from app.schemas.imports import ImportSummary, SkippedRecord

logger = logging.getLogger(__name__)

ARCHIVE_MARKER = "version.json"
RECORD_STREAM = "board.jsonl"

DEFAULT_BOARD_TITLE = "Imported board"
DEFAULT_VIEW_TITLE = "View"

VIEW_TYPES = ("BOARD", "TABLE", "CALENDAR", "GALLERY")

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


# --- Source record shapes --- #


class ArchiveOption(CamelModel):
    id: str
    value: str = ""
    color: Optional[str] = None


class ArchiveProperty(CamelModel):
    id: str
    name: str = ""
    type: str = "text"
    options: Optional[List[ArchiveOption]] = None


class ArchiveBoard(CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    show_description: Optional[bool] = None
    card_properties: Optional[List[ArchiveProperty]] = None


class ArchiveBlock(CamelModel):
    id: str
    type: str
    parent_id: Optional[str] = None
    title: Optional[str] = None
    fields: Optional[Dict[str, Any]] = None
    line: Optional[int] = None


@dataclass
class ParsedArchive:
    board: Optional[ArchiveBoard] = None
    cards: List[ArchiveBlock] = field(default_factory=list)
    views: List[ArchiveBlock] = field(default_factory=list)
    content_blocks: List[ArchiveBlock] = field(default_factory=list)
    skipped: List[SkippedRecord] = field(default_factory=list)

    def skip(self, line: Optional[int], reason: str):
        logger.warning(f"Skipping archive record at line {line}: {reason}")
        self.skipped.append(SkippedRecord(line=line, reason=reason))


@dataclass
class PropertyKeys:
    """Re-keyed property schema plus the old -> new id lookup tables."""

    properties: List[CardProperty]
    property_ids: Dict[str, str]
    option_ids: Dict[str, str]


# --- Structural validation and record parsing --- #


def find_board_dir(names: List[str]) -> Optional[str]:
    """Top-level board directory of the archive.

    Explicit ``dir/`` entries are used when present; otherwise directories
    implied by entry paths. Among those, the first one holding a record
    stream wins, falling back to the first in entry order.
    """
    directories = [name[:-1] for name in names if name.endswith("/") and name.count("/") == 1]
    if not directories:
        for name in names:
            head, sep, _ = name.partition("/")
            if sep and head and head not in directories:
                directories.append(head)
    if not directories:
        return None

    with_stream = [d for d in directories if f"{d}/{RECORD_STREAM}" in names]
    if len(with_stream) > 1:
        logger.warning(
            f"Archive holds {len(with_stream)} board directories; importing '{with_stream[0]}' only"
        )
    return with_stream[0] if with_stream else directories[0]


def read_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    """Decompress one entry, refusing anything above MAX_ENTRY_BYTES."""
    if info.file_size > MAX_ENTRY_BYTES:
        raise PayloadTooLarge(f"{info.filename} exceeds the {MAX_ENTRY_BYTES} byte entry limit")
    # The declared size can lie, so bound the actual read as well
    with archive.open(info) as fh:
        data = fh.read(MAX_ENTRY_BYTES + 1)
    if len(data) > MAX_ENTRY_BYTES:
        raise PayloadTooLarge(f"{info.filename} exceeds the {MAX_ENTRY_BYTES} byte entry limit")
    return data


def parse_records(text: str) -> ParsedArchive:
    """Fold the record stream into a ParsedArchive, skipping bad lines."""
    parsed = ParsedArchive()
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            parsed.skip(line_no, f"invalid JSON: {e.msg}")
            continue
        if not isinstance(record, dict):
            parsed.skip(line_no, "record is not an object")
            continue

        record_type = record.get("type")
        data = record.get("data")
        if record_type == "board":
            try:
                board = ArchiveBoard.model_validate(data)
            except SchemaError as e:
                parsed.skip(line_no, f"malformed board record: {e.error_count()} error(s)")
                continue
            if parsed.board is not None:
                logger.warning(f"Board record at line {line_no} replaces an earlier one")
            parsed.board = board
        elif record_type == "block":
            try:
                block = ArchiveBlock.model_validate(data)
            except SchemaError as e:
                parsed.skip(line_no, f"malformed block record: {e.error_count()} error(s)")
                continue
            block.line = line_no
            if block.type == "card":
                parsed.cards.append(block)
            elif block.type == "view":
                parsed.views.append(block)
            else:
                parsed.content_blocks.append(block)
        else:
            logger.debug(f"Ignoring record of type {record_type!r} at line {line_no}")
    return parsed


def read_archive(data: bytes) -> Tuple[zipfile.ZipFile, ParsedArchive]:
    """Open and parse an archive, raising InvalidArchive on structural problems."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile:
        raise InvalidArchive("Invalid archive: not a zip file")

    names = archive.namelist()
    if ARCHIVE_MARKER not in names:
        raise InvalidArchive(f"Invalid archive: {ARCHIVE_MARKER} not found")

    board_dir = find_board_dir(names)
    if board_dir is None:
        raise InvalidArchive("Invalid archive: board directory not found")

    stream_name = f"{board_dir}/{RECORD_STREAM}"
    if stream_name not in names:
        raise InvalidArchive(f"Invalid archive: {RECORD_STREAM} not found")
    try:
        raw = read_entry(archive, archive.getinfo(stream_name))
    except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError):
        raise InvalidArchive(f"Invalid archive: {RECORD_STREAM} is unreadable")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidArchive(f"Invalid archive: {RECORD_STREAM} is not UTF-8 text")

    parsed = parse_records(text)
    if parsed.board is None:
        raise InvalidArchive("Invalid archive: board record not found")
    return archive, parsed


# --- Re-keying --- #


_PROPERTY_TYPES = set(get_args(PropertyType))
_COLORS = set(get_args(PropertyColor))


def rekey_properties(source: List[ArchiveProperty]) -> PropertyKeys:
    properties = []
    property_ids: Dict[str, str] = {}
    option_ids: Dict[str, str] = {}
    for prop in source:
        new_prop_id = str(uuid4())
        property_ids[prop.id] = new_prop_id

        options = []
        for opt in prop.options or []:
            new_opt_id = str(uuid4())
            option_ids[opt.id] = new_opt_id
            color = opt.color if opt.color in _COLORS else "propColorDefault"
            options.append(PropertyOption(id=new_opt_id, value=opt.value, color=color))

        prop_type = prop.type
        if prop_type not in _PROPERTY_TYPES:
            logger.warning(f"Unknown property type {prop_type!r} on '{prop.name}', importing as text")
            prop_type = "text"
        properties.append(
            CardProperty(id=new_prop_id, name=prop.name, type=prop_type, options=options)
        )
    return PropertyKeys(properties=properties, property_ids=property_ids, option_ids=option_ids)


def rewrite_card_properties(values: Dict[str, Any], keys: PropertyKeys) -> Dict[str, str]:
    """Move a card's values onto the new property ids.

    Keys without a mapping are dropped. Values naming a known option are
    swapped for the new option id; other strings pass through unchanged.
    """
    rewritten: Dict[str, str] = {}
    for old_id, value in values.items():
        new_id = keys.property_ids.get(old_id)
        if new_id is None:
            logger.info(f"Dropping value for unknown property {old_id}")
            continue
        if not isinstance(value, str):
            logger.info(f"Dropping non-text value for property {old_id}")
            continue
        rewritten[new_id] = keys.option_ids.get(value, value)
    return rewritten


def rewrite_visible_property_ids(ids: List[Any], keys: PropertyKeys) -> List[str]:
    # Unmapped ids are kept as they are.
    return [keys.property_ids.get(pid, pid) for pid in ids if isinstance(pid, str)]


def view_type_for(tag: Any) -> str:
    if isinstance(tag, str) and tag.upper() in VIEW_TYPES:
        return tag.upper()
    return "BOARD"


def mime_type_for(filename: str) -> str:
    return MIME_TYPES.get(os.path.splitext(filename)[1].lower(), DEFAULT_MIME_TYPE)


def is_attachment(info: zipfile.ZipInfo) -> bool:
    return not info.is_dir() and not info.filename.endswith((".json", ".jsonl"))


# --- Entity reconstruction --- #


def build_card(block: ArchiveBlock, keys: PropertyKeys, board_id: str, user_id: str, order: int) -> Card:
    fields = block.fields or {}
    source_values = fields.get("properties") or {}
    if not isinstance(source_values, dict):
        raise ValueError("card properties are not an object")
    icon = fields.get("icon")
    return Card(
        id=str(uuid4()),
        board_id=board_id,
        title=block.title or "",
        properties=rewrite_card_properties(source_values, keys),
        icon=icon if isinstance(icon, str) and icon else DEFAULT_CARD_ICON,
        order=order,
        created_by_id=user_id,
    )


def build_view(block: ArchiveBlock, keys: PropertyKeys, board_id: str) -> View:
    fields = block.fields or {}
    return View(
        id=str(uuid4()),
        board_id=board_id,
        title=block.title or DEFAULT_VIEW_TITLE,
        type=view_type_for(fields.get("viewType")),
        filter=fields.get("filter") or {},
        sort_options=fields.get("sortOptions") or [],
        visible_property_ids=rewrite_visible_property_ids(fields.get("visiblePropertyIds") or [], keys),
        column_widths=fields.get("columnWidths") or {},
        kanban_calculations=fields.get("kanbanCalculations") or {},
    )


async def _persist(db: AsyncSession, row):
    """Commit one record on its own; a failure rolls back only that record."""
    db.add(row)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise


async def import_board_archive(
    db: AsyncSession, blobs: BlobStore, data: bytes, user_id: str
) -> ImportSummary:
    archive, parsed = read_archive(data)
    source = parsed.board
    keys = rekey_properties(source.card_properties or [])

    board_id = str(uuid4())
    board_title = source.title or DEFAULT_BOARD_TITLE
    db.add(
        Board(
            id=board_id,
            title=board_title,
            description=source.description,
            icon=source.icon or DEFAULT_BOARD_ICON,
            show_description=bool(source.show_description),
            properties=keys.properties,
            created_by_id=user_id,
        )
    )
    db.add(BoardMember(user_id=user_id, board_id=board_id, role=Role.ADMIN.value))
    await db.commit()
    logger.info(f"Created board {board_id} '{board_title}' from archive for user {user_id}")

    # Old card id -> new card id, kept for parent and content-block references.
    card_ids: Dict[str, str] = {}
    for order, block in enumerate(parsed.cards):
        try:
            card = build_card(block, keys, board_id, user_id, order)
            await _persist(db, card)
        except Exception as e:
            logger.error(f"Failed to import card {block.id}: {e}", exc_info=True)
            parsed.skip(block.line, f"card {block.id}: {e}")
            continue
        card_ids[block.id] = card.id

    views_imported = 0
    for block in parsed.views:
        try:
            await _persist(db, build_view(block, keys, board_id))
        except Exception as e:
            logger.error(f"Failed to import view {block.id}: {e}", exc_info=True)
            parsed.skip(block.line, f"view {block.id}: {e}")
            continue
        views_imported += 1

    if views_imported == 0:
        await _persist(
            db, View(board_id=board_id, title=DEFAULT_KANBAN_VIEW_TITLE, type="BOARD")
        )
        views_imported = 1

    if parsed.content_blocks:
        logger.info(f"Dropped {len(parsed.content_blocks)} content blocks from archive")

    files_imported = 0
    for info in archive.infolist():
        if not is_attachment(info):
            continue
        filename = os.path.basename(info.filename)
        written = False
        try:
            content = read_entry(archive, info)
            path = blobs.write(board_id, filename, content)
            written = True
            await _persist(
                db,
                File(
                    board_id=board_id,
                    filename=filename,
                    mimetype=mime_type_for(filename),
                    size=len(content),
                    path=path,
                ),
            )
        except Exception as e:
            logger.error(f"Failed to import file {info.filename}: {e}", exc_info=True)
            if written:
                blobs.remove(board_id, filename)
            parsed.skip(None, f"file {info.filename}: {e}")
            continue
        files_imported += 1

    logger.info(
        f"Imported board {board_id}: {len(card_ids)} cards, {views_imported} views, "
        f"{files_imported} files, {len(parsed.skipped)} skipped"
    )
    return ImportSummary(
        board_id=board_id,
        board_title=board_title,
        cards_imported=len(card_ids),
        views_imported=views_imported,
        files_imported=files_imported,
        skipped=parsed.skipped,
    )
