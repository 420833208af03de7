from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..mapping.fields import fields_for
from ..mapping.matcher import ColumnMapping, MappingError
from ..models.import_result import ImportResult, RowOutcome
from ..models.raw_table import DataType, RawTable
from ..models.records import Job, Location, Operative
from ..models.roster import RosterRequest
from ..normalizers import RowParser, ValidationError, parser_for
from ..tabular.reader import DecodeError, read_bytes, read_csv_text, read_table
from .progress import ProgressTracker

"""Import orchestration: decode -> guess mapping -> (edits) -> confirm -> normalize.

Every row of an upload is attempted. Rejected rows are collected with their
display row number (header row is row 1) instead of aborting the upload, and
are mirrored into the row error log.
"""

logger = logging.getLogger(__name__)


class RosterInputError(Exception):
    """A roster was requested without operatives or without jobs."""


def normalize_rows(
    table: RawTable,
    parser: RowParser,
    data_type: DataType,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Run ``parser`` over every row of ``table`` and collect the outcomes."""
    outcomes: list[RowOutcome] = []
    rejected = 0
    with ProgressTracker(len(table.rows), description=f"Parsing {table.source_name}") as progress:
        for index, row in enumerate(table.rows):
            row_number = index + 2
            try:
                record = parser.parse_row(row)
            except ValidationError as e:
                rejected += 1
                outcomes.append(RowOutcome(row_number=row_number, error=e.reason))
                logger.warning(f"{table.source_name} row {row_number}: {e.reason}")
                if error_log is not None:
                    error_log.reject_row(table.source_name, data_type.value, row_number, e.reason)
            else:
                outcomes.append(RowOutcome(row_number=row_number, record=record))
            progress.advance()
            progress.set_postfix(rejected=rejected)

    result = ImportResult(data_type=data_type, source_name=table.source_name, outcomes=outcomes)
    logger.info(
        f"{table.source_name}: type={data_type.value} rows={result.total_rows} "
        f"accepted={len(result.records)} rejected={len(result.errors)}"
    )
    return result


class ImportSession:
    """One in-flight upload of a single data type.

    Loading a new file replaces the previous table and mapping; a load that
    fails leaves them untouched. The mapping is guessed once per load and from
    then on only changes through ``edit``.
    """

    def __init__(
        self,
        data_type: DataType | str,
        default_location: Location | None = None,
        error_log: ErrorLogBuffer | None = None,
        guess: bool = True,
    ) -> None:
        self.data_type = DataType.parse(data_type)
        self.guess = guess
        self.default_location = default_location
        self.error_log = error_log
        self.table: RawTable | None = None
        self.mapping: ColumnMapping | None = None
        self.result: ImportResult | None = None

    def _decode_failed(self, source: str, e: DecodeError) -> None:
        logger.error(f"{source}: {e}")
        if self.error_log is not None:
            self.error_log.fail_file(source, self.data_type.value, str(e))

    def _accept(self, table: RawTable) -> RawTable:
        self.table = table
        if self.guess:
            self.mapping = ColumnMapping.guess(table, self.data_type)
        else:
            self.mapping = ColumnMapping(fields_for(self.data_type), table.headers)
        self.result = None
        logger.debug(f"{table.source_name}: headers={table.headers} guessed={self.mapping.as_dict()}")
        return table

    def load_file(self, path: Path) -> RawTable:
        try:
            table = read_table(path)
        except DecodeError as e:
            self._decode_failed(Path(path).name, e)
            raise
        return self._accept(table)

    def load_bytes(self, data: bytes, filename: str) -> RawTable:
        try:
            table = read_bytes(data, filename)
        except DecodeError as e:
            self._decode_failed(Path(filename).name, e)
            raise
        return self._accept(table)

    def load_text(self, text: str, source_name: str = "pasted") -> RawTable:
        try:
            table = read_csv_text(text, source_name=source_name)
        except DecodeError as e:
            self._decode_failed(source_name, e)
            raise
        return self._accept(table)

    def _require_mapping(self) -> ColumnMapping:
        if self.mapping is None:
            raise MappingError("No upload loaded")
        return self.mapping

    def edit(self, header: str, key: str | None) -> None:
        """Map one header to a field (None = don't import)."""
        self._require_mapping().assign(header, key)

    def apply_overrides(self, overrides: Mapping[str, str | None]) -> None:
        """Apply several ``header -> field`` edits in order."""
        for header, key in overrides.items():
            self.edit(header, key)

    def confirm(self) -> dict[str, str]:
        return self._require_mapping().confirm()

    def run(self) -> ImportResult:
        """Confirm the mapping and normalize every row."""
        mapping = self.confirm()
        assert self.table is not None
        parser = parser_for(self.data_type, mapping, default_location=self.default_location)
        self.result = normalize_rows(self.table, parser, self.data_type, self.error_log)
        return self.result


def import_file(
    path: Path,
    data_type: DataType | str,
    overrides: Mapping[str, str | None] | None = None,
    default_location: Location | None = None,
    error_log: ErrorLogBuffer | None = None,
    guess: bool = True,
) -> ImportResult:
    """Decode, map (guess + overrides), confirm and normalize one file."""
    session = ImportSession(data_type, default_location=default_location, error_log=error_log, guess=guess)
    session.load_file(path)
    if overrides:
        session.apply_overrides(overrides)
    return session.run()


def build_roster_request(operatives: Sequence[Operative], jobs: Sequence[Job]) -> RosterRequest:
    if not operatives or not jobs:
        raise RosterInputError("Both operatives and jobs are required for assignment")
    return RosterRequest(operatives=list(operatives), jobs=list(jobs))
