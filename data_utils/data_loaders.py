"""
Data loaders for delimited numeric files
Reads and validates CSV files whose header row names every numeric column
"""

import io
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

CSV_EXTENSION = '.csv'
FALLBACK_ENCODINGS = ['utf-8-sig', 'latin-1']


class DataFileError(ValueError):
    """A data file is missing, unreadable or malformed."""


def _parse_number(text):
    """Return a finite Decimal for ``text``, or None when it is not a number."""
    try:
        number = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def validate_csv_path(path):
    """
    Check that a path points to a readable CSV file

    Parameters:
    -----------
    path : str or Path
        Location of the data file

    Returns:
    --------
    Path : The validated path

    Raises:
    -------
    DataFileError : If there is no file, or the file is not a .csv file
    """
    file_path = Path(str(path).strip().strip('"'))

    if not file_path.is_file():
        raise DataFileError("There is no file at the specified path. Please try again.")

    if file_path.suffix.lower() != CSV_EXTENSION:
        raise DataFileError("Invalid file type. Please upload a .csv file.")

    return file_path


def _decode(content, encoding):
    """Decode file bytes, trying the requested encoding first"""
    if isinstance(content, str):
        return content

    encodings = [encoding] + [enc for enc in FALLBACK_ENCODINGS if enc != encoding]
    for enc in encodings:
        try:
            text = content.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
        logger.info("File decoded with encoding: %s", enc)
        return text

    raise DataFileError("Unable to decode file with any encoding")


def parse_csv_text(text, separator=',', quote_char='"'):
    """
    Parse delimited text into a DataFrame of Decimal columns

    Parameters:
    -----------
    text : str
        File contents; the first line holds the column headers
    separator : str
        Column separator (default comma)
    quote_char : str
        Quote character for fields containing the separator

    Returns:
    --------
    pd.DataFrame : One column per header, Decimal values (object dtype),
                   1-based row index

    Raises:
    -------
    DataFileError : If the header row is missing, contains numbers, blank or
                    duplicate names, or a data line is ragged or non-numeric
    """
    if not text.strip():
        raise DataFileError("The file is empty. Please check file format.")

    # Header row is read as data so duplicate names are not mangled by pandas
    try:
        raw = pd.read_csv(io.StringIO(text),
                          sep=separator,
                          header=None,
                          dtype=str,
                          keep_default_na=False,
                          skip_blank_lines=True,
                          quotechar=quote_char)
    except pd.errors.ParserError as e:
        raise DataFileError(
            f"A line contains more values than the header has columns. Please check file format. ({e})"
        ) from e

    headers = [str(cell).strip() for cell in raw.iloc[0]]

    if any(_parse_number(header) is not None for header in headers):
        raise DataFileError(
            "Header line contains numerical data. Please check file format and restart."
        )
    if any(header == '' for header in headers):
        raise DataFileError("Header line contains an empty column name. Please check file format.")

    seen = set()
    for header in headers:
        if header in seen:
            raise DataFileError(f"Header '{header}' appears more than once. Column names must be unique.")
        seen.add(header)

    rows = []
    for line_number, record in enumerate(raw.iloc[1:].itertuples(index=False, name=None), start=2):
        # Short lines are padded with NaN; empty fields stay ''
        cells = [cell for cell in record if isinstance(cell, str)]

        if len(cells) != len(headers):
            raise DataFileError(
                f"Line {line_number} contains {len(cells)} values but the header has "
                f"{len(headers)} columns. Please check file format."
            )

        row = []
        for header, cell in zip(headers, cells):
            number = _parse_number(cell)
            if number is None:
                raise DataFileError(
                    f"Cannot parse '{cell.strip()}' in column '{header}' on line {line_number} "
                    f"as a number. Please check that all data are numeric."
                )
            row.append(number)
        rows.append(row)

    if not rows:
        raise DataFileError("The file contains a header line but no data.")

    data = pd.DataFrame(rows, columns=headers, dtype=object)

    # Use 1-based index
    data.index = range(1, len(data) + 1)
    data.index.name = None

    return data


def load_csv_columns(source, separator=',', encoding='utf-8-sig', quote_char='"'):
    """
    Load a CSV file of numeric columns

    Parameters:
    -----------
    source : str, Path or file-like object
        Path to the file, or an uploaded file (anything with ``read()``;
        its ``name`` is checked for the .csv extension when present)
    separator : str
        Column separator (default comma)
    encoding : str
        Preferred text encoding (default utf-8, with or without BOM);
        utf-8-sig and latin-1 are tried next
    quote_char : str
        Quote character for fields containing the separator

    Returns:
    --------
    pd.DataFrame : Loaded data (see ``parse_csv_text``)

    Raises:
    -------
    DataFileError : On any missing, unreadable or malformed file
    """
    if hasattr(source, 'read'):
        name = getattr(source, 'name', None)
        if name and Path(name).suffix.lower() != CSV_EXTENSION:
            raise DataFileError("Invalid file type. Please upload a .csv file.")
        content = source.read()
    else:
        file_path = validate_csv_path(source)
        name = file_path.name
        try:
            content = file_path.read_bytes()
        except OSError as e:
            raise DataFileError(f"File cannot be read. Please try another file: {e}") from e

    data = parse_csv_text(_decode(content, encoding), separator=separator, quote_char=quote_char)
    logger.info("Loaded %s: %d rows x %d columns", name or 'data', len(data), len(data.columns))

    return data
