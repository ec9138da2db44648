"""
Go declarations parser entry point.

    with open("person.go", "rb") as src:
        tree = parse(src, "UTF-8")

Syntax errors do not raise: they come back as a File carrying a single
ParsingError. Only unsupported encodings, unreadable sources and internal
invariant violations are raised.
"""

from os import PathLike
from typing import BinaryIO

from smgo.config import settings
from smgo.debug import print_blocks
from smgo.errors import SourceReadError, UnsupportedEncodingError
from smgo.models import File, Location, LocationSpan, ParsingError, RuneSpan
from smgo.observability import get_logger
from smgo.parsing.boundaries import BoundaryFixer
from smgo.parsing.native import GoSyntaxError, parse_go
from smgo.parsing.walker import DeclarationWalker

logger = get_logger(__name__)

SUPPORTED_ENCODING = "UTF-8"


def parse(source: bytes | BinaryIO, encoding: str = SUPPORTED_ENCODING) -> File:
    """
    Parse Go source code into a declarations tree.

    Args:
        source: Source bytes, or a binary stream read to the end
        encoding: Declared encoding, only "UTF-8" (any case) is supported

    Returns:
        File tree; File.parsing_errors is set if the source has a syntax error

    Raises:
        UnsupportedEncodingError: If encoding is not UTF-8, before any parsing
        SourceReadError: If the stream cannot be read
        BoundaryError: On an internal invariant violation
    """
    check_encoding(encoding)
    src_bytes = _read_source(source)

    logger.debug("go_parse_started", size=len(src_bytes))
    try:
        tree = parse_go(src_bytes)
    except GoSyntaxError as e:
        logger.info("go_parse_failed", error=e.message)
        return error_file(e)

    file, blocks = DeclarationWalker(src_bytes).walk(tree)
    BoundaryFixer(src_bytes).fix(file, blocks)

    if settings.print_blocks:
        print_blocks(blocks)

    return file


def parse_file(path: str | PathLike, encoding: str = SUPPORTED_ENCODING) -> File:
    """
    Parse a Go source file.

    Raises:
        UnsupportedEncodingError: If encoding is not UTF-8, before opening the file
        SourceReadError: If the file cannot be opened or read
    """
    check_encoding(encoding)
    try:
        with open(path, "rb") as src:
            return parse(src, encoding)
    except OSError as e:
        raise SourceReadError(f"Error reading {path}", {"reason": str(e)}) from e


def check_encoding(encoding: str) -> None:
    if encoding.upper() != SUPPORTED_ENCODING:
        raise UnsupportedEncodingError(encoding)


def error_file(error: GoSyntaxError) -> File:
    """Empty tree reporting a syntax error"""
    return File(
        location_span=LocationSpan.degenerate(),
        footer_span=RuneSpan.absent(),
        containers=[],
        nodes=[],
        parsing_errors=[ParsingError(location=Location(error.line, error.column), message=error.message)],
    )


def _read_source(source: bytes | BinaryIO) -> bytes:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    try:
        data = source.read()
    except OSError as e:
        raise SourceReadError("Error reading src", {"reason": str(e)}) from e

    if isinstance(data, str):
        raise SourceReadError("Source stream must be opened in binary mode")
    return data
