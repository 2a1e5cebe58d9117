"""
Global pytest configuration and fixtures.
"""

from typing import Tuple

import pytest
from lsprotocol import types

from rsql_lsp.config.models import DetectionConfigModel, ParsingLimitsModel
from rsql_lsp.core.document import Document
from rsql_lsp.core.positions import position_at

CURSOR = "|"


@pytest.fixture
def detection_config() -> DetectionConfigModel:
    """Default detection configuration."""
    return DetectionConfigModel()


@pytest.fixture
def small_limits_config() -> DetectionConfigModel:
    """Detection configuration with tiny safety caps."""
    return DetectionConfigModel(
        limits=ParsingLimitsModel(
            max_document_size=200,
            max_function_matches=2,
            context_line_lookback=2,
        )
    )


@pytest.fixture
def make_document():
    """Factory building a Document from text."""

    def _make(text: str, uri: str = "file:///test.R", version: int = 1) -> Document:
        return Document(uri=uri, text=text, version=version)

    return _make


@pytest.fixture
def document_with_cursor():
    """
    Factory building a Document and a cursor Position from text with one ``|``.

    The marker is removed from the document text.
    """

    def _make(marked: str, uri: str = "file:///test.R") -> Tuple[Document, types.Position]:
        offset = marked.index(CURSOR)
        document = Document(uri=uri, text=marked[:offset] + marked[offset + 1:], version=1)
        return document, position_at(document, offset)

    return _make
