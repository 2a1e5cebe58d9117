"""
Document event coordinator for the rsql-lsp features.

pygls accepts a single handler per notification, while several features
(diagnostics, semantic tokens, the region cache) react to the same
didOpen/didChange/didClose events. The coordinator registers the three
notifications once and fans each event out to every subscribed handler.
A failing handler is logged and does not stop the others.
"""

import logging
from threading import Lock
from typing import List, Protocol

from lsprotocol import types
from pygls.server import LanguageServer

logger = logging.getLogger(__name__)


class DocumentEventHandler(Protocol):
    """
    Interface of a document event subscriber.

    Handlers only need the methods for the events they care about; missing
    methods are skipped.
    """

    def handle_document_open(self, params: types.DidOpenTextDocumentParams) -> None:
        ...

    def handle_document_change(self, params: types.DidChangeTextDocumentParams) -> None:
        ...

    def handle_document_close(self, params: types.DidCloseTextDocumentParams) -> None:
        ...


class DocumentEventCoordinator:
    """Single registration point for document lifecycle notifications."""

    def __init__(self):
        self._handlers: List[DocumentEventHandler] = []
        self._registered_with_server = False
        self._lock = Lock()

    def register_handler(self, handler: DocumentEventHandler) -> None:
        """
        Subscribe a handler. Handlers run in subscription order.

        Raises:
            ValueError: If handler is None
        """
        if handler is None:
            raise ValueError("Handler cannot be None")

        with self._lock:
            if handler in self._handlers:
                logger.warning(f"Handler {type(handler).__name__} is already registered")
                return
            self._handlers.append(handler)
        logger.info(f"Registered document event handler: {type(handler).__name__}")

    def unregister_handler(self, handler: DocumentEventHandler) -> bool:
        with self._lock:
            if handler not in self._handlers:
                logger.warning(f"Handler {type(handler).__name__} was not registered")
                return False
            self._handlers.remove(handler)
        logger.info(f"Unregistered document event handler: {type(handler).__name__}")
        return True

    def get_handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def register_with_server(self, server: LanguageServer) -> None:
        """
        Register the document notifications with the server.

        Later calls are ignored.

        Raises:
            ValueError: If server is None
        """
        if server is None:
            raise ValueError("Server cannot be None")

        if self._registered_with_server:
            logger.warning("Document events already registered with server")
            return

        @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
        def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams):
            self.distribute_event("handle_document_open", params)

        @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams):
            self.distribute_event("handle_document_change", params)

        @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams):
            self.distribute_event("handle_document_close", params)

        self._registered_with_server = True
        logger.info(f"Document events registered with server for {self.get_handler_count()} handlers")

    def distribute_event(self, method_name: str, params) -> None:
        """Call ``method_name`` on every handler that implements it."""
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            method = getattr(handler, method_name, None)
            if method is None or not callable(method):
                continue
            try:
                method(params)
            except Exception as e:
                logger.error(f"Error in {method_name} handler {type(handler).__name__}: {e}")

    def clear_handlers(self) -> None:
        with self._lock:
            count = len(self._handlers)
            self._handlers.clear()
        logger.info(f"Cleared {count} document event handlers")
