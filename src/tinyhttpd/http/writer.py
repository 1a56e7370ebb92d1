"""
Response writer: applies fault injection, then serializes a response
onto a connection.
"""

import logging
from typing import Optional

from ..faults import FaultInjector, NoFaults
from .response import HTTPResponse, bare


logger = logging.getLogger(__name__)


class ResponseWriter:
    """
    Writes HTTPResponse objects to a sink.

    A sink is anything with a ``send_response(data: bytes) -> bool``
    method, normally a core.connection.Connection.

    Usage:
        writer = ResponseWriter(EveryNthFault(every=100))
        writer.write(conn, response)
    """

    def __init__(self, faults: Optional[FaultInjector] = None):
        self.faults = faults or NoFaults()

    def prepare(self, response: HTTPResponse) -> HTTPResponse:
        """Return the response that will actually be sent."""
        injected = self.faults.override(response.status)
        if injected is None:
            return response
        logger.warning(
            f"{self.faults.name} replaced {response.status.value} with {injected.value} {injected.phrase}"
        )
        return bare(injected)

    def write(self, sink, response: HTTPResponse) -> bool:
        """
        Write a response.

        Returns:
            True if every byte was handed to the sink, False if the
            client went away.
        """
        final = self.prepare(response)
        logger.debug(f"Writing {final.status_line!r} ({len(final.body or b'')} body bytes)")
        return sink.send_response(final.to_bytes())
