"""
Encode exported documents as CSV text
"""

from typing import Any, Dict, List, Sequence
from datetime import date, datetime
from decimal import Decimal
from bson.decimal128 import Decimal128
import json
import logging

logger = logging.getLogger(__name__)


class CSVEncoder:
    """
    Encode a batch of documents into UTF-8 CSV.

    Rules:
    - Columns are the keys of the first document, in its key order
    - Header cells are always quoted
    - Strings are quoted, with embedded quotes doubled (RFC 4180)
    - Numbers are written bare, booleans as true/false
    - Missing keys and None render as empty cells; keys not in the header are dropped
    - Nested documents and arrays are written as compact JSON, quoted
    - Dates are written as ISO-8601, quoted; other values (ObjectId, UUID) via str(), quoted
    - Every line ends with the line terminator, including the last
    """

    def __init__(self, delimiter: str = ",", line_terminator: str = "\n", quote_char: str = '"'):
        self.delimiter = delimiter
        self.line_terminator = line_terminator
        self.quote_char = quote_char

    def columns(self, batch: Sequence[Dict[str, Any]]) -> List[str]:
        """Column names taken from the first document"""
        if not batch:
            raise ValueError("Cannot derive columns from an empty batch")
        return list(batch[0].keys())

    def encode_text(self, batch: Sequence[Dict[str, Any]]) -> str:
        """Encode the batch as CSV text"""
        columns = self.columns(batch)

        lines = [self.delimiter.join(self._quote(str(column)) for column in columns)]
        for record in batch:
            lines.append(
                self.delimiter.join(self._render_value(record.get(column)) for column in columns)
            )

        return "".join(line + self.line_terminator for line in lines)

    def encode(self, batch: Sequence[Dict[str, Any]]) -> bytes:
        """
        Encode the batch as UTF-8 CSV bytes.

        Args:
            batch: Non-empty sequence of documents

        Returns:
            Encoded payload

        Raises:
            ValueError: If the batch is empty
        """
        payload = self.encode_text(batch).encode("utf-8")
        logger.debug(f"Encoded {len(batch)} records into {len(payload)} bytes")
        return payload

    def _quote(self, text: str) -> str:
        q = self.quote_char
        return q + text.replace(q, q + q) + q

    def _render_value(self, value: Any) -> str:
        if value is None:
            return ""
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, Decimal, Decimal128)):
            return str(value)
        if isinstance(value, str):
            return self._quote(value)
        if isinstance(value, (dict, list, tuple)):
            return self._quote(
                json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
            )
        if isinstance(value, (datetime, date)):
            return self._quote(value.isoformat())
        return self._quote(str(value))


def _json_default(value: Any) -> Any:
    """Fallback for values json can't encode inside nested documents"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
