"""JSON envelope for HTTP replies."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, BinaryIO

HTTP_OK = 200


@dataclass
class ResponseWriter:
    """Writes replies as {"Code", "Message", "Data"} JSON to a binary writer."""

    writer: BinaryIO
    code: int = 0
    message: str = ""
    data: Any = None

    def write(self, data: Any) -> int:
        """Serialize data with status 200; returns what the writer reports."""
        self.data = data
        self.code = HTTP_OK
        body = json.dumps(
            {"Code": self.code, "Message": self.message, "Data": self.data},
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")
        return self.writer.write(body)