"""Decoding of raw change ops into ParsedOp models."""

import json
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from cypherops.config import CypherOpsConfig
from cypherops.errors import OpDecodeError
from cypherops.models import ChangeOp, ParsedOp

logger = logging.getLogger(__name__)

RawOp = Union[ChangeOp, Mapping[str, Any]]


def _reject_constant(name: str) -> None:
    """Refuse NaN and Infinity, which are not valid JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


class OpDecoder:
    """Turns raw change ops into ParsedOp models, skipping non-write ops."""

    def __init__(self, config: CypherOpsConfig) -> None:
        """Initialize the decoder.

        Args:
            config: Settings naming which op types are writes
        """
        self.config = config

    def to_change_op(self, raw_op: RawOp, index: int) -> ChangeOp:
        """Validate a raw op into a ChangeOp.

        Args:
            raw_op: ChangeOp instance or mapping with key, type and value
            index: Position of the op in the batch

        Returns:
            Validated ChangeOp

        Raises:
            OpDecodeError: If the op does not have the expected fields
        """
        if isinstance(raw_op, ChangeOp):
            return raw_op

        try:
            return ChangeOp.model_validate(raw_op)
        except ValidationError as e:
            logger.debug(f"Validation details for op {index}: {e}")
            raise OpDecodeError(
                f"Invalid op at index {index}: {e.error_count()} validation errors",
                index=index,
            ) from e

    def decode_payload(self, op: ChangeOp, index: int) -> dict:
        """Decode the JSON payload of a write op.

        Args:
            op: Write op
            index: Position of the op in the batch

        Returns:
            Decoded payload object; a null payload decodes to no properties

        Raises:
            OpDecodeError: If the payload is missing, malformed, too deeply
                nested, or neither an object nor null
        """
        if op.value is None:
            raise OpDecodeError(
                f"Op {op.key!r} at index {index} has no payload", key=op.key, index=index
            )

        try:
            payload = json.loads(op.value, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise OpDecodeError(
                f"Cannot decode payload of op {op.key!r} at index {index}: {e}",
                key=op.key,
                index=index,
            ) from e

        if payload is None:
            return {}

        if not isinstance(payload, dict):
            raise OpDecodeError(
                f"Payload of op {op.key!r} at index {index} is a "
                f"{type(payload).__name__}, expected an object",
                key=op.key,
                index=index,
            )

        return payload

    def parse_op(self, raw_op: RawOp, index: int) -> Optional[ParsedOp]:
        """Decode one op.

        Args:
            raw_op: ChangeOp instance or mapping
            index: Position of the op in the batch

        Returns:
            ParsedOp for write ops, None for any other op type
        """
        op = self.to_change_op(raw_op, index)

        if not self.config.is_write(op.type):
            logger.debug(f"Skipping {op.type!r} op for {op.key}")
            return None

        return ParsedOp(index=index, ref=op.key, properties=self.decode_payload(op, index))

    def parse_ops(self, raw_ops: Iterable[RawOp]) -> List[ParsedOp]:
        """Decode a batch of ops, keeping input order.

        Args:
            raw_ops: Ops from the change feed

        Returns:
            ParsedOp list for the write ops; each keeps its original index
        """
        parsed = []
        for index, raw_op in enumerate(raw_ops):
            parsed_op = self.parse_op(raw_op, index)
            if parsed_op is not None:
                parsed.append(parsed_op)
        return parsed
