"""Shared machinery for SASL mechanism implementations: QOP, strength and buffer sizes."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from saslkit.exceptions import SaslException
from saslkit.sasl import MAX_BUFFER, QOP, RAW_SEND_SIZE, SASL_LOGGER_NAME, STRENGTH

MAX_SEND_BUF = "javax.security.sasl.sendmaxbuffer"

NO_PROTECTION = 1
INTEGRITY_ONLY_PROTECTION = 2
PRIVACY_PROTECTION = 4

LOW_STRENGTH = 1
MEDIUM_STRENGTH = 2
HIGH_STRENGTH = 4

DEFAULT_QOP = bytes([NO_PROTECTION])
QOP_TOKENS = ("auth-conf", "auth-int", "auth")
QOP_MASKS = bytes([PRIVACY_PROTECTION, INTEGRITY_ONLY_PROTECTION, NO_PROTECTION])

DEFAULT_STRENGTH = bytes([HIGH_STRENGTH, MEDIUM_STRENGTH, LOW_STRENGTH])
STRENGTH_TOKENS = ("low", "medium", "high")
STRENGTH_MASKS = bytes([LOW_STRENGTH, MEDIUM_STRENGTH, HIGH_STRENGTH])

DEFAULT_RECV_MAX_BUF_SIZE = 0x00010000

# Finer-grained levels than DEBUG, used for protocol traces.
FINER = 7
FINEST = 5

_TOKEN_SEPARATORS = re.compile(r"[, \t\n]+")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

logger = logging.getLogger(SASL_LOGGER_NAME)


def _parse_int(value: Any, prop_name: str) -> int:
    error = SaslException(f"Property must be string representation of integer: {prop_name}")
    if not isinstance(value, str) or not _INTEGER.fullmatch(value):
        raise error
    number = int(value)
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise error
    return number


def _mask_list(masks: bytes) -> str:
    return " ".join(str(mask) for mask in masks)


class AbstractSaslImpl:
    """Base for SASL clients and servers that negotiate QOP and buffer sizes.

    ``props`` holds the SASL properties given by the application; with no
    properties the defaults apply.
    """

    def __init__(self, props: Mapping[str, Any] | None, class_name: str) -> None:
        self.completed = False
        self.privacy = False
        self.integrity = False
        self.send_max_buf_size = 0
        self.recv_max_buf_size = DEFAULT_RECV_MAX_BUF_SIZE
        self.raw_send_size = 0
        self.my_class_name = class_name

        if props is None:
            self.qop = DEFAULT_QOP
            self.all_qop = NO_PROTECTION
            self.strength = STRENGTH_MASKS
            return

        prop = props.get(QOP)
        self.qop = parse_qop(prop)
        logger.debug("%s constructor SASLIMPL01:Preferred qop property: %s", class_name, prop)
        self.all_qop = combine_masks(self.qop)
        logger.debug("%s constructor SASLIMPL02:Preferred qop mask: %s", class_name, self.all_qop)
        if self.qop:
            logger.debug(
                "%s constructor SASLIMPL03:Preferred qops : %s", class_name, _mask_list(self.qop)
            )

        prop = props.get(STRENGTH)
        self.strength = parse_strength(prop)
        logger.debug("%s constructor SASLIMPL04:Preferred strength property: %s", class_name, prop)
        if self.strength:
            logger.debug(
                "%s constructor SASLIMPL05:Cipher strengths: %s",
                class_name,
                _mask_list(self.strength),
            )

        prop = props.get(MAX_BUFFER)
        if prop is not None:
            logger.debug("%s constructor SASLIMPL06:Max receive buffer size: %s", class_name, prop)
            self.recv_max_buf_size = _parse_int(prop, MAX_BUFFER)

        prop = props.get(MAX_SEND_BUF)
        if prop is not None:
            logger.debug("%s constructor SASLIMPL07:Max send buffer size: %s", class_name, prop)
            self.send_max_buf_size = _parse_int(prop, MAX_SEND_BUF)

    def is_complete(self) -> bool:
        """Whether the authentication exchange has finished."""
        return self.completed

    def get_negotiated_property(self, prop_name: str) -> str | None:
        """The negotiated value of a property, or None for an unknown property.

        Raises RuntimeError when authentication has not completed.
        """
        if not self.completed:
            raise RuntimeError("SASL authentication not completed")
        if prop_name == QOP:
            if self.privacy:
                return "auth-conf"
            if self.integrity:
                return "auth-int"
            return "auth"
        if prop_name == MAX_BUFFER:
            return str(self.recv_max_buf_size)
        if prop_name == RAW_SEND_SIZE:
            return str(self.raw_send_size)
        if prop_name == MAX_SEND_BUF:
            return str(self.send_max_buf_size)
        return None


def combine_masks(masks: bytes | Sequence[int]) -> int:
    """The bitwise OR of all masks."""
    answer = 0
    for mask in masks:
        answer |= mask
    return answer


def find_preferred_mask(pref: int, masks: bytes | Sequence[int]) -> int:
    """The first mask sharing a bit with ``pref``, or 0 when none does."""
    return next((mask for mask in masks if mask & pref), 0)


def _parse(
    prop_name: str,
    prop_val: str,
    vals: Sequence[str],
    masks: bytes | Sequence[int],
    ignore: bool,
) -> tuple[bytes, list[str | None]]:
    answer: list[int] = []
    tokens: list[str | None] = [None] * len(vals)
    lowered = [val.lower() for val in vals]
    for token in (t for t in _TOKEN_SEPARATORS.split(prop_val) if t):
        if len(answer) >= len(vals):
            break
        key = token.lower()
        index = next((j for j, val in enumerate(lowered) if val == key), None)
        if index is not None:
            answer.append(masks[index])
            tokens[index] = token
        elif not ignore:
            raise SaslException(f"Invalid token in {prop_name}: {prop_val}")
    answer.extend([0] * (len(vals) - len(answer)))
    return bytes(answer), tokens


def parse_prop(
    prop_name: str,
    prop_val: str,
    vals: Sequence[str],
    masks: bytes | Sequence[int],
    ignore: bool = False,
) -> bytes:
    """Translate a list of tokens into their masks, in the order given.

    Tokens are separated by commas and whitespace and matched without
    regard to case. At most ``len(vals)`` tokens are read; unused slots
    are 0. An unknown token raises SaslException unless ``ignore`` is set.
    """
    return _parse(prop_name, prop_val, vals, masks, ignore)[0]


def parse_qop(qop: str | None, ignore: bool = False) -> bytes:
    """The masks of a QOP property value, or the default QOP when it is None."""
    return parse_qop_tokens(qop, ignore)[0]


def parse_qop_tokens(qop: str | None, ignore: bool = False) -> tuple[bytes, list[str | None]]:
    """Like parse_qop, also returning the token that matched each QOP value.

    The second item holds, for each of ``QOP_TOKENS``, the token as it
    appeared in ``qop``, or None when it did not appear.
    """
    if qop is None:
        return DEFAULT_QOP, [None] * len(QOP_TOKENS)
    return _parse(QOP, qop, QOP_TOKENS, QOP_MASKS, ignore)


def parse_strength(strength: str | None) -> bytes:
    """The masks of a strength property value, or the default strengths when it is None."""
    if strength is None:
        return DEFAULT_STRENGTH
    return parse_prop(STRENGTH, strength, STRENGTH_TOKENS, STRENGTH_MASKS, False)


def _hex_dump(data: bytes) -> str:
    lines = []
    for start in range(0, len(data), 16):
        chunk = data[start:start + 16]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        text = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append(f"{start:04X}: {hex_part:<47}  {text}")
    return "\n".join(lines)


def trace_output(
    src_class: str,
    src_method: str,
    trace_tag: str,
    output: bytes | None,
    offset: int = 0,
    length: int | None = None,
) -> None:
    """Log a hex dump of ``length`` bytes of ``output`` starting at ``offset``.

    Unless the FINEST level is enabled only the first 16 bytes are dumped,
    at the FINER level. The logged length is always the full length.
    """
    if length is None:
        length = 0 if output is None else len(output)
    try:
        original_length = length
        if logger.isEnabledFor(FINEST):
            level = FINEST
        else:
            length = min(16, length)
            level = FINER
        if output is not None:
            if offset < 0 or length < 0 or offset + length > len(output):
                raise IndexError("Trace range lies outside the buffer")
            content = _hex_dump(bytes(output[offset:offset + length]))
        else:
            content = "NULL"
        logger.log(
            level, "%s.%s %s ( %d ): %s", src_class, src_method, trace_tag, original_length, content
        )
    except Exception as error:
        logger.warning(
            "%s.%s SASLIMPL09:Error generating trace output: %s", src_class, src_method, error
        )


def network_byte_order_to_int(buf: bytes | Sequence[int], start: int, count: int) -> int:
    """Read ``count`` (at most 4) big-endian bytes from ``buf`` as a signed 32-bit integer."""
    if count > 4:
        raise ValueError("Cannot handle more than 4 bytes")
    answer = 0
    for byte in buf[start:start + count]:
        answer = (answer << 8) | (byte & 0xFF)
    if answer > _INT32_MAX:
        answer -= 2**32
    return answer


def int_to_network_byte_order(num: int, count: int) -> bytes:
    """The low ``count`` (at most 4) bytes of ``num`` in big-endian order."""
    if count > 4:
        raise ValueError("Cannot handle more than 4 bytes")
    return bytes((num >> (8 * shift)) & 0xFF for shift in reversed(range(count)))