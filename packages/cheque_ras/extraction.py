"""Read the amount and due date off a cheque image via the OpenAI Responses API.

Public API:
    - :func:`extract_cheque`

The model is asked for a strict JSON object ``{"date": ..., "amount": ...}``
(Jalali ``YYYY/MM/DD`` and a number, each ``null`` when unreadable). The
payload is validated with :class:`~cheque_ras.models.ExtractedCheque` and
turned into a raw :class:`~cheque_ras.models.ChequeRecord`; whether the date
is valid is left to the engine, like any other input. No client is created
and no environment is read at import time.
"""

from __future__ import annotations

import base64
import json
import mimetypes
import os
import random
import time
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any

from openai import OpenAI
from openai.types.responses import ResponseTextConfigParam
from pydantic import ValidationError

from .logging_setup import get_logger
from .models import ChequeRecord, ExtractedCheque
from .normalizers import normalize_digits

# ---- Tunables (private) ------------------------------------------------------

_MODEL_ENV_VAR = "CHEQUE_RAS_OCR_MODEL"
_DEFAULT_MODEL: str = "gpt-5"
_MAX_ATTEMPTS: int = 3
_BACKOFF_SCHEDULE_SEC: tuple[float, ...] = (0.5, 2.0)
_JITTER_PCT: float = 0.20

INSTRUCTIONS: str = (
    "Extract the date and amount from this cheque image. Return ONLY a JSON object "
    "with `date` (format: YYYY/MM/DD in the Jalali calendar) and `amount` (number, "
    "in rials, without separators). If you cannot find them, return null for those "
    "fields."
)

_logger = get_logger("cheque_ras.extraction")


# ---- Request building --------------------------------------------------------


def build_text_config() -> ResponseTextConfigParam:
    return {
        "format": {
            "type": "json_schema",
            "name": "cheque_fields",
            "schema": {
                "type": "object",
                "properties": {
                    "date": {"type": ["string", "null"]},
                    "amount": {"type": ["number", "null"]},
                },
                "required": ["date", "amount"],
                "additionalProperties": False,
            },
            "strict": True,
        }
    }


def _image_data_url(image: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def build_input(image: bytes, mime_type: str) -> list[dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "input_image", "image_url": _image_data_url(image, mime_type)},
                {"type": "input_text", "text": INSTRUCTIONS},
            ],
        }
    ]


# ---- Response handling -------------------------------------------------------


def _extract_response_json_mapping(resp: Any) -> Mapping[str, Any]:
    """Decode the JSON object from a Responses SDK result.

    Prefers ``resp.output_text`` and falls back to
    ``resp.output[0].content[0].text``. Raises ``ValueError`` when no text is
    found or it is not a JSON object.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        output = getattr(resp, "output", None)
        content = getattr(output[0], "content", None) if output else None
        if content:
            txt_obj = getattr(content[0], "text", None)
            if isinstance(txt_obj, str):
                text = txt_obj
    if not text or not isinstance(text, str):
        raise ValueError("Unexpected Responses API shape; unable to locate text output")

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError("Model output was not valid JSON") from e
    if not isinstance(decoded, Mapping):
        raise ValueError("Model output was not a JSON object")
    return decoded


def parse_extraction(payload: Mapping[str, Any]) -> ExtractedCheque:
    """Validate a decoded payload; ``ValueError`` when it does not fit the schema."""

    try:
        return ExtractedCheque.model_validate(dict(payload))
    except ValidationError as e:
        raise ValueError(f"Model output failed validation: {e}") from e


# ---- Retry helpers -----------------------------------------------------------


def _create_client() -> OpenAI:
    return OpenAI()


def _is_retryable(exc: BaseException) -> bool:
    """Only HTTP 429 and 5xx responses are retried."""

    sc = getattr(exc, "status_code", None)
    return isinstance(sc, int) and (sc == 429 or 500 <= sc < 600)


def _sleep_backoff(attempt_no: int) -> None:
    base = _BACKOFF_SCHEDULE_SEC[min(attempt_no - 1, len(_BACKOFF_SCHEDULE_SEC) - 1)]
    jitter = base * _JITTER_PCT
    time.sleep(max(0.0, base + random.uniform(-jitter, jitter)))


# ---- Public API --------------------------------------------------------------


def extract_cheque(
    image: bytes | str | PathLike[str],
    *,
    mime_type: str | None = None,
    model: str | None = None,
) -> ChequeRecord | None:
    """Extract one cheque record from an image.

    Parameters
    ----------
    image:
        Raw image bytes or a path to an image file.
    mime_type:
        Image MIME type. Guessed from the file name when a path is given;
        defaults to ``image/jpeg``.
    model:
        Model override; defaults to ``CHEQUE_RAS_OCR_MODEL`` or ``gpt-5``.

    Returns ``None`` when the model found neither an amount nor a date.
    Parsing/validation failures raise ``ValueError`` without retrying; other
    API failures are retried on 429/5xx and finally raised as
    ``RuntimeError``.
    """

    if isinstance(image, bytes):
        data = image
    else:
        path = Path(image)
        data = path.read_bytes()
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0]
    mime_type = mime_type or "image/jpeg"
    model_name = model or os.getenv(_MODEL_ENV_VAR) or _DEFAULT_MODEL

    request_input = build_input(data, mime_type)
    text_cfg = build_text_config()
    client = _create_client()

    attempt = 1
    while True:
        t0 = time.perf_counter()
        try:
            resp = client.responses.create(model=model_name, input=request_input, text=text_cfg)
            extracted = parse_extraction(_extract_response_json_mapping(resp))
            break
        except ValueError:
            _logger.error("extract_cheque:invalid_output model=%s", model_name)
            raise
        except Exception as e:  # noqa: BLE001
            dt_ms = (time.perf_counter() - t0) * 1000.0
            if attempt >= _MAX_ATTEMPTS or not _is_retryable(e):
                _logger.error(
                    "extract_cheque:failed_terminal attempt=%d latency_ms=%.2f error=%s",
                    attempt,
                    dt_ms,
                    e.__class__.__name__,
                )
                raise RuntimeError(f"cheque extraction failed: {e}") from e
            _logger.warning(
                "extract_cheque:retry attempt=%d latency_ms=%.2f error=%s",
                attempt,
                dt_ms,
                e.__class__.__name__,
            )
            _sleep_backoff(attempt)
            attempt += 1

    _logger.info(
        "extract_cheque:done amount_found=%s date_found=%s",
        extracted.amount is not None,
        extracted.date is not None,
    )
    if extracted.is_empty:
        return None
    return ChequeRecord(
        amount=str(extracted.amount) if extracted.amount else "",
        date=normalize_digits(extracted.date or ""),
    )


__all__ = ["extract_cheque", "parse_extraction"]
