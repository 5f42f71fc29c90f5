"""Shared CLI plumbing: error mapping and JSON envelopes.

Client faults (bad input, unknown entities, not enough stock) exit with
status 1; store faults and unexpected errors exit with status 3.  With
``--json`` both are printed as ``{"success": false, "error": ...}`` on
stdout.  Amounts are serialized as strings so the two decimal places
survive.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

import click

from pos.domain.exceptions import DomainException, StoreError

logger = logging.getLogger(__name__)


class ClientError(click.ClickException):
    exit_code = 1

    def __init__(self, message: str, as_json: bool = False) -> None:
        super().__init__(message)
        self.as_json = as_json

    def show(self, file=None) -> None:
        if self.as_json:
            click.echo(json.dumps({"success": False, "error": self.message}))
        else:
            super().show(file)


class ServerError(ClientError):
    exit_code = 3


@contextmanager
def reported_errors(as_json: bool = False) -> Iterator[None]:
    try:
        yield
    except DomainException as exc:
        raise ClientError(str(exc), as_json) from exc
    except StoreError as exc:
        raise ServerError(f"Store failure: {exc}", as_json) from exc
    except click.ClickException:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure")
        raise ServerError(f"Internal error: {exc}", as_json) from exc


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def plain(dto: Any) -> Any:
    """Dataclass DTO (or list of them) as plain dicts/lists."""
    if isinstance(dto, list):
        return [plain(item) for item in dto]
    if dataclasses.is_dataclass(dto):
        return dataclasses.asdict(dto)
    return dto


def echo_envelope(**fields: Any) -> None:
    click.echo(json.dumps({"success": True, **fields}, indent=2, default=_jsonable))
