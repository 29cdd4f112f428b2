#!/usr/bin/env python3
# tab-width:4

from __future__ import annotations


class MinichartsError(Exception):
    """Base class for errors raised by mpminicharts."""


class MalformedBatchError(MinichartsError, ValueError):
    """Batch, coordinates or options failed validation. Nothing was mutated."""


class UnknownLayerError(MinichartsError, KeyError):
    """A layer id was referenced that was never populated."""

    def __init__(self, layer_ids):
        self.layer_ids = tuple(layer_ids)
        super().__init__(f"unknown layer ids: {list(self.layer_ids)}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class MissingLayerIdError(MinichartsError, RuntimeError):
    """update() called on charts populated without stable identifiers."""

    def __init__(self):
        super().__init__(
            "update requires stable identifiers established at populate time"
        )
