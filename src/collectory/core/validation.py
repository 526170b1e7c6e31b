#!/usr/bin/env python3

from typing import List

from collectory.core.errors import MetadataError


class ValidationResult:
    def __init__(self):
        self.errors: List[MetadataError] = []

    def add(self, error: MetadataError):
        self.errors.append(error)

    def report(self, error: MetadataError, strict: bool = False):
        """
        Add an error to the result, or raise it if in strict mode.

        Args:
            error (MetadataError): The failure, already carrying its message.
            strict (bool): Whether to raise immediately.
        """
        if strict:
            raise error
        self.add(error)

    @property
    def messages(self) -> List[str]:
        return [str(e) for e in self.errors]

    def is_valid(self) -> bool:
        return not self.errors

    def __len__(self):
        return len(self.errors)

    def __iter__(self):
        return iter(self.messages)

    def __repr__(self):
        return f"<ValidationResult valid={self.is_valid()} errors={len(self.errors)}>"
