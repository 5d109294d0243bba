"""Tests for the error hierarchy."""
import pytest

from anime_mirror.core.errors import (
    AnimeMirrorError,
    GenerationError,
    GenerationInProgressError,
    InvalidUploadError,
    NoImageProducedError,
    ParseError,
    RemoteError,
)


class TestErrorHierarchy:
    def test_all_errors_inherit_from_base(self) -> None:
        for cls in (
            InvalidUploadError,
            GenerationInProgressError,
            GenerationError,
            RemoteError,
            ParseError,
            NoImageProducedError,
        ):
            assert issubclass(cls, AnimeMirrorError), f"{cls.__name__} missing base"

    def test_chain_failures_are_generation_errors(self) -> None:
        """Everything the two remote steps raise is caught as GenerationError."""
        for cls in (RemoteError, ParseError, NoImageProducedError):
            with pytest.raises(GenerationError):
                raise cls("test")

    def test_input_errors_are_not_generation_errors(self) -> None:
        assert not issubclass(InvalidUploadError, GenerationError)
        assert not issubclass(GenerationInProgressError, GenerationError)

    def test_contract_violations_distinguishable_from_remote_errors(self) -> None:
        assert not issubclass(ParseError, RemoteError)
        assert not issubclass(NoImageProducedError, RemoteError)
