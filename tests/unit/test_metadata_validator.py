import pytest

from score_intake.exceptions import ValidationError
from score_intake.metadata.models import FileType
from score_intake.metadata.validator import validate_and_build


def _valid() -> dict:
    return {
        "title": "  Stars and Stripes Forever ",
        "composer": "John Philip Sousa",
        "confidenceScore": 87.6,
        "fileType": "FULL_SCORE",
        "isMultiPart": True,
        "parts": [{"instrument": "Flute", "partName": "Flute 1"}, {}],
    }


class TestValidPayload:
    def test_builds_metadata(self) -> None:
        metadata = validate_and_build(_valid())
        assert metadata.title == "Stars and Stripes Forever"
        assert metadata.composer == "John Philip Sousa"
        assert metadata.confidence_score == 88
        assert metadata.file_type == FileType.FULL_SCORE
        assert metadata.is_multi_part is True
        assert metadata.parts[0].instrument == "Flute"
        assert metadata.parts[1].instrument is None

    def test_minimal_payload(self) -> None:
        metadata = validate_and_build({"title": "March"})
        assert metadata.composer is None
        assert metadata.parts == []
        assert metadata.is_multi_part is False

    def test_to_dict_round_trips(self) -> None:
        metadata = validate_and_build(_valid())
        assert validate_and_build(metadata.to_dict()) == metadata


class TestInvalidPayload:
    @pytest.mark.parametrize("payload", [None, [], "title"])
    def test_rejects_non_object(self, payload: object) -> None:
        with pytest.raises(ValidationError):
            validate_and_build(payload)

    @pytest.mark.parametrize("title", [None, "", "   ", 5])
    def test_rejects_bad_title(self, title: object) -> None:
        with pytest.raises(ValidationError, match="title"):
            validate_and_build({"title": title})

    @pytest.mark.parametrize("score", [-1, 101, "90", True])
    def test_rejects_bad_confidence(self, score: object) -> None:
        with pytest.raises(ValidationError, match="confidenceScore"):
            validate_and_build({"title": "t", "confidenceScore": score})

    def test_rejects_unknown_file_type(self) -> None:
        with pytest.raises(ValidationError, match="fileType"):
            validate_and_build({"title": "t", "fileType": "POSTER"})

    def test_rejects_non_bool_multi_part(self) -> None:
        with pytest.raises(ValidationError, match="isMultiPart"):
            validate_and_build({"title": "t", "isMultiPart": "yes"})

    def test_rejects_too_many_parts(self) -> None:
        with pytest.raises(ValidationError, match="Too many parts"):
            validate_and_build({"title": "t", "parts": [{}] * 101})

    def test_part_error_names_index(self) -> None:
        with pytest.raises(ValidationError, match="index 1"):
            validate_and_build({"title": "t", "parts": [{}, {"instrument": 3}]})
