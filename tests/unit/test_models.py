import pytest

from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile


class TestSourceFile:
    def test_size_and_stem(self) -> None:
        file = SourceFile(name="annual.report.pdf", mime_type="application/pdf", data=b"12345")
        assert file.size == 5
        assert file.stem == "annual.report"

    def test_stem_falls_back_for_empty_name(self) -> None:
        assert SourceFile(name="", mime_type="application/pdf", data=b"").stem == "document"

    def test_repr_omits_bytes(self) -> None:
        file = SourceFile(name="a.pdf", mime_type="application/pdf", data=b"secret-bytes")
        assert "secret-bytes" not in repr(file)


class TestProcessingOptionsFromMapping:
    def test_none_gives_defaults(self) -> None:
        options = ProcessingOptions.from_mapping(None)
        assert options == ProcessingOptions()
        assert options.quality == "medium"
        assert options.compression is True

    def test_ignores_unknown_keys(self) -> None:
        options = ProcessingOptions.from_mapping({"quality": "low", "colour": "blue"})
        assert options.quality == "low"

    def test_drops_invalid_quality(self) -> None:
        assert ProcessingOptions.from_mapping({"quality": "ultra"}).quality == "medium"

    def test_coerces_pages_to_ints(self) -> None:
        assert ProcessingOptions.from_mapping({"pages": ["1", 3]}).pages == (1, 3)

    def test_rejects_non_numeric_pages(self) -> None:
        with pytest.raises(ValueError):
            ProcessingOptions.from_mapping({"pages": ["x"]})

    def test_additional_files_become_tuple(self) -> None:
        extra = SourceFile(name="b.pdf", mime_type="application/pdf", data=b"%PDF")
        options = ProcessingOptions.from_mapping({"additional_files": [extra]})
        assert options.additional_files == (extra,)


class TestProcessedFile:
    def test_from_bytes_sets_size(self) -> None:
        result = ProcessedFile.from_bytes(b"abc", "out.txt", "text/plain")
        assert result.size == 3
        assert result.file_name == "out.txt"


class TestProcessingOptionsCoercion:
    def test_numeric_strings_become_ints(self) -> None:
        options = ProcessingOptions.from_mapping({"rotation": "180", "width": " 300 ", "font_size": 40.0})
        assert options.rotation == 180
        assert options.width == 300
        assert options.font_size == 40

    def test_none_clears_optional_dimensions(self) -> None:
        assert ProcessingOptions.from_mapping({"height": None}).height is None

    def test_opacity_accepts_numeric_string(self) -> None:
        assert ProcessingOptions.from_mapping({"watermark_opacity": "0.25"}).watermark_opacity == 0.25

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(False, False), ("no", False), ("TRUE", True), (1, True)],
    )
    def test_compression_flag(self, value: object, expected: bool) -> None:
        assert ProcessingOptions.from_mapping({"compression": value}).compression is expected

    @pytest.mark.parametrize(
        "raw",
        [
            {"rotation": "ninety"},
            {"width": "300px"},
            {"watermark_opacity": "half"},
            {"compression": "maybe"},
            {"font_size": 12.5},
        ],
    )
    def test_unconvertible_values_raise_value_error(self, raw: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            ProcessingOptions.from_mapping(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            {"watermark_text": 5},
            {"password": ["pw"]},
            {"format": 3},
            {"rotation": True},
            {"width": [300]},
            {"pages": "1,2"},
            {"additional_files": [b"%PDF"]},
        ],
    )
    def test_wrong_types_raise_type_error(self, raw: dict[str, object]) -> None:
        with pytest.raises(TypeError):
            ProcessingOptions.from_mapping(raw)
