"""
Tests for CSV parsing and row-to-track conversion.
"""

import pytest

from songdb.domain.tracks import FIELD_NAMES, load_tracks, parse_csv, row_to_track, validate_header
from songdb.errors import (
    FieldCountError,
    FormatError,
    LoadError,
    NumericFormatError,
    SchemaMismatchError,
)


class TestParseCsv:
    def test_header_excluded_from_rows(self, write_csv, make_row):
        """A 10-line file yields the header plus exactly 9 data rows."""
        header = list(FIELD_NAMES)
        rows = [make_row(id=f"track-{i}") for i in range(9)]
        path = write_csv([header] + rows)

        parsed_header, parsed_rows = parse_csv(path)

        assert parsed_header == header
        assert len(parsed_rows) == 9
        assert parsed_rows == rows

    def test_quoted_fields_keep_commas_and_newlines(self, write_csv, make_row):
        row = make_row(name="Hello, World", artists="['Drake', 'Future']\nLive")
        path = write_csv([list(FIELD_NAMES), row])

        _, parsed_rows = parse_csv(path)

        assert parsed_rows[0][1] == "Hello, World"
        assert parsed_rows[0][2] == "['Drake', 'Future']\nLive"

    def test_empty_file_is_format_error(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(FormatError, match="empty"):
            parse_csv(path)

    def test_blank_lines_only_is_format_error(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("\n\n")

        with pytest.raises(FormatError):
            parse_csv(path)

    def test_header_only_returns_no_rows(self, tmp_path):
        path = tmp_path / "header.csv"
        path.write_text("id,name\n")

        header, rows = parse_csv(path)

        assert header == ["id", "name"]
        assert rows == []

    def test_missing_file_raises_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_csv(tmp_path / "missing.csv")

    def test_missing_file_is_an_ioerror(self, tmp_path):
        with pytest.raises(IOError):
            parse_csv(tmp_path / "missing.csv")

    def test_unterminated_quote_is_format_error(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text('id,name\na,b\nc,"unterminated\n')

        with pytest.raises(FormatError) as exc_info:
            parse_csv(path)

        assert exc_info.value.line_number == 3

    def test_stray_quote_is_format_error(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text('id,name\na,"b"c\n')

        with pytest.raises(FormatError):
            parse_csv(path)

    def test_invalid_utf8_is_format_error(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes("id,name\na,Beyonc\xe9\n".encode("latin-1"))

        with pytest.raises(FormatError, match="UTF-8"):
            parse_csv(path)

    def test_bom_is_stripped_from_header(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("id,name\na,b\n".encode("utf-8-sig"))

        header, _ = parse_csv(path)

        assert header == ["id", "name"]

    def test_large_quoted_field_is_read(self, write_csv, make_row):
        name = "Artist, Band " * 20_000
        path = write_csv([list(FIELD_NAMES), make_row(name=name)])

        _, rows = parse_csv(path)

        assert rows[0][1] == name


class TestRowToTrack:
    def test_converts_all_fields(self, make_row, make_track):
        assert row_to_track(make_row()) == make_track()

    def test_trailing_zero_decimal_is_stripped(self, make_row):
        track = row_to_track(make_row(key="5.0"))
        assert track.key == 5
        assert isinstance(track.key, int)

    def test_fractional_integer_is_rejected(self, make_row):
        with pytest.raises(NumericFormatError) as exc_info:
            row_to_track(make_row(key="5.5"))

        assert exc_info.value.field_name == "key"
        assert exc_info.value.value == "5.5"

    def test_bad_float_is_numeric_format_error(self, make_row):
        with pytest.raises(NumericFormatError, match="tempo"):
            row_to_track(make_row(tempo="fast"), line_number=7)

    @pytest.mark.parametrize(
        "field,raw",
        [
            ("duration_ms", "99999999999999999999.0"),
            ("key", "-9223372036854775809"),
            ("tempo", "1e400"),
        ],
    )
    def test_out_of_range_number_is_numeric_format_error(self, make_row, field, raw):
        with pytest.raises(NumericFormatError) as exc_info:
            row_to_track(make_row(**{field: raw}))

        assert exc_info.value.field_name == field
        assert exc_info.value.value == raw

    @pytest.mark.parametrize("arity", [0, 15, 17])
    def test_wrong_arity_is_field_count_error(self, make_row, arity):
        row = (make_row() + ["extra"])[:arity]

        with pytest.raises(FieldCountError) as exc_info:
            row_to_track(row)

        assert exc_info.value.expected == 16
        assert exc_info.value.actual == arity

    def test_empty_id_is_format_error(self, make_row):
        with pytest.raises(FormatError, match="id"):
            row_to_track(make_row(id=""))

    def test_text_fields_are_kept_verbatim(self, make_row):
        track = row_to_track(make_row(artists="  ['Drake', 'Future'] "))
        assert track.artists == "  ['Drake', 'Future'] "


class TestValidateHeader:
    def test_accepts_expected_header(self):
        validate_header(list(FIELD_NAMES))

    def test_ignores_case_and_whitespace(self):
        validate_header([f" {name.upper()} " for name in FIELD_NAMES])

    def test_rejects_reordered_columns(self):
        header = list(FIELD_NAMES)
        header[3], header[4] = header[4], header[3]

        with pytest.raises(SchemaMismatchError, match="column 4"):
            validate_header(header)

    def test_rejects_wrong_column_count(self):
        with pytest.raises(SchemaMismatchError):
            validate_header(list(FIELD_NAMES)[:-1])


class TestLoadTracks:
    def test_loads_tracks_in_file_order(self, write_csv, make_row):
        rows = [make_row(id="a"), make_row(id="b"), make_row(id="c")]
        path = write_csv([list(FIELD_NAMES)] + rows)

        tracks = load_tracks(path)

        assert [t.id for t in tracks] == ["a", "b", "c"]

    def test_collects_every_row_error_with_line_numbers(self, write_csv, make_row):
        rows = [
            make_row(id="ok-1"),
            make_row(id="bad-key", key="5.5"),
            make_row(id="ok-2"),
            make_row(id="short")[:10],
            make_row(id="bad-tempo", tempo="n/a"),
        ]
        path = write_csv([list(FIELD_NAMES)] + rows)

        with pytest.raises(LoadError) as exc_info:
            load_tracks(path)

        errors = exc_info.value.errors
        assert [e.line_number for e in errors] == [3, 5, 6]
        assert "key" in errors[0].message
        assert "Expected 16 fields, got 10" in errors[1].message
        assert "tempo" in errors[2].message

    def test_load_error_is_a_format_error(self, write_csv, make_row):
        path = write_csv([list(FIELD_NAMES), make_row(mode="major")])

        with pytest.raises(FormatError):
            load_tracks(path)

    def test_strict_header_rejects_mismatch(self, write_csv, make_row):
        header = ["track_id"] + list(FIELD_NAMES)[1:]
        path = write_csv([header, make_row()])

        assert len(load_tracks(path)) == 1
        with pytest.raises(SchemaMismatchError):
            load_tracks(path, strict_header=True)

    def test_out_of_range_numbers_are_reported_by_line(self, write_csv, make_row):
        rows = [
            make_row(id="ok"),
            make_row(id="huge", duration_ms="99999999999999999999.0"),
            make_row(id="overflow", tempo="1e400"),
        ]
        path = write_csv([list(FIELD_NAMES)] + rows)

        with pytest.raises(LoadError) as exc_info:
            load_tracks(path)

        errors = exc_info.value.errors
        assert [e.line_number for e in errors] == [3, 4]
        assert "duration_ms" in errors[0].message
        assert "tempo" in errors[1].message
