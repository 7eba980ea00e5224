"""Unit tests for RMC sentence extraction and fix decoding."""

import pytest

from subgps.nmea import (
    SentenceExtractor,
    decode_fix,
    parse_coordinate,
    parse_date,
    parse_number,
    KNOTS_TO_KMH,
)


class TestSentenceExtractor:
    """Test finding RMC sentences in payloads."""

    def test_gprmc(self, rmc):
        body = SentenceExtractor().extract(rmc())
        assert body == "123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"

    def test_gnrmc(self, rmc):
        assert SentenceExtractor().extract(rmc(talker="GN")) is not None

    def test_other_talker_ignored(self, rmc):
        assert SentenceExtractor().extract(rmc(talker="GL")) is None

    def test_plain_caption_has_no_match(self):
        assert SentenceExtractor().extract(b"\x00\x05hello") is None

    def test_sentence_inside_binary_payload(self, rmc):
        payload = b"\x00\x40\xff\xfe" + rmc() + b"$GPGGA,foo*00"
        body = SentenceExtractor().extract(payload)
        assert body.startswith("123519,A,")
        assert "*" not in body

    def test_semicolon_terminates_body(self):
        assert SentenceExtractor().extract(b"$GNRMC,1,A,2;trailing") == "1,A,2"

    def test_other_sentence_types_ignored(self):
        assert SentenceExtractor().extract(b"$GPGGA,123519,4807.038,N*47") is None


class TestParseCoordinate:
    """Test DDDMM.MMMM to decimal degree conversion."""

    def test_latitude(self):
        assert parse_coordinate("4807.038", "N") == pytest.approx(48.1173)

    def test_longitude(self):
        assert parse_coordinate("01131.000", "E") == pytest.approx(11.516667, abs=1e-6)

    @pytest.mark.parametrize("hemisphere", ["S", "W"])
    def test_southern_and_western_are_negative(self, hemisphere):
        assert parse_coordinate("4807.038", hemisphere) == pytest.approx(-48.1173)

    def test_single_digit_degrees(self):
        assert parse_coordinate("807.038", "N") == pytest.approx(8.1173)

    def test_minutes_only(self):
        assert parse_coordinate("30.000", "N") == pytest.approx(0.5)

    @pytest.mark.parametrize("raw", ["", "7.5", ".5", "4807"])
    def test_unsplittable_is_zero(self, raw):
        assert parse_coordinate(raw, "N") == 0.0


class TestParseDate:
    """Test DDMMYY conversion with the century pivot."""

    def test_nineteen_hundreds(self):
        assert parse_date("230394") == "1994-03-23"

    def test_two_thousands(self):
        assert parse_date("050125") == "2025-01-05"

    def test_pivot(self):
        assert parse_date("010179") == "2079-01-01"
        assert parse_date("010180") == "1980-01-01"

    def test_short_date_falls_back_to_epoch(self):
        assert parse_date("0501") == "1970-01-01"
        assert parse_date("") == "1970-01-01"

    def test_bad_year_counts_as_zero(self):
        assert parse_date("0501xx") == "2000-01-05"


class TestDecodeFix:
    """Test decoding of a whole RMC field body."""

    BODY = "123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"

    def test_valid_fix(self):
        fix = decode_fix(self.BODY)

        assert fix.is_valid
        assert fix.time == "123519"
        assert fix.latitude == pytest.approx(48.1173)
        assert fix.longitude == pytest.approx(11.516667, abs=1e-6)
        assert fix.speed == pytest.approx(22.4 * KNOTS_TO_KMH)
        assert fix.course == pytest.approx(84.4)
        assert fix.date == "1994-03-23"

    def test_speed_not_rounded(self):
        fix = decode_fix("1,A,4807.038,N,01131.000,E,10,0,230394")
        assert fix.speed == pytest.approx(18.52)
        assert f"{fix.speed:.1f}" == "18.5"

    def test_void_fix_is_not_valid(self):
        fix = decode_fix(self.BODY.replace(",A,", ",V,"))
        assert fix is not None
        assert not fix.is_valid

    def test_too_few_fields(self):
        assert decode_fix("123519,A,4807.038,N,01131.000,E,022.4,084.4") is None

    def test_bad_speed_and_course_default_to_zero(self):
        fix = decode_fix("123519,A,4807.038,N,01131.000,E,fast,,230394")
        assert fix.is_valid
        assert fix.speed == 0.0
        assert fix.course == 0.0
        assert fix.latitude == pytest.approx(48.1173)

    def test_empty_position_fields(self):
        fix = decode_fix("123519,A,,,,,0.0,0.0,")
        assert fix.latitude == 0.0
        assert fix.longitude == 0.0
        assert fix.date == "1970-01-01"


def test_parse_number():
    assert parse_number("022.4") == pytest.approx(22.4)
    assert parse_number("") == 0.0
    assert parse_number("n/a") == 0.0
