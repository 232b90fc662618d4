"""Tests for parsing the tabular output of the audio tools."""

import pytest

from mixerdeck.audio.parser import (
    DEFAULT_DEVICE_PLACEHOLDER,
    parse_applications,
    parse_csv_line,
    parse_devices,
    parse_number,
    parse_processes,
)
from mixerdeck.audio.processes import PROCESS_COLUMNS
from mixerdeck.audio.service import process_name

DEVICE_OUTPUT = (
    "Realtek High Definition Audio\tSpeakers\t45.5%\tRender\n"
    "USB Audio\tHeadset\t80\t\n"
    "NVIDIA High Definition Audio\tMonitor\t100.0%\t\n"
)


class TestParseDevices:
    """Test device enumeration parsing."""

    def test_parses_all_well_formed_lines(self):
        """Should produce one device per line with four fields."""
        device_list = parse_devices(DEVICE_OUTPUT)

        assert [d.name for d in device_list.devices] == ["Speakers", "Headset", "Monitor"]
        assert device_list.devices[0].device_identifier == "Realtek High Definition Audio"
        assert device_list.devices[0].volume_percent == 45.5
        assert device_list.devices[1].volume_percent == 80.0

    def test_render_marker_selects_default(self):
        """Should mark the Render row as default, case-insensitively."""
        device_list = parse_devices("Realtek\tSpeakers\t45.5%\trender\nUSB\tHeadset\t80\t\n")

        assert device_list.default_device == "Speakers"
        assert device_list.devices[0].is_default is True
        assert device_list.devices[1].is_default is False

    def test_first_default_wins(self):
        """Should keep the first default when several rows are marked."""
        device_list = parse_devices("A\tFirst\t10\tRender\nB\tSecond\t20\tRender\n")

        assert device_list.default_device == "First"
        assert all(d.is_default for d in device_list.devices)

    def test_falls_back_to_placeholder_without_default(self):
        """Should use the placeholder default when no row is marked."""
        device_list = parse_devices("USB\tHeadset\t80\t\n")

        assert device_list.default_device == DEFAULT_DEVICE_PLACEHOLDER

    def test_skips_malformed_lines(self):
        """Should drop short lines without affecting the others."""
        text = "garbage\nRealtek\tSpeakers\t45\tRender\nonly\ttwo\n\n   \n"
        device_list = parse_devices(text)

        assert len(device_list.devices) == 1
        assert device_list.devices[0].name == "Speakers"

    def test_empty_output(self):
        """Should return no devices and the placeholder default."""
        device_list = parse_devices("")

        assert device_list.devices == ()
        assert device_list.default_device == DEFAULT_DEVICE_PLACEHOLDER

    def test_non_numeric_volume_is_zero(self):
        """Should read a volume with no leading number as 0."""
        device_list = parse_devices("Realtek\tSpeakers\tn/a\tRender\n")

        assert device_list.devices[0].volume_percent == 0.0


class TestParseApplications:
    """Test application enumeration parsing."""

    def test_numbers_repeated_process_paths(self):
        """Should number repeats of a path in encounter order."""
        text = (
            "Chrome\t50\tC:\\A.exe\n"
            "Spotify\t70\tC:\\B.exe\n"
            "Chrome\t40\tC:\\A.exe\n"
            "Chrome\t30\tC:\\A.exe\n"
        )
        applications = parse_applications(text)

        assert [a.instance_id for a in applications] == [None, None, "instance-1", "instance-2"]
        assert [a.volume_percent for a in applications] == [50.0, 70.0, 40.0, 30.0]

    def test_keys_are_unique(self):
        """Should give every application a distinct (path, instance) key."""
        text = "App\t10\tC:\\a.exe\nApp\t20\tC:\\a.exe\nOther\t30\tC:\\b.exe\n"
        applications = parse_applications(text)

        assert len({a.key for a in applications}) == len(applications)

    def test_skips_short_lines(self):
        """Should drop lines with fewer than three fields."""
        applications = parse_applications("Chrome\t50\nSpotify\t70\tC:\\spotify.exe\n")

        assert len(applications) == 1
        assert applications[0].process_path == "C:\\spotify.exe"


class TestParseProcesses:
    """Test audio process listing parsing."""

    def test_keeps_application_sessions_once(self):
        """Should dedupe by path and mark processes with a render session as active."""
        text = (
            "Name,Type,Process Path,Direction\n"
            "Chrome,Application,C:\\chrome.exe,Capture\n"
            "Chrome,Application,C:\\chrome.exe,Render\n"
            "Speakers,Device,,Render\n"
            '"Teams, Work",Application,"C:\\Program Files\\teams.exe",Capture\n'
            "System Sounds,Application,,Render\n"
        )
        processes = parse_processes(text, PROCESS_COLUMNS)

        assert [p.process_path for p in processes] == [
            "C:\\chrome.exe",
            "C:\\Program Files\\teams.exe",
        ]
        assert processes[0].is_active is True
        assert processes[1].name == "Teams, Work"
        assert processes[1].is_active is False


class TestHelpers:
    """Test low-level field helpers."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            pytest.param("a,b,c", ["a", "b", "c"], id="plain"),
            pytest.param('"a,b",c', ["a,b", "c"], id="quoted-comma"),
            pytest.param(" a , b ", ["a", "b"], id="trimmed"),
        ],
    )
    def test_parse_csv_line(self, line, expected):
        """Should split on commas outside double quotes."""
        assert parse_csv_line(line) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            pytest.param("45.5%", 45.5, id="percent"),
            pytest.param("  80\n", 80.0, id="whitespace"),
            pytest.param("abc", 0.0, id="no-number"),
            pytest.param("", 0.0, id="empty"),
        ],
    )
    def test_parse_number(self, text, expected):
        """Should parse the leading number or return 0."""
        assert parse_number(text) == expected

    @pytest.mark.parametrize(
        "path,expected",
        [
            pytest.param("C:\\Program Files\\App\\app.exe", "app.exe", id="windows"),
            pytest.param("/usr/bin/player", "player", id="posix"),
            pytest.param("app.exe", "app.exe", id="bare"),
        ],
    )
    def test_process_name(self, path, expected):
        """Should return the executable filename."""
        assert process_name(path) == expected
