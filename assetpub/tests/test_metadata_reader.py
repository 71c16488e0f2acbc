"""Tests for MetadataReader and record parsing."""

import logging

from assetpub.metadata_reader import MetadataReader, MirrorEntry, parse_metadata


class TestParseMetadata:
    """Tests for parse_metadata."""

    def test_parses_padded_fields(self):
        """Test the writer's padded key layout."""
        content = 'date     :  2026-01-01\nuid      :  photo\nformat   :  png\n'

        assert parse_metadata(content) == ('photo', 'png')

    def test_ignores_comments_and_quotes(self):
        """Test commented shortcodes and quoted values."""
        content = '# Image shortcode: {{ img src="x" }}\nuid: "quoted"\nformat: \'gif\'\n'

        assert parse_metadata(content) == ('quoted', 'gif')

    def test_missing_format(self):
        """Test a record without format."""
        assert parse_metadata('uid: photo\nwidth: 10\n') is None

    def test_empty_value_does_not_borrow_next_line(self):
        """Test that an empty field is treated as missing."""
        assert parse_metadata('uid: photo\nformat:\nalt: ""\n') is None

    def test_windows_line_endings(self):
        """Test CRLF records."""
        assert parse_metadata('uid : photo\r\nformat : png\r\n') == ('photo', 'png')


class TestMetadataReader:
    """Tests for MetadataReader."""

    def test_entries_sorted_and_keyed(self, tmp_path):
        """Test entries for every complete record."""
        (tmp_path / 'b.yml').write_text('uid: b\nformat: png\n')
        (tmp_path / 'a.yml').write_text('uid: a\nformat: gif\n')

        entries = MetadataReader(tmp_path).get_entries()

        assert entries == [
            MirrorEntry(key='a.gif', uid='a', format='gif'),
            MirrorEntry(key='b.png', uid='b', format='png'),
        ]

    def test_record_missing_format_is_skipped(self, tmp_path):
        """Test that an incomplete record does not stop the scan."""
        (tmp_path / 'a.yml').write_text('uid: a\n')
        (tmp_path / 'b.yml').write_text('uid: b\nformat: png\n')

        entries = MetadataReader(tmp_path).get_entries()

        assert [e.uid for e in entries] == ['b']

    def test_non_yml_files_ignored(self, tmp_path):
        """Test that only .yml files are read."""
        (tmp_path / 'notes.txt').write_text('uid: n\nformat: png\n')
        (tmp_path / 'sub.yml').mkdir()

        assert MetadataReader(tmp_path).get_entries() == []

    def test_unreadable_record_is_logged_and_skipped(self, tmp_path, caplog):
        """Test that undecodable content is skipped."""
        (tmp_path / 'bad.yml').write_bytes(b'\xff\xfe\x00uid')
        (tmp_path / 'good.yml').write_text('uid: good\nformat: png\n')

        with caplog.at_level(logging.ERROR):
            entries = MetadataReader(tmp_path).get_entries()

        assert [e.uid for e in entries] == ['good']
        assert 'bad.yml' in caplog.text

    def test_missing_directory(self, tmp_path):
        """Test a metadata directory that does not exist."""
        assert MetadataReader(tmp_path / 'missing').get_entries() == []

    def test_image_prefix_applied_to_key(self, tmp_path):
        """Test keys under an image prefix."""
        (tmp_path / 'a.yml').write_text('uid: a\nformat: png\n')

        entries = MetadataReader(tmp_path, image_prefix='images/').get_entries()

        assert entries[0].key == 'images/a.png'
