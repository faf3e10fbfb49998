import pytest

from cmpdl.exceptions import DirectoryExistsError
from cmpdl.utils.formatting import (
    LABEL_WIDTH,
    fit_label,
    format_counter,
    format_duration,
    format_size,
)
from cmpdl.utils.path import create_fresh_dir, sanitize_dir_name

ILLEGAL = '/\\?%*:|"<>'


class TestSanitizeDirName:
    def test_replaces_each_illegal_character(self):
        assert sanitize_dir_name('a/b\\c?d%e*f:g|h"i<j>k') == "a-b-c-d-e-f-g-h-i-j-k"

    def test_keeps_legal_characters(self):
        assert sanitize_dir_name("All the Mods 6 - 1.5.2") == "All the Mods 6 - 1.5.2"

    @pytest.mark.parametrize(
        "name", ["", "plain", "Modpack: v1/2", ILLEGAL, "x" * 300 + "?"]
    )
    def test_idempotent_and_clean(self, name):
        once = sanitize_dir_name(name)
        assert sanitize_dir_name(once) == once
        assert not any(c in once for c in ILLEGAL)
        assert len(once) == len(name)


class TestFitLabel:
    def test_short_label_is_padded(self):
        label = fit_label("jei.jar")
        assert label == "jei.jar" + " " * (LABEL_WIDTH - 7)

    def test_exact_width_is_unchanged(self):
        name = "a" * LABEL_WIDTH
        assert fit_label(name) == name

    def test_long_label_keeps_head_and_tail(self):
        name = "ProjectE-1.16.5-PE1.0.1-with-a-very-long-suffix.jar"
        label = fit_label(name)
        assert label == name[:30] + "..." + name[-7:]
        assert label.endswith("fix.jar")

    @pytest.mark.parametrize("length", [0, 1, 39, 40, 41, 120])
    def test_always_exact_width(self, length):
        assert len(fit_label("m" * length)) == LABEL_WIDTH


class TestFormatCounter:
    def test_padded_to_final_width(self):
        assert format_counter(3, 120) == "(3/120)   "
        assert format_counter(120, 120) == "(120/120) "

    def test_all_counters_share_width(self):
        widths = {len(format_counter(i, 57)) for i in range(1, 58)}
        assert widths == {len("(57/57) ")}


def test_format_size():
    assert format_size(0) == "0 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(3 * 1024 * 1024) == "3.0 MB"


def test_format_duration():
    assert format_duration(0) == "0s"
    assert format_duration(61) == "1m 1s"
    assert format_duration(3600) == "1h"


def test_create_fresh_dir_refuses_existing(tmp_path):
    target = tmp_path / "pack"
    create_fresh_dir(target)
    assert target.is_dir()
    with pytest.raises(DirectoryExistsError, match="already a folder"):
        create_fresh_dir(target)
