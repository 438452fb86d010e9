import importlib.util
import os

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

_spec = importlib.util.spec_from_file_location(
    "render_badge_script", os.path.join(PROJECT_ROOT, "scripts", "render_badge.py")
)
render_badge_script = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(render_badge_script)


def test_parse_option_pairs():
    opts = render_badge_script.parse_option_pairs(["label=Downloads", "font-size=12"])
    assert opts.label == "Downloads"
    assert opts.font_size == 12
    assert render_badge_script.parse_option_pairs([]) is None


def test_parse_option_pairs_rejects_unknown():
    with pytest.raises(ValueError):
        render_badge_script.parse_option_pairs(["colour=red"])
    with pytest.raises(ValueError):
        render_badge_script.parse_option_pairs(["label"])


def test_writes_svg_file(tmp_path):
    out = tmp_path / "badge.svg"
    assert render_badge_script.main(["--count", "42", "--option", "label=Stars", "-o", str(out)]) == 0
    svg = out.read_text(encoding="utf-8")
    assert '<text class="count">42</text>' in svg
    assert '<text class="label">Stars</text>' in svg


def test_prints_url(capsys):
    assert render_badge_script.main(["--url", "home", "--option", "height=30"]) == 0
    assert capsys.readouterr().out.strip() == "/counter/home/svg?height=30"
