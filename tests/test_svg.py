import re

from typer.testing import CliRunner

from lorenzfun.cli.app import app
from lorenzfun.io.svg import format_points, render_svg
from lorenzfun.orchestrator.pipeline import svg_points

PAIR = re.compile(r"^-?\d+\.\d{5},-?\d+\.\d{5}$")


def _points_attr(document: str) -> list[str]:
    match = re.search(r'points="([^"]*)"', document)
    assert match, document
    return match.group(1).split(" ")


def test_render_svg_literal_format():
    document = render_svg([(1.0, 2.0), (-0.5, 3.25)])
    assert document == (
        '<svg viewBox="-20 -20 40 40" xmlns="http://www.w3.org/2000/svg">\n'
        '  <polyline stroke="black" fill="none" stroke-width="0.1" '
        'points="1.00000,2.00000 -0.50000,3.25000"/>\n'
        "</svg>\n"
    )


def test_format_points_precision():
    assert format_points([(1.234567, -7.0)]) == "1.23457,-7.00000"
    assert format_points([]) == ""


def test_svg_points_first_step():
    pts = svg_points(steps=1)
    assert pts.shape == (1, 2)
    assert pts[0][0] == 1.0
    assert abs(pts[0][1] - 1.26) < 1e-12


def test_svg_command_default_export():
    runner = CliRunner()
    result = runner.invoke(app, ["svg"])
    assert result.exit_code == 0, result.output

    document = result.stdout
    assert document.startswith('<svg viewBox="-20 -20 40 40"')
    assert 'stroke="black" fill="none" stroke-width="0.1"' in document
    pairs = _points_attr(document)
    assert len(pairs) == 4000
    assert all(PAIR.match(pair) for pair in pairs)
    assert pairs[0] == "1.00000,1.26000"


def test_svg_command_writes_file(tmp_path):
    out = tmp_path / "nested" / "lorenz.svg"
    runner = CliRunner()
    result = runner.invoke(app, ["svg", "--steps", "10", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "[done]" in result.output
    assert len(_points_attr(out.read_text(encoding="utf-8"))) == 10


def test_svg_command_rejects_negative_steps():
    runner = CliRunner()
    result = runner.invoke(app, ["svg", "--steps", "-1"])
    assert result.exit_code == 1
