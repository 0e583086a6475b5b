from click.testing import CliRunner

from fractal_dive.cli.main import main


def test_version():
    result = CliRunner().invoke(main, ['--version'])
    assert result.exit_code == 0
    assert "Fractal Dive v" in result.output


def test_dive_writes_image_and_snapshots(tmp_path):
    output = tmp_path / "image.png"
    debug_dir = tmp_path / "debug"
    result = CliRunner().invoke(main, [
        'dive',
        '--date-seed', '2018-03-01T14:00:00',
        '--dive-dimensions', '48x36',
        '--shot-dimensions', '32x24',
        '--antialiasing', '1',
        '--output', str(output),
        '--debug-dir', str(debug_dir),
    ])

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert "zoom divisions" in result.output
    assert debug_dir.is_dir()
    for snapshot in debug_dir.iterdir():
        assert snapshot.name.startswith("spotted-area-")


def test_dive_without_debug_images(tmp_path):
    debug_dir = tmp_path / "debug"
    result = CliRunner().invoke(main, [
        'dive',
        '--dive-dimensions', '32x24',
        '--shot-dimensions', '16x12',
        '--no-debug-images',
        '--output', str(tmp_path / "image.png"),
        '--debug-dir', str(debug_dir),
    ])

    assert result.exit_code == 0, result.output
    assert not debug_dir.exists()


def test_dive_rejects_bad_antialiasing(tmp_path):
    result = CliRunner().invoke(main, [
        'dive', '--antialiasing', '3', '--output', str(tmp_path / "image.png"),
    ])
    assert result.exit_code == 1
    assert "power of four" in result.output


def test_dive_reads_config_file(tmp_path):
    config = tmp_path / "dive.json"
    config.write_text('{"dive_dimensions": "24x24", "shot_dimensions": "12x12", '
                      '"antialiasing": 1, "debug_images": false}')
    output = tmp_path / "image.png"

    result = CliRunner().invoke(main, ['--config', str(config), 'dive', '--output', str(output)])
    assert result.exit_code == 0, result.output
    assert output.exists()


def test_render_single_view(tmp_path):
    output = tmp_path / "julia.png"
    result = CliRunner().invoke(main, [
        'render', 'julia', str(output),
        '--julia-c', '-0.4,0.3',
        '--dimensions', '20x16',
        '--antialiasing', '4',
    ])

    assert result.exit_code == 0, result.output
    assert output.exists()


def test_render_rejects_bad_center(tmp_path):
    result = CliRunner().invoke(main, [
        'render', 'mandelbrot', str(tmp_path / "m.png"), '--center', 'nowhere',
    ])
    assert result.exit_code == 1
    assert "Invalid center" in result.output
