import logging
from unittest.mock import MagicMock

import pytest

from favicon_fetch import cli
from favicon_fetch.errors import FetchError, NoFaviconFound
from favicon_fetch.favicon import FaviconAsset
from favicon_fetch.images import decode_image
from favicon_fetch.models import ImageSize, OutputFormat

from conftest import make_image_bytes

ICON_URL = "https://www.example.com/favicon.png"


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fake_resolve(monkeypatch):
    resolve = MagicMock(return_value=FaviconAsset.build(ICON_URL, make_image_bytes()))
    monkeypatch.setattr(cli, "resolve", resolve)
    return resolve


def _run(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_parse_args_defaults():
    args = cli.parse_args(["example.com"])
    assert args.size == ImageSize.default()
    assert args.output_format is OutputFormat.PNG
    assert args.path is None and not args.stdout and not args.url_only


def test_parse_args_rejects_invalid_size():
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["example.com", "--size", "enormous"])
    assert excinfo.value.code == 2


def test_stdout_and_path_are_exclusive():
    with pytest.raises(SystemExit):
        cli.parse_args(["example.com", "--stdout", "--path", "x.png"])


def test_url_only(fake_resolve, capsys):
    assert _run(["example.com", "--url-only"]) == cli.EXIT_OK
    assert capsys.readouterr().out == ICON_URL + "\n"


def test_stdout_writes_image_bytes(fake_resolve, capsysbinary):
    assert _run(["example.com", "--stdout", "--size", "small"]) == cli.EXIT_OK
    image, format_name = decode_image(capsysbinary.readouterr().out)
    assert image.size == (16, 16)
    assert format_name == "PNG"


def test_writes_to_default_path(fake_resolve, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert _run(["example.com", "--format", "ico", "--size", "24,24"]) == cli.EXIT_OK
    image, format_name = decode_image((tmp_path / "example-com.ico").read_bytes())
    assert format_name == "ICO"
    assert image.size == (24, 24)


def test_cli_options_reach_config(fake_resolve, tmp_path):
    _run(["example.com", "--path", str(tmp_path / "i.png"), "--timeout", "4", "--concurrency", "2"])
    config = fake_resolve.call_args.kwargs["config"]
    assert config.timeout == 4.0
    assert config.max_concurrency == 2


def test_non_positive_custom_size_exits_before_fetching(fake_resolve, tmp_path):
    assert _run(["example.com", "--size", "0,10", "--path", str(tmp_path / "i.png")]) == cli.EXIT_USAGE
    fake_resolve.assert_not_called()


@pytest.mark.parametrize(
    "error, code",
    [
        (NoFaviconFound("none"), cli.EXIT_NOT_FOUND),
        (FetchError("down"), cli.EXIT_FETCH),
    ],
)
def test_errors_map_to_exit_codes(monkeypatch, tmp_path, error, code):
    monkeypatch.setattr(cli, "resolve", MagicMock(side_effect=error))
    assert _run(["example.com", "--path", str(tmp_path / "i.png")]) == code


def test_invalid_url_exit_code(tmp_path):
    assert _run(["ftp://example.com", "--path", str(tmp_path / "i.png")]) == cli.EXIT_USAGE


def test_encode_error_exit_code(fake_resolve, tmp_path):
    target = tmp_path / "i.jpg"
    assert _run(["example.com", "--format", "jpeg", "--path", str(target)]) == cli.EXIT_EXPORT
    assert not target.exists()
