"""Tests for fragment readers and fragment location handling."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import pytest

from cfgforge.errors import InvalidFragmentError, UnsupportedFragmentError
from cfgforge.io.readers import (
    DotEnvReader,
    JsonReader,
    PythonReader,
    YamlReader,
    get_reader,
    read_fragment,
)


@pytest.mark.parametrize(
    ("name", "reader_cls"),
    [
        ("web.yaml", YamlReader),
        ("web.YML", YamlReader),
        ("web.json", JsonReader),
        ("prod.env", DotEnvReader),
        (".env", DotEnvReader),
        (".env.local", DotEnvReader),
        ("web.py", PythonReader),
    ],
)
def test_get_reader_selects_reader_by_file_name(name: str, reader_cls: type) -> None:
    assert type(get_reader(name)) is reader_cls


def test_get_reader_rejects_unknown_format() -> None:
    with pytest.raises(UnsupportedFragmentError, match=r"\.ini"):
        get_reader("web.ini")


def test_yaml_and_json_readers_parse_trees(tmp_path: Path) -> None:
    yaml_file = tmp_path / "web.yaml"
    yaml_file.write_text("app:\n  name: demo\n  modules: [a, b]\n", encoding="utf-8")
    json_file = tmp_path / "web.json"
    json_file.write_text(json.dumps({"app": {"debug": True}}), encoding="utf-8")

    assert read_fragment(str(yaml_file)) == {"app": {"name": "demo", "modules": ["a", "b"]}}
    assert read_fragment(str(json_file)) == {"app": {"debug": True}}


def test_empty_fragments_read_as_empty_mapping(tmp_path: Path) -> None:
    for name in ("empty.yaml", "empty.json", "empty.env"):
        (tmp_path / name).write_text("", encoding="utf-8")
        assert read_fragment(str(tmp_path / name)) == {}


def test_fragment_with_scalar_root_is_invalid(tmp_path: Path) -> None:
    path = tmp_path / "scalar.yaml"
    path.write_text("just a string\n", encoding="utf-8")

    with pytest.raises(InvalidFragmentError, match="str"):
        read_fragment(str(path))


def test_dotenv_reader_parses_assignments(tmp_path: Path) -> None:
    path = tmp_path / ".env"
    path.write_text(
        "\n".join(
            [
                "# comment",
                "export APP_ENV=prod",
                'DB_DSN="sqlite:///var/app.db"',
                "EMPTY=",
                "not an assignment",
            ]
        ),
        encoding="utf-8",
    )

    assert read_fragment(str(path)) == {
        "APP_ENV": "prod",
        "DB_DSN": "sqlite:///var/app.db",
        "EMPTY": "",
    }


def test_python_reader_receives_context_as_globals(tmp_path: Path) -> None:
    path = tmp_path / "web.py"
    path.write_text(
        "config = {'db': params['db'], 'env': defines.get('APP_ENV', 'dev')}\n",
        encoding="utf-8",
    )

    fragment = read_fragment(str(path), context={"params": {"db": "main"}, "defines": {}})

    assert fragment == {"db": "main", "env": "dev"}


def test_python_reader_without_config_global_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "noop.py"
    path.write_text("value = 1\n", encoding="utf-8")

    assert read_fragment(str(path)) == {}


def test_missing_skippable_fragment_is_silent(tmp_path: Path, caplog) -> None:
    messages: List[str] = []

    assert read_fragment("?" + str(tmp_path / "missing.yaml"), reporter=messages.append) == {}
    assert messages == []
    assert not caplog.records


def test_skippable_prefix_is_stripped_for_existing_fragment(tmp_path: Path) -> None:
    path = tmp_path / "web.yaml"
    path.write_text("a: 1\n", encoding="utf-8")

    assert read_fragment("?" + str(path)) == {"a": 1}


def test_missing_required_fragment_is_reported(tmp_path: Path) -> None:
    messages: List[str] = []
    missing = tmp_path / "missing.yaml"

    assert read_fragment(str(missing), reporter=messages.append) == {}
    assert len(messages) == 1
    assert str(missing) in messages[0]


def test_missing_required_fragment_falls_back_to_logger(tmp_path: Path, caplog) -> None:
    missing = tmp_path / "missing.yaml"

    with caplog.at_level(logging.WARNING, logger="cfgforge.readers"):
        assert read_fragment(str(missing)) == {}

    assert any(str(missing) in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("broken.yaml", "a: [1,\n"),
        ("broken.json", "{\"a\": 1,"),
        ("broken.py", "config = undefined_name\n"),
    ],
)
def test_unparsable_fragment_is_invalid(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(InvalidFragmentError, match=name) as excinfo:
        read_fragment(str(path))

    assert excinfo.value.__cause__ is not None
