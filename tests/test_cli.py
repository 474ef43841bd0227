import json

import pytest

from hdfs_usage import cli


@pytest.mark.unit
def test_parse_args_defaults():
    args = cli.parse_args(["c1"])

    assert args.cluster == "c1"
    assert args.path == ""
    assert args.limit == 100
    assert args.attime is None


@pytest.mark.integration
def test_main_prints_json_lines(temp_store, put_stats, capsys):
    put_stats(3600, "c1", "/data/a", file_count=1, owner="alice")
    put_stats(3600, "c1", "/data/b", file_count=2)

    result = cli.main(["c1", "--path", "/data", "--attime", "3661", "--db", temp_store.db_path])

    assert result == 0
    lines = capsys.readouterr().out.strip().splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["path"] for r in records] == ["/data/a", "/data/b"]
    assert records[0]["owner"] == "alice"
    assert "owner" not in records[1]


@pytest.mark.integration
def test_main_returns_error_code_on_invalid_input(temp_store, capsys):
    result = cli.main(["c1", "--limit", "0", "--db", temp_store.db_path])

    assert result == 1
    assert capsys.readouterr().out == ""
