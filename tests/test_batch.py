from schema_validator.batch import find_documents, validate_files
from schema_validator.compiler import compile_schema


def test_find_documents(tmp_path, write_file):
    (tmp_path / "nested").mkdir()
    a = write_file("a.json", {})
    b = write_file("nested/b.yaml", "x: 1\n")
    write_file("notes.txt", "ignored")
    assert find_documents([tmp_path, a, tmp_path / "missing"]) == [a, b]


def test_validate_files_reports_each_file(tmp_path, write_file, config):
    compiled = compile_schema({"type": "object", "required": ["id"]}, config=config)
    good = write_file("good.json", {"id": 1})
    bad = write_file("bad.yaml", "name: x\n")
    broken = write_file("broken.json", "{")

    reports = validate_files([good, bad, broken], compiled, tmp_path / "schema.json", config=config)
    assert [r.valid for r in reports] == [True, False, False]
    assert [e.keyword for e in reports[1].result.errors] == ["required"]
    assert reports[2].result.errors[0].keyword == "load"
    assert "Invalid JSON" in reports[2].result.errors[0].message
