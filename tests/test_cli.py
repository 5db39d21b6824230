# ==============================================
# Tests for the CLI
# ==============================================

import pytest

from docmap.cli import describe, import_object, main
from docmap.config import AppConfig
from docmap.mapper import TypeMapper

import sample_types


@pytest.fixture(autouse=True)
def isolated_config(clean_config, monkeypatch):
    monkeypatch.delenv("DOCMAP_ANNOTATION_INCLUSION", raising=False)
    monkeypatch.delenv("DOCMAP_SNAKE_CASE_FIELDS", raising=False)


class TestImportObject:
    def test_module_reference(self):
        assert import_object("sample_types:Person") is sample_types.Person

    def test_builtin_name(self):
        assert import_object("str") is str

    @pytest.mark.parametrize("reference", ["nope", "sample_types:Nope", "no_such_module:X"])
    def test_unknown(self, reference):
        with pytest.raises(ValueError):
            import_object(reference)


class TestDescribe:
    def test_lines(self):
        lines = describe(TypeMapper(config=AppConfig()).model_for(sample_types.Person))
        assert lines[0] == "Person  (collection: people)"
        assert '  id: int -> "_id"' in lines
        assert any(line.startswith("  cache:") and line.endswith("(transient)") for line in lines)
        assert "  greet(other: Person) -> str" in lines


class TestMain:
    def test_describe(self, capsys):
        assert main(["describe", "sample_types:Person"]) == 0
        out = capsys.readouterr().out
        assert "Person  (collection: people)" in out
        assert '"_id"' in out

    def test_describe_generic(self, capsys):
        assert main(["describe", "sample_types:Pair", "--args", "str", "int"]) == 0
        out = capsys.readouterr().out
        assert "(collection: pair)" in out
        assert "type parameters: A=str, B=int" in out
        assert '  first: str -> "first"' in out

    def test_argument_mismatch(self, capsys):
        assert main(["describe", "sample_types:Pair", "--args", "str"]) == 1
        assert "error:" in capsys.readouterr().err

    def test_unknown_type(self, capsys):
        assert main(["describe", "sample_types:Nope"]) == 1
        assert "error:" in capsys.readouterr().err
